"""Auth state hook called by the backend on session changes."""
import logging
from fastapi import APIRouter, Depends, Request
from app.api.deps import verify_webhook_secret
from app.schemas.auth import AuthStateChange

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/state")
async def auth_state_changed(
    change: AuthStateChange,
    request: Request,
    auth: bool = Depends(verify_webhook_secret),
):
    observer = request.app.state.auth_observer
    task = await observer.on_auth_state_change(change)
    return {"status": "ok", "reconciling": task is not None}
