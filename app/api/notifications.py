"""Feed of notifications that have already fired, and user responses to them."""
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from app.api.deps import verify_webhook_secret
from app.config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.notification_handler import handle_notification_response
from app.db.session import AsyncSessionLocal
from app.schemas.notification import LedgerEntryOut, NotificationResponse, NotificationResponseIn
from app.services.notification_service import NotificationLedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/{user_id}", response_model=List[LedgerEntryOut])
async def list_delivered_notifications(
    user_id: uuid.UUID,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    auth: bool = Depends(verify_webhook_secret),
):
    async with AsyncSessionLocal() as session:
        entries = await NotificationLedgerService(session).get_delivered_notifications(
            user_id, limit=limit, offset=offset
        )
    return [LedgerEntryOut.model_validate(entry) for entry in entries]


@router.post("/{user_id}/responses")
async def record_notification_response(
    user_id: uuid.UUID,
    payload: NotificationResponseIn,
    auth: bool = Depends(verify_webhook_secret),
):
    response = NotificationResponse(user_id=str(user_id), **payload.model_dump())
    delivered = await handle_notification_response(response)
    return {"status": "ok", "listeners": delivered}
