import hmac
from fastapi import Header, HTTPException
from app.core.config import settings


def verify_webhook_secret(x_webhook_secret: str = Header(None)):
    """Timing-safe shared-secret auth for backend hooks."""
    expected = settings.WEBHOOK_SECRET
    if not expected or not x_webhook_secret:
        raise HTTPException(status_code=403, detail="Forbidden")
    if not hmac.compare_digest(x_webhook_secret, expected):
        raise HTTPException(status_code=403, detail="Forbidden")
    return True
