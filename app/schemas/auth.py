from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
import uuid

class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"

class AuthSession(BaseModel):
    user_id: uuid.UUID
    access_token: Optional[str] = None
    expires_at: Optional[datetime] = None

class AuthStateChange(BaseModel):
    event: AuthEvent
    user_id: uuid.UUID
    session: Optional[AuthSession] = None

    @property
    def has_session(self) -> bool:
        return self.session is not None and self.event != AuthEvent.SIGNED_OUT
