from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone
import uuid

from app.config.constants import DEFAULT_SHOW_ALERT, DEFAULT_PLAY_SOUND, DEFAULT_SET_BADGE

class NotificationContent(BaseModel):
    title: str
    body: Optional[str] = None

class NotificationBehavior(BaseModel):
    """How a fired notification is presented."""
    should_show_alert: bool = DEFAULT_SHOW_ALERT
    should_play_sound: bool = DEFAULT_PLAY_SOUND
    should_set_badge: bool = DEFAULT_SET_BADGE

class LocalNotification(BaseModel):
    notification_id: str
    user_id: str
    content: NotificationContent
    fired_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class NotificationResponseIn(BaseModel):
    notification_id: str
    action_identifier: str = "default"

class NotificationResponse(NotificationResponseIn):
    """A user interaction with a notification that was shown."""
    user_id: str
    received_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class ScheduledNotification(BaseModel):
    """A pending job in the local notification scheduler."""
    notification_id: str
    user_id: Optional[str] = None
    fire_at: Optional[datetime] = None

class LedgerEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: str
    reminder_id: uuid.UUID
    pet_id: Optional[uuid.UUID] = None
    type: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    time: str
