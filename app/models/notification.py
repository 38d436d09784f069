import uuid
from sqlalchemy import Column, String, Text, ForeignKey, TIMESTAMP, func, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.base import Base

class NotificationLedgerEntry(Base):
    """One local notification job scheduled for one reminder occurrence."""
    __tablename__ = "notifications"
    __table_args__ = (
        UniqueConstraint("reminder_id", "time", name="uq_notifications_reminder_time"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Job id returned by the local scheduler
    notification_id = Column(String(64), nullable=False, index=True)
    reminder_id = Column(UUID(as_uuid=True), ForeignKey("reminders.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    pet_id = Column(UUID(as_uuid=True), ForeignKey("pets.id", ondelete="SET NULL"), nullable=True)

    type = Column(String(50))
    title = Column(String(255))
    body = Column(Text)
    time = Column(String(40), nullable=False)  # UTC ISO-8601 fire time
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    reminder = relationship("Reminder", backref="notifications", passive_deletes=True)
