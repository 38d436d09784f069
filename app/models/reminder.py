from enum import Enum as PyEnum
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Time, Integer, func, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.base import Base

class ReminderType(str, PyEnum):
    DEWORMING = "deworming"
    FEEDING_WET = "feeding_wet"
    FEEDING_DRY = "feeding_dry"
    NAIL_CUTTING = "nail_cutting"
    LITTER_CLEANING = "litter_cleaning"
    VACCINATION = "vaccination"
    VET_CHECKUP = "vet_checkup"
    PLAYTIME = "playtime"

class Frequency(str, PyEnum):
    ONCE = "once"
    DAILY = "daily"
    # Declared for the forms; not expanded into notifications
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"

class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    pet_id = Column(UUID(as_uuid=True), ForeignKey("pets.id", ondelete="CASCADE"), nullable=True, index=True)

    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)

    frequency = Column(String(20), default=Frequency.ONCE.value, nullable=False)
    interval = Column(Integer, nullable=True)  # days, custom frequency only
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    time = Column(Time, nullable=True)

    # Informational; not consulted when scheduling notifications
    last_completed = Column(DateTime(timezone=True), nullable=True)
    next_due = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    pet = relationship("Pet", backref="reminders")
