import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from app.db.base import Base

class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the auth user issued by the backend
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    telegram_id = Column(BigInteger, unique=True, index=True, nullable=True)
    notifications_enabled = Column(Boolean, default=True, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), onupdate=func.now(), server_default=func.now())
