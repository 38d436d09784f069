import uuid
import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.notification import NotificationLedgerEntry
from app.models.reminder import Reminder
from app.config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.services.triggers import format_trigger

logger = logging.getLogger(__name__)

class NotificationLedgerService:
    """Reads and appends rows of the notification ledger table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_entries(self, user_id: uuid.UUID) -> List[NotificationLedgerEntry]:
        stmt = select(NotificationLedgerEntry).where(NotificationLedgerEntry.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def record_notification(
        self,
        notification_id: str,
        reminder: Reminder,
        fire_at: datetime,
        user_id: uuid.UUID,
    ) -> NotificationLedgerEntry:
        """
        Insert one ledger row for a scheduled occurrence.
        The insert runs in a savepoint so a rejected row leaves objects loaded
        earlier in the session usable; the error is re-raised.
        """
        entry = NotificationLedgerEntry(
            notification_id=notification_id,
            reminder_id=reminder.id,
            type=getattr(reminder.type, "value", reminder.type),
            title=reminder.title,
            body=reminder.notes,
            time=format_trigger(fire_at),
            user_id=user_id,
            pet_id=reminder.pet_id,
        )
        async with self.session.begin_nested():
            self.session.add(entry)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return entry

    async def delete_entries(self, entries: List[NotificationLedgerEntry]) -> None:
        if not entries:
            return
        for entry in entries:
            await self.session.delete(entry)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def get_delivered_notifications(
        self,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[NotificationLedgerEntry]:
        """Ledger rows whose fire time has passed, newest first."""
        now = now or datetime.now(timezone.utc)
        limit = min(limit, MAX_PAGE_SIZE)
        stmt = (
            select(NotificationLedgerEntry)
            .where(
                NotificationLedgerEntry.user_id == user_id,
                NotificationLedgerEntry.time <= format_trigger(now),
            )
            .order_by(NotificationLedgerEntry.time.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
