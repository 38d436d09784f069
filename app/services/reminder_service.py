import uuid
import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.reminder import Reminder

logger = logging.getLogger(__name__)

class ReminderService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_reminders(self, user_id: uuid.UUID) -> List[Reminder]:
        """
        All reminders owned by the user.
        No pagination and no is_active filter: every row takes part in reconciliation.
        """
        stmt = select(Reminder).where(Reminder.user_id == user_id).order_by(Reminder.created_at.asc())
        result = await self.session.execute(stmt)
        return result.scalars().all()
