import uuid
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.models.profile import Profile

logger = logging.getLogger(__name__)

class ProfileService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_profile(self, user_id: uuid.UUID) -> Optional[Profile]:
        return await self.session.get(Profile, user_id)

    async def has_notification_permission(self, user_id: uuid.UUID) -> bool:
        """
        Notifications need the global switch and the user's own opt-in.
        A user without a profile row has not opted out.
        """
        if not settings.NOTIFICATIONS_ENABLED:
            return False
        profile = await self.get_profile(user_id)
        if profile is None:
            return True
        return bool(profile.notifications_enabled)
