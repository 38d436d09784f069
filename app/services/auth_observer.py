import asyncio
import uuid
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Set
from app.db.session import AsyncSessionLocal
from app.schemas.auth import AuthStateChange
from app.services.local_scheduler import LocalNotificationScheduler
from app.services.profile_service import ProfileService
from app.services.reconciler import NotificationReconciler

logger = logging.getLogger(__name__)

ReconcileRunner = Callable[[uuid.UUID], Awaitable[Optional[List[str]]]]


class AuthStateObserver:
    """
    Starts a reconciliation pass when a user's session appears.

    Only the absent -> present transition triggers a pass; token refreshes
    of a live session do not. At most one pass per user runs at a time:
    triggers arriving while one is in flight get the running task back.
    """

    def __init__(
        self,
        local_scheduler: LocalNotificationScheduler = None,
        reconcile_runner: ReconcileRunner = None,
    ):
        self.local_scheduler = local_scheduler or LocalNotificationScheduler()
        self._reconcile_runner = reconcile_runner or self._run_reconciliation
        self._active_sessions: Set[uuid.UUID] = set()
        self._in_flight: Dict[uuid.UUID, asyncio.Task] = {}

    def has_session(self, user_id: uuid.UUID) -> bool:
        return user_id in self._active_sessions

    async def on_auth_state_change(self, change: AuthStateChange) -> Optional[asyncio.Task]:
        user_id = change.user_id
        if not change.has_session:
            if user_id in self._active_sessions:
                logger.info(f"Session ended for {user_id}")
            self._active_sessions.discard(user_id)
            return None

        if user_id in self._active_sessions:
            logger.debug(f"{change.event.value} for live session of {user_id}, nothing to do")
            return None

        self._active_sessions.add(user_id)
        logger.info(f"Session started for {user_id} ({change.event.value})")
        return self.trigger(user_id)

    def trigger(self, user_id: uuid.UUID) -> asyncio.Task:
        running = self._in_flight.get(user_id)
        if running is not None and not running.done():
            logger.info(f"Reconciliation already running for {user_id}, coalescing")
            return running

        task = asyncio.create_task(self._guarded_run(user_id))
        self._in_flight[user_id] = task

        def _clear(done: asyncio.Task):
            if self._in_flight.get(user_id) is done:
                del self._in_flight[user_id]

        task.add_done_callback(_clear)
        return task

    async def _guarded_run(self, user_id: uuid.UUID) -> Optional[List[str]]:
        try:
            return await self._reconcile_runner(user_id)
        except Exception:
            logger.exception(f"Reconciliation failed for {user_id}")
            return None

    async def _run_reconciliation(self, user_id: uuid.UUID) -> Optional[List[str]]:
        async with AsyncSessionLocal() as session:
            if not await ProfileService(session).has_notification_permission(user_id):
                logger.warning(f"Notifications disabled for {user_id}, skipping reconciliation.")
                return None
            reconciler = NotificationReconciler(session, local_scheduler=self.local_scheduler)
            return await reconciler.reconcile(user_id)

    async def wait_idle(self):
        """Wait for every running pass (used on shutdown)."""
        pending = [task for task in self._in_flight.values() if not task.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
