"""
Reconciles a user's reminders with pending local notifications.

One pass:
    1. read the notification ledger of the user
    2. cancel pending notifications the ledger does not know (orphans)
    3. read the user's reminders and expand them into trigger times
    4. schedule every schedulable occurrence missing from the ledger and
       append one ledger row per scheduled occurrence

Ledger rows are keyed per occurrence, (reminder_id, fire time), so running
the pass again without reminder changes schedules nothing new. Pending
occurrences a reminder no longer produces after an edit are cancelled and
their rows deleted before the new ones are scheduled.
"""
import uuid
import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.models.notification import NotificationLedgerEntry
from app.models.reminder import Reminder
from app.schemas.notification import NotificationContent
from app.services.local_scheduler import LocalNotificationScheduler
from app.services.notification_service import NotificationLedgerService
from app.services.reminder_service import ReminderService
from app.services.triggers import (
    compute_trigger_times,
    is_schedulable,
    normalize_stored_time,
    occurrence_key,
    parse_stored_time,
)
from app.utils.retry import retry_async

logger = logging.getLogger(__name__)


class NotificationReconciler:
    def __init__(
        self,
        session: AsyncSession,
        local_scheduler: LocalNotificationScheduler = None,
        reminder_service: ReminderService = None,
        ledger_service: NotificationLedgerService = None,
        tz=None,
        clock: Callable[[], datetime] = None,
    ):
        self.session = session
        self.local_scheduler = local_scheduler or LocalNotificationScheduler()
        self.reminder_service = reminder_service or ReminderService(session)
        self.ledger_service = ledger_service or NotificationLedgerService(session)
        self.tz = tz or settings.tz
        self.clock = clock or (lambda: datetime.now(self.tz))

    async def reconcile(self, user_id: uuid.UUID) -> Optional[List[str]]:
        """
        Run one reconciliation pass for the user.

        Returns the ids of notifications scheduled during this pass, or None
        when the ledger or the reminders could not be read.
        """
        try:
            entries = await retry_async(self.ledger_service.get_user_entries, user_id, on_retry=self._rollback)
        except Exception as e:
            logger.error(f"Error fetching existing notifications for {user_id}: {e}")
            return None

        known_ids = {entry.notification_id for entry in entries}
        known_occurrences: Set[Tuple[str, str]] = set()
        entries_by_reminder: Dict[str, List[NotificationLedgerEntry]] = defaultdict(list)
        for entry in entries:
            known_occurrences.add((str(entry.reminder_id), normalize_stored_time(entry.time)))
            entries_by_reminder[str(entry.reminder_id)].append(entry)

        await self._cancel_orphans(user_id, known_ids)

        try:
            reminders = await retry_async(self.reminder_service.get_user_reminders, user_id, on_retry=self._rollback)
        except Exception as e:
            logger.error(f"Error fetching reminders for {user_id}: {e}")
            return None

        now = self.clock()
        scheduled_ids: List[str] = []
        for reminder in reminders:
            try:
                scheduled_ids.extend(
                    await self._schedule_reminder(
                        reminder,
                        user_id,
                        known_occurrences,
                        entries_by_reminder.get(str(reminder.id), []),
                        now,
                    )
                )
            except Exception:
                logger.exception(f"Failed to reconcile reminder {getattr(reminder, 'id', None)}")

        logger.info(f"Reconciliation for {user_id} scheduled {len(scheduled_ids)} notification(s)")
        return scheduled_ids

    async def _rollback(self):
        if self.session is not None:
            await self.session.rollback()

    async def _cancel_orphans(self, user_id: uuid.UUID, known_ids: Set[str]):
        try:
            pending = await self.local_scheduler.get_all_scheduled(user_id)
        except Exception as e:
            logger.error(f"Error listing scheduled notifications: {e}")
            return

        for notification in pending:
            if notification.notification_id in known_ids:
                continue
            try:
                await self.local_scheduler.cancel_notification(notification.notification_id)
                logger.info(f"Cancelled orphaned notification {notification.notification_id}")
            except Exception as e:
                logger.error(f"Failed to cancel orphaned notification {notification.notification_id}: {e}")

    async def _retire_stale_occurrences(
        self,
        reminder: Reminder,
        entries: List[NotificationLedgerEntry],
        candidate_keys: Set[Tuple[str, str]],
        known_occurrences: Set[Tuple[str, str]],
        now: datetime,
    ):
        """
        Cancel pending occurrences the reminder no longer produces (its date,
        time or frequency was edited). Rows whose time has passed stay as history.
        """
        stale = []
        for entry in entries:
            key = (str(entry.reminder_id), normalize_stored_time(entry.time))
            fire_at = parse_stored_time(entry.time)
            if key in candidate_keys or fire_at is None or fire_at < now:
                continue
            stale.append((key, entry))
        if not stale:
            return

        for key, entry in stale:
            try:
                await self.local_scheduler.cancel_notification(entry.notification_id)
            except Exception as e:
                logger.error(f"Failed to cancel stale notification {entry.notification_id}: {e}")
            known_occurrences.discard(key)

        try:
            await self.ledger_service.delete_entries([entry for _, entry in stale])
            logger.info(f"Retired {len(stale)} stale notification(s) of {reminder.title}")
        except Exception as e:
            # Rows left behind only point at cancelled jobs
            logger.error(f"Failed to delete stale notifications of reminder {reminder.id}: {e}")

    async def _schedule_reminder(
        self,
        reminder: Reminder,
        user_id: uuid.UUID,
        known_occurrences: Set[Tuple[str, str]],
        entries: List[NotificationLedgerEntry],
        now: datetime,
    ) -> List[str]:
        try:
            triggers = compute_trigger_times(reminder, self.tz)
        except (TypeError, ValueError) as e:
            logger.error(f"Invalid schedule on reminder {reminder.id}: {e}")
            return []

        candidate_keys = {occurrence_key(reminder.id, trigger) for trigger in triggers}
        await self._retire_stale_occurrences(reminder, entries, candidate_keys, known_occurrences, now)

        content = NotificationContent(title=reminder.title, body=reminder.notes)
        scheduled_ids = []
        for trigger in triggers:
            if not is_schedulable(trigger, now):
                logger.debug(f"Skipping {reminder.title} on {trigger.isoformat()} - date is in the past")
                continue

            key = occurrence_key(reminder.id, trigger)
            if key in known_occurrences:
                continue

            try:
                notification_id = await self.local_scheduler.schedule_notification(content, trigger, user_id)
            except Exception as e:
                logger.error(f"Failed to schedule {reminder.title} for {trigger.isoformat()}: {e}")
                continue

            scheduled_ids.append(notification_id)
            known_occurrences.add(key)

            try:
                await self.ledger_service.record_notification(notification_id, reminder, trigger, user_id)
                logger.info(f"Notification stored for {reminder.title} on {trigger.isoformat()}")
            except Exception as e:
                # The job stays pending and is swept as an orphan next pass
                logger.error(f"Failed to store notification {notification_id}: {e}")

        return scheduled_ids
