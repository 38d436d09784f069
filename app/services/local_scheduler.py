import uuid
import logging
from datetime import datetime
from typing import List, Optional
from apscheduler.jobstores.base import JobLookupError
from app.core import scheduler as scheduler_module
from app.core.notification_handler import handle_notification
from app.config.constants import NOTIFICATION_JOBSTORE
from app.db.session import AsyncSessionLocal
from app.infrastructure.notifier import send_telegram_message, format_notification_text
from app.schemas.notification import LocalNotification, NotificationContent, ScheduledNotification
from app.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

async def fire_local_notification(notification_id: str, user_id: str, title: str, body: str = None):
    """
    Job function to be executed by APScheduler at the notification's fire time.
    """
    logger.info(f"Firing local notification {notification_id}")
    notification = LocalNotification(
        notification_id=notification_id,
        user_id=user_id,
        content=NotificationContent(title=title, body=body),
    )
    try:
        behavior = await handle_notification(notification)
        if behavior is None or not behavior.should_show_alert:
            return

        async with AsyncSessionLocal() as session:
            profile = await ProfileService(session).get_profile(uuid.UUID(user_id))

        if not profile or not profile.telegram_id:
            logger.info(f"No push channel for user {user_id}, notification {notification_id} shown locally only.")
            return

        await send_telegram_message(
            profile.telegram_id,
            format_notification_text(title, body),
            silent=not behavior.should_play_sound,
        )
    except Exception:
        logger.exception(f"Failed to deliver local notification {notification_id}")


class LocalNotificationScheduler:
    """
    Local notification facility backed by APScheduler one-shot date jobs.
    Job ids double as notification identifiers.
    """

    def __init__(self, job_scheduler=None, jobstore: str = NOTIFICATION_JOBSTORE):
        self._job_scheduler = job_scheduler
        self.jobstore = jobstore

    @property
    def job_scheduler(self):
        return self._job_scheduler or scheduler_module.scheduler

    async def schedule_notification(
        self,
        content: NotificationContent,
        fire_at: datetime,
        user_id: uuid.UUID,
    ) -> str:
        notification_id = str(uuid.uuid4())
        self.job_scheduler.add_job(
            fire_local_notification,
            'date',
            run_date=fire_at,
            kwargs={
                'notification_id': notification_id,
                'user_id': str(user_id),
                'title': content.title,
                'body': content.body,
            },
            id=notification_id,
            jobstore=self.jobstore,
            # Past triggers still fire as soon as possible
            misfire_grace_time=None,
        )
        logger.info(f"Scheduled notification {notification_id} for {fire_at.isoformat()}")
        return notification_id

    async def cancel_notification(self, notification_id: str) -> bool:
        try:
            self.job_scheduler.remove_job(notification_id, jobstore=self.jobstore)
        except JobLookupError:
            logger.debug(f"Notification {notification_id} already gone")
            return False
        logger.info(f"Cancelled notification {notification_id}")
        return True

    async def get_all_scheduled(self, user_id: Optional[uuid.UUID] = None) -> List[ScheduledNotification]:
        """Pending notifications, optionally only those of one user plus unowned ones."""
        scheduled = []
        for job in self.job_scheduler.get_jobs(jobstore=self.jobstore):
            owner = (job.kwargs or {}).get('user_id')
            # Jobs without an owner belong to nobody and are swept with every user
            if user_id is not None and owner is not None and owner != str(user_id):
                continue
            scheduled.append(ScheduledNotification(
                notification_id=job.id,
                user_id=owner,
                fire_at=getattr(job, 'next_run_time', None),
            ))
        return scheduled
