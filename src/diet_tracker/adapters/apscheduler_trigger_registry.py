"""APScheduler-backed trigger registry for meal reminders."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from diet_tracker.domain.reminders import ReminderPayload

logger = logging.getLogger(__name__)

BACKUP_JOB_ID = "meal-reminders-backup"


def reminder_job_id(key: int) -> str:
    """Return the job id used for a trigger key."""
    return f"meal-reminder:{key}"


@dataclass
class ApschedulerTriggerRegistry:
    """Arms reminders as one-off date jobs on an asyncio scheduler."""

    callback: Callable[[ReminderPayload], Awaitable[object]]
    misfire_grace_seconds: int = 900
    scheduler: AsyncIOScheduler = field(default_factory=AsyncIOScheduler)

    def arm(self, key: int, when_epoch_millis: int, payload: ReminderPayload) -> None:
        """Add or replace the date job for a key."""
        run_date = datetime.fromtimestamp(when_epoch_millis / 1000, tz=UTC)
        # Pending jobs of a stopped scheduler are not deduplicated by id.
        self.cancel(key)
        self.scheduler.add_job(
            self.callback,
            trigger=DateTrigger(run_date=run_date),
            args=[payload],
            id=reminder_job_id(key),
            name=f"Reminder for {payload.meal_name} on {payload.day}",
            replace_existing=True,
            misfire_grace_time=self.misfire_grace_seconds,
        )

    def cancel(self, key: int) -> None:
        """Remove the job for a key if it is still pending."""
        try:
            self.scheduler.remove_job(reminder_job_id(key))
        except JobLookupError:
            return

    def is_armed(self, key: int) -> bool:
        """Return True when a job for the key is pending."""
        return self.scheduler.get_job(reminder_job_id(key)) is not None

    def schedule_backup(
        self, refresh: Callable[[], object], interval_hours: int
    ) -> None:
        """Periodically re-run the full schedule in case a trigger was lost."""
        self.scheduler.add_job(
            refresh,
            trigger=IntervalTrigger(hours=interval_hours),
            id=BACKUP_JOB_ID,
            name="Meal reminder backup scheduling",
            replace_existing=True,
        )
        logger.info("Backup reminder scheduling every %dh", interval_hours)

    def start(self) -> None:
        """Start the scheduler on the running event loop."""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Reminder scheduler started")

    def shutdown(self) -> None:
        """Stop the scheduler without waiting for running jobs."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder scheduler stopped")
