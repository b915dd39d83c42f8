"""
APScheduler reminder backend.
Schedules reminders as jobs on an in-process AsyncIOScheduler.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from src.core.utils import get_logger
from src.modules.reminders.backends.interfaces import (ReminderBackend,
                                                       reminder_identity)
from src.modules.reminders.exceptions import (PermissionDeniedError,
                                              SchedulingError)
from src.modules.reminders.models.reminder import (NotificationPresentation,
                                                   OneShotTrigger,
                                                   ReminderPayload,
                                                   ReminderTrigger,
                                                   ScheduledEntry)

logger = get_logger(__name__)

DeliverCallback = Callable[[ReminderPayload, NotificationPresentation], Awaitable[None]]


async def log_delivery(payload: ReminderPayload, presentation: NotificationPresentation) -> None:
    """Default delivery: write the reminder to the log."""
    logger.info(
        "Reminder delivered",
        title=payload.title,
        type=payload.type,
        subject_id=payload.subject_id,
        alert=presentation.show_alert,
        sound=presentation.play_sound,
    )


class APSchedulerReminderBackend(ReminderBackend):
    """
    Reminder backend on top of APScheduler.

    One-shot reminders become DateTrigger jobs and standing reminders
    CronTrigger jobs. Payload and trigger are stored as job kwargs so the
    list snapshot can be rebuilt from the job store alone.
    """

    def __init__(
        self,
        scheduler: Optional[AsyncIOScheduler] = None,
        presentation: Optional[NotificationPresentation] = None,
        deliver: Optional[DeliverCallback] = None,
        permission_granted: bool = True,
        timezone_name: str = "UTC",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone_name)
        self.presentation = presentation or NotificationPresentation()
        self.deliver = deliver or log_delivery
        self.permission_granted = permission_granted
        self.timezone_name = timezone_name
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def start(self):
        """Start the scheduler."""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Reminder scheduler started")

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder scheduler shutdown")

    def _build_trigger(self, trigger: ReminderTrigger):
        if isinstance(trigger, OneShotTrigger):
            return DateTrigger(run_date=trigger.at)
        return CronTrigger(
            day_of_week=trigger.weekday if trigger.weekday is not None else "*",
            hour=trigger.hour,
            minute=trigger.minute,
            timezone=self.timezone_name,
        )

    async def schedule(self, trigger: ReminderTrigger, payload: ReminderPayload) -> str:
        if not self.permission_granted:
            raise PermissionDeniedError("Notification permission not granted")

        if isinstance(trigger, OneShotTrigger) and trigger.at <= self.clock():
            raise SchedulingError(f"Trigger is not in the future: {trigger.at.isoformat()}")

        job_id = reminder_identity(trigger, payload)
        try:
            self.scheduler.add_job(
                self._fire,
                self._build_trigger(trigger),
                id=job_id,
                replace_existing=True,
                kwargs={
                    "payload": payload.model_dump(mode="json"),
                    "trigger": trigger.model_dump(mode="json"),
                },
            )
        except (ValueError, TypeError, LookupError) as e:
            raise SchedulingError(f"Scheduler rejected reminder: {e}") from e

        logger.info(
            "Scheduled reminder job",
            backend_id=job_id,
            kind=trigger.kind,
            trigger=trigger.fingerprint(),
        )
        return job_id

    async def cancel(self, backend_id: str) -> None:
        try:
            self.scheduler.remove_job(backend_id)
            logger.info("Removed reminder job", backend_id=backend_id)
        except JobLookupError:
            # Already fired or never existed
            logger.debug("Reminder job not found, nothing to cancel", backend_id=backend_id)

    async def list_scheduled(self) -> List[ScheduledEntry]:
        entries = []
        for job in self.scheduler.get_jobs():
            try:
                entries.append(
                    ScheduledEntry.model_validate(
                        {
                            "backend_id": job.id,
                            "trigger": job.kwargs["trigger"],
                            "payload": job.kwargs["payload"],
                        }
                    )
                )
            except (KeyError, ValueError) as e:
                logger.warning("Skipping foreign scheduler job", job_id=job.id, error=str(e))
        return entries

    async def query_permission(self) -> bool:
        return self.permission_granted

    async def request_permission(self) -> bool:
        # No OS prompt for an in-process scheduler
        self.permission_granted = True
        return True

    async def _fire(self, payload: Dict[str, Any], trigger: Dict[str, Any]) -> None:
        reminder = ReminderPayload.model_validate(payload)
        try:
            await self.deliver(reminder, self.presentation)
        except Exception as e:
            logger.error(
                "Error delivering reminder",
                subject_id=reminder.subject_id,
                trigger=trigger,
                error=str(e),
            )
