"""
Reminder Policy component.
Pure decisions about whether a subject owns a reminder and when it fires.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.models.decision import Decision, NoReminder, RemindAt
from src.modules.reminders.models.reminder import RecurringTrigger
from src.modules.reminders.models.reminder_map import StandingReminderConfig
from src.modules.reminders.models.task import ReminderSubject

DEFAULT_LEAD_TIME = timedelta(hours=1)

DEFAULT_STANDING_CONFIGS = {
    StandingReminderKind.DAILY_DIGEST: StandingReminderConfig(hour=8, minute=0),
    StandingReminderKind.WEEKLY_CHECK_IN: StandingReminderConfig(hour=18, minute=0, weekday=6),
}


class ReminderPolicy:
    """
    Decides reminder timing. No I/O; the clock is injected.
    """

    def __init__(
        self,
        lead_time: timedelta = DEFAULT_LEAD_TIME,
        clock: Optional[Callable[[], datetime]] = None,
        standing_defaults: Optional[Dict[StandingReminderKind, StandingReminderConfig]] = None,
    ):
        if lead_time < timedelta(0):
            raise ValueError("lead_time must not be negative")
        self.lead_time = lead_time
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.standing_defaults = {**DEFAULT_STANDING_CONFIGS, **(standing_defaults or {})}

    def should_remind(self, subject: ReminderSubject, now: Optional[datetime] = None) -> Decision:
        """
        Decide whether `subject` should own a reminder.

        The trigger is `due_date - lead_time`. A trigger equal to `now` counts
        as elapsed: some platforms reject near-past triggers.
        """
        if not subject.is_active():
            return NoReminder("inactive")

        if subject.due_date is None:
            return NoReminder("no_due_date")

        due = subject.due_date
        if due.tzinfo is None:
            due = due.replace(tzinfo=timezone.utc)

        trigger_at = due - self.lead_time
        now = now or self.clock()
        if trigger_at <= now:
            return NoReminder("trigger_elapsed")

        return RemindAt(trigger_at)

    def default_config(self, kind: StandingReminderKind) -> StandingReminderConfig:
        return self.standing_defaults[kind]

    def standing_reminder_spec(
        self, kind: StandingReminderKind, config: Optional[StandingReminderConfig] = None
    ) -> RecurringTrigger:
        """
        Map a standing reminder and its user-chosen time to a recurring trigger.

        Raises:
            ValueError: a weekly reminder without a weekday
        """
        config = config or self.default_config(kind)

        if kind.is_weekly():
            weekday = config.weekday
            if weekday is None:
                weekday = self.default_config(kind).weekday
            if weekday is None:
                raise ValueError(f"{kind.value} requires a weekday")
            return RecurringTrigger(hour=config.hour, minute=config.minute, weekday=weekday)

        # Daily reminders ignore any weekday
        return RecurringTrigger(hour=config.hour, minute=config.minute)
