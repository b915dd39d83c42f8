"""
Standing reminder kinds.

Standing reminders are named, user-toggled recurring reminders. Their values
double as keys of the persisted preferences blob and as the payload type.
"""

from enum import Enum


class StandingReminderKind(Enum):
    """
    Enum for named standing reminders.

    - DAILY_DIGEST: Every day at a chosen time
    - WEEKLY_CHECK_IN: Once a week on a chosen weekday and time
    """

    DAILY_DIGEST = "dailyDigest"
    WEEKLY_CHECK_IN = "weeklyCheckIn"

    @classmethod
    def values(cls):
        """Returns the raw values, as used in payloads and preference keys."""
        return [kind.value for kind in cls]

    def is_weekly(self) -> bool:
        """Check if this kind needs a weekday."""
        return self is StandingReminderKind.WEEKLY_CHECK_IN

    def __repr__(self) -> str:
        return f"StandingReminderKind.{self.name}"
