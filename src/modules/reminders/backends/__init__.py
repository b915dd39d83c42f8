from .apscheduler_backend import APSchedulerReminderBackend
from .interfaces import ReminderBackend, reminder_identity
from .memory import InMemoryReminderBackend
from .timeout import TimeoutReminderBackend

__all__ = [
    "APSchedulerReminderBackend",
    "InMemoryReminderBackend",
    "ReminderBackend",
    "TimeoutReminderBackend",
    "reminder_identity",
]
