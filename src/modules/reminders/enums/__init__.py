from .reminder_kind import ReminderKind
from .standing_reminder_kind import StandingReminderKind
from .task_priority import TaskPriority
from .task_status import TaskStatus

__all__ = [
    "ReminderKind",
    "StandingReminderKind",
    "TaskPriority",
    "TaskStatus",
]
