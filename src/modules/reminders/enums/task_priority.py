from enum import Enum


class TaskPriority(Enum):
    """
    Enum for task priority.

    Drives the marker and accent color of task reminders.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __repr__(self) -> str:
        return f"TaskPriority.{self.name}"
