from enum import Enum


class TaskStatus(Enum):
    """
    Enum for task status.

    - ACTIVE: Task still open, may own a reminder
    - COMPLETED: Task done, never owns a reminder
    """

    ACTIVE = "active"
    COMPLETED = "completed"

    def __repr__(self) -> str:
        return f"TaskStatus.{self.name}"
