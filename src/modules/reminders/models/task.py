from datetime import datetime, timezone
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from src.modules.reminders.enums.task_priority import TaskPriority
from src.modules.reminders.enums.task_status import TaskStatus


class ReminderSubject(Protocol):
    """Anything that can own at most one active reminder."""

    id: str
    user_id: str
    due_date: Optional[datetime]

    def is_active(self) -> bool:
        ...


class Task(BaseModel):
    """
    Task entity as stored in the remote `tasks` table.
    Only the fields the reminder engine reads are declared.
    """

    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.ACTIVE
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, extra="ignore")

    @field_validator("due_date", "created_at", "completed_at")
    @classmethod
    def ensure_timezone(cls, v):
        """Naive timestamps coming from the store are UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_active(self) -> bool:
        """Check if task is still open."""
        return TaskStatus(self.status) is TaskStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"Task(id={self.id}, user_id={self.user_id}, "
            f"status={self.status}, due_date={self.due_date})"
        )
