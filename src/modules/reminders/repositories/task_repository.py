from abc import ABC, abstractmethod
from typing import List, Optional

from src.modules.reminders.models.task import Task


class TaskRepository(ABC):
    """Interface for Task Repository."""

    @abstractmethod
    async def list_active_subjects_with_due_date(self, user_id: str) -> List[Task]:
        """Active tasks of `user_id` that have a due date."""
        pass

    @abstractmethod
    async def find_by_id(self, task_id: str) -> Optional[Task]:
        """Find a task by ID."""
        pass
