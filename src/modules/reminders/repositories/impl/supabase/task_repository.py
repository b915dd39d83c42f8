"""
Task repository for the `tasks` table.
"""

from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from src.core.database.interface import IDatabaseSession
from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.reminders.enums.task_status import TaskStatus
from src.modules.reminders.models.task import Task
from src.modules.reminders.repositories.task_repository import TaskRepository

logger = get_logger(__name__)


class SupabaseTaskRepository(SupabaseRepository[Task], TaskRepository):
    """Supabase implementation of TaskRepository"""

    def __init__(self, client: IDatabaseSession, table_name: str = "tasks"):
        super().__init__(client, table_name, Task)

    async def list_active_subjects_with_due_date(self, user_id: str) -> List[Task]:
        def _list():
            try:
                result = (
                    self.client.table(self.table_name)
                    .select("*")
                    .eq("user_id", user_id)
                    .eq("status", TaskStatus.ACTIVE.value)
                    .not_.is_("due_date", "null")
                    .order("due_date", desc=False)
                    .execute()
                )
                return [self.model_class(**item) for item in result.data]
            except Exception as e:
                logger.error(
                    "Error listing active tasks with due date",
                    user_id=user_id,
                    error=str(e),
                )
                raise

        return await run_in_threadpool(_list)

    async def find_by_id(self, task_id: str) -> Optional[Task]:
        def _find():
            return super(SupabaseTaskRepository, self).find_by_id(task_id)

        return await run_in_threadpool(_find)
