"""
Preferences repository for the `users` table.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from starlette.concurrency import run_in_threadpool

from src.core.database.interface import IDatabaseSession
from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.core.utils.exceptions import NotFoundError
from src.modules.reminders.repositories.preferences_repository import \
    PreferencesRepository

logger = get_logger(__name__)

MERGE_FUNCTION = "merge_notification_preferences"


class UserPreferencesRecord(BaseModel):
    """Subset of a `users` row read by the reminder engine."""

    id: str
    # Any JSON value; shape checks belong to the reminder map
    notification_preferences: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class SupabasePreferencesRepository(
    SupabaseRepository[UserPreferencesRecord], PreferencesRepository
):
    """Supabase implementation of PreferencesRepository"""

    def __init__(self, client: IDatabaseSession, table_name: str = "users"):
        super().__init__(client, table_name, UserPreferencesRecord)

    async def get_preferences(self, user_id: str) -> Optional[Any]:
        def _get():
            record = self.find_by_id(user_id)
            return record.notification_preferences if record else None

        return await run_in_threadpool(_get)

    async def set_preferences(self, user_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        """
        Field-scoped merge done by the database in one statement
        (`merge_notification_preferences`, see migrations/). Keys written by
        other clients between our read and this write are preserved, and a
        stored value that is not an object is replaced.
        """
        def _set():
            params = {"p_user_id": user_id, "p_partial": partial, "p_table": self.table_name}
            try:
                result = self.client.rpc(MERGE_FUNCTION, params).execute()
            except Exception as e:
                logger.error(
                    "Error merging notification preferences",
                    table=self.table_name,
                    user_id=user_id,
                    error=str(e),
                )
                raise

            if result.data is None:
                raise NotFoundError(f"User record not found: {user_id}")

            logger.debug(
                "Notification preferences merged",
                user_id=user_id,
                keys=sorted(partial.keys()),
            )
            return result.data

        return await run_in_threadpool(_set)
