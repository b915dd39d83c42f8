from typing import Dict, List

from src.core.utils import get_logger
from src.modules.reminders.backends.interfaces import ReminderBackend
from src.modules.reminders.components.reminder_content import \
    ReminderContentBuilder
from src.modules.reminders.components.reminder_map_store import \
    ReminderMapStore
from src.modules.reminders.components.reminder_policy import ReminderPolicy
from src.modules.reminders.repositories.preferences_repository import \
    PreferencesRepository
from src.modules.reminders.repositories.task_repository import TaskRepository
from src.modules.reminders.services.reminder_sync_service import \
    ReminderSyncService

logger = get_logger(__name__)


class ReminderSyncRegistry:
    """
    Hands out one sync engine per user.
    Engines of different users never share a lock or a reminder map.
    """

    def __init__(
        self,
        backend: ReminderBackend,
        preferences_repository: PreferencesRepository,
        task_repository: TaskRepository,
        policy: ReminderPolicy,
        content: ReminderContentBuilder,
    ):
        self.backend = backend
        self.preferences_repository = preferences_repository
        self.task_repository = task_repository
        self.policy = policy
        self.content = content
        self._engines: Dict[str, ReminderSyncService] = {}

    def get(self, user_id: str) -> ReminderSyncService:
        engine = self._engines.get(user_id)
        if engine is None:
            engine = ReminderSyncService(
                user_id=user_id,
                backend=self.backend,
                store=ReminderMapStore(self.preferences_repository, user_id),
                task_repository=self.task_repository,
                policy=self.policy,
                content=self.content,
            )
            self._engines[user_id] = engine
            logger.debug("Sync engine created", user_id=user_id)
        return engine

    @property
    def user_ids(self) -> List[str]:
        return list(self._engines.keys())
