"""
Reminder Map Store component.
Owns the in-memory reminder map of one user and its persistence.
"""

from typing import Dict, Optional

from src.core.utils import get_logger
from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.exceptions import PersistenceError
from src.modules.reminders.models.reminder_map import (ReminderMap,
                                                       StandingReminder)
from src.modules.reminders.repositories.preferences_repository import \
    PreferencesRepository

logger = get_logger(__name__)


class ReminderMapStore:
    """
    Reminder map of a single user.

    Mutations only touch memory; `save()` writes the engine-owned keys back
    through a field-scoped merge so sibling preferences survive.
    """

    def __init__(
        self,
        repository: PreferencesRepository,
        user_id: str,
        max_attempts: int = 2,
    ):
        self.repository = repository
        self.user_id = user_id
        self.max_attempts = max(1, max_attempts)
        self._map = ReminderMap()
        self.loaded = False

    async def load(self) -> ReminderMap:
        """
        Load the map from the preferences blob.

        A missing or unreadable blob yields an empty map.

        Raises:
            PersistenceError: the repository read itself failed
        """
        try:
            blob = await self.repository.get_preferences(self.user_id)
        except Exception as e:
            logger.error(
                "Failed to read reminder map", user_id=self.user_id, error=str(e)
            )
            raise PersistenceError(f"Could not read reminder map: {e}") from e

        try:
            self._map = ReminderMap.from_preferences(blob)
        except ValueError as e:
            logger.warning(
                "Corrupt reminder map, starting empty",
                user_id=self.user_id,
                error=str(e),
            )
            self._map = ReminderMap()

        if blob is None:
            logger.info("No reminder map stored yet", user_id=self.user_id)

        self.loaded = True
        logger.debug(
            "Reminder map loaded",
            user_id=self.user_id,
            task_reminders=len(self._map.task_notifications),
        )
        return self._map

    async def save(self) -> None:
        """
        Persist engine-owned keys.

        Raises:
            PersistenceError: every attempt failed; memory keeps the mutated map
        """
        partial = self._map.to_preferences()
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                await self.repository.set_preferences(self.user_id, partial)
                logger.debug("Reminder map saved", user_id=self.user_id, attempt=attempt)
                return
            except Exception as e:
                last_error = e
                logger.warning(
                    "Reminder map save failed",
                    user_id=self.user_id,
                    attempt=attempt,
                    error=str(e),
                )

        raise PersistenceError(
            f"Could not save reminder map: {last_error}", attempts=self.max_attempts
        ) from last_error

    def get(self, subject_id: str) -> Optional[str]:
        return self._map.task_notifications.get(subject_id)

    def set(self, subject_id: str, backend_id: str) -> None:
        self._map.task_notifications[subject_id] = backend_id

    def remove(self, subject_id: str) -> Optional[str]:
        return self._map.task_notifications.pop(subject_id, None)

    def replace_task_notifications(self, task_notifications: Dict[str, str]) -> None:
        self._map.task_notifications = dict(task_notifications)

    def get_standing(self, kind: StandingReminderKind) -> Optional[StandingReminder]:
        return self._map.standing.get(kind)

    def set_standing(self, kind: StandingReminderKind, reminder: StandingReminder) -> None:
        self._map.standing[kind] = reminder

    @property
    def task_reminders_enabled(self) -> bool:
        return self._map.task_reminders_enabled

    def set_task_reminders_enabled(self, enabled: bool) -> None:
        self._map.task_reminders_enabled = enabled

    def replace(self, reminder_map: ReminderMap) -> None:
        self._map = reminder_map.model_copy(deep=True)

    def snapshot(self) -> ReminderMap:
        return self._map.model_copy(deep=True)
