"""
In-memory reminder backend.
Keeps pending reminders in a dict; used in development and tests.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from src.core.utils import get_logger
from src.modules.reminders.backends.interfaces import (ReminderBackend,
                                                       reminder_identity)
from src.modules.reminders.exceptions import (PermissionDeniedError,
                                              SchedulingError)
from src.modules.reminders.models.reminder import (OneShotTrigger,
                                                   ReminderPayload,
                                                   ReminderTrigger,
                                                   ScheduledEntry)

logger = get_logger(__name__)


class InMemoryReminderBackend(ReminderBackend):
    """Dict-backed reminder backend."""

    def __init__(
        self,
        permission_granted: bool = True,
        grant_on_request: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.permission_granted = permission_granted
        self.grant_on_request = grant_on_request
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.entries: Dict[str, ScheduledEntry] = {}
        self.delivered: List[ScheduledEntry] = []

    async def schedule(self, trigger: ReminderTrigger, payload: ReminderPayload) -> str:
        if not self.permission_granted:
            raise PermissionDeniedError("Notification permission not granted")

        if isinstance(trigger, OneShotTrigger) and trigger.at <= self.clock():
            raise SchedulingError(f"Trigger is not in the future: {trigger.at.isoformat()}")

        backend_id = reminder_identity(trigger, payload)
        self.entries[backend_id] = ScheduledEntry(
            backend_id=backend_id, trigger=trigger, payload=payload
        )
        logger.debug("Reminder stored in memory", backend_id=backend_id)
        return backend_id

    async def cancel(self, backend_id: str) -> None:
        if self.entries.pop(backend_id, None) is None:
            logger.debug("Cancel ignored for unknown reminder", backend_id=backend_id)

    async def list_scheduled(self) -> List[ScheduledEntry]:
        return list(self.entries.values())

    async def query_permission(self) -> bool:
        return self.permission_granted

    async def request_permission(self) -> bool:
        if self.grant_on_request:
            self.permission_granted = True
        return self.permission_granted

    def fire_due(self, now: Optional[datetime] = None) -> List[ScheduledEntry]:
        """Drop one-shot reminders whose trigger has passed, as if delivered."""
        now = now or self.clock()
        fired = [
            entry
            for entry in self.entries.values()
            if isinstance(entry.trigger, OneShotTrigger) and entry.trigger.at <= now
        ]
        for entry in fired:
            del self.entries[entry.backend_id]
        self.delivered.extend(fired)
        return fired
