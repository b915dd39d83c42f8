import uuid
from abc import ABC, abstractmethod
from typing import List

from src.modules.reminders.models.reminder import (ReminderPayload,
                                                   ReminderTrigger,
                                                   ScheduledEntry)

REMINDER_ID_NAMESPACE = uuid.UUID("6f1c2b8e-3d4a-4f5e-9a7b-1c2d3e4f5a6b")


def reminder_identity(trigger: ReminderTrigger, payload: ReminderPayload) -> str:
    """
    Deterministic backend id for a (trigger, payload) pair.
    Re-scheduling the same reminder yields the same id.
    """
    key = "|".join(
        [
            payload.type or "",
            payload.subject_id or "",
            payload.user_id or "",
            trigger.fingerprint(),
        ]
    )
    return str(uuid.uuid5(REMINDER_ID_NAMESPACE, key))


class ReminderBackend(ABC):
    """
    Abstract base class for local reminder backends.
    """

    @abstractmethod
    async def schedule(self, trigger: ReminderTrigger, payload: ReminderPayload) -> str:
        """
        Schedule a reminder.
        Returns the backend id used to cancel it.

        Raises:
            PermissionDeniedError: notifications are not permitted
            SchedulingError: the trigger was rejected
        """
        pass

    @abstractmethod
    async def cancel(self, backend_id: str) -> None:
        """
        Cancel a reminder.
        Unknown or already fired ids are a no-op.
        """
        pass

    @abstractmethod
    async def list_scheduled(self) -> List[ScheduledEntry]:
        """
        Best-effort snapshot of every pending reminder.
        """
        pass

    @abstractmethod
    async def query_permission(self) -> bool:
        """Whether reminders may currently be scheduled."""
        pass

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask for permission. Returns the resulting grant state."""
        pass
