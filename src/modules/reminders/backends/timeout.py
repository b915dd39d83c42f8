import asyncio
from typing import List

from src.core.utils import get_logger
from src.modules.reminders.backends.interfaces import ReminderBackend
from src.modules.reminders.exceptions import (ReminderBackendError,
                                              SchedulingError)
from src.modules.reminders.models.reminder import (ReminderPayload,
                                                   ReminderTrigger,
                                                   ScheduledEntry)

logger = get_logger(__name__)


class TimeoutReminderBackend(ReminderBackend):
    """
    Applies a hard timeout to every call of the wrapped backend.
    A hung call surfaces as a backend failure instead of stalling the engine.
    """

    def __init__(self, inner: ReminderBackend, timeout_seconds: float = 10.0):
        self.inner = inner
        self.timeout_seconds = timeout_seconds

    async def _guard(self, operation: str, awaitable, error_class=ReminderBackendError):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.warning(
                "Reminder backend call timed out",
                operation=operation,
                timeout=self.timeout_seconds,
            )
            raise error_class(
                f"Reminder backend {operation} timed out after {self.timeout_seconds}s"
            ) from e

    async def schedule(self, trigger: ReminderTrigger, payload: ReminderPayload) -> str:
        return await self._guard(
            "schedule", self.inner.schedule(trigger, payload), SchedulingError
        )

    async def cancel(self, backend_id: str) -> None:
        await self._guard("cancel", self.inner.cancel(backend_id))

    async def list_scheduled(self) -> List[ScheduledEntry]:
        return await self._guard("list", self.inner.list_scheduled())

    async def query_permission(self) -> bool:
        return await self._guard("query_permission", self.inner.query_permission())

    async def request_permission(self) -> bool:
        return await self._guard("request_permission", self.inner.request_permission())

    def start(self):
        """Start the wrapped backend, if it has a lifecycle."""
        if hasattr(self.inner, "start"):
            self.inner.start()

    def shutdown(self):
        """Shutdown the wrapped backend, if it has a lifecycle."""
        if hasattr(self.inner, "shutdown"):
            self.inner.shutdown()
