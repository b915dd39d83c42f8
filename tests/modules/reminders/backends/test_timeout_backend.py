import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.reminders.backends.timeout import TimeoutReminderBackend
from src.modules.reminders.exceptions import (ReminderBackendError,
                                              SchedulingError)
from src.modules.reminders.models.reminder import (OneShotTrigger,
                                                   ReminderPayload)


async def hang(*args, **kwargs):
    await asyncio.sleep(5)


@pytest.mark.asyncio
class TestTimeoutReminderBackend:
    @pytest.fixture
    def inner(self):
        return AsyncMock()

    @pytest.fixture
    def guarded(self, inner):
        return TimeoutReminderBackend(inner, timeout_seconds=0.05)

    async def test_passes_results_through(self, guarded, inner, clock):
        inner.schedule.return_value = "id-1"
        trigger = OneShotTrigger(at=clock() + timedelta(hours=1))
        payload = ReminderPayload(title="t", body="b")

        assert await guarded.schedule(trigger, payload) == "id-1"
        inner.schedule.assert_awaited_once_with(trigger, payload)

    async def test_schedule_timeout_is_scheduling_error(self, guarded, inner, clock):
        inner.schedule.side_effect = hang

        with pytest.raises(SchedulingError):
            await guarded.schedule(
                OneShotTrigger(at=clock() + timedelta(hours=1)),
                ReminderPayload(title="t", body="b"),
            )

    async def test_cancel_timeout_is_backend_error(self, guarded, inner):
        inner.cancel.side_effect = hang

        with pytest.raises(ReminderBackendError) as exc:
            await guarded.cancel("id-1")

        assert not isinstance(exc.value, SchedulingError)

    async def test_list_timeout(self, guarded, inner):
        inner.list_scheduled.side_effect = hang

        with pytest.raises(ReminderBackendError):
            await guarded.list_scheduled()

    async def test_inner_errors_propagate_unchanged(self, guarded, inner):
        inner.cancel.side_effect = SchedulingError("rejected")

        with pytest.raises(SchedulingError, match="rejected"):
            await guarded.cancel("id-1")

    async def test_lifecycle_delegates(self):
        inner = MagicMock()
        guarded = TimeoutReminderBackend(inner)

        guarded.start()
        guarded.shutdown()

        inner.start.assert_called_once()
        inner.shutdown.assert_called_once()
