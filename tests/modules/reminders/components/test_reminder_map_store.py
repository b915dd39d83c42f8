from unittest.mock import AsyncMock

import pytest

from src.modules.reminders.components.reminder_map_store import \
    ReminderMapStore
from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.exceptions import PersistenceError
from src.modules.reminders.models.reminder_map import StandingReminder

USER_ID = "user-1"


@pytest.mark.asyncio
class TestReminderMapStore:
    @pytest.fixture
    def store(self, preferences_repository):
        return ReminderMapStore(preferences_repository, USER_ID)

    async def test_load_missing_blob(self, store):
        reminder_map = await store.load()

        assert store.loaded
        assert reminder_map.task_notifications == {}

    async def test_load_existing_blob(self, store, preferences_repository):
        preferences_repository.blobs[USER_ID] = {"taskNotifications": {"task-1": "id-1"}}

        await store.load()

        assert store.get("task-1") == "id-1"

    async def test_load_corrupt_blob_starts_empty(self, store, preferences_repository):
        preferences_repository.blobs[USER_ID] = {
            "taskNotifications": {"task-1": "id-1"},
            "dailyDigest": "yes",
        }

        reminder_map = await store.load()

        assert store.loaded
        assert reminder_map.task_notifications == {}

    async def test_non_object_blob_starts_empty_and_is_replaced(self, store, preferences_repository):
        preferences_repository.blobs[USER_ID] = "garbage"

        reminder_map = await store.load()
        store.set("task-1", "id-1")
        await store.save()

        assert store.loaded
        assert reminder_map.task_notifications == {"task-1": "id-1"}
        assert preferences_repository.blobs[USER_ID]["taskNotifications"] == {"task-1": "id-1"}

    async def test_load_read_failure(self, store, preferences_repository):
        preferences_repository.fail_reads = True

        with pytest.raises(PersistenceError):
            await store.load()

        assert not store.loaded

    async def test_save_preserves_sibling_preferences(self, store, preferences_repository):
        preferences_repository.blobs[USER_ID] = {
            "medicationReminders": True,
            "weeklyReport": False,
        }
        await store.load()

        store.set("task-1", "id-1")
        store.set_standing(
            StandingReminderKind.DAILY_DIGEST,
            StandingReminder(enabled=True, id="id-2", hour=8, minute=0),
        )
        await store.save()

        blob = preferences_repository.blobs[USER_ID]
        assert blob["medicationReminders"] is True
        assert blob["weeklyReport"] is False
        assert blob["taskNotifications"] == {"task-1": "id-1"}
        assert blob["dailyDigest"]["id"] == "id-2"

    async def test_save_retries_once(self, store, preferences_repository):
        preferences_repository.fail_writes = 1
        store.set("task-1", "id-1")

        await store.save()

        assert preferences_repository.blobs[USER_ID]["taskNotifications"] == {"task-1": "id-1"}

    async def test_save_gives_up_after_second_failure(self, store, preferences_repository):
        preferences_repository.fail_writes = 2
        store.set("task-1", "id-1")

        with pytest.raises(PersistenceError) as exc:
            await store.save()

        assert exc.value.attempts == 2
        assert USER_ID not in preferences_repository.blobs
        # Memory keeps the mutation
        assert store.get("task-1") == "id-1"

    async def test_save_writes_engine_keys_only(self):
        repository = AsyncMock()
        store = ReminderMapStore(repository, USER_ID)
        store.set("task-1", "id-1")

        await store.save()

        repository.set_preferences.assert_awaited_once_with(
            USER_ID, {"taskNotifications": {"task-1": "id-1"}, "taskReminders": True}
        )

    async def test_remove(self, store):
        store.set("task-1", "id-1")

        assert store.remove("task-1") == "id-1"
        assert store.remove("task-1") is None
        assert store.get("task-1") is None

    async def test_snapshot_is_a_copy(self, store):
        store.set("task-1", "id-1")

        snapshot = store.snapshot()
        snapshot.task_notifications["task-2"] = "id-2"

        assert store.get("task-2") is None

    async def test_replace(self, store):
        store.set("task-1", "id-1")
        replacement = store.snapshot()
        replacement.task_notifications = {"task-9": "id-9"}
        replacement.task_reminders_enabled = False

        store.replace(replacement)

        assert store.get("task-1") is None
        assert store.get("task-9") == "id-9"
        assert store.task_reminders_enabled is False
