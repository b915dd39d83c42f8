import pytest

from src.modules.reminders.services.reminder_sync_registry import \
    ReminderSyncRegistry


class TestReminderSyncRegistry:
    @pytest.fixture
    def registry(self, backend, preferences_repository, task_repository, policy, content):
        return ReminderSyncRegistry(
            backend=backend,
            preferences_repository=preferences_repository,
            task_repository=task_repository,
            policy=policy,
            content=content,
        )

    def test_one_engine_per_user(self, registry):
        first = registry.get("user-1")

        assert registry.get("user-1") is first
        assert registry.get("user-2") is not first
        assert registry.user_ids == ["user-1", "user-2"]

    def test_engines_share_backend_but_not_state(self, registry, backend):
        first = registry.get("user-1")
        second = registry.get("user-2")

        assert first.backend is second.backend is backend
        assert first.store is not second.store
        assert first._lock is not second._lock
        assert second.store.user_id == "user-2"

    @pytest.mark.asyncio
    async def test_users_do_not_see_each_other(self, registry, make_task, preferences_repository):
        await registry.get("user-1").on_subject_changed(make_task("task-1", user_id="user-1"))
        await registry.get("user-2").on_subject_changed(make_task("task-2", user_id="user-2"))

        assert list(preferences_repository.blobs["user-1"]["taskNotifications"]) == ["task-1"]
        assert list(preferences_repository.blobs["user-2"]["taskNotifications"]) == ["task-2"]
