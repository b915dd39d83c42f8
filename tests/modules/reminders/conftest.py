import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from src.modules.reminders.backends.memory import InMemoryReminderBackend
from src.modules.reminders.components.reminder_content import \
    ReminderContentBuilder
from src.modules.reminders.components.reminder_map_store import \
    ReminderMapStore
from src.modules.reminders.components.reminder_policy import ReminderPolicy
from src.modules.reminders.models.task import Task
from src.modules.reminders.repositories.preferences_repository import \
    PreferencesRepository
from src.modules.reminders.repositories.task_repository import TaskRepository
from src.modules.reminders.services.reminder_sync_service import \
    ReminderSyncService

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta):
        self.now = self.now + delta


class FakePreferencesRepository(PreferencesRepository):
    """Dict-backed preferences store with top-level merge."""

    def __init__(self, blobs: Optional[Dict[str, Any]] = None):
        self.blobs = blobs or {}
        self.fail_reads = False
        self.fail_writes = 0
        self.writes: List[Dict[str, Any]] = []

    async def get_preferences(self, user_id):
        if self.fail_reads:
            raise ConnectionError("store offline")
        return copy.deepcopy(self.blobs.get(user_id))

    async def set_preferences(self, user_id, partial):
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise ConnectionError("store offline")
        stored = self.blobs.get(user_id)
        base = stored if isinstance(stored, dict) else {}
        merged = {**base, **copy.deepcopy(partial)}
        self.blobs[user_id] = merged
        self.writes.append(copy.deepcopy(partial))
        return copy.deepcopy(merged)


class FakeTaskRepository(TaskRepository):
    def __init__(self):
        self.tasks: Dict[str, Task] = {}
        self.fail = False

    def put(self, task: Task):
        self.tasks[task.id] = task

    async def list_active_subjects_with_due_date(self, user_id):
        if self.fail:
            raise ConnectionError("store offline")
        return [
            task
            for task in self.tasks.values()
            if task.user_id == user_id and task.is_active() and task.due_date is not None
        ]

    async def find_by_id(self, task_id):
        if self.fail:
            raise ConnectionError("store offline")
        return self.tasks.get(task_id)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_task():
    def _make(
        task_id: str = "task-1",
        due_in: Optional[timedelta] = timedelta(hours=3),
        user_id: str = USER_ID,
        **overrides,
    ) -> Task:
        data = {
            "id": task_id,
            "user_id": user_id,
            "title": f"Task {task_id}",
            "priority": "medium",
            "status": "active",
            "due_date": NOW + due_in if due_in is not None else None,
        }
        data.update(overrides)
        return Task(**data)

    return _make


@pytest.fixture
def preferences_repository():
    return FakePreferencesRepository()


@pytest.fixture
def task_repository():
    return FakeTaskRepository()


@pytest.fixture
def backend(clock):
    return InMemoryReminderBackend(clock=clock)


@pytest.fixture
def policy(clock):
    return ReminderPolicy(clock=clock)


@pytest.fixture
def content():
    return ReminderContentBuilder()


@pytest.fixture
def make_engine(backend, preferences_repository, task_repository, policy, content):
    def _make(user_id: str = USER_ID) -> ReminderSyncService:
        return ReminderSyncService(
            user_id=user_id,
            backend=backend,
            store=ReminderMapStore(preferences_repository, user_id),
            task_repository=task_repository,
            policy=policy,
            content=content,
        )

    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()
