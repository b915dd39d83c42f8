"""
Reminder Sync Service.
Keeps the locally scheduled reminders of one user consistent with their tasks.
"""

import asyncio
from typing import Dict, List, Optional, Set

from src.core.utils import get_logger
from src.modules.reminders.backends.interfaces import ReminderBackend
from src.modules.reminders.components.reminder_content import \
    ReminderContentBuilder
from src.modules.reminders.components.reminder_map_store import \
    ReminderMapStore
from src.modules.reminders.components.reminder_policy import ReminderPolicy
from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.exceptions import (PersistenceError,
                                              StaleReferenceError)
from src.modules.reminders.models.decision import NoReminder, RemindAt
from src.modules.reminders.models.reminder import (OneShotTrigger,
                                                   ScheduledEntry,
                                                   ScheduledReminder)
from src.modules.reminders.models.reminder_map import (ReminderMap,
                                                       StandingReminder,
                                                       StandingReminderConfig)
from src.modules.reminders.models.task import Task
from src.modules.reminders.repositories.task_repository import TaskRepository

logger = get_logger(__name__)


class ReminderSyncService:
    """
    Synchronization engine bound to a single user.

    Every public operation runs under one asyncio.Lock, so operations are
    applied one at a time in arrival order. Failures are logged and reported
    as bool/int results; nothing is raised to callers.
    """

    def __init__(
        self,
        user_id: str,
        backend: ReminderBackend,
        store: ReminderMapStore,
        task_repository: TaskRepository,
        policy: ReminderPolicy,
        content: ReminderContentBuilder,
    ):
        self.user_id = user_id
        self.backend = backend
        self.store = store
        self.task_repository = task_repository
        self.policy = policy
        self.content = content
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Load the reminder map. Called once at app start."""
        async with self._lock:
            try:
                await self.store.load()
                return True
            except PersistenceError:
                return False

    async def on_subject_changed(self, task: Task) -> bool:
        """
        Apply the committed state of a created or edited task.
        Returns True when the desired reminder state is reached and persisted.
        """
        if task.user_id != self.user_id:
            logger.warning(
                "Task belongs to another user, ignored",
                subject_id=task.id,
                task_user_id=task.user_id,
                user_id=self.user_id,
            )
            return False

        async with self._lock:
            return await self._apply(task.id, task)

    async def on_subject_removed(self, subject_id: str) -> bool:
        """Cancel and forget the reminder of a deleted task."""
        async with self._lock:
            return await self._apply(subject_id, None)

    async def reconcile_all(self, user_id: Optional[str] = None) -> int:
        """
        Rebuild every task reminder from the current task list.
        Returns the number of reminders scheduled.
        """
        user_id = user_id or self.user_id
        if user_id != self.user_id:
            logger.warning(
                "Reconciliation requested for another user, ignored",
                requested_user_id=user_id,
                user_id=self.user_id,
            )
            return 0

        async with self._lock:
            return await self._reconcile()

    async def set_standing_reminder(
        self,
        kind: StandingReminderKind,
        enabled: bool,
        config: Optional[StandingReminderConfig] = None,
        overrides: Optional[Dict[str, int]] = None,
    ) -> bool:
        """
        Enable, disable or reschedule a standing (recurring) reminder.

        Without `config` the stored config (or the default) is used;
        `overrides` then replaces individual fields of it.
        """
        async with self._lock:
            if not await self._ensure_loaded():
                return False

            current = self.store.get_standing(kind)
            if config is None:
                config = current.schedule_config if current else self.policy.default_config(kind)
            if overrides:
                config = config.model_copy(update=overrides)

            try:
                trigger = self.policy.standing_reminder_spec(kind, config)
            except ValueError as e:
                logger.warning("Invalid standing reminder config", kind=kind.value, error=str(e))
                return False

            if current and current.id:
                if not await self._cancel(current.id):
                    return False
            await self._cancel_standing_entries(kind)

            if not enabled:
                self.store.set_standing(kind, self._standing(config, trigger.weekday))
                logger.info("Standing reminder disabled", kind=kind.value, user_id=self.user_id)
                return await self._persist()

            if not await self._permission_granted():
                logger.warning(
                    "Standing reminder not scheduled, permission missing",
                    kind=kind.value,
                    user_id=self.user_id,
                )
                self.store.set_standing(kind, self._standing(config, trigger.weekday))
                await self._persist()
                return False

            payload = self.content.standing_payload(kind, self.user_id)
            try:
                backend_id = await self.backend.schedule(trigger, payload)
            except Exception as e:
                logger.error(
                    "Failed to schedule standing reminder",
                    kind=kind.value,
                    user_id=self.user_id,
                    error=str(e),
                )
                self.store.set_standing(kind, self._standing(config, trigger.weekday))
                await self._persist()
                return False

            self.store.set_standing(
                kind,
                self._standing(config, trigger.weekday, enabled=True, backend_id=backend_id),
            )
            logger.info(
                "Standing reminder scheduled",
                kind=kind.value,
                backend_id=backend_id,
                hour=trigger.hour,
                minute=trigger.minute,
                weekday=trigger.weekday,
            )
            return await self._persist()

    async def set_task_reminders_enabled(self, enabled: bool) -> bool:
        """
        Master switch for task reminders.
        Off cancels every mapped task reminder; on rebuilds them.
        """
        async with self._lock:
            if not await self._ensure_loaded():
                return False

            self.store.set_task_reminders_enabled(enabled)

            if enabled:
                if not await self._persist():
                    return False
                await self._reconcile()
                return True

            all_cancelled = True
            for subject_id, backend_id in list(self.store.snapshot().task_notifications.items()):
                if await self._cancel(backend_id):
                    self.store.remove(subject_id)
                else:
                    all_cancelled = False

            persisted = await self._persist()
            logger.info("Task reminders disabled", user_id=self.user_id)
            return persisted and all_cancelled

    async def request_permission(self) -> bool:
        """Ask for notification permission; a grant triggers a full reconciliation."""
        async with self._lock:
            try:
                granted = await self.backend.request_permission()
            except Exception as e:
                logger.error("Permission request failed", user_id=self.user_id, error=str(e))
                return False

            logger.info("Notification permission", user_id=self.user_id, granted=granted)
            if granted:
                await self._reconcile()
            return granted

    async def list_scheduled_reminders(self) -> List[ScheduledReminder]:
        """Backend-confirmed reminders of this user."""
        async with self._lock:
            try:
                entries = await self.backend.list_scheduled()
            except Exception as e:
                logger.error("Failed to list scheduled reminders", user_id=self.user_id, error=str(e))
                return []

            return [
                ScheduledReminder.from_entry(entry)
                for entry in entries
                if self._owns(entry)
            ]

    async def get_map_snapshot(self) -> ReminderMap:
        """Read-only copy of the reminder map."""
        async with self._lock:
            await self._ensure_loaded()
            return self.store.snapshot()

    # ------------------------------------------------------------------
    # Internals (called with the lock held)
    # ------------------------------------------------------------------

    async def _apply(self, subject_id: str, task: Optional[Task]) -> bool:
        if not await self._ensure_loaded():
            return False

        existing_id = self.store.get(subject_id)
        if existing_id is not None:
            if not await self._cancel(existing_id):
                return False

        if task is None:
            decision = NoReminder("removed")
        elif not self.store.task_reminders_enabled:
            decision = NoReminder("task_reminders_disabled")
        else:
            decision = self.policy.should_remind(task)

        if isinstance(decision, NoReminder):
            logger.debug(
                "No reminder for subject",
                subject_id=subject_id,
                reason=decision.reason,
            )
            if self.store.remove(subject_id) is None:
                return True
            return await self._persist()

        if not await self._permission_granted():
            logger.warning(
                "Reminder not scheduled, permission missing",
                subject_id=subject_id,
                user_id=self.user_id,
            )
            if self.store.remove(subject_id) is not None:
                await self._persist()
            return False

        return await self._schedule_task(task, decision)

    async def _schedule_task(self, task: Task, decision: RemindAt) -> bool:
        payload = self.content.task_payload(task)
        try:
            backend_id = await self.backend.schedule(OneShotTrigger(at=decision.at), payload)
        except Exception as e:
            logger.error(
                "Failed to schedule task reminder",
                subject_id=task.id,
                user_id=self.user_id,
                error=str(e),
            )
            if self.store.remove(task.id) is not None:
                await self._persist()
            return False

        self.store.set(task.id, backend_id)
        logger.info(
            "Task reminder scheduled",
            subject_id=task.id,
            backend_id=backend_id,
            scheduled_for=decision.at.isoformat(),
        )
        return await self._persist()

    async def _reconcile(self) -> int:
        if not await self._ensure_loaded():
            return 0

        try:
            candidates = await self.task_repository.list_active_subjects_with_due_date(
                self.user_id
            )
        except Exception as e:
            logger.error("Failed to fetch tasks for reconciliation", user_id=self.user_id, error=str(e))
            return 0

        await self._cancel_task_entries()

        fresh: Dict[str, str] = {}
        if self.store.task_reminders_enabled and await self._permission_granted():
            for task in candidates:
                decision = self.policy.should_remind(task)
                if not isinstance(decision, RemindAt):
                    continue
                payload = self.content.task_payload(task)
                try:
                    fresh[task.id] = await self.backend.schedule(
                        OneShotTrigger(at=decision.at), payload
                    )
                except Exception as e:
                    logger.warning(
                        "Skipping task during reconciliation",
                        subject_id=task.id,
                        error=str(e),
                    )

        self.store.replace_task_notifications(fresh)
        await self._persist()

        logger.info(
            "Reconciliation finished",
            user_id=self.user_id,
            candidates=len(candidates),
            scheduled=len(fresh),
        )
        return len(fresh)

    async def _cancel_task_entries(self) -> None:
        """Cancel every non-standing reminder of this user found in the backend."""
        backend_ids: Set[str] = set(self.store.snapshot().task_notifications.values())
        try:
            entries = await self.backend.list_scheduled()
            backend_ids.update(
                entry.backend_id
                for entry in entries
                if not entry.payload.is_standing() and self._owns(entry)
            )
        except Exception as e:
            logger.warning(
                "Backend listing failed, cancelling mapped reminders only",
                user_id=self.user_id,
                error=str(e),
            )

        for backend_id in backend_ids:
            await self._cancel(backend_id)

    async def _cancel_standing_entries(self, kind: StandingReminderKind) -> None:
        try:
            entries = await self.backend.list_scheduled()
        except Exception as e:
            logger.warning("Backend listing failed", kind=kind.value, error=str(e))
            return

        for entry in entries:
            if entry.payload.type == kind.value and self._owns(entry):
                await self._cancel(entry.backend_id)

    async def _cancel(self, backend_id: str) -> bool:
        try:
            await self.backend.cancel(backend_id)
            return True
        except StaleReferenceError:
            return True
        except Exception as e:
            logger.error("Failed to cancel reminder", backend_id=backend_id, error=str(e))
            return False

    async def _permission_granted(self) -> bool:
        try:
            return await self.backend.query_permission()
        except Exception as e:
            logger.warning("Permission query failed", user_id=self.user_id, error=str(e))
            return False

    async def _ensure_loaded(self) -> bool:
        if self.store.loaded:
            return True
        try:
            await self.store.load()
            return True
        except PersistenceError:
            return False

    async def _persist(self) -> bool:
        try:
            await self.store.save()
            return True
        except PersistenceError as e:
            logger.error(
                "Reminder map not persisted",
                user_id=self.user_id,
                attempts=e.attempts,
                error=str(e),
            )
            return False

    def _owns(self, entry: ScheduledEntry) -> bool:
        owner = entry.payload.user_id
        return owner is None or owner == self.user_id

    @staticmethod
    def _standing(
        config: StandingReminderConfig,
        weekday: Optional[int],
        enabled: bool = False,
        backend_id: Optional[str] = None,
    ) -> StandingReminder:
        return StandingReminder(
            enabled=enabled,
            id=backend_id,
            hour=config.hour,
            minute=config.minute,
            weekday=weekday,
        )
