from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from src.core.di.container import Container
from src.core.utils import get_logger
from src.modules.reminders.dtos.reminder_dto import (PermissionResultDTO,
                                                     ReconcileResultDTO,
                                                     ReminderMapDTO,
                                                     ScheduledRemindersDTO,
                                                     StandingReminderUpdateDTO,
                                                     SyncResultDTO,
                                                     TaskRemindersUpdateDTO)
from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.services.reminder_sync_registry import \
    ReminderSyncRegistry

logger = get_logger(__name__)

router = APIRouter(prefix="/users/{user_id}", tags=["Reminders"])


@router.post("/tasks/{task_id}/sync", response_model=SyncResultDTO)
@inject
async def sync_task(
    user_id: str,
    task_id: str,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """
    Apply the committed state of a task after it was created, edited or completed.
    A task that no longer exists is handled as a removal.
    """
    engine = registry.get(user_id)
    try:
        task = await registry.task_repository.find_by_id(task_id)
    except Exception as e:
        logger.error("Failed to load task for sync", user_id=user_id, task_id=task_id, error=str(e))
        return SyncResultDTO(success=False, subject_id=task_id, action="changed")

    if task is None:
        success = await engine.on_subject_removed(task_id)
        return SyncResultDTO(success=success, subject_id=task_id, action="removed")

    success = await engine.on_subject_changed(task)
    return SyncResultDTO(success=success, subject_id=task_id, action="changed")


@router.delete("/tasks/{task_id}", response_model=SyncResultDTO)
@inject
async def remove_task_reminder(
    user_id: str,
    task_id: str,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Cancel and forget the reminder of a deleted task."""
    success = await registry.get(user_id).on_subject_removed(task_id)
    return SyncResultDTO(success=success, subject_id=task_id, action="removed")


@router.post("/reconcile", response_model=ReconcileResultDTO)
@inject
async def reconcile(
    user_id: str,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Full reconciliation, e.g. on app start or foreground."""
    scheduled = await registry.get(user_id).reconcile_all(user_id)
    return ReconcileResultDTO(scheduled=scheduled)


@router.put("/standing/{kind}", response_model=SyncResultDTO)
@inject
async def set_standing_reminder(
    user_id: str,
    kind: StandingReminderKind,
    request: StandingReminderUpdateDTO,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Enable, disable or reschedule the daily digest or the weekly check-in."""
    success = await registry.get(user_id).set_standing_reminder(
        kind, request.enabled, overrides=request.overrides()
    )
    return SyncResultDTO(
        success=success,
        subject_id=kind.value,
        action="enabled" if request.enabled else "disabled",
    )


@router.put("/task-reminders", response_model=SyncResultDTO)
@inject
async def set_task_reminders(
    user_id: str,
    request: TaskRemindersUpdateDTO,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Master switch for task reminders."""
    success = await registry.get(user_id).set_task_reminders_enabled(request.enabled)
    return SyncResultDTO(
        success=success, action="enabled" if request.enabled else "disabled"
    )


@router.post("/permission", response_model=PermissionResultDTO)
@inject
async def request_permission(
    user_id: str,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Request notification permission; a grant reschedules every task reminder."""
    granted = await registry.get(user_id).request_permission()
    return PermissionResultDTO(granted=granted)


@router.get("/map", response_model=ReminderMapDTO)
@inject
async def get_reminder_map(
    user_id: str,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Current reminder map, in its persisted shape."""
    snapshot = await registry.get(user_id).get_map_snapshot()
    return ReminderMapDTO.from_map(snapshot)


@router.get("/scheduled", response_model=ScheduledRemindersDTO)
@inject
async def list_scheduled(
    user_id: str,
    registry: ReminderSyncRegistry = Depends(Provide[Container.reminder_sync_registry]),
):
    """Reminders the backend currently holds for this user."""
    reminders = await registry.get(user_id).list_scheduled_reminders()
    return ScheduledRemindersDTO(count=len(reminders), reminders=reminders)
