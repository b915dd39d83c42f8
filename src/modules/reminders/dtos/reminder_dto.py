from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.modules.reminders.models.reminder import ScheduledReminder
from src.modules.reminders.models.reminder_map import ReminderMap


class StandingReminderUpdateDTO(BaseModel):
    """DTO for enabling or disabling a standing reminder."""

    enabled: bool
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    minute: Optional[int] = Field(default=None, ge=0, le=59)
    weekday: Optional[int] = Field(default=None, ge=0, le=6)

    def overrides(self) -> Dict[str, int]:
        """Schedule fields the caller supplied."""
        return self.model_dump(exclude={"enabled"}, exclude_none=True)


class TaskRemindersUpdateDTO(BaseModel):
    enabled: bool


class SyncResultDTO(BaseModel):
    success: bool
    subject_id: Optional[str] = None
    action: Optional[str] = None


class ReconcileResultDTO(BaseModel):
    scheduled: int


class PermissionResultDTO(BaseModel):
    granted: bool


class ReminderMapDTO(BaseModel):
    """Reminder map in its persisted shape."""

    preferences: Dict[str, Any]

    @classmethod
    def from_map(cls, reminder_map: ReminderMap) -> "ReminderMapDTO":
        return cls(preferences=reminder_map.to_preferences())


class ScheduledRemindersDTO(BaseModel):
    count: int
    reminders: List[ScheduledReminder]
