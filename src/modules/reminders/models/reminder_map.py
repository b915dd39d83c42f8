"""
Persisted reminder bookkeeping.

The map lives inside the user's notification preferences blob. Only the keys
below belong to the reminder engine; every other key is left untouched:

    taskNotifications   {subject_id: backend_id}
    taskReminders       master switch for task reminders
    dailyDigest         {enabled, id, hour, minute}
    weeklyCheckIn       {enabled, id, hour, minute, weekday}
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind

TASK_NOTIFICATIONS_KEY = "taskNotifications"
TASK_REMINDERS_KEY = "taskReminders"


class StandingReminderConfig(BaseModel):
    """User-chosen time of a standing reminder."""

    hour: int = Field(default=8, ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    weekday: Optional[int] = Field(default=None, ge=0, le=6)  # 0=Monday


class StandingReminder(StandingReminderConfig):
    """Standing reminder state: config plus backend handle."""

    enabled: bool = False
    id: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def schedule_config(self) -> StandingReminderConfig:
        return StandingReminderConfig(
            hour=self.hour, minute=self.minute, weekday=self.weekday
        )

    def to_preferences(self) -> Dict[str, Any]:
        data = {
            "enabled": self.enabled,
            "id": self.id,
            "hour": self.hour,
            "minute": self.minute,
        }
        if self.weekday is not None:
            data["weekday"] = self.weekday
        return data


class ReminderMap(BaseModel):
    """Subject to backend id associations plus standing reminders."""

    task_notifications: Dict[str, str] = Field(default_factory=dict)
    task_reminders_enabled: bool = True
    standing: Dict[StandingReminderKind, StandingReminder] = Field(default_factory=dict)

    @classmethod
    def from_preferences(cls, blob: Optional[Dict[str, Any]]) -> "ReminderMap":
        """
        Build a map from the preferences blob.

        Raises:
            ValueError: the blob is not shaped like a reminder map
                (pydantic's ValidationError is a ValueError).
        """
        if blob is None:
            return cls()
        if not isinstance(blob, dict):
            raise ValueError(f"Preferences blob must be an object, got {type(blob).__name__}")

        standing: Dict[StandingReminderKind, StandingReminder] = {}
        for kind in StandingReminderKind:
            raw = blob.get(kind.value)
            if raw is None:
                continue
            if isinstance(raw, bool):
                # Older profile screens stored a bare toggle
                standing[kind] = StandingReminder(enabled=raw)
            elif isinstance(raw, dict):
                standing[kind] = StandingReminder(**raw)
            else:
                raise ValueError(f"Invalid {kind.value} entry: {raw!r}")

        return cls(
            task_notifications=blob.get(TASK_NOTIFICATIONS_KEY) or {},
            task_reminders_enabled=blob.get(TASK_REMINDERS_KEY, True) is not False,
            standing=standing,
        )

    def to_preferences(self) -> Dict[str, Any]:
        """Engine-owned keys only, ready for a field-scoped merge."""
        data: Dict[str, Any] = {
            TASK_NOTIFICATIONS_KEY: dict(self.task_notifications),
            TASK_REMINDERS_KEY: self.task_reminders_enabled,
        }
        for kind, reminder in self.standing.items():
            data[kind.value] = reminder.to_preferences()
        return data
