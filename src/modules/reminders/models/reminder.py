"""
Reminder models shared by the policy, the backends and the sync engine.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Annotated

from src.modules.reminders.enums.reminder_kind import ReminderKind
from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind

TASK_REMINDER_TYPE = "task-reminder"


class OneShotTrigger(BaseModel):
    """Fires once at `at`."""

    kind: Literal["one-shot"] = "one-shot"
    at: datetime

    model_config = ConfigDict(frozen=True)

    @field_validator("at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def fingerprint(self) -> str:
        return self.at.isoformat()


class RecurringTrigger(BaseModel):
    """Fires every day (weekday=None) or every week at hour:minute."""

    kind: Literal["recurring"] = "recurring"
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)
    weekday: Optional[int] = Field(default=None, ge=0, le=6)  # 0=Monday

    model_config = ConfigDict(frozen=True)

    def fingerprint(self) -> str:
        day = "*" if self.weekday is None else str(self.weekday)
        return f"{day}:{self.hour:02d}:{self.minute:02d}"


ReminderTrigger = Annotated[
    Union[OneShotTrigger, RecurringTrigger], Field(discriminator="kind")
]


class ReminderPayload(BaseModel):
    """Content handed to the backend and delivered when the reminder fires."""

    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def type(self) -> Optional[str]:
        return self.data.get("type")

    @property
    def subject_id(self) -> Optional[str]:
        return self.data.get("subject_id")

    @property
    def user_id(self) -> Optional[str]:
        return self.data.get("user_id")

    def is_standing(self) -> bool:
        return self.type in StandingReminderKind.values()


class ScheduledEntry(BaseModel):
    """A reminder as reported by the backend's list snapshot."""

    backend_id: str
    trigger: ReminderTrigger
    payload: ReminderPayload


class ScheduledReminder(BaseModel):
    """
    Backend-confirmed reminder seen from the domain side.
    Derived on demand, never persisted.
    """

    subject_id: str
    backend_id: str
    scheduled_for: Optional[datetime] = None
    kind: ReminderKind

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_entry(cls, entry: ScheduledEntry) -> "ScheduledReminder":
        trigger = entry.trigger
        if isinstance(trigger, OneShotTrigger):
            return cls(
                subject_id=entry.payload.subject_id or entry.backend_id,
                backend_id=entry.backend_id,
                scheduled_for=trigger.at,
                kind=ReminderKind.ONE_SHOT,
            )
        return cls(
            subject_id=entry.payload.subject_id or entry.payload.type or entry.backend_id,
            backend_id=entry.backend_id,
            kind=ReminderKind.RECURRING,
        )


class NotificationPresentation(BaseModel):
    """
    How a delivered reminder is presented.
    Passed once to the backend at construction time.
    """

    show_alert: bool = True
    play_sound: bool = True
    set_badge: bool = True

    model_config = ConfigDict(frozen=True)
