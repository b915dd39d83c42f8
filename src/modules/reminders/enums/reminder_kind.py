from enum import Enum


class ReminderKind(Enum):
    """
    Enum for the trigger shape of a scheduled reminder.

    - ONE_SHOT: Fires once at a fixed instant (task reminders)
    - RECURRING: Fires repeatedly at a time of day (standing reminders)
    """

    ONE_SHOT = "one-shot"
    RECURRING = "recurring"

    def __repr__(self) -> str:
        return f"ReminderKind.{self.name}"
