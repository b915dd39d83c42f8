from zoneinfo import ZoneInfo

from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.enums.task_priority import TaskPriority
from src.modules.reminders.models.reminder import (TASK_REMINDER_TYPE,
                                                   ReminderPayload)
from src.modules.reminders.models.task import Task

TASK_REMINDERS_CHANNEL = "task-reminders"

PRIORITY_MARKERS = {
    TaskPriority.HIGH: "🔴",
    TaskPriority.MEDIUM: "🔵",
    TaskPriority.LOW: "🟢",
}

PRIORITY_COLORS = {
    TaskPriority.HIGH: "#e74c3c",
    TaskPriority.MEDIUM: "#f39c12",
    TaskPriority.LOW: "#2ecc71",
}

STANDING_CONTENT = {
    StandingReminderKind.DAILY_DIGEST: (
        "📋 Daily Task Digest",
        "Review your tasks for today and plan your day",
    ),
    StandingReminderKind.WEEKLY_CHECK_IN: (
        "🗓️ Weekly Check-In",
        "Look back on your week and plan the next one",
    ),
}


class ReminderContentBuilder:
    """Builds reminder payloads (title, body, routing data)."""

    def __init__(self, timezone_name: str = "UTC"):
        self.tz = ZoneInfo(timezone_name)

    def task_payload(self, task: Task) -> ReminderPayload:
        priority = TaskPriority(task.priority)
        due_time = task.due_date.astimezone(self.tz).strftime("%H:%M") if task.due_date else "--:--"

        return ReminderPayload(
            title=f"{PRIORITY_MARKERS[priority]} Task Reminder: {task.title}",
            body=f"Due at {due_time}. Time to focus on this task!",
            data={
                "type": TASK_REMINDER_TYPE,
                "subject_id": task.id,
                "user_id": task.user_id,
                "priority": priority.value,
                "channel_id": TASK_REMINDERS_CHANNEL,
                "color": PRIORITY_COLORS[priority],
            },
        )

    def standing_payload(self, kind: StandingReminderKind, user_id: str) -> ReminderPayload:
        title, body = STANDING_CONTENT[kind]
        return ReminderPayload(
            title=title,
            body=body,
            data={
                "type": kind.value,
                "user_id": user_id,
                "channel_id": TASK_REMINDERS_CHANNEL,
                "color": "#3498db",
            },
        )
