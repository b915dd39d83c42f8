import pytest

from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.models.reminder_map import (ReminderMap,
                                                       StandingReminder)


class TestReminderMap:
    def test_missing_blob_gives_empty_map(self):
        reminder_map = ReminderMap.from_preferences(None)

        assert reminder_map.task_notifications == {}
        assert reminder_map.task_reminders_enabled is True
        assert reminder_map.standing == {}

    def test_from_preferences(self):
        blob = {
            "taskNotifications": {"task-1": "id-1"},
            "taskReminders": False,
            "dailyDigest": {"enabled": True, "id": "id-2", "hour": 7, "minute": 30},
            "weeklyCheckIn": {"enabled": False, "id": None, "hour": 18, "minute": 0, "weekday": 6},
            "medicationReminders": True,
        }

        reminder_map = ReminderMap.from_preferences(blob)

        assert reminder_map.task_notifications == {"task-1": "id-1"}
        assert reminder_map.task_reminders_enabled is False
        daily = reminder_map.standing[StandingReminderKind.DAILY_DIGEST]
        assert (daily.enabled, daily.id, daily.hour, daily.minute) == (True, "id-2", 7, 30)
        assert reminder_map.standing[StandingReminderKind.WEEKLY_CHECK_IN].weekday == 6

    def test_bare_toggle_is_read_as_enabled_flag(self):
        reminder_map = ReminderMap.from_preferences({"dailyDigest": True})

        daily = reminder_map.standing[StandingReminderKind.DAILY_DIGEST]
        assert daily.enabled is True
        assert daily.id is None

    def test_to_preferences_only_writes_engine_keys(self):
        reminder_map = ReminderMap.from_preferences(
            {"taskNotifications": {"task-1": "id-1"}, "weeklyReport": True}
        )
        reminder_map.standing[StandingReminderKind.DAILY_DIGEST] = StandingReminder(
            enabled=True, id="id-2", hour=8, minute=0
        )

        assert reminder_map.to_preferences() == {
            "taskNotifications": {"task-1": "id-1"},
            "taskReminders": True,
            "dailyDigest": {"enabled": True, "id": "id-2", "hour": 8, "minute": 0},
        }

    @pytest.mark.parametrize(
        "blob",
        [
            ["not", "an", "object"],
            {"dailyDigest": "yes"},
            {"dailyDigest": {"enabled": True, "hour": 30}},
            {"taskNotifications": "task-1"},
        ],
    )
    def test_malformed_blob_rejected(self, blob):
        with pytest.raises(ValueError):
            ReminderMap.from_preferences(blob)
