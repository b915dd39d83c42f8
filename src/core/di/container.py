"""
Dependency Injection Container.
"""

from datetime import timedelta

from dependency_injector import containers, providers

from src.core.config.settings import settings
from src.core.database.session import DatabaseConnection
from src.modules.reminders.backends.apscheduler_backend import \
    APSchedulerReminderBackend
from src.modules.reminders.backends.memory import InMemoryReminderBackend
from src.modules.reminders.backends.timeout import TimeoutReminderBackend
from src.modules.reminders.components.reminder_content import \
    ReminderContentBuilder
from src.modules.reminders.components.reminder_policy import ReminderPolicy
from src.modules.reminders.enums.standing_reminder_kind import \
    StandingReminderKind
from src.modules.reminders.models.reminder import NotificationPresentation
from src.modules.reminders.models.reminder_map import StandingReminderConfig
# Repositories
from src.modules.reminders.repositories.impl.supabase.preferences_repository import \
    SupabasePreferencesRepository
from src.modules.reminders.repositories.impl.supabase.task_repository import \
    SupabaseTaskRepository
# Services
from src.modules.reminders.services.reminder_sync_registry import \
    ReminderSyncRegistry


def _standing_defaults():
    reminders = settings.reminders
    return {
        StandingReminderKind.DAILY_DIGEST: StandingReminderConfig(
            hour=reminders.daily_digest_hour,
            minute=reminders.daily_digest_minute,
        ),
        StandingReminderKind.WEEKLY_CHECK_IN: StandingReminderConfig(
            hour=reminders.weekly_check_in_hour,
            minute=reminders.weekly_check_in_minute,
            weekday=reminders.weekly_check_in_weekday,
        ),
    }


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    This container manages the lifecycle of all application components
    (engines, backends, repositories, database connections).
    """

    # Wiring configuration
    wiring_config = containers.WiringConfiguration(
        modules=[
            "src.modules.reminders.api.v1.reminders",
            "src.modules.reminders.workers.reconciliation_scheduler",
        ]
    )

    # Database
    supabase_connection = providers.Singleton(DatabaseConnection)

    supabase_session = providers.Singleton(lambda db: db.session, supabase_connection)

    # Repositories
    preferences_repository = providers.Factory(
        SupabasePreferencesRepository,
        client=supabase_session,
        table_name=settings.reminders.users_table,
    )

    task_repository = providers.Factory(
        SupabaseTaskRepository,
        client=supabase_session,
        table_name=settings.reminders.tasks_table,
    )

    # Components
    reminder_policy = providers.Singleton(
        ReminderPolicy,
        lead_time=timedelta(minutes=settings.reminders.lead_time_minutes),
        standing_defaults=providers.Callable(_standing_defaults),
    )

    reminder_content = providers.Singleton(
        ReminderContentBuilder,
        timezone_name=settings.reminders.display_timezone,
    )

    # Backend
    backend_name = providers.Object(settings.reminders.backend)

    local_reminder_backend = providers.Selector(
        backend_name,
        apscheduler=providers.Singleton(
            APSchedulerReminderBackend,
            presentation=providers.Object(NotificationPresentation()),
            permission_granted=settings.reminders.permission_granted,
            timezone_name=settings.reminders.display_timezone,
        ),
        memory=providers.Singleton(
            InMemoryReminderBackend,
            permission_granted=settings.reminders.permission_granted,
        ),
    )

    reminder_backend = providers.Singleton(
        TimeoutReminderBackend,
        inner=local_reminder_backend,
        timeout_seconds=settings.reminders.backend_timeout_seconds,
    )

    # Services
    reminder_sync_registry = providers.Singleton(
        ReminderSyncRegistry,
        backend=reminder_backend,
        preferences_repository=preferences_repository,
        task_repository=task_repository,
        policy=reminder_policy,
        content=reminder_content,
    )
