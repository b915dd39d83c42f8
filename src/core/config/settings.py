"""
Configuration module for the reminder sync service.
Handles environment variables and application settings.
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseSettings(BaseSettings):
    """Supabase connection settings."""

    url: str | None = Field(default=None, description="Supabase project URL")
    key: str | None = Field(default=None, description="Supabase anon key")
    service_key: str | None = Field(
        default=None,
        description="Supabase service role key",
        validation_alias=AliasChoices("SUPABASE_SERVICE_KEY", "SUPABASE_SERVICE_ROLE_KEY")
    )
    db_schema: str = Field(
        default="public", description="Default database schema (e.g. public, app)"
    )

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class APISettings(BaseSettings):
    """API server settings."""

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class ReminderSettings(BaseSettings):
    """Local reminder scheduling and synchronization settings."""

    backend: str = Field(
        default="apscheduler",
        description="Reminder backend (apscheduler, memory)",
    )
    lead_time_minutes: int = Field(
        default=60,
        description="Minutes before the due date at which a task reminder fires",
    )
    backend_timeout_seconds: float = Field(
        default=10.0,
        description="Hard timeout applied to every reminder backend call",
    )
    reconcile_interval_seconds: int = Field(
        default=3600,
        description="Seconds between periodic full reconciliations (0 disables the in-app loop)",
    )
    display_timezone: str = Field(
        default="UTC",
        description="Timezone used to render due times inside reminder bodies",
    )
    permission_granted: bool = Field(
        default=True,
        description="Initial notification permission state of the local backend",
    )
    daily_digest_hour: int = Field(default=8, description="Default daily digest hour")
    daily_digest_minute: int = Field(default=0, description="Default daily digest minute")
    weekly_check_in_weekday: int = Field(
        default=6, description="Default weekly check-in weekday (0=Monday, 6=Sunday)"
    )
    weekly_check_in_hour: int = Field(default=18, description="Default weekly check-in hour")
    weekly_check_in_minute: int = Field(default=0, description="Default weekly check-in minute")
    users_table: str = Field(default="users", description="Table holding user preference records")
    tasks_table: str = Field(default="tasks", description="Table holding tasks")

    model_config = SettingsConfigDict(
        env_prefix="REMINDERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("apscheduler", "memory"):
            raise ValueError(f"Unsupported reminder backend: {v}")
        return v

    @field_validator("lead_time_minutes")
    @classmethod
    def validate_lead_time(cls, v: int) -> int:
        if v < 0:
            raise ValueError("lead_time_minutes must not be negative")
        return v


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-settings
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    api: APISettings = Field(default_factory=APISettings)
    log: LogSettings = Field(default_factory=LogSettings)
    reminders: ReminderSettings = Field(default_factory=ReminderSettings)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


# Global settings instance
settings = Settings()
