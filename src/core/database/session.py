"""
Database connection utilities.
Handles Supabase client initialization and management.
"""

from typing import Any, Dict, Optional

from supabase import Client, ClientOptions, create_client

from src.core.config.settings import settings
from src.core.database.interface import IDatabaseSession
from src.core.utils.logging import get_logger

logger = get_logger(__name__)


class SupabaseSession(IDatabaseSession):
    """
    Wrapper for Supabase client implementing IDatabaseSession.
    """

    def __init__(self, client: Client):
        self._client = client

    def table(self, name: str) -> Any:
        return self._client.table(name)

    def rpc(self, fn: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._client.rpc(fn, params or {})


class DatabaseConnection:
    """
    Singleton class to manage Supabase database connection.
    """

    _instance: Optional["DatabaseConnection"] = None
    _client: Optional[Client] = None
    _session: Optional[IDatabaseSession] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _validate_supabase_settings(self) -> None:
        missing: list[str] = []
        if not settings.supabase.url:
            missing.append("SUPABASE_URL")
        if not (settings.supabase.key or settings.supabase.service_key):
            missing.append("SUPABASE_KEY")
        if missing:
            raise RuntimeError(
                "Supabase settings missing: " + ", ".join(missing)
            )

    def _connect(self):
        """Establish connection to Supabase."""
        try:
            self._validate_supabase_settings()

            # Service role key bypasses RLS; fall back to the anon key
            api_key = settings.supabase.service_key or settings.supabase.key
            key_type = "SERVICE_KEY" if settings.supabase.service_key else "ANON_KEY"

            options = ClientOptions(schema=settings.supabase.db_schema)
            self._client = create_client(
                settings.supabase.url, api_key, options=options
            )
            self._session = SupabaseSession(self._client)
            logger.info(
                "Connected to Supabase",
                schema=settings.supabase.db_schema,
                key_type=key_type,
            )
        except Exception as e:
            logger.error("Failed to connect to Supabase", error=str(e))
            raise

    @property
    def session(self) -> IDatabaseSession:
        """Get database session instance."""
        if self._client is None:
            self._connect()
        return self._session

    def disconnect(self):
        """Disconnect from database."""
        # Supabase client doesn't require explicit disconnection
        self._client = None
        self._session = None
        logger.info("Disconnected from Supabase")
