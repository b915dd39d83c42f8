from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

T = TypeVar("T")


class IDatabaseSession(Protocol):
    """
    Interface for a database session.
    Abstracts the concrete client (Supabase, SQL, etc).
    """

    def table(self, name: str) -> Any:
        """Return a query builder for the given table."""
        ...

    def rpc(self, fn: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Return a builder that calls a stored database function."""
        ...


class IRepository(Generic[T], Protocol):
    """
    Generic repository interface.
    Read contract independent of the backing store.
    """

    def find_by_id(self, id_value: Any, id_column: str = "id") -> Optional[T]:
        """Find a record by ID."""
        ...
