"""
Generic Supabase repository.
Implements the IRepository contract on top of the postgrest query builder.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from src.core.database.interface import IDatabaseSession
from src.core.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class SupabaseRepository(Generic[T]):
    """
    Base repository for Supabase tables mapped to Pydantic models.
    All calls are blocking; async callers wrap them in run_in_threadpool.
    """

    def __init__(self, client: IDatabaseSession, table_name: str, model_class: Type[T]):
        self.client = client
        self.table_name = table_name
        self.model_class = model_class

    def find_by_id(self, id_value: Any, id_column: str = "id") -> Optional[T]:
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .eq(id_column, id_value)
                .limit(1)
                .execute()
            )
            if result.data:
                return self.model_class(**result.data[0])
            return None
        except Exception as e:
            logger.error(
                "Error finding record by id",
                table=self.table_name,
                id_value=id_value,
                error=str(e),
            )
            raise
