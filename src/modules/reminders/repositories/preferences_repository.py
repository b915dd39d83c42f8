from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class PreferencesRepository(ABC):
    """Interface for the user notification preferences record."""

    @abstractmethod
    async def get_preferences(self, user_id: str) -> Optional[Any]:
        """Return the stored preferences value as is, or None when the user has none."""
        pass

    @abstractmethod
    async def set_preferences(self, user_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge `partial` into the stored blob, key by key.
        Keys absent from `partial` keep their stored value.
        Returns the merged blob.
        """
        pass
