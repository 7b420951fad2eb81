"""
Storage backend interface.

Defines abstract interface for metadata storage backends (Memory/SQL).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IStorageBackend(ABC):
    """Storage backend interface.

    Stores JSON-serialisable dictionaries by key, e.g. the persisted position
    metadata payload {"updated_at": <ms>, "data": {...}}. Implementations
    raise StorageError when the underlying store fails.

    Supports multiple storage backends:
    - MemoryStorage: For tests and single-process bots (in-memory)
    - SQLStorage: Any SQLAlchemy database (SQLite by default)
    """

    @abstractmethod
    def save(self, key: str, data: Dict[str, Any]) -> None:
        """
        Store a payload, replacing any previous payload for key.

        Args:
            key: Storage key.
            data: JSON-serialisable payload.

        Raises:
            StorageError: If the payload cannot be written.
        """
        pass

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Read the payload stored for key.

        Args:
            key: Storage key.

        Returns:
            A copy of the payload, or None if nothing is stored.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the payload for key (no-op if absent)."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    def close(self) -> None:
        """Release resources held by the backend."""
        pass
