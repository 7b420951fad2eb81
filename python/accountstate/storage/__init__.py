"""
Storage layer implementations.

This module implements:
- MemoryStorage: In-memory storage (tests, single-process bots)
- SQLStorage: SQL database storage (SQLAlchemy)
"""

from ..config.loader import StorageConfig
from ..interfaces.storage import IStorageBackend
from .memory import MemoryStorage
from .sql import SQLStorage


def create_storage(config: StorageConfig) -> IStorageBackend:
    """
    Create the storage backend selected by configuration.

    Args:
        config: Storage configuration.

    Returns:
        Storage backend instance.
    """
    if config.backend == "sql":
        return SQLStorage(config.url, table_name=config.table_name)
    return MemoryStorage()


__all__ = [
    "MemoryStorage",
    "SQLStorage",
    "create_storage",
]
