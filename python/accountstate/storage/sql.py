"""
SQL storage backend.

Key/value storage of JSON payloads in any SQLAlchemy-supported database.
"""

import json
import logging
import re
import time
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import StorageError
from ..interfaces.storage import IStorageBackend

logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLStorage(IStorageBackend):
    """SQL database storage backend.

    Each key maps to one row holding the JSON-encoded payload and the time of
    the last write. The table is created on first use.
    """

    def __init__(self, url: str, table_name: str = "account_state_kv", engine: Optional[Engine] = None):
        """
        Initialize SQL storage.

        Args:
            url: SQLAlchemy database URL.
            table_name: Key/value table name.
            engine: Optional pre-built engine (url is then ignored).
        """
        if not _TABLE_NAME_RE.match(table_name):
            raise ValueError(f"Invalid table name: {table_name}")
        self.url = url
        self.table_name = table_name
        self.engine: Optional[Engine] = engine
        self._table_ready = False

    def _get_engine(self) -> Engine:
        """
        Get or create database engine.

        Returns:
            SQLAlchemy engine.
        """
        if self.engine is None:
            try:
                self.engine = create_engine(self.url, pool_pre_ping=True)
            except Exception as e:
                raise StorageError(f"Failed to create database engine: {e}") from e
        return self.engine

    def _ensure_table(self) -> None:
        if self._table_ready:
            return
        with self._get_engine().begin() as conn:
            conn.execute(text(
                f'CREATE TABLE IF NOT EXISTS "{self.table_name}" ('
                f'storage_key VARCHAR(255) PRIMARY KEY, '
                f'payload TEXT NOT NULL, '
                f'updated_at BIGINT NOT NULL)'
            ))
        self._table_ready = True

    def save(self, key: str, data: Dict[str, Any]) -> None:
        """
        Save data to SQL database, replacing any previous payload for the key.

        Args:
            key: Storage key.
            data: Data dictionary to save.

        Raises:
            StorageError: If the write fails.
        """
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Payload for {key} is not JSON serialisable: {e}") from e

        try:
            self._ensure_table()
            with self._get_engine().begin() as conn:
                conn.execute(
                    text(f'DELETE FROM "{self.table_name}" WHERE storage_key = :key'),
                    {"key": key},
                )
                conn.execute(
                    text(
                        f'INSERT INTO "{self.table_name}" (storage_key, payload, updated_at) '
                        f'VALUES (:key, :payload, :updated_at)'
                    ),
                    {"key": key, "payload": payload, "updated_at": int(time.time() * 1000)},
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save {key}: {e}") from e
        logger.debug(f"SQL save: {key}")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Load data from SQL database.

        Args:
            key: Storage key.

        Returns:
            Data dictionary if found, None otherwise.

        Raises:
            StorageError: If the read fails.
        """
        try:
            self._ensure_table()
            with self._get_engine().connect() as conn:
                row = conn.execute(
                    text(f'SELECT payload FROM "{self.table_name}" WHERE storage_key = :key'),
                    {"key": key},
                ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load {key}: {e}") from e

        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as e:
            raise StorageError(f"Stored payload for {key} is not valid JSON: {e}") from e

    def delete(self, key: str) -> None:
        """
        Delete data from SQL database.

        Args:
            key: Storage key.
        """
        try:
            self._ensure_table()
            with self._get_engine().begin() as conn:
                conn.execute(
                    text(f'DELETE FROM "{self.table_name}" WHERE storage_key = :key'),
                    {"key": key},
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

    def exists(self, key: str) -> bool:
        """
        Check if key exists in SQL database.

        Args:
            key: Storage key.

        Returns:
            True if exists, False otherwise.
        """
        try:
            self._ensure_table()
            with self._get_engine().connect() as conn:
                row = conn.execute(
                    text(f'SELECT 1 FROM "{self.table_name}" WHERE storage_key = :key'),
                    {"key": key},
                ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to check {key}: {e}") from e
        return row is not None

    def close(self) -> None:
        """Dispose the engine and its connection pool."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self._table_ready = False
