"""
Metadata persister.

Periodically writes an account's per-symbol position metadata to a storage
backend whenever the store's pending-persist flag is raised, and restores it on
startup.

The stored payload is {"updated_at": <ms>, "data": {<symbol>: <metadata>}}
under the key "<metadata_key>:<account_id>".
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..config.loader import PersistenceConfig
from ..interfaces.storage import IStorageBackend
from ..state.store import AccountStateStore
from ..utils.dates import get_time_diff_in_dates
from ..utils.errors import sanitise_error

logger = logging.getLogger(__name__)


def _identity(value: Any) -> Any:
    return value


class MetadataPersister(threading.Thread):
    """Timer-driven job persisting an AccountStateStore's metadata.

    The "check flag -> clear flag -> write snapshot" sequence runs under a lock.
    A failed write raises the pending flag again so the next cycle retries.
    """

    def __init__(
        self,
        account_id: str,
        store: AccountStateStore,
        storage: IStorageBackend,
        config: Optional[PersistenceConfig] = None,
        serializer: Optional[Callable[[Any], Any]] = None,
        deserializer: Optional[Callable[[Any], Any]] = None,
    ):
        """
        Initialize metadata persister.

        Args:
            account_id: Account identifier, part of the storage key.
            store: Store whose metadata is persisted.
            storage: Storage backend.
            config: Persistence configuration (interval, key prefix).
            serializer: Converts one metadata record to a JSON-serialisable value.
            deserializer: Converts a stored value back to a metadata record.
        """
        super().__init__(daemon=True, name=f"MetadataPersister-{account_id}")
        self.account_id = account_id
        self.store = store
        self.storage = storage
        self.config = config or PersistenceConfig()
        self.serializer = serializer or _identity
        self.deserializer = deserializer or _identity
        self.did_restore = False
        self._lock = threading.Lock()
        self._stop_event = threading.Event()

    @property
    def storage_key(self) -> str:
        return f"{self.config.metadata_key}:{self.account_id}"

    def restore_persisted_data(self) -> bool:
        """
        Load persisted metadata into the store.

        Call this during bootstrap, before resuming event processing.

        Returns:
            True if metadata was found and restored, False otherwise.

        Raises:
            StorageError: If the storage backend fails.
        """
        stored = self.storage.load(self.storage_key)
        data = stored.get("data") if isinstance(stored, dict) else None

        restored = False
        if isinstance(data, dict):
            logger.info(
                f'Fetched persisted "{self.account_id}" state - state last updated '
                f"{self._describe_age(stored.get('updated_at'))}, {len(data)} symbols"
            )
            self.store.set_all_symbol_metadata(self._deserialize_all(data))
            restored = True
        else:
            logger.info(f'No persisted state for "{self.account_id}" - nothing to restore')

        self.did_restore = True
        return restored

    @staticmethod
    def _describe_age(updated_at_ms: Any) -> str:
        try:
            updated_at = datetime.fromtimestamp((updated_at_ms or 0) / 1000)
        except (TypeError, ValueError, OverflowError, OSError):
            logger.warning(f"Persisted metadata has an unusable updated_at: {updated_at_ms!r}")
            return "at an unknown time"
        age = get_time_diff_in_dates(datetime.now(), updated_at)
        return f"{age.minutes} minutes ago"

    def _deserialize_all(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Deserialize stored records, skipping (and logging) records that fail."""
        records = {}
        for symbol, record in data.items():
            try:
                records[symbol] = self.deserializer(record)
            except Exception as e:
                logger.error(
                    f"Dropping unreadable persisted metadata for {symbol}: {sanitise_error(e)}"
                )
        return records

    def _snapshot(self) -> Dict[str, Any]:
        return {
            symbol: self.serializer(record)
            for symbol, record in self.store.get_all_symbol_metadata().items()
        }

    def persist_once(self) -> bool:
        """
        Write metadata if the store has unpersisted changes.

        Returns:
            True if metadata was written, False if there was nothing to write or
            the write failed (the pending flag is raised again on failure).
        """
        with self._lock:
            if not self.did_restore:
                try:
                    self.restore_persisted_data()
                except Exception as e:
                    logger.error(f"Exception restoring position metadata: {sanitise_error(e)}")
                    return False

            if not self.store.is_pending_persist():
                return False

            self.store.set_is_pending_persist(False)
            try:
                self.storage.save(
                    self.storage_key,
                    {
                        "updated_at": int(time.time() * 1000),
                        "data": self._snapshot(),
                    },
                )
            except Exception as e:
                logger.error(f"Exception writing position metadata: {sanitise_error(e)}")
                self.store.set_is_pending_persist(True)
                return False

            logger.info(f'Saved position metadata for "{self.account_id}"')
            return True

    def run(self) -> None:
        """Persist loop, runs until stop() is called."""
        interval = self.config.interval_ms / 1000
        while not self._stop_event.is_set():
            self.persist_once()
            self._stop_event.wait(interval)

    def stop(self) -> None:
        """Stop the persist loop."""
        self._stop_event.set()

    def flush(self) -> bool:
        """Persist pending changes immediately (e.g. on shutdown)."""
        return self.persist_once()
