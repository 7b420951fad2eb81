"""
Memory storage backend.

Keeps JSON-encoded payloads in a process-local dict. Payloads go through the
same encoding as SQLStorage, so data that cannot be persisted to a database
fails here too.
"""

import json
import threading
from typing import Any, Dict, List, Optional

from ..exceptions import StorageError
from ..interfaces.storage import IStorageBackend


class MemoryStorage(IStorageBackend):
    """In-memory storage backend for tests and single-process bots.

    Data is lost when the process ends. Access is guarded by a lock because
    the metadata persister writes from its own thread.
    """

    def __init__(self):
        self._payloads: Dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, data: Dict[str, Any]) -> None:
        """
        Encode and store a payload.

        Raises:
            StorageError: If data is not JSON serialisable.
        """
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Payload for {key} is not JSON serialisable: {e}") from e
        with self._lock:
            self._payloads[key] = payload

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Decoded payload for key, or None. Each call returns a fresh copy."""
        with self._lock:
            payload = self._payloads.get(key)
        return json.loads(payload) if payload is not None else None

    def delete(self, key: str) -> None:
        with self._lock:
            self._payloads.pop(key, None)

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._payloads

    def clear(self) -> None:
        """Drop every stored payload."""
        with self._lock:
            self._payloads.clear()

    def keys(self, prefix: Optional[str] = None) -> List[str]:
        """Stored keys, optionally only those starting with prefix."""
        with self._lock:
            return [key for key in self._payloads if not prefix or key.startswith(prefix)]
