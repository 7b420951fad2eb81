"""
Per-symbol position metadata.

Metadata is caller-defined information about a symbol's position(s) that cannot
be recovered from the exchange, e.g. which strategy or leader opened it. It is
the only state in the store that must be persisted, so every mutation raises a
pending-persist flag that only an external acknowledgement clears.
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Dict, Generic, List, Optional, TypeVar

from ..exceptions import MetadataNotInitialisedError

logger = logging.getLogger(__name__)

TMetadata = TypeVar("TMetadata")


class MetadataStore(Generic[TMetadata]):
    """Metadata table keyed by symbol, plus the pending-persist flag."""

    def __init__(self):
        """Initialize metadata store."""
        self.metadata: Dict[str, TMetadata] = {}
        self.pending_persist = False

    def set(self, symbol: str, data: TMetadata) -> TMetadata:
        """
        Overwrite the metadata for a symbol.

        Args:
            symbol: Symbol.
            data: Full metadata record.

        Returns:
            The stored record.
        """
        self.metadata[symbol] = data
        self.pending_persist = True
        return data

    def set_value(self, symbol: str, key: str, value: Any) -> TMetadata:
        """
        Set one field of a symbol's existing metadata.

        Mapping records are updated by item, other records by attribute.

        Args:
            symbol: Symbol.
            key: Field name.
            value: New field value.

        Returns:
            The updated record.

        Raises:
            MetadataNotInitialisedError: If no metadata was set for the symbol yet.
        """
        record = self.metadata.get(symbol)
        if record is None:
            raise MetadataNotInitialisedError(symbol)

        if isinstance(record, MutableMapping):
            record[key] = value
        else:
            setattr(record, key, value)
        self.pending_persist = True
        return record

    def get(self, symbol: str) -> Optional[TMetadata]:
        """Get metadata for a symbol, None if not set."""
        return self.metadata.get(symbol)

    def delete(self, symbol: str) -> None:
        """Remove a symbol's metadata."""
        self.metadata.pop(symbol, None)
        self.pending_persist = True
        logger.debug(f"Metadata deleted: {symbol}")

    def get_all(self) -> Dict[str, TMetadata]:
        """Get a shallow copy of the full metadata table."""
        return dict(self.metadata)

    def set_all(self, data: Dict[str, TMetadata]) -> None:
        """Replace the full metadata table (restore path, the flag is not raised)."""
        self.metadata = dict(data)

    def symbols(self) -> List[str]:
        """Symbols that currently have metadata."""
        return list(self.metadata.keys())
