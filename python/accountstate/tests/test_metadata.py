"""
Unit tests for per-symbol metadata and the pending-persist flag.
"""

import unittest
from dataclasses import dataclass
from typing import Optional

from accountstate.exceptions import MetadataNotInitialisedError, PreconditionError
from accountstate.state import AccountStateStore


@dataclass
class LeaderMetadata:
    leader_id: str
    entry_reason: Optional[str] = None


class TestSymbolMetadata(unittest.TestCase):
    """Test metadata mutations and the pending-persist flag."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = AccountStateStore()

    def test_set_symbol_metadata_raises_flag(self):
        """Wholesale set stores the record and marks it for persistence."""
        self.assertFalse(self.store.is_pending_persist())

        result = self.store.set_symbol_metadata("BTCUSDT", {"leader": "alice"})

        self.assertEqual(result, {"leader": "alice"})
        self.assertEqual(self.store.get_symbol_metadata("BTCUSDT"), {"leader": "alice"})
        self.assertTrue(self.store.is_pending_persist())

    def test_set_value_requires_initialised_metadata(self):
        """Field updates before initialisation fail and leave the flag alone."""
        with self.assertRaises(MetadataNotInitialisedError) as ctx:
            self.store.set_symbol_metadata_value("BTCUSDT", "leader", "bob")

        self.assertIsInstance(ctx.exception, PreconditionError)
        self.assertEqual(ctx.exception.symbol, "BTCUSDT")
        self.assertFalse(self.store.is_pending_persist())
        self.assertIsNone(self.store.get_symbol_metadata("BTCUSDT"))

    def test_set_value_failure_keeps_raised_flag(self):
        """A failed field update does not clear an already raised flag."""
        self.store.set_symbol_metadata("ETHUSDT", {"leader": "alice"})

        with self.assertRaises(PreconditionError):
            self.store.set_symbol_metadata_value("BTCUSDT", "leader", "bob")

        self.assertTrue(self.store.is_pending_persist())

    def test_set_value_on_mapping(self):
        """Field updates mutate the stored mapping and raise the flag."""
        self.store.set_symbol_metadata("BTCUSDT", {"leader": "alice", "count": 1})
        self.store.set_is_pending_persist(False)

        updated = self.store.set_symbol_metadata_value("BTCUSDT", "count", 2)

        self.assertEqual(updated, {"leader": "alice", "count": 2})
        self.assertTrue(self.store.is_pending_persist())

    def test_set_value_on_object(self):
        """Field updates on dataclass records use attributes."""
        store = AccountStateStore[LeaderMetadata]()
        store.set_symbol_metadata("BTCUSDT", LeaderMetadata(leader_id="alice"))

        store.set_symbol_metadata_value("BTCUSDT", "entry_reason", "breakout")

        self.assertEqual(store.get_symbol_metadata("BTCUSDT").entry_reason, "breakout")

    def test_delete_raises_flag(self):
        """Deleting metadata removes it and marks for persistence."""
        self.store.set_symbol_metadata("BTCUSDT", {"leader": "alice"})
        self.store.set_is_pending_persist(False)

        self.store.delete_position_metadata("BTCUSDT")

        self.assertIsNone(self.store.get_symbol_metadata("BTCUSDT"))
        self.assertEqual(self.store.get_symbols_with_metadata(), [])
        self.assertTrue(self.store.is_pending_persist())

    def test_symbols_with_metadata(self):
        """List symbols that hold metadata."""
        self.store.set_symbol_metadata("BTCUSDT", {"leader": "alice"})
        self.store.set_symbol_metadata("ETHUSDT", {"leader": "bob"})

        self.assertEqual(sorted(self.store.get_symbols_with_metadata()), ["BTCUSDT", "ETHUSDT"])

    def test_bulk_round_trip_is_idempotent(self):
        """set_all(get_all()) changes nothing and does not raise the flag."""
        self.store.set_symbol_metadata("BTCUSDT", {"leader": "alice"})
        self.store.set_is_pending_persist(False)

        snapshot = self.store.get_all_symbol_metadata()
        self.assertFalse(self.store.is_pending_persist())

        self.store.set_all_symbol_metadata(snapshot)

        self.assertEqual(self.store.get_all_symbol_metadata(), {"BTCUSDT": {"leader": "alice"}})
        self.assertFalse(self.store.is_pending_persist())

    def test_get_all_returns_copy(self):
        """Mutating the returned table does not change the store."""
        self.store.set_symbol_metadata("BTCUSDT", {"leader": "alice"})

        snapshot = self.store.get_all_symbol_metadata()
        snapshot["ETHUSDT"] = {"leader": "mallory"}

        self.assertIsNone(self.store.get_symbol_metadata("ETHUSDT"))


if __name__ == "__main__":
    unittest.main()
