"""
Unit tests for SQLStorage against a temporary SQLite database.
"""

import os
import tempfile
import unittest

from accountstate.config import StorageConfig
from accountstate.exceptions import StorageError
from accountstate.storage import MemoryStorage, SQLStorage, create_storage


class TestSQLStorage(unittest.TestCase):
    """Test SQL key/value storage."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.url = f"sqlite:///{os.path.join(self.tmp_dir.name, 'state.db')}"
        self.storage = SQLStorage(self.url)

    def tearDown(self):
        """Dispose engine and remove the database."""
        self.storage.close()
        self.tmp_dir.cleanup()

    def test_save_and_load(self):
        """Payloads round trip through the table."""
        payload = {"updated_at": 1, "data": {"BTCUSDT": {"leader": "alice"}}}

        self.storage.save("positionMetadata:acc-1", payload)

        self.assertTrue(self.storage.exists("positionMetadata:acc-1"))
        self.assertEqual(self.storage.load("positionMetadata:acc-1"), payload)

    def test_save_overwrites(self):
        """Saving the same key replaces the payload."""
        self.storage.save("k", {"v": 1})
        self.storage.save("k", {"v": 2})

        self.assertEqual(self.storage.load("k"), {"v": 2})

    def test_missing_key(self):
        """Unknown keys load as None."""
        self.assertIsNone(self.storage.load("missing"))
        self.assertFalse(self.storage.exists("missing"))

    def test_delete(self):
        """Deleted keys are gone."""
        self.storage.save("k", {"v": 1})
        self.storage.delete("k")

        self.assertIsNone(self.storage.load("k"))

    def test_persists_across_instances(self):
        """A new backend on the same database sees earlier writes."""
        self.storage.save("k", {"v": 1})

        other = SQLStorage(self.url)
        try:
            self.assertEqual(other.load("k"), {"v": 1})
        finally:
            other.close()

    def test_unserialisable_payload(self):
        """Non-JSON payloads raise StorageError."""
        with self.assertRaises(StorageError):
            self.storage.save("k", {"v": object()})

    def test_invalid_table_name(self):
        """Table names are restricted to identifiers."""
        with self.assertRaises(ValueError):
            SQLStorage(self.url, table_name="kv; DROP TABLE x")


class TestCreateStorage(unittest.TestCase):
    """Test backend selection from configuration."""

    def test_memory_backend(self):
        """The default backend is in-memory."""
        self.assertIsInstance(create_storage(StorageConfig()), MemoryStorage)

    def test_sql_backend(self):
        """The sql backend uses the configured URL and table."""
        storage = create_storage(StorageConfig(backend="sql", url="sqlite://", table_name="kv"))

        self.assertIsInstance(storage, SQLStorage)
        self.assertEqual(storage.table_name, "kv")


if __name__ == "__main__":
    unittest.main()
