"""
Unit tests for leverage state.
"""

import unittest

from accountstate.state import AccountStateStore, OrderSide, PositionSide


class TestLeverage(unittest.TestCase):
    """Test symmetric and hedge-mode leverage."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = AccountStateStore()

    def test_symmetric_leverage(self):
        """Most recent write wins; unknown symbols return None."""
        self.assertIsNone(self.store.get_symbol_leverage("BTCUSDT"))

        self.store.set_symbol_leverage("BTCUSDT", 10)
        self.store.set_symbol_leverage("BTCUSDT", 20)

        self.assertEqual(self.store.get_symbol_leverage("BTCUSDT"), 20)
        self.assertEqual(self.store.get_symbol_side_leverage("BTCUSDT", OrderSide.SELL), 20)
        self.assertEqual(self.store.get_symbol_leverage_cache(), {"BTCUSDT": 20})

    def test_side_leverage(self):
        """Buy and sell leverage are kept independently."""
        self.store.set_symbol_side_leverage("BTCUSDT", OrderSide.BUY, 5)
        self.store.set_symbol_side_leverage("BTCUSDT", OrderSide.SELL, 8)

        self.assertEqual(self.store.get_symbol_side_leverage("BTCUSDT", OrderSide.BUY), 5)
        self.assertEqual(self.store.get_symbol_side_leverage("BTCUSDT", PositionSide.SHORT), 8)
        self.assertEqual(self.store.get_symbol_side_leverage("BTCUSDT", "LONG"), 5)

    def test_side_leverage_falls_back_to_known_side(self):
        """When only one side is known it is used for both."""
        self.store.set_symbol_side_leverage("ETHUSDT", PositionSide.SHORT, 3)

        self.assertEqual(self.store.get_symbol_side_leverage("ETHUSDT", OrderSide.BUY), 3)
        self.assertEqual(self.store.get_symbol_leverage("ETHUSDT"), 3)
        self.assertEqual(self.store.get_symbol_leverage_cache(), {"ETHUSDT": 3})

    def test_unknown_side(self):
        """Unknown sides are rejected."""
        with self.assertRaises(ValueError):
            self.store.set_symbol_side_leverage("ETHUSDT", "BOTH", 3)


if __name__ == "__main__":
    unittest.main()
