"""
Unit tests for order state in AccountStateStore.

Test live order storage, terminal status eviction, filters and sorting.
"""

import unittest

from accountstate.state import (
    AccountStateStore,
    Order,
    OrderPositionSide,
    OrderSide,
    OrderStatus,
    OrderType,
)


def make_order(order_id, symbol="BTCUSDT", status=OrderStatus.NEW, price=100.0,
               side=OrderSide.BUY, position_side=OrderPositionSide.LONG,
               order_type=OrderType.LIMIT, created_at_ms=0):
    """Build an order with sensible defaults."""
    return Order(
        exchange_order_id=order_id,
        custom_order_id=f"c-{order_id}",
        symbol=symbol,
        order_side=side,
        position_side=position_side,
        order_type=order_type,
        status=status,
        price=price,
        original_quantity=1.0,
        created_at_ms=created_at_ms,
        updated_at_ms=created_at_ms,
    )


class TestUpsertActiveOrder(unittest.TestCase):
    """Test the upsert entry point."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = AccountStateStore()

    def test_live_orders_are_stored(self):
        """NEW and PARTIALLY_FILLED orders are stored by exchange order id."""
        self.store.upsert_active_order(make_order("1"))
        self.store.upsert_active_order(make_order("2", status=OrderStatus.PARTIALLY_FILLED))

        self.assertEqual(len(self.store.get_orders()), 2)
        self.assertEqual(self.store.get_order("2").status, OrderStatus.PARTIALLY_FILLED)

    def test_filled_removes_partially_filled(self):
        """A FILLED update evicts the stored order."""
        self.store.upsert_active_order(make_order("1", status=OrderStatus.PARTIALLY_FILLED))
        self.store.upsert_active_order(make_order("1", status=OrderStatus.FILLED))

        self.assertIsNone(self.store.get_order("1"))
        self.assertNotIn("1", [o.exchange_order_id for o in self.store.get_orders()])

    def test_terminal_statuses_are_never_stored(self):
        """Every non-live status causes removal rather than storage."""
        terminal = [
            OrderStatus.FILLED,
            OrderStatus.CANCELLED,
            OrderStatus.EXPIRED,
            OrderStatus.REJECTED,
            OrderStatus.PENDING_CANCEL,
        ]
        for i, status in enumerate(terminal):
            self.store.upsert_active_order(make_order(str(i), status=status))

        self.assertEqual(self.store.get_orders(), [])

    def test_out_of_order_updates_last_write_wins(self):
        """A PARTIALLY_FILLED arriving after FILLED re-creates the order."""
        self.store.upsert_active_order(make_order("1", status=OrderStatus.FILLED))
        self.store.upsert_active_order(make_order("1", status=OrderStatus.PARTIALLY_FILLED))

        self.assertEqual(self.store.get_order("1").status, OrderStatus.PARTIALLY_FILLED)

    def test_set_order_and_active_filter(self):
        """set_order stores any status; get_active_orders still filters it out."""
        self.store.set_order(make_order("1", status=OrderStatus.FILLED))
        self.store.upsert_active_order(make_order("2"))

        self.assertEqual(len(self.store.get_orders()), 2)
        self.assertEqual([o.exchange_order_id for o in self.store.get_active_orders()], ["2"])
        self.assertEqual(len(self.store.get_orders_by_status(OrderStatus.FILLED)), 1)

    def test_delete_and_clear(self):
        """Orders can be deleted individually or all at once."""
        self.store.upsert_active_order(make_order("1"))
        self.store.upsert_active_order(make_order("2"))

        self.store.delete_order("1")
        self.store.delete_order("missing")
        self.assertEqual([o.exchange_order_id for o in self.store.get_orders()], ["2"])

        self.store.clear_all_orders()
        self.assertEqual(self.store.get_orders(), [])


class TestOrderQueries(unittest.TestCase):
    """Test order filters and sorting."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = AccountStateStore()
        self.store.upsert_active_order(make_order("b", symbol="ETHUSDT", price=30.0, created_at_ms=3))
        self.store.upsert_active_order(make_order(
            "c", symbol="BTCUSDT", price=10.0, created_at_ms=1,
            side=OrderSide.SELL, position_side=OrderPositionSide.SHORT,
            order_type=OrderType.STOP_MARKET,
        ))
        self.store.upsert_active_order(make_order(
            "a", symbol="BTCUSDT", price=20.0, created_at_ms=2,
            status=OrderStatus.PARTIALLY_FILLED,
        ))

    def test_filters(self):
        """Filter by symbol, side, status and type."""
        self.assertEqual(
            sorted(o.exchange_order_id for o in self.store.get_orders_for_symbol("BTCUSDT")),
            ["a", "c"],
        )
        self.assertEqual(
            [o.exchange_order_id for o in self.store.get_orders_for_symbol_side("BTCUSDT", OrderSide.SELL)],
            ["c"],
        )
        self.assertEqual(
            [o.exchange_order_id for o in self.store.get_orders_for_symbol_side("BTCUSDT", "LONG")],
            ["a"],
        )
        self.assertEqual(
            [o.exchange_order_id for o in self.store.get_orders_by_status(OrderStatus.PARTIALLY_FILLED)],
            ["a"],
        )
        self.assertEqual(
            [o.exchange_order_id for o in self.store.get_orders_by_type("STOP_MARKET")],
            ["c"],
        )

    def test_symbol_side_accepts_names_and_enums(self):
        """Side names pick order side or position side; unknown names are rejected."""
        ids = lambda orders: [o.exchange_order_id for o in orders]

        self.assertEqual(ids(self.store.get_orders_for_symbol_side("BTCUSDT", "BUY")), ["a"])
        self.assertEqual(ids(self.store.get_orders_for_symbol_side("BTCUSDT", "SHORT")), ["c"])
        self.assertEqual(
            ids(self.store.get_orders_for_symbol_side("BTCUSDT", OrderPositionSide.SHORT)),
            ["c"],
        )
        self.assertEqual(self.store.get_orders_for_symbol_side("BTCUSDT", "BOTH"), [])
        with self.assertRaises(ValueError):
            self.store.get_orders_for_symbol_side("BTCUSDT", "SIDEWAYS")

    def test_sorting(self):
        """Sort variants order by their key, ascending by default."""
        ids = lambda orders: [o.exchange_order_id for o in orders]

        self.assertEqual(ids(self.store.get_orders_sorted_by_price()), ["c", "a", "b"])
        self.assertEqual(ids(self.store.get_orders_sorted_by_price(ascending=False)), ["b", "a", "c"])
        self.assertEqual(ids(self.store.get_orders_sorted_by_id()), ["a", "b", "c"])
        self.assertEqual(ids(self.store.get_orders_sorted_by_timestamp()), ["c", "a", "b"])
        self.assertEqual(ids(self.store.get_orders_sorted_by_symbol())[-1], "b")
        self.assertEqual(ids(self.store.get_orders_sorted_by_symbol(ascending=False))[0], "b")

    def test_sorting_does_not_mutate_order(self):
        """Sorting returns a new list and keeps insertion order."""
        before = [o.exchange_order_id for o in self.store.get_orders()]
        self.store.get_orders_sorted_by_price(ascending=False)
        self.store.get_orders_sorted_by_id()

        self.assertEqual([o.exchange_order_id for o in self.store.get_orders()], before)
        self.assertEqual(before, ["b", "c", "a"])

    def test_to_dict(self):
        """Enum fields are serialised as their values."""
        data = self.store.get_order("c").to_dict()
        self.assertEqual(data['order_side'], "SELL")
        self.assertEqual(data['order_type'], "STOP_MARKET")
        self.assertEqual(data['status'], "NEW")


if __name__ == "__main__":
    unittest.main()
