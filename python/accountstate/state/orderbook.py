"""
Order book management.

Caches live (NEW / PARTIALLY_FILLED) exchange orders keyed by exchange order id.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .position import OrderPositionSide

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    """Order status enumeration."""
    NEW = "NEW"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
    REJECTED = "REJECTED"
    PENDING_CANCEL = "PENDING_CANCEL"


class OrderSide(str, Enum):
    """Order side enumeration."""
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    """Order type enumeration."""
    LIMIT = "LIMIT"
    MARKET = "MARKET"
    STOP = "STOP"
    STOP_MARKET = "STOP_MARKET"
    TAKE_PROFIT = "TAKE_PROFIT"
    TAKE_PROFIT_MARKET = "TAKE_PROFIT_MARKET"
    TRAILING_STOP_MARKET = "TRAILING_STOP_MARKET"


LIVE_ORDER_STATUSES = frozenset({OrderStatus.NEW, OrderStatus.PARTIALLY_FILLED})


@dataclass
class Order:
    """Cached exchange order."""

    exchange_order_id: str
    custom_order_id: str
    symbol: str
    order_side: OrderSide
    position_side: OrderPositionSide
    order_type: OrderType
    status: OrderStatus
    price: float
    original_quantity: float
    executed_quantity: float = 0.0
    average_price: float = 0.0
    created_at_ms: int = 0
    updated_at_ms: int = 0
    reduce_only: Optional[bool] = None

    @property
    def is_live(self) -> bool:
        """NEW and PARTIALLY_FILLED orders are live; every other status is terminal."""
        return OrderStatus(self.status) in LIVE_ORDER_STATUSES

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = asdict(self)
        data['order_side'] = OrderSide(self.order_side).value
        data['position_side'] = OrderPositionSide(self.position_side).value
        data['order_type'] = OrderType(self.order_type).value
        data['status'] = OrderStatus(self.status).value
        return data


class OrderBook:
    """Order table.

    The store is a cache, not an execution engine: status transitions are not
    validated and the most recently applied update wins.
    """

    def __init__(self):
        """Initialize order book."""
        self.orders: Dict[str, Order] = {}

    def upsert_active(self, order: Order) -> None:
        """
        Store a live order, or evict it when its status is terminal.

        Args:
            order: Order update.
        """
        if order.is_live:
            self.orders[order.exchange_order_id] = order
            logger.debug(
                f"Order stored: {order.exchange_order_id}, {OrderSide(order.order_side).value} "
                f"{order.symbol}, status={OrderStatus(order.status).value}"
            )
        else:
            self.delete(order.exchange_order_id)

    def set(self, order: Order) -> None:
        """
        Store an order regardless of its status.

        Args:
            order: Order to store.
        """
        self.orders[order.exchange_order_id] = order

    def delete(self, order_id: str) -> None:
        """
        Remove an order if present.

        Args:
            order_id: Exchange order ID.
        """
        if self.orders.pop(order_id, None) is not None:
            logger.debug(f"Order removed: {order_id}")

    def clear(self) -> None:
        """Remove all orders."""
        self.orders.clear()

    def get(self, order_id: str) -> Optional[Order]:
        """
        Get order by exchange order ID.

        Args:
            order_id: Exchange order ID.

        Returns:
            Order if found, None otherwise.
        """
        return self.orders.get(order_id)

    def all(self) -> List[Order]:
        """Get all stored orders in insertion order."""
        return list(self.orders.values())

    def filter(self, predicate: Callable[[Order], bool]) -> List[Order]:
        """Get stored orders matching a predicate."""
        return [order for order in self.orders.values() if predicate(order)]

    def get_active(self) -> List[Order]:
        """Get orders whose status is NEW or PARTIALLY_FILLED."""
        return self.filter(lambda order: order.is_live)

    def get_by_symbol(self, symbol: str) -> List[Order]:
        """Get all orders for a symbol."""
        return self.filter(lambda order: order.symbol == symbol)

    def get_by_symbol_side(
        self,
        symbol: str,
        side: Union[OrderSide, OrderPositionSide, str],
    ) -> List[Order]:
        """
        Get orders for a symbol on one side.

        Args:
            symbol: Symbol.
            side: BUY/SELL matches the order side; LONG/SHORT/BOTH/NONE matches
                the targeted position side.

        Returns:
            List of orders.
        """
        try:
            order_side = OrderSide(side)
        except ValueError:
            position_side = OrderPositionSide(side)
            return self.filter(
                lambda order: order.symbol == symbol and order.position_side == position_side
            )
        return self.filter(
            lambda order: order.symbol == symbol and order.order_side == order_side
        )

    def get_by_status(self, status: Union[OrderStatus, str]) -> List[Order]:
        """Get all orders with a specific status."""
        status = OrderStatus(status)
        return self.filter(lambda order: order.status == status)

    def get_by_type(self, order_type: Union[OrderType, str]) -> List[Order]:
        """Get all orders of a specific type."""
        order_type = OrderType(order_type)
        return self.filter(lambda order: order.order_type == order_type)

    def sorted_by(self, key: Callable[[Order], object], ascending: bool = True) -> List[Order]:
        """
        Get a newly sorted list of orders. The stored order is not changed.

        Args:
            key: Sort key function.
            ascending: Sort ascending (default) or descending.

        Returns:
            Sorted list of orders.
        """
        return sorted(self.orders.values(), key=key, reverse=not ascending)

    def to_dict(self) -> dict:
        """Convert to dictionary (for log dumps)."""
        return {order_id: order.to_dict() for order_id, order in self.orders.items()}
