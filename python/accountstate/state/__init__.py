"""
State management layer.

This module implements:
- Account: Wallet balance and cached counters
- Position / PositionManager: Per symbol, per side position cache
- Order / OrderBook: Live order cache
- LeverageCache: Per symbol (and per side) leverage
- MetadataStore: Per symbol metadata with the pending-persist flag
- AccountStateStore: The store combining all of the above
"""

from .position import OrderPositionSide, Position, PositionManager, PositionSide
from .orderbook import (
    LIVE_ORDER_STATUSES,
    Order,
    OrderBook,
    OrderSide,
    OrderStatus,
    OrderType,
)
from .account import Account
from .leverage import LeverageCache, SymbolLeverage
from .metadata import MetadataStore
from .store import AccountStateStore, ActivePositionCounts, PriceEvent

__all__ = [
    "Account",
    "AccountStateStore",
    "ActivePositionCounts",
    "LeverageCache",
    "LIVE_ORDER_STATUSES",
    "MetadataStore",
    "Order",
    "OrderBook",
    "OrderPositionSide",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "Position",
    "PositionManager",
    "PositionSide",
    "PriceEvent",
    "SymbolLeverage",
]
