"""
In-memory account state cache for derivatives/futures trading bots.

This package implements:
- A state store for wallet balance, leverage, positions, orders and
  per-symbol position metadata (AccountStateStore)
- Unrealised PnL and depth (exposure) calculations
- Session summaries and balance reports
- Persistence of position metadata through pluggable storage backends

Architecture:
- State Layer: Account / LeverageCache / PositionManager / OrderBook / MetadataStore
- Logic Layer: PnL / Depth
- Reporting Layer: Session summary / Balance report / DataFrame views
- Storage Layer: Storage Backend (Memory/SQL)
- Service Layer: MetadataPersister
"""

__version__ = "0.1.0"

from .state import (
    AccountStateStore,
    ActivePositionCounts,
    Order,
    OrderPositionSide,
    OrderSide,
    OrderStatus,
    OrderType,
    Position,
    PositionSide,
    PriceEvent,
)
from .config import Config, StoreConfig, load_config
from .exceptions import (
    AccountStateError,
    ExternalIOError,
    InvalidNumberError,
    MetadataNotInitialisedError,
    PreconditionError,
    ReportingError,
    StorageError,
    ZeroBalanceError,
)
from .storage import MemoryStorage, SQLStorage, create_storage
from .service import MetadataPersister

__all__ = [
    "AccountStateStore",
    "ActivePositionCounts",
    "Order",
    "OrderPositionSide",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "Position",
    "PositionSide",
    "PriceEvent",
    "Config",
    "StoreConfig",
    "load_config",
    "AccountStateError",
    "ExternalIOError",
    "InvalidNumberError",
    "MetadataNotInitialisedError",
    "PreconditionError",
    "ReportingError",
    "StorageError",
    "ZeroBalanceError",
    "MemoryStorage",
    "SQLStorage",
    "create_storage",
    "MetadataPersister",
]
