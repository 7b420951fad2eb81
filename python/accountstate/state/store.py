"""
Account state store.

A cache of account state (wallet balance, leverage, positions, orders) so that
incoming exchange events can be compared with what we already know. Most of it
can be rebuilt from the exchange REST API and is never persisted.

The exception is per-symbol position metadata, which cannot be derived from the
exchange. Every metadata mutation raises the pending-persist flag; an external
job (see accountstate.service.MetadataPersister) writes the metadata and clears
the flag.

The store does no locking: callers serialise access (one mutation at a time).
"""

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Generic, List, Optional, Union

from ..config.loader import StoreConfig
from ..logic.depth import (
    DepthSummary,
    PositionDepthState,
    calculate_depth_for_positions,
    calculate_depth_summary_for_all_positions,
)
from ..logic.pnl import get_unrealised_pnl_for_position
from ..reporting.summary import (
    AccountSummary,
    ActivePositionSummary,
    PnlState,
    QuoteBalanceState,
    SessionSummary,
)
from .account import Account
from .leverage import LeverageCache, LeverageSide
from .metadata import MetadataStore, TMetadata
from .orderbook import Order, OrderBook, OrderSide, OrderStatus, OrderType
from .position import OrderPositionSide, Position, PositionManager, PositionSide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceEvent:
    """Latest observed price for a symbol."""

    symbol: str
    price: float


@dataclass(frozen=True)
class ActivePositionCounts:
    """Active position counters (hedged symbols count as 2 in total)."""

    total: int
    total_hedged: int


class AccountStateStore(Generic[TMetadata]):
    """In-memory account state for one account session.

    Freely instantiable; stores never share state.
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        """
        Initialize account state store.

        Args:
            config: Store configuration (default leverage, quote asset).
        """
        self.config = config or StoreConfig()
        self.account = Account()
        self.leverage = LeverageCache()
        self.position_manager = PositionManager()
        self.order_book = OrderBook()
        self.metadata: MetadataStore[TMetadata] = MetadataStore()

    def dump_log_state(self) -> None:
        """Log a JSON dump of the cached state."""
        logger.info(
            "Position dump: " + json.dumps(
                {
                    'account_leverage_state': self.leverage.to_dict(),
                    'account_position_state': self.position_manager.to_dict(),
                    'account_other_state': self.account.to_dict(),
                },
                indent=2,
                default=str,
            )
        )

    # Price events

    def process_price_event(self, event: PriceEvent) -> None:
        """
        Recalculate price-sensitive position state (unrealised PnL) in place.

        Args:
            event: Latest price for a symbol.
        """
        for side in (PositionSide.LONG, PositionSide.SHORT):
            position = self.get_active_position(event.symbol, side)
            if position is not None:
                position.value_upnl = get_unrealised_pnl_for_position(
                    event.price,
                    position.asset_qty,
                    position.position_price,
                )

    # Summaries

    def get_session_summary(self, starting_balance: float) -> SessionSummary:
        """
        Build a loggable summary of the session. Does not mutate the store.

        Uses the last processed price event for each position's unrealised PnL.

        Args:
            starting_balance: Wallet balance when the session started.

        Returns:
            SessionSummary.
        """
        balance_now = self.get_wallet_balance()

        active_positions = [
            ActivePositionSummary(
                position=replace(position),
                leverage=self.get_symbol_leverage(position.symbol),
            )
            for position in self.get_all_positions()
        ]

        upnl_sum = 0.0
        margin_locked_sum = 0.0
        for summary in active_positions:
            upnl_sum += summary.position.value_upnl
            margin_locked_sum += summary.position.margin_value

        return SessionSummary(
            active_positions=active_positions,
            active_position_upnl_sum=upnl_sum,
            account=AccountSummary(
                quote_balance_state=QuoteBalanceState(
                    started_with=starting_balance,
                    now=balance_now,
                    quote_margin_locked_sum=margin_locked_sum,
                    now_incl_locked=starting_balance - margin_locked_sum,
                    now_if_everything_closed_at_market=starting_balance + upnl_sum,
                ),
                pnl_state=PnlState(
                    realised_pnl=balance_now - starting_balance,
                    unrealised_pnl=upnl_sum,
                ),
            ),
        )

    def get_position_depths(self) -> List[PositionDepthState]:
        """Depth per active position against the current wallet balance."""
        return calculate_depth_for_positions(
            self.get_wallet_balance(),
            self.get_symbol_leverage_cache(),
            self.get_all_positions(),
            self.config.quote_asset,
            self.config.default_leverage,
        )

    def get_depth_summary(self, leverage_type: str = "cross") -> DepthSummary:
        """Aggregate depth across active positions against the current wallet balance."""
        return calculate_depth_summary_for_all_positions(
            self.get_wallet_balance(),
            self.get_symbol_leverage_cache(),
            self.get_all_positions(),
            self.config.quote_asset,
            leverage_type,
            self.config.default_leverage,
        )

    # Persistence flag

    def is_pending_persist(self) -> bool:
        """Check if metadata changed since it was last persisted."""
        return self.metadata.pending_persist

    def set_is_pending_persist(self, value: bool) -> None:
        """
        Set the pending-persist flag.

        Persistence backends set this back to False after a successful write.
        """
        self.metadata.pending_persist = value

    # Balance

    def set_wallet_balance(self, balance: float) -> None:
        self.account.balance = balance

    def get_wallet_balance(self) -> float:
        return self.account.balance

    def store_previous_balance(self) -> None:
        """Overwrite the previous balance with the current balance (before/after diffing)."""
        self.account.store_previous_balance()

    def get_previous_balance(self) -> float:
        return self.account.previous_balance

    # Positions

    def get_all_positions(self) -> List[Position]:
        """All positions with a non-zero quantity. Order is not meaningful."""
        return self.position_manager.get_all_active()

    def get_total_active_positions(self) -> ActivePositionCounts:
        """
        Recalculate active position counters.

        Also caches the hedged count for get_total_hedged_positions().

        Returns:
            ActivePositionCounts.
        """
        counts = self.position_manager.count_active()
        self.account.hedged_positions = counts['total_hedged']
        return ActivePositionCounts(total=counts['total'], total_hedged=counts['total_hedged'])

    def get_total_hedged_positions(self) -> int:
        """Cached count of symbols with both a long and a short open."""
        return self.account.hedged_positions

    def is_symbol_side_in_position(self, symbol: str, side: Union[PositionSide, str]) -> bool:
        return self.position_manager.is_active(symbol, side)

    def is_symbol_in_any_position(self, symbol: str) -> bool:
        """True if either side has a position for this symbol."""
        return (
            self.is_symbol_side_in_position(symbol, PositionSide.LONG)
            or self.is_symbol_side_in_position(symbol, PositionSide.SHORT)
        )

    def is_dual_position_mode(self) -> bool:
        """LONG and SHORT are always tracked separately (hedge mode)."""
        return True

    def get_active_position(
        self,
        symbol: str,
        side: Union[PositionSide, str],
    ) -> Optional[Position]:
        """
        Get the cached position for a symbol and side.

        Initialises an empty record for the symbol on first access.
        """
        return self.position_manager.get_position(symbol, side)

    def set_active_position(
        self,
        symbol: str,
        side: Union[PositionSide, str],
        position: Position,
    ) -> None:
        self.position_manager.set_position(symbol, side, position)

    def delete_active_position(self, symbol: str, side: Union[PositionSide, str]) -> None:
        self.position_manager.delete_position(symbol, side)

    # Leverage

    def set_symbol_leverage(self, symbol: str, leverage: float) -> None:
        self.leverage.set(symbol, leverage)

    def get_symbol_leverage(self, symbol: str) -> Optional[float]:
        return self.leverage.get(symbol)

    def set_symbol_side_leverage(self, symbol: str, side: LeverageSide, leverage: float) -> None:
        """Set leverage for one side (BUY/SELL or LONG/SHORT) of a hedge-mode symbol."""
        self.leverage.set_side(symbol, side, leverage)

    def get_symbol_side_leverage(self, symbol: str, side: LeverageSide) -> Optional[float]:
        """Leverage for one side, falling back to the other side when only one is known."""
        return self.leverage.get_side(symbol, side)

    def get_symbol_leverage_cache(self) -> Dict[str, float]:
        return self.leverage.to_dict()

    # Orders

    def upsert_active_order(self, order: Order) -> None:
        """
        Store a live order, or remove it if its status is terminal.

        Only NEW and PARTIALLY_FILLED orders are kept. The last applied update
        wins; out-of-order updates are not reconciled.
        """
        self.order_book.upsert_active(order)

    def set_order(self, order: Order) -> None:
        """Store an order without checking its status."""
        self.order_book.set(order)

    def get_order(self, order_id: str) -> Optional[Order]:
        return self.order_book.get(order_id)

    def get_orders(self) -> List[Order]:
        return self.order_book.all()

    def get_active_orders(self) -> List[Order]:
        return self.order_book.get_active()

    def get_orders_for_symbol(self, symbol: str) -> List[Order]:
        return self.order_book.get_by_symbol(symbol)

    def get_orders_for_symbol_side(
        self,
        symbol: str,
        side: Union[OrderSide, OrderPositionSide, str],
    ) -> List[Order]:
        """Orders for a symbol by order side (BUY/SELL) or targeted position side."""
        return self.order_book.get_by_symbol_side(symbol, side)

    def get_orders_by_status(self, status: Union[OrderStatus, str]) -> List[Order]:
        return self.order_book.get_by_status(status)

    def get_orders_by_type(self, order_type: Union[OrderType, str]) -> List[Order]:
        return self.order_book.get_by_type(order_type)

    def delete_order(self, order_id: str) -> None:
        self.order_book.delete(order_id)

    def clear_all_orders(self) -> None:
        self.order_book.clear()

    def get_orders_sorted_by_price(self, ascending: bool = True) -> List[Order]:
        return self.order_book.sorted_by(lambda order: order.price, ascending)

    def get_orders_sorted_by_id(self, ascending: bool = True) -> List[Order]:
        return self.order_book.sorted_by(lambda order: order.exchange_order_id, ascending)

    def get_orders_sorted_by_symbol(self, ascending: bool = True) -> List[Order]:
        return self.order_book.sorted_by(lambda order: order.symbol, ascending)

    def get_orders_sorted_by_timestamp(self, ascending: bool = True) -> List[Order]:
        """Sort by creation time."""
        return self.order_book.sorted_by(lambda order: order.created_at_ms, ascending)

    # Metadata

    def set_all_symbol_metadata(self, data: Dict[str, TMetadata]) -> None:
        """Overwrite the full metadata table (keyed by symbol)."""
        self.metadata.set_all(data)

    def get_all_symbol_metadata(self) -> Dict[str, TMetadata]:
        """Metadata for all symbols."""
        return self.metadata.get_all()

    def get_symbols_with_metadata(self) -> List[str]:
        return self.metadata.symbols()

    def get_symbol_metadata(self, symbol: str) -> Optional[TMetadata]:
        return self.metadata.get(symbol)

    def set_symbol_metadata(self, symbol: str, data: TMetadata) -> TMetadata:
        """Overwrite the full metadata for a symbol."""
        return self.metadata.set(symbol, data)

    def delete_position_metadata(self, symbol: str) -> None:
        self.metadata.delete(symbol)

    def set_symbol_metadata_value(self, symbol: str, key: str, value: Any) -> TMetadata:
        """
        Set one value in a symbol's metadata.

        Set the initial metadata with set_symbol_metadata() first.

        Raises:
            MetadataNotInitialisedError: If the symbol has no metadata yet.
        """
        return self.metadata.set_value(symbol, key, value)
