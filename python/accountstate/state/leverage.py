"""
Leverage cache.

Keeps the last known leverage per symbol. Hedge-mode accounts may run different
buy and sell leverage on the same symbol, so both sides are kept; whenever only
one figure is known it is used for both.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .orderbook import OrderSide
from .position import PositionSide

logger = logging.getLogger(__name__)


@dataclass
class SymbolLeverage:
    """Buy/sell leverage pair for one symbol."""

    buy: Optional[float] = None
    sell: Optional[float] = None

    def for_side(self, side: OrderSide) -> Optional[float]:
        """Leverage for one side, falling back to the other side when unknown."""
        if side == OrderSide.BUY:
            return self.buy if self.buy is not None else self.sell
        return self.sell if self.sell is not None else self.buy


LeverageSide = Union[OrderSide, PositionSide, str]


def _to_order_side(side: LeverageSide) -> OrderSide:
    # LONG exposure is opened by buying, SHORT by selling
    if side in (PositionSide.LONG, OrderSide.BUY):
        return OrderSide.BUY
    if side in (PositionSide.SHORT, OrderSide.SELL):
        return OrderSide.SELL
    raise ValueError(f"Unknown leverage side: {side!r}")


class LeverageCache:
    """Leverage table keyed by symbol. Most recent write wins."""

    def __init__(self):
        """Initialize leverage cache."""
        self.leverage: Dict[str, SymbolLeverage] = {}

    def set(self, symbol: str, leverage: float) -> None:
        """Set the same leverage for both sides of a symbol."""
        self.leverage[symbol] = SymbolLeverage(buy=leverage, sell=leverage)
        logger.debug(f"Leverage set: {symbol}={leverage}")

    def set_side(self, symbol: str, side: LeverageSide, leverage: float) -> None:
        """Set leverage for one side of a symbol."""
        entry = self.leverage.setdefault(symbol, SymbolLeverage())
        if _to_order_side(side) == OrderSide.BUY:
            entry.buy = leverage
        else:
            entry.sell = leverage
        logger.debug(f"Leverage set: {symbol} {_to_order_side(side).value}={leverage}")

    def get(self, symbol: str) -> Optional[float]:
        """Get the symmetric leverage for a symbol (buy side first), None if unknown."""
        entry = self.leverage.get(symbol)
        if entry is None:
            return None
        return entry.for_side(OrderSide.BUY)

    def get_side(self, symbol: str, side: LeverageSide) -> Optional[float]:
        """Get leverage for one side of a symbol, None if unknown."""
        entry = self.leverage.get(symbol)
        if entry is None:
            return None
        return entry.for_side(_to_order_side(side))

    def to_dict(self) -> Dict[str, float]:
        """Dump symbol -> symmetric leverage for all known symbols."""
        return {
            symbol: value
            for symbol, value in ((symbol, self.get(symbol)) for symbol in self.leverage)
            if value is not None
        }
