"""
Position management.

Keeps one cached position per symbol and per position side (LONG/SHORT).
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from ..utils.numbers import is_number

logger = logging.getLogger(__name__)


class PositionSide(str, Enum):
    """Directional side a stored position represents."""
    LONG = "LONG"
    SHORT = "SHORT"


class OrderPositionSide(str, Enum):
    """Position an order targets (BOTH/NONE for one-way trading)."""
    LONG = "LONG"
    SHORT = "SHORT"
    BOTH = "BOTH"
    NONE = "NONE"


@dataclass
class Position:
    """Cached futures position state.

    asset_qty is signed: short positions carry a negative quantity, which lets
    the unrealised PnL formula work for both sides without branching.
    """

    symbol: str
    timestamp_ms: int
    position_side: PositionSide
    order_position_side: OrderPositionSide
    position_price: float  # Entry price
    asset_qty: float
    value: float  # Notional value
    value_upnl: float = 0.0  # Unrealised PnL in quote currency
    margin_value: float = 0.0  # Margin allocated to the position, considering leverage
    liquidation_price: float = 0.0
    stop_loss_price: Optional[float] = None
    take_profit_price: Optional[float] = None

    @property
    def is_active(self) -> bool:
        """A position with a non-zero quantity is active."""
        return is_number(self.asset_qty) and self.asset_qty != 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = asdict(self)
        data['position_side'] = PositionSide(self.position_side).value
        data['order_position_side'] = OrderPositionSide(self.order_position_side).value
        return data


SideLike = Union[PositionSide, str]


class PositionManager:
    """Position table keyed by symbol, then position side.

    Reading a symbol for the first time creates an empty record for it (all
    sides absent). Writes are unconditional overwrites of one slot.
    """

    def __init__(self):
        """Initialize position manager."""
        self.positions: Dict[str, Dict[PositionSide, Optional[Position]]] = {}

    def _ensure_symbol(self, symbol: str) -> Dict[PositionSide, Optional[Position]]:
        if symbol not in self.positions:
            self.positions[symbol] = {PositionSide.LONG: None, PositionSide.SHORT: None}
        return self.positions[symbol]

    def get_position(self, symbol: str, side: SideLike) -> Optional[Position]:
        """
        Get the stored position for a symbol and side.

        Args:
            symbol: Symbol.
            side: Position side.

        Returns:
            Position if stored, None otherwise.
        """
        return self._ensure_symbol(symbol).get(PositionSide(side))

    def set_position(self, symbol: str, side: SideLike, position: Position) -> None:
        """
        Overwrite the position stored for a symbol and side.

        Args:
            symbol: Symbol.
            side: Position side.
            position: New position state.
        """
        self._ensure_symbol(symbol)[PositionSide(side)] = position
        logger.debug(
            f"Position set: {symbol} {PositionSide(side).value}, "
            f"qty={position.asset_qty}, price={position.position_price}"
        )

    def delete_position(self, symbol: str, side: SideLike) -> None:
        """
        Clear one side of a symbol. The opposite side is untouched.

        Args:
            symbol: Symbol.
            side: Position side.
        """
        self._ensure_symbol(symbol)[PositionSide(side)] = None
        logger.debug(f"Position deleted: {symbol} {PositionSide(side).value}")

    def is_active(self, symbol: str, side: SideLike) -> bool:
        """Check if the slot holds a position with a non-zero quantity."""
        position = self.get_position(symbol, side)
        return position is not None and position.is_active

    def get_all_active(self) -> List[Position]:
        """Get all positions with a non-zero quantity, across all symbols and sides."""
        return [
            position
            for sides in self.positions.values()
            for position in sides.values()
            if position is not None and position.is_active
        ]

    def count_active(self) -> Dict[str, int]:
        """
        Count active positions.

        Returns:
            Dictionary with 'total' (active symbol/side slots) and 'total_hedged'
            (symbols with both LONG and SHORT active).
        """
        total = 0
        total_hedged = 0
        for symbol, sides in self.positions.items():
            active_sides = sum(
                1 for position in sides.values()
                if position is not None and position.is_active
            )
            total += active_sides
            if active_sides == 2:
                logger.info(f"{symbol} has a long and short position!")
                total_hedged += 1
        return {'total': total, 'total_hedged': total_hedged}

    def to_dict(self) -> dict:
        """Convert to dictionary (for log dumps)."""
        return {
            symbol: {
                side.value: position.to_dict() if position is not None else None
                for side, position in sides.items()
            }
            for symbol, sides in self.positions.items()
        }
