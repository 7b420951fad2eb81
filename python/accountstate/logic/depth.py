"""
Depth (exposure) calculations.

Depth is the share of the available balance committed to open positions,
directly or through leverage.
"""

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from ..utils.numbers import to_fixed_number
from .pnl import ensure_non_zero_balance, ensure_number, get_unrealised_pnl

if TYPE_CHECKING:
    from ..state.position import Position

DEFAULT_QUOTE_ASSET = "USDT"
LEVERAGE_TYPE_CROSS = "cross"
LEVERAGE_TYPE_ISOLATED = "isolated"


@dataclass(frozen=True)
class PositionDepthState:
    """How much of the account one position exposes (figures rounded to 2 decimals)."""

    asset: str
    symbol: str
    position_amount: float
    estimated_value: float
    estimated_value_with_leverage: float
    position_depth: float
    position_depth_unrealised: float
    balance_remaining: float
    unrealised_pnl: float
    estimated_pnl_pct: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class DepthSummary:
    """How much of the account all positions expose together."""

    raw_depth_sum: float
    estimated_value_with_leverage: float
    unrealised_pnl: float
    cross_balance: float
    depth_without_pnl: float
    depth_with_pnl: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


def calculate_depth_for_position(
    asset: str,
    symbol: str,
    base_asset_balance: float,
    position_amount: float,
    entry_price: float,
    unrealised_pnl: float,
    total_net_unrealised_pnl: float,
    leverage: Optional[float],
) -> PositionDepthState:
    """
    Calculate depth for one position.

    Args:
        asset: Quote asset the balance is held in.
        symbol: Position symbol.
        base_asset_balance: Available balance.
        position_amount: Signed position quantity.
        entry_price: Position entry price.
        unrealised_pnl: Position unrealised PnL.
        total_net_unrealised_pnl: Unrealised PnL summed over all positions.
        leverage: Symbol leverage; None or 0 counts as 1.

    Returns:
        PositionDepthState.

    Raises:
        ZeroBalanceError: If base_asset_balance is zero.
    """
    balance = ensure_non_zero_balance("available balance", base_asset_balance)
    position_amount = ensure_number("position amount", position_amount)
    entry_price = ensure_number("entry price", entry_price)
    unrealised_pnl = ensure_number("unrealised pnl", unrealised_pnl)

    estimated_value = abs(position_amount * entry_price)
    estimated_value_with_leverage = abs(estimated_value / (leverage or 1))
    position_depth = estimated_value_with_leverage / balance * 100
    position_depth_unrealised = (
        (estimated_value_with_leverage - total_net_unrealised_pnl) / balance * 100
    )
    balance_remaining = balance - estimated_value_with_leverage

    if estimated_value_with_leverage:
        estimated_pnl_pct = unrealised_pnl / estimated_value_with_leverage * 100
    else:
        estimated_pnl_pct = 0.0

    return PositionDepthState(
        asset=asset,
        symbol=symbol,
        position_amount=position_amount,
        estimated_value=to_fixed_number(estimated_value),
        estimated_value_with_leverage=to_fixed_number(estimated_value_with_leverage),
        position_depth=to_fixed_number(position_depth),
        position_depth_unrealised=to_fixed_number(position_depth_unrealised),
        balance_remaining=to_fixed_number(balance_remaining),
        unrealised_pnl=to_fixed_number(unrealised_pnl),
        estimated_pnl_pct=to_fixed_number(estimated_pnl_pct),
    )


def calculate_depth_for_positions(
    balance_available: float,
    symbol_leverage_cache: Dict[str, float],
    positions: Optional[Sequence['Position']],
    quote_balance_asset: str = DEFAULT_QUOTE_ASSET,
    default_leverage: float = 1.0,
) -> List[PositionDepthState]:
    """
    Calculate depth for each position.

    Args:
        balance_available: Available balance.
        symbol_leverage_cache: Symbol -> leverage mapping.
        positions: Active positions (None is treated as no positions).
        quote_balance_asset: Quote asset name.
        default_leverage: Leverage for symbols missing from the cache.

    Returns:
        One PositionDepthState per position.
    """
    if not positions:
        return []

    total_net_unrealised_pnl = get_unrealised_pnl(positions)

    return [
        calculate_depth_for_position(
            quote_balance_asset,
            position.symbol,
            balance_available,
            position.asset_qty,
            position.position_price,
            position.value_upnl,
            total_net_unrealised_pnl,
            symbol_leverage_cache.get(position.symbol) or default_leverage,
        )
        for position in positions
    ]


def calculate_depth_summary_for_all_positions(
    balance: float,
    symbol_leverage_cache: Dict[str, float],
    positions: Optional[Sequence['Position']],
    quote_balance_asset: str = DEFAULT_QUOTE_ASSET,
    leverage_type: str = LEVERAGE_TYPE_CROSS,
    default_leverage: float = 1.0,
) -> DepthSummary:
    """
    Aggregate depth across all positions.

    For cross margin the unrealised PnL counts towards the balance backing the
    positions; for isolated margin it does not. depth_with_pnl is capped at 100.

    Args:
        balance: Wallet balance.
        symbol_leverage_cache: Symbol -> leverage mapping.
        positions: Active positions.
        quote_balance_asset: Quote asset name.
        leverage_type: "cross" or "isolated".
        default_leverage: Leverage for symbols missing from the cache.

    Returns:
        DepthSummary.

    Raises:
        ZeroBalanceError: If balance, or balance plus unrealised PnL, is zero.
    """
    if leverage_type not in (LEVERAGE_TYPE_CROSS, LEVERAGE_TYPE_ISOLATED):
        raise ValueError(f"Unknown leverage type: {leverage_type}")

    balance = ensure_non_zero_balance("balance", balance)
    depth_by_position = calculate_depth_for_positions(
        balance,
        symbol_leverage_cache,
        positions,
        quote_balance_asset,
        default_leverage,
    )

    raw_depth_sum = 0.0
    estimated_value_with_leverage = 0.0
    unrealised_pnl = 0.0
    for depth in depth_by_position:
        raw_depth_sum += depth.position_depth
        estimated_value_with_leverage += depth.estimated_value_with_leverage
        if leverage_type == LEVERAGE_TYPE_CROSS:
            unrealised_pnl += depth.unrealised_pnl

    cross_balance = ensure_non_zero_balance("cross balance", balance + unrealised_pnl)

    depth_without_pnl = estimated_value_with_leverage / balance * 100
    depth_with_pnl = estimated_value_with_leverage / cross_balance * 100

    return DepthSummary(
        raw_depth_sum=raw_depth_sum,
        estimated_value_with_leverage=estimated_value_with_leverage,
        unrealised_pnl=unrealised_pnl,
        cross_balance=to_fixed_number(cross_balance),
        depth_without_pnl=to_fixed_number(depth_without_pnl),
        depth_with_pnl=to_fixed_number(min(depth_with_pnl, 100)),
    )


def get_depth_percent_for_all_positions(
    positions: Sequence['Position'],
    wallet_balance: float,
    symbol_leverage_cache: Dict[str, float],
    quote_balance_asset: str = DEFAULT_QUOTE_ASSET,
    default_leverage: float = 1.0,
) -> float:
    """Cross-margin depth percentage (including PnL) across all positions."""
    summary = calculate_depth_summary_for_all_positions(
        wallet_balance,
        symbol_leverage_cache,
        positions,
        quote_balance_asset,
        LEVERAGE_TYPE_CROSS,
        default_leverage,
    )
    return summary.depth_with_pnl
