"""
Profit and loss calculations.
"""

from typing import TYPE_CHECKING, Iterable, Optional

import pandas as pd

from ..exceptions import InvalidNumberError, ZeroBalanceError
from ..utils.numbers import to_fixed_number

if TYPE_CHECKING:
    from ..state.position import Position


def ensure_number(name: str, value: float) -> float:
    """
    Reject NaN and non-numeric inputs before they reach a report.

    Args:
        name: Input name, for the error message.
        value: Input value.

    Returns:
        The value as float.

    Raises:
        InvalidNumberError: If value is None, NaN or not numeric.
    """
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidNumberError(f"{name} is not a number: {value!r}") from e
    if pd.isna(number):
        raise InvalidNumberError(f"{name} is NaN")
    return number


def ensure_non_zero_balance(name: str, balance: float) -> float:
    """
    Guard a balance used as a divisor.

    Raises:
        ZeroBalanceError: If the balance is zero.
        InvalidNumberError: If the balance is NaN.
    """
    balance = ensure_number(name, balance)
    if balance == 0:
        raise ZeroBalanceError(f"Cannot calculate a percentage of a zero {name}")
    return balance


def get_unrealised_pnl_for_position(
    last_price: float,
    asset_qty: float,
    entry_price: float,
) -> float:
    """
    Mark-to-market PnL for a position.

    Works for both sides: short positions carry a negative quantity.

    Args:
        last_price: Latest observed price.
        asset_qty: Signed position quantity.
        entry_price: Position entry price.

    Returns:
        Unrealised PnL in quote currency.
    """
    return float(asset_qty) * (float(last_price) - float(entry_price))


def get_unrealised_pnl(positions: Iterable['Position']) -> float:
    """Sum of unrealised PnL across positions."""
    return sum((float(position.value_upnl) for position in positions), 0.0)


def get_unrealised_pnl_pct(positions: Iterable['Position'], wallet_balance: float) -> float:
    """
    Unrealised PnL as a percentage of wallet balance, rounded to 2 decimals.

    Raises:
        ZeroBalanceError: If wallet_balance is zero.
    """
    wallet_balance = ensure_non_zero_balance("wallet balance", wallet_balance)
    return to_fixed_number(get_unrealised_pnl(positions) / wallet_balance * 100)


def estimate_margin_value(
    notional_value: float,
    leverage: Optional[float],
    default_leverage: float = 1.0,
) -> float:
    """
    Estimate the margin locked by a position.

    Adapters that receive positions without a margin figure use this. When the
    symbol's leverage is unknown, default_leverage is used as the divisor.

    Args:
        notional_value: Position notional value.
        leverage: Known leverage for the symbol, or None.
        default_leverage: Leverage assumed when unknown.

    Returns:
        Absolute margin value.
    """
    divisor = leverage if leverage else default_leverage
    if not divisor:
        raise ZeroBalanceError("Cannot estimate margin with a zero leverage")
    return abs(notional_value / divisor)
