"""
DataFrame views of account state, for notebooks and log tables.
"""

from typing import TYPE_CHECKING, Iterable

import pandas as pd

from ..logic.depth import PositionDepthState

if TYPE_CHECKING:
    from ..state.orderbook import Order
    from ..state.position import Position

POSITION_COLUMNS = [
    'symbol', 'timestamp_ms', 'position_side', 'order_position_side', 'position_price',
    'asset_qty', 'value', 'value_upnl', 'margin_value', 'liquidation_price',
    'stop_loss_price', 'take_profit_price',
]

ORDER_COLUMNS = [
    'exchange_order_id', 'custom_order_id', 'symbol', 'order_side', 'position_side',
    'order_type', 'status', 'price', 'original_quantity', 'executed_quantity',
    'average_price', 'created_at_ms', 'updated_at_ms', 'reduce_only',
]

DEPTH_COLUMNS = [
    'asset', 'symbol', 'position_amount', 'estimated_value', 'estimated_value_with_leverage',
    'position_depth', 'position_depth_unrealised', 'balance_remaining', 'unrealised_pnl',
    'estimated_pnl_pct',
]


def positions_to_frame(positions: Iterable['Position']) -> pd.DataFrame:
    """One row per position, with a UTC 'time' column derived from timestamp_ms."""
    df = pd.DataFrame([position.to_dict() for position in positions], columns=POSITION_COLUMNS)
    df['time'] = pd.to_datetime(df['timestamp_ms'], unit='ms', utc=True)
    return df


def orders_to_frame(orders: Iterable['Order']) -> pd.DataFrame:
    """One row per order."""
    return pd.DataFrame([order.to_dict() for order in orders], columns=ORDER_COLUMNS)


def depth_to_frame(depths: Iterable[PositionDepthState]) -> pd.DataFrame:
    """One row per position depth state."""
    return pd.DataFrame([depth.to_dict() for depth in depths], columns=DEPTH_COLUMNS)
