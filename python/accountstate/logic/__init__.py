"""
Calculation layer.

Pure functions over position state:
- Unrealised PnL (per position, summed, as a percentage of balance)
- Depth / exposure per position and across the account
- Margin estimate for positions without a margin figure
"""

from .depth import (
    DepthSummary,
    PositionDepthState,
    calculate_depth_for_position,
    calculate_depth_for_positions,
    calculate_depth_summary_for_all_positions,
    get_depth_percent_for_all_positions,
)
from .pnl import (
    estimate_margin_value,
    get_unrealised_pnl,
    get_unrealised_pnl_for_position,
    get_unrealised_pnl_pct,
)

__all__ = [
    "DepthSummary",
    "PositionDepthState",
    "calculate_depth_for_position",
    "calculate_depth_for_positions",
    "calculate_depth_summary_for_all_positions",
    "get_depth_percent_for_all_positions",
    "estimate_margin_value",
    "get_unrealised_pnl",
    "get_unrealised_pnl_for_position",
    "get_unrealised_pnl_pct",
]
