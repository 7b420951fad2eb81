"""
Reporting layer.

This module implements:
- SessionSummary: Read-only session snapshot types
- Balance reports: build and submit account figures over HTTP
- DataFrame views of positions, orders and depth
"""

from .summary import (
    AccountSummary,
    ActivePositionSummary,
    PnlState,
    QuoteBalanceState,
    SessionSummary,
)
from .balance_report import (
    BalanceReporter,
    BalanceUpdateEvent,
    BalanceUpdateEventData,
    build_balance_update,
)
from .frames import depth_to_frame, orders_to_frame, positions_to_frame

__all__ = [
    "AccountSummary",
    "ActivePositionSummary",
    "PnlState",
    "QuoteBalanceState",
    "SessionSummary",
    "BalanceReporter",
    "BalanceUpdateEvent",
    "BalanceUpdateEventData",
    "build_balance_update",
    "depth_to_frame",
    "orders_to_frame",
    "positions_to_frame",
]
