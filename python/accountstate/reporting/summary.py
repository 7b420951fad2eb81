"""
Session summary.

A read-only snapshot of balance, positions and PnL since a starting balance.
"""

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..state.position import Position


@dataclass(frozen=True)
class ActivePositionSummary:
    """An active position together with its symbol's current leverage."""

    position: 'Position'
    leverage: Optional[float]

    def to_dict(self) -> dict:
        """Convert to dictionary (position fields flattened)."""
        data = self.position.to_dict()
        data['leverage'] = self.leverage
        return data


@dataclass(frozen=True)
class QuoteBalanceState:
    """Balance figures in the quote currency."""

    started_with: float
    now: float
    quote_margin_locked_sum: float
    now_incl_locked: float
    now_if_everything_closed_at_market: float


@dataclass(frozen=True)
class PnlState:
    """Realised and unrealised PnL since the session started."""

    realised_pnl: float
    unrealised_pnl: float


@dataclass(frozen=True)
class AccountSummary:
    quote_balance_state: QuoteBalanceState
    pnl_state: PnlState


@dataclass(frozen=True)
class SessionSummary:
    """Loggable summary of the account session."""

    account: AccountSummary
    active_position_upnl_sum: float
    active_positions: List[ActivePositionSummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'active_positions': [position.to_dict() for position in self.active_positions],
            'active_position_upnl_sum': self.active_position_upnl_sum,
            'account': asdict(self.account),
        }
