"""
Account management.

Tracks wallet balance, the previous balance snapshot and cached counters.
"""

from dataclasses import dataclass


@dataclass
class Account:
    """Account aggregate state.

    Negative balances are valid (debt / margin call state) and are stored as-is.
    """

    balance: float = 0.0
    previous_balance: float = 0.0
    hedged_positions: int = 0  # Cached by AccountStateStore.get_total_active_positions()

    def store_previous_balance(self) -> None:
        """Copy the current balance into the previous-balance slot."""
        self.previous_balance = self.balance

    @property
    def balance_change(self) -> float:
        """Change between the previous balance snapshot and now."""
        return self.balance - self.previous_balance

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'balance': self.balance,
            'previous_balance': self.previous_balance,
            'hedged_positions': self.hedged_positions,
        }
