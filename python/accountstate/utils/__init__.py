"""
Utility helpers.
"""

from .dates import TimeDifference, get_time_diff_in_dates
from .errors import sanitise_error
from .logger import configure_logging, setup_logger
from .numbers import is_number, to_fixed_number

__all__ = [
    "TimeDifference",
    "get_time_diff_in_dates",
    "sanitise_error",
    "configure_logging",
    "setup_logger",
    "is_number",
    "to_fixed_number",
]
