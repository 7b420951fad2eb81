"""
Date helpers.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeDifference:
    """Absolute time difference expressed in hours, minutes and seconds."""

    hours: float
    minutes: float
    seconds: float


def get_time_diff_in_dates(old_date: datetime, new_date: datetime) -> TimeDifference:
    """
    Get the absolute difference between two datetimes.

    Each field expresses the full difference in that unit (e.g. 90 seconds is
    0.03 hours, 1.5 minutes, 90 seconds), not a broken-down clock value.

    Args:
        old_date: First datetime.
        new_date: Second datetime.

    Returns:
        TimeDifference.
    """
    seconds = abs((new_date - old_date).total_seconds())
    return TimeDifference(
        hours=round(seconds / 3600, 2),
        minutes=round(seconds / 60, 1),
        seconds=round(seconds),
    )
