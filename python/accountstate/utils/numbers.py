"""
Numeric helpers.
"""

from decimal import Decimal
from typing import Any, Union

import numpy as np


def to_fixed_number(value: Union[str, float, int], decimal_places: int = 2) -> float:
    """
    Round a number (or numeric string) to a fixed number of decimal places.

    Args:
        value: Number or numeric string.
        decimal_places: Decimal places to keep.

    Returns:
        Rounded float.
    """
    return round(float(value), decimal_places)


def is_number(value: Any) -> bool:
    """Check that value is a real number (int, float, numpy scalar or Decimal) and not NaN."""
    if isinstance(value, Decimal):
        return not value.is_nan()
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return not np.isnan(value)
