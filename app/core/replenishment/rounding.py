"""Rounding policy shared by every analytics output.

Stock quantities are always rounded up; percentages and displayed demand
use ordinary (half-up) rounding. Python's round() is banker's rounding and
is not used here.
"""

from __future__ import annotations

import math

# Float noise below this is trimmed before rounding, so that an exact
# reconstruction such as 1.65 * (50 / 1.65) == 50.000000000000007 stays 50.
_EPSILON = 1e-6


def ceil_quantity(value: float) -> int:
    return max(int(math.ceil(value - _EPSILON)), 0)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    if value >= 0:
        return math.floor(value * factor + 0.5 + _EPSILON * factor) / factor
    return -math.floor(-value * factor + 0.5 + _EPSILON * factor) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value, 0))
