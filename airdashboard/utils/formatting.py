"""Number formatting shared by the services and the dashboard."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0):
    """Round halves away from zero for non-negative values (2.5 -> 3).

    Returns an ``int`` when ``digits`` is 0 and a ``float`` otherwise.
    """
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5)
    if digits == 0:
        return int(rounded)
    return rounded / factor


def format_number(num: float) -> str:
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    if isinstance(num, float) and num.is_integer():
        return str(int(num))
    return str(num)
