"""Numeric helpers shared by the scoring services.

Percentages are computed on exact rationals so that results such as
2/3 -> 67 and 1/8 -> 13 never depend on float representation.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

LN2 = math.log(2)


def round_half_up(value: float | Fraction) -> int:
    """Round to the nearest integer, halves away from zero."""
    if isinstance(value, Fraction):
        if value >= 0:
            return math.floor(value + Fraction(1, 2))
        return -math.floor(-value + Fraction(1, 2))
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(numerator: int, denominator: int) -> int:
    """Integer percentage of numerator/denominator; 0 for an empty denominator."""
    if denominator <= 0:
        return 0
    return round_half_up(Fraction(numerator * 100, denominator))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(value, high))


def time_decay_weight(days: float, half_life_days: float = 30) -> float:
    """Exponential decay weight (0.0 to 1.0).

    Zero days ago is weight 1.0; every half-life halves it. Negative gaps
    (commit dates after the reference time) count as zero days.
    """
    if days <= 0:
        return 1.0
    return math.exp(-LN2 * days / half_life_days)
