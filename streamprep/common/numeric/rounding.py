# streamprep/common/numeric/rounding.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def round_even(value: float) -> int:
    """
    Round to the nearest even integer.
    H.264 with 4:2:0 chroma needs both output dimensions divisible by 2.
    """
    return round_half_away(value / 2) * 2
