"""Rounding and bounding helpers shared by the rating stages."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity.

    Stored ratings were produced with this convention, so Python's
    round-half-even must not be used here.
    """

    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def bounded_round(value: float, lower: int = 0, upper: int = 99) -> int:
    return int(clamp(round_half_up(value), lower, upper))
