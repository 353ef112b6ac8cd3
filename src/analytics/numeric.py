"""Rounding helpers matching the half-up convention of the reported metrics."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3), unlike the built-in banker's rounding.

    Inputs are expected to be non-negative, which holds for every count,
    rate, and duration reported here.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: float, whole: float) -> int:
    """Integer percentage of ``part`` in ``whole``; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))
