"""Numeric helpers shared by the scoring engine."""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def percentage(part: float, whole: float) -> int:
    """Whole-number percentage of ``part`` in ``whole``; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)
