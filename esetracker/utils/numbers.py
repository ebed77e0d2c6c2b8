"""Numeric helpers."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, not banker's 2)."""
    return math.floor(value + 0.5)
