"""Rounding and clamping helpers for metric scores."""
from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from minus infinity."""
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int) -> float:
    factor = 10 ** digits
    return round_half_up(value * factor) / factor


def clamp_score(value: float) -> int:
    """Round a raw score and clamp it to [0, 100]. NaN scores as 0."""
    if value is None or math.isnan(value):
        return 0
    if math.isinf(value):
        return 100 if value > 0 else 0
    return max(0, min(100, round_half_up(value)))


def linear_score(value: float, zero_at: float, full_at: float) -> float:
    """Linear ramp that is 0 at ``zero_at`` and 100 at ``full_at`` (unclamped)."""
    if full_at == zero_at:
        return 100.0 if value >= full_at else 0.0
    return (value - zero_at) / (full_at - zero_at) * 100.0
