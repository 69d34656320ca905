"""Math helpers — percentile normalization, clamping, power-of-two snapping. No engine imports."""

from __future__ import annotations

import math


def clamp01(value: float) -> float:
    """Clamp a float into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


def normalize_with_percentile(value: float, low: float, high: float) -> float:
    """Linear rescale of ``value`` against an expected [low, high] range.

    Values at or below ``low`` map to 0, at or above ``high`` to 1.
    """
    if value <= low:
        return 0.0
    if value >= high:
        return 1.0
    return float((value - low) / (high - low))


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def closest_power_of_two(value: int) -> int:
    """Nearest power of two; ties resolve to the larger one."""
    if value <= 1:
        return 1
    lower = 1 << (int(value).bit_length() - 1)
    upper = lower << 1
    return lower if value - lower < upper - value else upper


def floor_power_of_two(value: int) -> int:
    """Largest power of two that is <= value (1 for anything below 2)."""
    if value < 2:
        return 1
    return 1 << (int(value).bit_length() - 1)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def safe_log2(value: float) -> float:
    """log2 that treats non-positive input as 1 (exponent 0)."""
    return math.log2(value) if value > 0 else 0.0
