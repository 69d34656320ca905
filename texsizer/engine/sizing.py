"""Complexity → resolution decision.

High complexity keeps the small divisor (detail preserved), low complexity
takes the large one. Divisors are powers of two, so the interpolation
runs in log2 space; a linear blend of divisors would lean toward the
large end of the range.
"""

from __future__ import annotations

import math

from texsizer.engine.config import EngineConfig
from texsizer.engine.constants import DIMENSION_ALIGNMENT
from texsizer.engine.context import SizeDecision
from texsizer.utils.math_helpers import closest_power_of_two, floor_power_of_two, lerp, safe_log2

_THRESHOLD_EPSILON = 1e-6


def divisor_for(
    complexity: float,
    high_threshold: float,
    low_threshold: float,
    min_divisor: int,
    max_divisor: int,
) -> int:
    """Power-of-two divisor in [min_divisor, max_divisor] for a complexity score."""
    if math.isclose(high_threshold, low_threshold, abs_tol=_THRESHOLD_EPSILON):
        t = 0.5
    elif complexity >= high_threshold:
        t = 0.0
    elif complexity <= low_threshold:
        t = 1.0
    else:
        t = 1.0 - (complexity - low_threshold) / (high_threshold - low_threshold)

    log_divisor = lerp(safe_log2(min_divisor), safe_log2(max_divisor), t)
    divisor = 2 ** int(round(log_divisor))
    return max(min_divisor, min(max_divisor, divisor))


def _align(value: int, min_resolution: int, max_resolution: int) -> int:
    """Round up to a multiple of 4 without leaving [min, max]."""
    aligned = -(-value // DIMENSION_ALIGNMENT) * DIMENSION_ALIGNMENT
    if aligned > max_resolution:
        aligned = max_resolution // DIMENSION_ALIGNMENT * DIMENSION_ALIGNMENT
    return max(aligned, DIMENSION_ALIGNMENT)


def _snap_power_of_two(value: int, min_resolution: int, max_resolution: int) -> int:
    snapped = closest_power_of_two(value)
    if snapped < min_resolution and snapped * 2 <= max_resolution:
        snapped *= 2
    if snapped > max_resolution:
        snapped = floor_power_of_two(max_resolution)
    if snapped < min_resolution:
        # No power of two fits [min, max]; keep the aligned, clamped size
        return max(value, DIMENSION_ALIGNMENT)
    return max(snapped, DIMENSION_ALIGNMENT)


def compute_dimension(
    source: int,
    divisor: int,
    min_resolution: int,
    max_resolution: int,
    force_power_of_two: bool,
) -> int:
    size = max(min_resolution, min(max_resolution, source // max(1, divisor)))
    size = _align(size, min_resolution, max_resolution)
    if force_power_of_two:
        size = _snap_power_of_two(size, min_resolution, max_resolution)
    return size


def compute_dimensions(
    width: int,
    height: int,
    divisor: int,
    min_resolution: int,
    max_resolution: int,
    force_power_of_two: bool = True,
) -> tuple[int, int]:
    """Target (width, height): divided, clamped, 4-aligned, optionally power-of-two."""
    return (
        compute_dimension(width, divisor, min_resolution, max_resolution, force_power_of_two),
        compute_dimension(height, divisor, min_resolution, max_resolution, force_power_of_two),
    )


class ComplexityCalculator:
    """Binds the divisor and dimension rules to one engine configuration."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    def divisor(self, complexity: float) -> int:
        c = self.config
        return divisor_for(
            complexity,
            c.high_complexity_threshold,
            c.low_complexity_threshold,
            c.min_divisor,
            c.max_divisor,
        )

    def dimensions(self, width: int, height: int, divisor: int) -> tuple[int, int]:
        c = self.config
        return compute_dimensions(
            width, height, divisor, c.min_resolution, c.max_resolution, c.force_power_of_two
        )

    def decide(self, width: int, height: int, complexity: float) -> SizeDecision:
        divisor = self.divisor(complexity)
        new_width, new_height = self.dimensions(width, height, divisor)
        return SizeDecision(divisor=divisor, width=new_width, height=new_height)

    def decide_with_divisor(self, width: int, height: int, divisor: int) -> SizeDecision:
        """Size decision for a caller-supplied (pinned) divisor.

        The divisor is used exactly as given (floored at 1), not snapped to a
        power of two; only the resulting dimensions go through the usual
        clamp, alignment and power-of-two rules.
        """
        divisor = max(1, int(divisor))
        new_width, new_height = self.dimensions(width, height, divisor)
        return SizeDecision(divisor=divisor, width=new_width, height=new_height)


def decide_size(width: int, height: int, complexity: float, config: EngineConfig | None = None) -> SizeDecision:
    return ComplexityCalculator(config).decide(width, height, complexity)
