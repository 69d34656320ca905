"""Engine configuration — thresholds, divisor range, weights and resolution limits."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

from texsizer.engine.constants import (
    COMBINED_DEFAULT_FAST_WEIGHT,
    COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
    COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
    DEFAULT_HIGH_QUALITY_THRESHOLD,
    DIMENSION_ALIGNMENT,
    MAX_SAMPLED_PIXELS,
    MIN_SAMPLED_DIMENSION,
)
from texsizer.engine.context import AnalysisStrategy
from texsizer.engine.formats import CompressionPlatform
from texsizer.utils.math_helpers import clamp01, floor_power_of_two


class Preset(str, enum.Enum):
    HIGH_QUALITY = "high_quality"
    QUALITY = "quality"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"
    MAXIMUM = "maximum"
    CUSTOM = "custom"


@dataclass(frozen=True)
class EngineConfig:
    """Read-only for the duration of a batch; safe to share across worker threads.

    Values are sanitized on construction rather than rejected: thresholds
    and weights are clamped, divisors snapped down to powers of two, and
    inverted ranges swapped.
    """

    strategy: AnalysisStrategy = AnalysisStrategy.COMBINED

    # Combined strategy weights
    fast_weight: float = COMBINED_DEFAULT_FAST_WEIGHT
    high_accuracy_weight: float = COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT
    perceptual_weight: float = COMBINED_DEFAULT_PERCEPTUAL_WEIGHT

    # Complexity thresholds: above high → min divisor, below low → max divisor
    high_complexity_threshold: float = 0.7
    low_complexity_threshold: float = 0.2

    # Divisor range (powers of two)
    min_divisor: int = 1
    max_divisor: int = 8

    # Output resolution
    min_resolution: int = 32
    max_resolution: int = 2048
    force_power_of_two: bool = True

    # Format prediction
    platform: CompressionPlatform = CompressionPlatform.AUTO
    use_high_quality_format_for_high_complexity: bool = True
    high_quality_complexity_threshold: float = DEFAULT_HIGH_QUALITY_THRESHOLD

    # Analysis sampling
    max_sampled_pixels: int = MAX_SAMPLED_PIXELS
    min_sampled_dimension: int = MIN_SAMPLED_DIMENSION

    # Worker pool size (None → executor default)
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.strategy, AnalysisStrategy):
            self._set("strategy", AnalysisStrategy(str(self.strategy).lower()))
        if not isinstance(self.platform, CompressionPlatform):
            self._set("platform", CompressionPlatform(str(self.platform).lower()))

        for name in ("fast_weight", "high_accuracy_weight", "perceptual_weight"):
            self._set(name, max(0.0, float(getattr(self, name))))

        high = clamp01(self.high_complexity_threshold)
        low = clamp01(self.low_complexity_threshold)
        if low > high:
            high, low = low, high
        self._set("high_complexity_threshold", high)
        self._set("low_complexity_threshold", low)
        self._set("high_quality_complexity_threshold", clamp01(self.high_quality_complexity_threshold))

        min_div = floor_power_of_two(max(1, int(self.min_divisor)))
        max_div = floor_power_of_two(max(1, int(self.max_divisor)))
        if min_div > max_div:
            min_div, max_div = max_div, min_div
        self._set("min_divisor", min_div)
        self._set("max_divisor", max_div)

        min_res = max(DIMENSION_ALIGNMENT, int(self.min_resolution))
        max_res = max(DIMENSION_ALIGNMENT, int(self.max_resolution))
        if min_res > max_res:
            min_res, max_res = max_res, min_res
        # Both bounds must be reachable by 4-aligned sizes
        min_res = -(-min_res // DIMENSION_ALIGNMENT) * DIMENSION_ALIGNMENT
        max_res = max(min_res, max_res // DIMENSION_ALIGNMENT * DIMENSION_ALIGNMENT)
        self._set("min_resolution", min_res)
        self._set("max_resolution", max_res)

        self._set("max_sampled_pixels", max(1, int(self.max_sampled_pixels)))
        self._set("min_sampled_dimension", max(1, int(self.min_sampled_dimension)))
        if self.max_workers is not None:
            self._set("max_workers", max(1, int(self.max_workers)))

    def _set(self, name: str, value) -> None:
        object.__setattr__(self, name, value)

    def replace(self, **changes) -> EngineConfig:
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_preset(cls, preset: Preset | str, **overrides) -> EngineConfig:
        """Start from a named preset; keyword overrides win."""
        preset = Preset(preset) if not isinstance(preset, Preset) else preset
        values = dict(_PRESETS.get(preset, {}))
        values.update(overrides)
        return cls(**values)


_PRESETS: dict[Preset, dict] = {
    Preset.HIGH_QUALITY: {
        "strategy": AnalysisStrategy.COMBINED,
        "fast_weight": 0.1,
        "high_accuracy_weight": 0.5,
        "perceptual_weight": 0.4,
        "high_complexity_threshold": 0.3,
        "low_complexity_threshold": 0.1,
        "min_divisor": 1,
        "max_divisor": 2,
        "max_resolution": 2048,
        "min_resolution": 256,
    },
    Preset.QUALITY: {
        "strategy": AnalysisStrategy.COMBINED,
        "fast_weight": 0.2,
        "high_accuracy_weight": 0.5,
        "perceptual_weight": 0.3,
        "high_complexity_threshold": 0.5,
        "low_complexity_threshold": 0.15,
        "min_divisor": 1,
        "max_divisor": 4,
        "max_resolution": 2048,
        "min_resolution": 128,
    },
    Preset.BALANCED: {
        "strategy": AnalysisStrategy.COMBINED,
        "fast_weight": 0.3,
        "high_accuracy_weight": 0.5,
        "perceptual_weight": 0.2,
        "high_complexity_threshold": 0.7,
        "low_complexity_threshold": 0.2,
        "min_divisor": 1,
        "max_divisor": 8,
        "max_resolution": 2048,
        "min_resolution": 64,
    },
    Preset.AGGRESSIVE: {
        "strategy": AnalysisStrategy.FAST,
        "fast_weight": 0.5,
        "high_accuracy_weight": 0.3,
        "perceptual_weight": 0.2,
        "high_complexity_threshold": 0.8,
        "low_complexity_threshold": 0.3,
        "min_divisor": 2,
        "max_divisor": 8,
        "max_resolution": 2048,
        "min_resolution": 32,
    },
    Preset.MAXIMUM: {
        "strategy": AnalysisStrategy.FAST,
        "fast_weight": 0.6,
        "high_accuracy_weight": 0.3,
        "perceptual_weight": 0.1,
        "high_complexity_threshold": 0.9,
        "low_complexity_threshold": 0.4,
        "min_divisor": 2,
        "max_divisor": 16,
        "max_resolution": 2048,
        "min_resolution": 32,
    },
}
