"""Fast strategy — Sobel gradient, spatial frequency and color variance.

Cheap first-order statistics; good enough for flat albedo and UI textures.
"""

from __future__ import annotations

from texsizer.engine.constants import (
    COLOR_VARIANCE_RANGE,
    DEFAULT_COMPLEXITY_SCORE,
    FAST_COLOR_VARIANCE_WEIGHT,
    FAST_GRADIENT_WEIGHT,
    FAST_SPATIAL_FREQUENCY_WEIGHT,
    GRADIENT_RANGE,
    SPATIAL_FREQ_RANGE,
)
from texsizer.engine.context import AnalysisStrategy, ComplexityResult, ProcessedPixelData
from texsizer.engine.registry import analyzer
from texsizer.utils import image_math
from texsizer.utils.math_helpers import normalize_with_percentile


@analyzer(AnalysisStrategy.FAST, description="Sobel gradient + spatial frequency + color variance")
class FastAnalyzer:
    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        if not data.is_well_formed:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "Pixel data does not match dimensions")
        if data.opaque_count == 0:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "No opaque pixels to analyze")

        gradient = image_math.sobel_gradient(data.grayscale, data.width, data.height, data.opaque_count)
        spatial_freq = image_math.spatial_frequency(data.grayscale, data.width, data.height, data.opaque_count)
        color_var = image_math.color_variance(data.opaque_pixels, data.opaque_count)

        score = (
            FAST_GRADIENT_WEIGHT * normalize_with_percentile(gradient, *GRADIENT_RANGE)
            + FAST_SPATIAL_FREQUENCY_WEIGHT * normalize_with_percentile(spatial_freq, *SPATIAL_FREQ_RANGE)
            + FAST_COLOR_VARIANCE_WEIGHT * normalize_with_percentile(color_var, *COLOR_VARIANCE_RANGE)
        )
        return ComplexityResult(score)
