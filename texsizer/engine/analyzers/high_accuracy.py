"""High-accuracy strategy — DCT high-frequency energy, GLCM texture features and entropy."""

from __future__ import annotations

import math

from texsizer.engine.constants import (
    CONTRAST_RANGE,
    DEFAULT_COMPLEXITY_SCORE,
    ENTROPY_RANGE,
    HIGH_ACCURACY_CONTRAST_WEIGHT,
    HIGH_ACCURACY_DCT_WEIGHT,
    HIGH_ACCURACY_ENERGY_WEIGHT,
    HIGH_ACCURACY_ENTROPY_WEIGHT,
    HIGH_ACCURACY_HOMOGENEITY_WEIGHT,
)
from texsizer.engine.context import AnalysisStrategy, ComplexityResult, ProcessedPixelData
from texsizer.engine.registry import analyzer
from texsizer.utils import image_math
from texsizer.utils.math_helpers import normalize_with_percentile


@analyzer(AnalysisStrategy.HIGH_ACCURACY, description="DCT high-frequency ratio + GLCM + entropy")
class HighAccuracyAnalyzer:
    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        if not data.is_well_formed:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "Pixel data does not match dimensions")
        if data.opaque_count == 0:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "No opaque pixels to analyze")

        args = (data.grayscale, data.width, data.height, data.opaque_count)
        dct_ratio = image_math.dct_high_frequency_ratio(*args)
        glcm = image_math.glcm_features(*args)
        entropy = image_math.entropy(*args)

        score = (
            HIGH_ACCURACY_DCT_WEIGHT * dct_ratio
            + HIGH_ACCURACY_CONTRAST_WEIGHT * normalize_with_percentile(glcm.contrast, *CONTRAST_RANGE)
            + HIGH_ACCURACY_HOMOGENEITY_WEIGHT * (1.0 - glcm.homogeneity)
            + HIGH_ACCURACY_ENERGY_WEIGHT * (1.0 - math.sqrt(glcm.energy))
            + HIGH_ACCURACY_ENTROPY_WEIGHT * normalize_with_percentile(entropy, *ENTROPY_RANGE)
        )
        return ComplexityResult(score)
