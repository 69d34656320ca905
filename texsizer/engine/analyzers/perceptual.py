"""Perceptual strategy — local variance, edge density and share of detailed regions."""

from __future__ import annotations

from texsizer.engine.constants import (
    DEFAULT_COMPLEXITY_SCORE,
    EDGE_RANGE,
    MIN_ANALYSIS_DIMENSION,
    MIN_OPAQUE_PIXELS_FOR_ANALYSIS,
    PERCEPTUAL_BLOCK_SIZE,
    PERCEPTUAL_DETAIL_WEIGHT,
    PERCEPTUAL_EDGE_WEIGHT,
    PERCEPTUAL_VARIANCE_WEIGHT,
    VARIANCE_RANGE,
)
from texsizer.engine.context import AnalysisStrategy, ComplexityResult, ProcessedPixelData
from texsizer.engine.registry import analyzer
from texsizer.utils import image_math
from texsizer.utils.math_helpers import normalize_with_percentile


@analyzer(AnalysisStrategy.PERCEPTUAL, description="Block variance + edge density + detail density")
class PerceptualAnalyzer:
    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        if not data.is_well_formed:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "Pixel data does not match dimensions")
        if data.opaque_count == 0:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "No opaque pixels to analyze")
        if (
            data.width < MIN_ANALYSIS_DIMENSION
            or data.height < MIN_ANALYSIS_DIMENSION
            or data.opaque_count < MIN_OPAQUE_PIXELS_FOR_ANALYSIS
        ):
            return ComplexityResult(
                DEFAULT_COMPLEXITY_SCORE,
                f"Too small for perceptual analysis ({data.width}x{data.height}, "
                f"{data.opaque_count} opaque pixels)",
            )

        args = (data.grayscale, data.width, data.height, data.opaque_count)
        avg_variance = image_math.block_variance(*args, block_size=PERCEPTUAL_BLOCK_SIZE)
        avg_edge = image_math.edge_density(*args)
        detail = image_math.detail_density(*args, avg_variance=avg_variance)

        score = (
            PERCEPTUAL_VARIANCE_WEIGHT * normalize_with_percentile(avg_variance, *VARIANCE_RANGE)
            + PERCEPTUAL_EDGE_WEIGHT * normalize_with_percentile(avg_edge, *EDGE_RANGE)
            + PERCEPTUAL_DETAIL_WEIGHT * detail
        )
        return ComplexityResult(score)
