"""Combined strategy — weighted blend of the Fast, HighAccuracy and Perceptual scores."""

from __future__ import annotations

import logging

from texsizer.engine.analyzers.fast import FastAnalyzer
from texsizer.engine.analyzers.high_accuracy import HighAccuracyAnalyzer
from texsizer.engine.analyzers.perceptual import PerceptualAnalyzer
from texsizer.engine.constants import (
    COMBINED_DEFAULT_FAST_WEIGHT,
    COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
    COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
    ZERO_WEIGHT_THRESHOLD,
)
from texsizer.engine.context import AnalysisStrategy, ComplexityResult, ProcessedPixelData
from texsizer.engine.registry import analyzer

logger = logging.getLogger(__name__)


@analyzer(AnalysisStrategy.COMBINED, description="Weighted average of fast, high-accuracy and perceptual")
class CombinedAnalyzer:
    def __init__(
        self,
        fast_weight: float = COMBINED_DEFAULT_FAST_WEIGHT,
        high_accuracy_weight: float = COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
        perceptual_weight: float = COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
    ) -> None:
        self.fast = FastAnalyzer()
        self.high_accuracy = HighAccuracyAnalyzer()
        self.perceptual = PerceptualAnalyzer()
        self.fast_weight = fast_weight
        self.high_accuracy_weight = high_accuracy_weight
        self.perceptual_weight = perceptual_weight

    @property
    def total_weight(self) -> float:
        return self.fast_weight + self.high_accuracy_weight + self.perceptual_weight

    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        fast = self.fast.analyze(data).score
        high_acc = self.high_accuracy.analyze(data).score
        perceptual = self.perceptual.analyze(data).score

        total = self.total_weight
        if total < ZERO_WEIGHT_THRESHOLD:
            logger.debug("Combined weights sum to %.6f, using equal weights", total)
            return ComplexityResult(
                (fast + high_acc + perceptual) / 3.0,
                "Combined analysis with equal weights (all weights were zero)",
            )

        combined = (
            fast * self.fast_weight
            + high_acc * self.high_accuracy_weight
            + perceptual * self.perceptual_weight
        ) / total
        return ComplexityResult(combined)
