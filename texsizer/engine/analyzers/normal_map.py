"""Normal map analyzer — measures how much the encoded surface normal varies between neighbours.

Color statistics are meaningless for tangent-space normals: a bumpy normal
map can have almost no luminance variance. Instead each texel is decoded to
a unit vector and compared with its 4-connected neighbours.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from texsizer.engine.constants import (
    DEFAULT_COMPLEXITY_SCORE,
    MIN_NORMAL_MAP_DIMENSION,
    NORMAL_MAP_SAMPLE_STEP,
    NORMAL_MAP_VARIATION_MULTIPLIER,
    NORMAL_MIN_LENGTH,
)
from texsizer.engine.context import AnalysisStrategy, ComplexityResult, ProcessedPixelData
from texsizer.engine.registry import analyzer

_FLAT_NORMAL = np.array([0.0, 0.0, 1.0])


def decode_normals(rgb: NDArray[np.floating]) -> NDArray[np.float64]:
    """Map [0,1] RGB to unit vectors via 2c − 1.

    Degenerate encodings (mid-gray, length ~0) decode to the flat +Z normal.
    """
    n = np.asarray(rgb, dtype=np.float64) * 2.0 - 1.0
    length = np.linalg.norm(n, axis=-1, keepdims=True)
    degenerate = length < NORMAL_MIN_LENGTH
    unit = n / np.where(degenerate, 1.0, length)
    return np.where(degenerate, _FLAT_NORMAL, unit)


@analyzer(AnalysisStrategy.NORMAL_MAP, description="Neighbour normal-vector variation")
class NormalMapAnalyzer:
    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        width, height = data.width, data.height
        if width < MIN_NORMAL_MAP_DIMENSION or height < MIN_NORMAL_MAP_DIMENSION:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "Normal map too small to analyze")
        pixels = np.asarray(data.opaque_pixels)
        if pixels.ndim != 2 or len(pixels) != width * height:
            return ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "Pixel data does not match dimensions")

        normals = decode_normals(pixels.reshape(height, width, -1)[..., :3])

        step = NORMAL_MAP_SAMPLE_STEP
        center = normals[1:-1:step, 1:-1:step]
        neighbours = (
            normals[1:-1:step, 2::step],  # right
            normals[2::step, 1:-1:step],  # down
            normals[1:-1:step, 0:-2:step],  # left
            normals[0:-2:step, 1:-1:step],  # up
        )
        variation = sum(1.0 - np.sum(center * n, axis=-1) for n in neighbours) / 4.0
        mean_variation = float(variation.mean()) if variation.size else 0.0
        return ComplexityResult(mean_variation * NORMAL_MAP_VARIATION_MULTIPLIER)
