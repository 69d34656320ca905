"""Engine data model — pixel buffers in, complexity and size decisions out.

PixelBuffer          → caller-owned RGBA input, never mutated
ProcessedPixelData   → per-analysis derived arrays, discarded after one call
ComplexityResult     → analyzer output
SizeDecision         → divisor + target resolution
TextureDecision      → everything the caller needs for one image
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple

import numpy as np
from numpy.typing import NDArray

from texsizer.engine.formats import PinnedFormat, TextureFormat
from texsizer.utils.math_helpers import clamp01

if TYPE_CHECKING:
    from PIL import Image


class AnalysisStrategy(str, enum.Enum):
    FAST = "fast"
    HIGH_ACCURACY = "high_accuracy"
    PERCEPTUAL = "perceptual"
    COMBINED = "combined"
    NORMAL_MAP = "normal_map"


@dataclass
class PixelBuffer:
    """RGBA float pixels in [0, 1], stored flat as (width*height, 4)."""

    width: int
    height: int
    pixels: NDArray[np.float32] = field(default_factory=lambda: np.empty((0, 4), dtype=np.float32))

    def __post_init__(self) -> None:
        arr = np.asarray(self.pixels, dtype=np.float32)
        if arr.size == 0:
            arr = np.empty((0, 4), dtype=np.float32)
        elif arr.ndim != 2 or arr.shape[-1] != 4:
            arr = arr.reshape(-1, 4)
        self.pixels = arr

    @property
    def pixel_count(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.pixel_count == 0

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Build a buffer from a Pillow image (any mode, converted to RGBA)."""
        rgba = image.convert("RGBA")
        arr = np.asarray(rgba, dtype=np.float32) / 255.0
        return cls(width=rgba.width, height=rgba.height, pixels=arr.reshape(-1, 4))


@dataclass
class ProcessedPixelData:
    """Pixel data ready for complexity analysis.

    ``grayscale`` marks transparent pixels with a negative sentinel;
    ``opaque_pixels`` holds zeroed RGBA at the same positions.
    """

    width: int
    height: int
    grayscale: NDArray[np.float32]
    opaque_pixels: NDArray[np.float32]
    opaque_count: int
    is_normal_map: bool = False
    is_emission: bool = False

    @property
    def is_well_formed(self) -> bool:
        total = self.width * self.height
        return (
            self.width > 0
            and self.height > 0
            and len(self.grayscale) == total
            and len(self.opaque_pixels) == total
        )


def _summary_for(score: float) -> str:
    if score < 0.2:
        return "Very low complexity - can be heavily compressed"
    if score < 0.4:
        return "Low complexity - suitable for compression"
    if score < 0.6:
        return "Medium complexity - moderate compression recommended"
    if score < 0.8:
        return "High complexity - light compression only"
    return "Very high complexity - minimal compression recommended"


@dataclass(frozen=True)
class ComplexityResult:
    """Normalized complexity score in [0, 1] plus a human-readable rationale."""

    score: float
    summary: str = ""

    def __post_init__(self) -> None:
        score = clamp01(self.score)
        object.__setattr__(self, "score", score)
        if not self.summary:
            object.__setattr__(self, "summary", _summary_for(score))


@dataclass(frozen=True)
class SizeDecision:
    divisor: int
    width: int
    height: int


class GlcmFeatures(NamedTuple):
    contrast: float
    homogeneity: float
    energy: float


@dataclass(frozen=True)
class PinnedSettings:
    """Manual settings that bypass analysis for one texture."""

    divisor: int = 1
    format: PinnedFormat = PinnedFormat.AUTO
    skip: bool = False


@dataclass
class BatchItem:
    """One image submitted to the batch orchestrator."""

    pixels: PixelBuffer
    is_normal_map: bool = False
    is_emission: bool = False
    pinned: PinnedSettings | None = None
    # None → evaluate the default significant-alpha predicate on the buffer
    has_alpha: bool | None = None


@dataclass(frozen=True)
class TextureDecision:
    complexity: ComplexityResult
    size: SizeDecision
    format: TextureFormat
    source_width: int
    source_height: int
    estimated_bytes: int = 0
    pinned: bool = False

    @property
    def summary(self) -> str:
        return (
            f"Complexity: {self.complexity.score:.0%}, "
            f"Divisor: {self.size.divisor}x, "
            f"Target: {self.size.width}x{self.size.height} ({self.format.value})"
        )
