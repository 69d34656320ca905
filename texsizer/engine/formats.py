"""Compressed format policy — which block format a resized texture should be encoded in.

Only the choice is made here; encoding is the caller's job.
"""

from __future__ import annotations

import enum

from texsizer.engine.constants import DEFAULT_HIGH_QUALITY_THRESHOLD


class TextureFormat(str, enum.Enum):
    DXT1 = "DXT1"  # RGB, 4 bpp
    DXT5 = "DXT5"  # RGBA, 8 bpp
    BC5 = "BC5"  # two-channel, normal maps
    BC7 = "BC7"  # high-quality RGB(A)
    ASTC_4X4 = "ASTC_4x4"
    ASTC_6X6 = "ASTC_6x6"
    ASTC_8X8 = "ASTC_8x8"


class CompressionPlatform(str, enum.Enum):
    AUTO = "auto"
    DESKTOP = "desktop"
    MOBILE = "mobile"


class PinnedFormat(str, enum.Enum):
    """Format choice stored with pinned settings; AUTO defers to prediction."""

    AUTO = "auto"
    DXT1 = "DXT1"
    DXT5 = "DXT5"
    BC5 = "BC5"
    BC7 = "BC7"
    ASTC_4X4 = "ASTC_4x4"
    ASTC_6X6 = "ASTC_6x6"
    ASTC_8X8 = "ASTC_8x8"


_BITS_PER_PIXEL: dict[TextureFormat, float] = {
    TextureFormat.DXT1: 4.0,
    TextureFormat.DXT5: 8.0,
    TextureFormat.BC5: 8.0,
    TextureFormat.BC7: 8.0,
    TextureFormat.ASTC_4X4: 8.0,
    TextureFormat.ASTC_6X6: 3.56,
    TextureFormat.ASTC_8X8: 2.0,
}


def bits_per_pixel(fmt: TextureFormat) -> float:
    return _BITS_PER_PIXEL[fmt]


def estimate_memory(width: int, height: int, fmt: TextureFormat) -> int:
    """Approximate size in bytes of the top mip level in ``fmt``."""
    return int(width * height * bits_per_pixel(fmt) / 8.0)


def resolve_pinned_format(pinned: PinnedFormat) -> TextureFormat | None:
    """Concrete format for a pinned choice, None for AUTO."""
    pinned = PinnedFormat(pinned)
    if pinned is PinnedFormat.AUTO:
        return None
    return TextureFormat(pinned.value)


class FormatSelector:
    """Predicts the target compressed format from complexity, alpha and role."""

    def __init__(
        self,
        platform: CompressionPlatform = CompressionPlatform.AUTO,
        use_high_quality_for_complex: bool = True,
        high_quality_threshold: float = DEFAULT_HIGH_QUALITY_THRESHOLD,
    ) -> None:
        # Offline pipelines build for desktop unless told otherwise
        self.platform = CompressionPlatform.DESKTOP if platform is CompressionPlatform.AUTO else platform
        self.use_high_quality_for_complex = use_high_quality_for_complex
        self.high_quality_threshold = high_quality_threshold

    def is_high_complexity(self, complexity: float) -> bool:
        return self.use_high_quality_for_complex and complexity >= self.high_quality_threshold

    def predict_format(self, is_normal_map: bool, complexity: float, has_alpha: bool) -> TextureFormat:
        if self.platform is CompressionPlatform.MOBILE:
            return self._predict_mobile(is_normal_map, complexity)
        return self._predict_desktop(is_normal_map, complexity, has_alpha)

    def _predict_desktop(self, is_normal_map: bool, complexity: float, has_alpha: bool) -> TextureFormat:
        if is_normal_map:
            return TextureFormat.BC5
        if self.is_high_complexity(complexity):
            return TextureFormat.BC7
        return TextureFormat.DXT5 if has_alpha else TextureFormat.DXT1

    def _predict_mobile(self, is_normal_map: bool, complexity: float) -> TextureFormat:
        # ASTC always carries alpha, so only block size varies
        if is_normal_map or self.is_high_complexity(complexity):
            return TextureFormat.ASTC_4X4
        return TextureFormat.ASTC_6X6
