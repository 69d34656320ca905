"""Tests for compressed format prediction."""

import pytest

from texsizer.engine.formats import (
    CompressionPlatform,
    FormatSelector,
    PinnedFormat,
    TextureFormat,
    estimate_memory,
    resolve_pinned_format,
)


def test_desktop_table():
    s = FormatSelector(CompressionPlatform.DESKTOP)
    assert s.predict_format(True, 0.1, False) == TextureFormat.BC5
    assert s.predict_format(False, 0.9, False) == TextureFormat.BC7
    assert s.predict_format(False, 0.3, True) == TextureFormat.DXT5
    assert s.predict_format(False, 0.3, False) == TextureFormat.DXT1


def test_mobile_table():
    s = FormatSelector(CompressionPlatform.MOBILE)
    assert s.predict_format(True, 0.1, False) == TextureFormat.ASTC_4X4
    assert s.predict_format(False, 0.9, True) == TextureFormat.ASTC_4X4
    assert s.predict_format(False, 0.3, True) == TextureFormat.ASTC_6X6


def test_auto_platform_is_desktop():
    assert FormatSelector().platform is CompressionPlatform.DESKTOP


def test_high_quality_threshold_and_disable():
    s = FormatSelector(CompressionPlatform.DESKTOP, high_quality_threshold=0.5)
    assert s.predict_format(False, 0.5, False) == TextureFormat.BC7
    assert s.predict_format(False, 0.49, False) == TextureFormat.DXT1

    off = FormatSelector(CompressionPlatform.DESKTOP, use_high_quality_for_complex=False)
    assert off.predict_format(False, 0.99, False) == TextureFormat.DXT1
    assert off.predict_format(False, 0.99, True) == TextureFormat.DXT5


@pytest.mark.parametrize("fmt,expected", [
    (TextureFormat.DXT1, 524288),
    (TextureFormat.DXT5, 1048576),
    (TextureFormat.BC7, 1048576),
    (TextureFormat.ASTC_8X8, 262144),
])
def test_estimate_memory(fmt, expected):
    assert estimate_memory(1024, 1024, fmt) == expected


def test_resolve_pinned_format():
    assert resolve_pinned_format(PinnedFormat.AUTO) is None
    assert resolve_pinned_format(PinnedFormat.BC7) is TextureFormat.BC7
    assert resolve_pinned_format("ASTC_4x4") is TextureFormat.ASTC_4X4
