"""Pixel preprocessing — alpha extraction, grayscale conversion, analysis-resolution sampling."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from texsizer.engine.constants import (
    ALPHA_THRESHOLD,
    LUMA_B,
    LUMA_G,
    LUMA_R,
    MAX_SAMPLED_PIXELS,
    MIN_SAMPLED_DIMENSION,
    SIGNIFICANT_ALPHA_CUTOFF,
    SIGNIFICANT_ALPHA_FRACTION,
    TRANSPARENT_MARKER,
)
from texsizer.engine.context import PixelBuffer, ProcessedPixelData

_LUMA = np.array([LUMA_R, LUMA_G, LUMA_B], dtype=np.float32)


def _as_rgba(pixels: NDArray[np.floating]) -> NDArray[np.float32]:
    arr = np.asarray(pixels, dtype=np.float32)
    if arr.size == 0:
        return np.empty((0, 4), dtype=np.float32)
    return arr.reshape(-1, 4)


def is_transparent(values: NDArray[np.floating] | float) -> NDArray[np.bool_] | bool:
    """True where a grayscale value carries the transparent marker."""
    return np.asarray(values) < 0.0


def to_grayscale(pixels: NDArray[np.floating]) -> NDArray[np.float32]:
    """Rec. 709 luminance of every pixel, alpha ignored."""
    rgba = _as_rgba(pixels)
    return (rgba[:, :3] @ _LUMA).astype(np.float32)


def extract_opaque(
    pixels: NDArray[np.floating],
    width: int,
    height: int,
) -> tuple[NDArray[np.float32], NDArray[np.float32], int]:
    """Split pixels into opaque RGBA and sentinel-marked luminance, keeping 2-D layout.

    Returns (opaque_rgba, grayscale, opaque_count). Transparent pixels
    become all-zero RGBA and ``TRANSPARENT_MARKER`` in grayscale; both
    arrays keep the input length.
    """
    rgba = _as_rgba(pixels)
    opaque = rgba[:, 3] >= ALPHA_THRESHOLD

    opaque_rgba = np.where(opaque[:, None], rgba, np.float32(0.0)).astype(np.float32)
    grayscale = np.where(opaque, rgba[:, :3] @ _LUMA, TRANSPARENT_MARKER).astype(np.float32)
    return opaque_rgba, grayscale, int(np.count_nonzero(opaque))


def sample_if_needed(
    pixels: NDArray[np.floating],
    width: int,
    height: int,
    max_pixels: int = MAX_SAMPLED_PIXELS,
    min_dimension: int = MIN_SAMPLED_DIMENSION,
) -> tuple[NDArray[np.floating], int, int]:
    """Nearest-neighbour downsample so that width*height stays near ``max_pixels``.

    Buffers already within the pixel limit are returned as the same object.
    Sampling is pure index remapping, so it is deterministic.
    """
    total = width * height
    if total <= max_pixels:
        return pixels, width, height

    ratio = float(np.sqrt(max_pixels / total))
    new_width = max(min_dimension, int(width * ratio))
    new_height = max(min_dimension, int(height * ratio))

    src_x = np.minimum(np.arange(new_width) * width // new_width, width - 1)
    src_y = np.minimum(np.arange(new_height) * height // new_height, height - 1)

    grid = _as_rgba(pixels).reshape(height, width, 4)
    sampled = grid[np.ix_(src_y, src_x)].reshape(-1, 4)
    return sampled, new_width, new_height


def has_significant_alpha(
    pixels: NDArray[np.floating],
    alpha_cutoff: float = SIGNIFICANT_ALPHA_CUTOFF,
    min_fraction: float = SIGNIFICANT_ALPHA_FRACTION,
) -> bool:
    """Whether more than ``min_fraction`` of pixels sit visibly below full opacity."""
    rgba = _as_rgba(pixels)
    if len(rgba) == 0:
        return False
    translucent = np.count_nonzero(rgba[:, 3] < alpha_cutoff)
    return translucent / len(rgba) > min_fraction


def preprocess(
    buffer: PixelBuffer,
    is_normal_map: bool = False,
    is_emission: bool = False,
    max_pixels: int = MAX_SAMPLED_PIXELS,
    min_dimension: int = MIN_SAMPLED_DIMENSION,
) -> ProcessedPixelData:
    """Sample and extract a buffer into analysis-ready data.

    Normal maps keep every pixel: their alpha channel carries no coverage
    information, so nothing is masked.
    """
    pixels, width, height = buffer.pixels, buffer.width, buffer.height
    if len(pixels) == width * height:
        pixels, width, height = sample_if_needed(pixels, width, height, max_pixels, min_dimension)

    if is_normal_map:
        rgba = _as_rgba(pixels)
        return ProcessedPixelData(
            width=width,
            height=height,
            grayscale=to_grayscale(rgba),
            opaque_pixels=rgba,
            opaque_count=len(rgba),
            is_normal_map=True,
            is_emission=False,
        )

    opaque_rgba, grayscale, opaque_count = extract_opaque(pixels, width, height)
    return ProcessedPixelData(
        width=width,
        height=height,
        grayscale=grayscale,
        opaque_pixels=opaque_rgba,
        opaque_count=opaque_count,
        is_normal_map=False,
        is_emission=is_emission,
    )
