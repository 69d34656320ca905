"""Image statistics for texture complexity — all transparency-aware.

Inputs are flat luminance arrays in which transparent pixels carry a
negative marker. Any neighbourhood, pair or block that touches a marked
sample is left out of the statistic entirely; it is never substituted
with 0, which would fake an edge along every alpha boundary.

Every function returns 0 when there are no opaque pixels
(``glcm_features`` returns the featureless (0, 1, 1) instead).
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage
from scipy.fft import dctn
from scipy.stats import entropy as shannon_entropy
from skimage.feature import graycomatrix

from texsizer.engine.constants import (
    ALPHA_THRESHOLD,
    DCT_BLOCK_SIZE,
    DCT_HIGH_FREQ_INDEX_SUM,
    DCT_MAX_BLOCKS_PER_AXIS,
    DCT_MIN_TOTAL_ENERGY,
    DETAIL_BLOCK_SIZE,
    DETAIL_MIN_VARIANCE,
    DETAIL_VARIANCE_FACTOR,
    EDGE_SAMPLE_COLUMNS,
    GLCM_LEVELS,
    GRADIENT_SAMPLE_COLUMNS,
    HISTOGRAM_BINS,
)
from texsizer.engine.context import GlcmFeatures

_SOBEL_X = np.array([[-1.0, 0.0, 1.0], [-2.0, 0.0, 2.0], [-1.0, 0.0, 1.0]])
_SOBEL_Y = np.array([[-1.0, -2.0, -1.0], [0.0, 0.0, 0.0], [1.0, 2.0, 1.0]])
_NEIGHBOURHOOD_3X3 = np.ones((3, 3), dtype=bool)

# DCT coefficient (u, v) is high frequency when u + v > 2
_DCT_HIGH_FREQ_MASK = (
    np.add.outer(np.arange(DCT_BLOCK_SIZE), np.arange(DCT_BLOCK_SIZE)) > DCT_HIGH_FREQ_INDEX_SUM
)

_FEATURELESS_GLCM = GlcmFeatures(contrast=0.0, homogeneity=1.0, energy=1.0)


def _grid(grayscale: NDArray[np.floating], width: int, height: int) -> NDArray[np.float64] | None:
    """Reshape flat luminance to (height, width); None when the length does not match."""
    g = np.asarray(grayscale, dtype=np.float64)
    if width <= 0 or height <= 0 or g.size != width * height:
        return None
    return g.reshape(height, width)


def _blocks(grid: NDArray[np.float64], size: int) -> NDArray[np.float64]:
    """Non-overlapping size×size tiles as (blocks_y, blocks_x, size, size). Partial tiles dropped."""
    rows, cols = grid.shape
    by, bx = rows // size, cols // size
    return grid[: by * size, : bx * size].reshape(by, size, bx, size).swapaxes(1, 2)


def _block_variances(grid: NDArray[np.float64], size: int) -> NDArray[np.float64]:
    """Variance over opaque pixels of every tile that has at least one."""
    tiles = _blocks(grid, size).reshape(-1, size * size)
    mask = tiles >= 0.0
    counts = mask.sum(axis=1)
    keep = counts > 0
    if not np.any(keep):
        return np.empty(0)

    tiles, mask, counts = tiles[keep], mask[keep], counts[keep]
    means = np.where(mask, tiles, 0.0).sum(axis=1) / counts
    deviations = np.where(mask, tiles - means[:, None], 0.0)
    return (deviations**2).sum(axis=1) / counts


# ── Gradient analysis ──


def sobel_gradient(grayscale: NDArray[np.floating], width: int, height: int, opaque_count: int) -> float:
    """Mean 3×3 Sobel magnitude over a stride-sampled interior grid."""
    if opaque_count == 0:
        return 0.0
    g = _grid(grayscale, width, height)
    if g is None or width < 3 or height < 3:
        return 0.0

    step = max(1, width // GRADIENT_SAMPLE_COLUMNS)
    # A sample is usable only if its whole 3×3 neighbourhood is opaque
    valid = ndimage.binary_erosion(g >= 0.0, structure=_NEIGHBOURHOOD_3X3, border_value=0)
    gx = ndimage.correlate(g, _SOBEL_X, mode="nearest")
    gy = ndimage.correlate(g, _SOBEL_Y, mode="nearest")

    interior = (slice(1, height - 1, step), slice(1, width - 1, step))
    magnitude = np.hypot(gx[interior], gy[interior])
    usable = valid[interior]
    if not np.any(usable):
        return 0.0
    return float(magnitude[usable].mean())


def spatial_frequency(grayscale: NDArray[np.floating], width: int, height: int, opaque_count: int) -> float:
    """sqrt(RF² + CF²) where RF/CF are RMS horizontal/vertical first differences."""
    if opaque_count == 0:
        return 0.0
    g = _grid(grayscale, width, height)
    if g is None:
        return 0.0

    step = max(1, width // GRADIENT_SAMPLE_COLUMNS)
    sub = g[::step, ::step]
    opaque = sub >= 0.0

    def _rms(diff: NDArray[np.float64], mask: NDArray[np.bool_]) -> float:
        if not np.any(mask):
            return 0.0
        return float(np.sqrt(np.mean(diff[mask] ** 2)))

    row_freq = _rms(sub[:, 1:] - sub[:, :-1], opaque[:, 1:] & opaque[:, :-1])
    col_freq = _rms(sub[1:, :] - sub[:-1, :], opaque[1:, :] & opaque[:-1, :])
    return float(np.hypot(row_freq, col_freq))


# ── Color analysis ──


def color_variance(pixels: NDArray[np.floating], opaque_count: int) -> float:
    """Mean squared RGB distance from the mean colour, over opaque pixels only."""
    if opaque_count == 0:
        return 0.0
    rgba = np.asarray(pixels, dtype=np.float64).reshape(-1, 4)
    rgb = rgba[rgba[:, 3] >= ALPHA_THRESHOLD, :3]
    if len(rgb) == 0:
        return 0.0
    diff = rgb - rgb.mean(axis=0)
    return float(np.mean(np.sum(diff**2, axis=1)))


# ── DCT analysis ──


def dct_high_frequency_ratio(
    grayscale: NDArray[np.floating], width: int, height: int, opaque_count: int
) -> float:
    """Share of 8×8 block DCT energy in coefficients with u + v > 2.

    Only fully opaque blocks contribute. The block grid is strided so that
    roughly 16 blocks per axis are transformed regardless of image size.
    """
    if opaque_count == 0:
        return 0.0
    g = _grid(grayscale, width, height)
    if g is None:
        return 0.0

    blocks_x = width // DCT_BLOCK_SIZE
    blocks_y = height // DCT_BLOCK_SIZE
    if blocks_x == 0 or blocks_y == 0:
        return 0.0

    step = max(1, blocks_x // DCT_MAX_BLOCKS_PER_AXIS)
    tiles = _blocks(g, DCT_BLOCK_SIZE)[::step, ::step].reshape(-1, DCT_BLOCK_SIZE, DCT_BLOCK_SIZE)
    tiles = tiles[np.all(tiles >= 0.0, axis=(1, 2))]
    if len(tiles) == 0:
        return 0.0

    # Orthonormal DCT-II: coefficient scale 0.25·C(u)·C(v) for 8×8
    energy = dctn(tiles, type=2, axes=(1, 2), norm="ortho") ** 2
    total = float(energy.sum())
    if total <= DCT_MIN_TOTAL_ENERGY:
        return 0.0
    return float(energy[:, _DCT_HIGH_FREQ_MASK].sum() / total)


# ── GLCM analysis ──


def glcm_features(grayscale: NDArray[np.floating], width: int, height: int, opaque_count: int) -> GlcmFeatures:
    """Contrast, homogeneity and energy of a 16-level symmetric co-occurrence matrix.

    Horizontal and vertical neighbour pairs are pooled. Transparent pixels
    are quantized to an extra level that is cropped away afterwards, which
    drops every pair touching one.
    """
    if opaque_count == 0:
        return _FEATURELESS_GLCM
    g = _grid(grayscale, width, height)
    if g is None:
        return _FEATURELESS_GLCM

    levels = GLCM_LEVELS
    quantized = np.clip((g * (levels - 1)).astype(np.int64), 0, levels - 1)
    quantized = np.where(g >= 0.0, quantized, levels).astype(np.uint8)

    matrix = graycomatrix(
        quantized,
        distances=[1],
        angles=[0.0, np.pi / 2],
        levels=levels + 1,
        symmetric=True,
    )
    counts = matrix[:levels, :levels, 0, :].sum(axis=-1).astype(np.float64)
    pairs = counts.sum()
    if pairs == 0:
        return _FEATURELESS_GLCM

    p = counts / pairs
    i, j = np.indices(p.shape)
    diff = i - j
    return GlcmFeatures(
        contrast=float(np.sum(p * diff**2)),
        homogeneity=float(np.sum(p / (1.0 + np.abs(diff)))),
        energy=float(np.sum(p**2)),
    )


# ── Entropy ──


def entropy(grayscale: NDArray[np.floating], width: int, height: int, opaque_count: int) -> float:
    """Base-2 Shannon entropy of the 256-bin luminance histogram of opaque pixels."""
    if opaque_count == 0:
        return 0.0
    values = np.asarray(grayscale, dtype=np.float64)
    values = values[values >= 0.0]
    if len(values) == 0:
        return 0.0
    bins = np.clip((values * (HISTOGRAM_BINS - 1)).astype(np.int64), 0, HISTOGRAM_BINS - 1)
    histogram = np.bincount(bins, minlength=HISTOGRAM_BINS)
    return float(shannon_entropy(histogram, base=2))


# ── Perceptual statistics ──


def block_variance(
    grayscale: NDArray[np.floating],
    width: int,
    height: int,
    opaque_count: int,
    block_size: int = 4,
) -> float:
    """Mean per-block luminance variance, ignoring blocks with no opaque pixels."""
    if opaque_count == 0 or block_size <= 0:
        return 0.0
    g = _grid(grayscale, width, height)
    if g is None:
        return 0.0
    variances = _block_variances(g, block_size)
    return float(variances.mean()) if len(variances) else 0.0


def edge_density(grayscale: NDArray[np.floating], width: int, height: int, opaque_count: int) -> float:
    """Mean of |right − left| + |down − up| over a stride-sampled interior grid."""
    if opaque_count == 0:
        return 0.0
    g = _grid(grayscale, width, height)
    if g is None or width < 3 or height < 3:
        return 0.0

    step = max(1, width // EDGE_SAMPLE_COLUMNS)
    sample = (slice(None, None, step), slice(None, None, step))
    center = g[1:-1, 1:-1][sample]
    left = g[1:-1, :-2][sample]
    right = g[1:-1, 2:][sample]
    up = g[:-2, 1:-1][sample]
    down = g[2:, 1:-1][sample]

    valid = (center >= 0) & (left >= 0) & (right >= 0) & (up >= 0) & (down >= 0)
    if not np.any(valid):
        return 0.0
    grad = np.abs(right - left) + np.abs(down - up)
    return float(grad[valid].mean())


def detail_density(
    grayscale: NDArray[np.floating],
    width: int,
    height: int,
    opaque_count: int,
    avg_variance: float,
) -> float:
    """Fraction of 16×16 blocks whose variance beats an adaptive threshold.

    The threshold is max(0.005, avg_variance * 0.5), so busy textures are
    judged against their own baseline.
    """
    if opaque_count == 0:
        return 0.0
    g = _grid(grayscale, width, height)
    if g is None:
        return 0.0

    threshold = max(DETAIL_MIN_VARIANCE, avg_variance * DETAIL_VARIANCE_FACTOR)
    variances = _block_variances(g, DETAIL_BLOCK_SIZE)
    if len(variances) == 0:
        return 0.0
    return float(np.count_nonzero(variances > threshold) / len(variances))
