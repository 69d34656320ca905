"""Shared test fixtures — synthetic textures."""

from __future__ import annotations

import numpy as np
import pytest

from texsizer.engine.context import BatchItem, PixelBuffer
from texsizer.engine.preprocess import preprocess

SEED = 1234

# Tangent-space "straight up" normal, (0, 0, 1) encoded as RGB
FLAT_NORMAL_RGB = (0.5, 0.5, 1.0)


def rgba_image(rgb: np.ndarray, alpha: float | np.ndarray = 1.0) -> np.ndarray:
    """Stack an (H, W, 3) array with alpha into (H, W, 4) float32."""
    h, w = rgb.shape[:2]
    a = np.broadcast_to(np.asarray(alpha, dtype=np.float32), (h, w))
    return np.dstack([rgb.astype(np.float32), a]).astype(np.float32)


def solid_image(size: int, color=(0.5, 0.5, 0.5), alpha: float = 1.0) -> np.ndarray:
    rgb = np.broadcast_to(np.asarray(color, dtype=np.float32), (size, size, 3))
    return rgba_image(rgb, alpha)


def gray_noise_image(size: int, seed: int = SEED) -> np.ndarray:
    """Per-pixel uniform luminance noise (r = g = b)."""
    v = np.random.default_rng(seed).random((size, size), dtype=np.float32)
    return rgba_image(np.dstack([v, v, v]))


def color_noise_image(size: int, seed: int = SEED) -> np.ndarray:
    rgb = np.random.default_rng(seed).random((size, size, 3), dtype=np.float32)
    return rgba_image(rgb)


def gradient_image(size: int) -> np.ndarray:
    ramp = np.linspace(0.0, 1.0, size, dtype=np.float32)
    v = np.broadcast_to(ramp, (size, size))
    return rgba_image(np.dstack([v, v, v]))


def flat_normal_image(size: int, alpha: float = 1.0) -> np.ndarray:
    return solid_image(size, FLAT_NORMAL_RGB, alpha)


def buffer_of(image: np.ndarray) -> PixelBuffer:
    h, w = image.shape[:2]
    return PixelBuffer(width=w, height=h, pixels=image.reshape(-1, 4))


def item_of(image: np.ndarray, **kwargs) -> BatchItem:
    return BatchItem(pixels=buffer_of(image), **kwargs)


def processed(image: np.ndarray, **kwargs):
    return preprocess(buffer_of(image), **kwargs)


@pytest.fixture
def noise_data():
    return processed(gray_noise_image(128))


@pytest.fixture
def solid_data():
    return processed(solid_image(128))


@pytest.fixture
def transparent_data():
    return processed(solid_image(64, alpha=0.0))


@pytest.fixture
def gradient_data():
    return processed(gradient_image(128))


@pytest.fixture
def flat_normal_data():
    return processed(flat_normal_image(64), is_normal_map=True)
