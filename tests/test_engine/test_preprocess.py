"""Tests for pixel preprocessing."""

import numpy as np
import pytest

from texsizer.engine.constants import TRANSPARENT_MARKER
from texsizer.engine.context import PixelBuffer
from texsizer.engine.preprocess import (
    extract_opaque,
    has_significant_alpha,
    is_transparent,
    preprocess,
    sample_if_needed,
    to_grayscale,
)
from tests.conftest import buffer_of, flat_normal_image, gray_noise_image, solid_image


def test_to_grayscale_uses_rec709_weights():
    pixels = np.array([[1.0, 0.0, 0.0, 1.0], [0.0, 1.0, 0.0, 0.0], [1.0, 1.0, 1.0, 1.0]])
    gray = to_grayscale(pixels)
    assert gray[0] == pytest.approx(0.2126, abs=1e-6)
    assert gray[1] == pytest.approx(0.7152, abs=1e-6)
    assert gray[2] == pytest.approx(1.0, abs=1e-6)


def test_extract_opaque_marks_transparent_pixels():
    pixels = np.array([
        [1.0, 1.0, 1.0, 1.0],
        [1.0, 0.0, 0.0, 0.05],  # below threshold
        [0.0, 0.0, 1.0, 0.1],  # exactly at threshold counts as opaque
        [0.5, 0.5, 0.5, 0.0],
    ])
    opaque, gray, count = extract_opaque(pixels, 2, 2)

    assert count == 2
    assert len(opaque) == len(gray) == 4
    assert gray[1] == TRANSPARENT_MARKER
    assert gray[3] == TRANSPARENT_MARKER
    assert gray[2] == pytest.approx(0.0722, abs=1e-6)
    assert np.all(opaque[1] == 0.0)
    assert list(is_transparent(gray)) == [False, True, False, True]


def test_small_buffer_returned_unsampled():
    pixels = solid_image(64).reshape(-1, 4)
    sampled, w, h = sample_if_needed(pixels, 64, 64)
    assert sampled is pixels
    assert (w, h) == (64, 64)


def test_sample_large_image_is_deterministic():
    pixels = gray_noise_image(1024).reshape(-1, 4)
    a, w, h = sample_if_needed(pixels, 1024, 1024)
    b, _, _ = sample_if_needed(pixels, 1024, 1024)

    assert (w, h) == (512, 512)
    assert len(a) == w * h
    assert np.array_equal(a, b)
    # Nearest neighbour: every sample is an original pixel
    assert np.array_equal(a[0], pixels[0])


def test_sample_respects_min_dimension():
    pixels = np.zeros((8192 * 64, 4), dtype=np.float32)
    sampled, w, h = sample_if_needed(pixels, 8192, 64)
    assert h == 64
    assert w < 8192
    assert len(sampled) == w * h


def test_has_significant_alpha():
    opaque = solid_image(10).reshape(-1, 4)
    assert not has_significant_alpha(opaque)

    some = opaque.copy()
    some[:2, 3] = 0.5  # 2%
    assert has_significant_alpha(some)

    few = np.tile(opaque, (4, 1))
    few[:2, 3] = 0.5  # 0.5%
    assert not has_significant_alpha(few)

    assert not has_significant_alpha(np.empty((0, 4)))


def test_preprocess_normal_map_keeps_every_pixel():
    data = preprocess(buffer_of(flat_normal_image(16, alpha=0.0)), is_normal_map=True)
    assert data.is_normal_map
    assert data.opaque_count == 256
    assert np.all(data.grayscale >= 0.0)


def test_preprocess_colour_texture():
    data = preprocess(buffer_of(solid_image(16, alpha=0.0)), is_emission=True)
    assert data.opaque_count == 0
    assert data.is_emission
    assert data.is_well_formed
    assert np.all(data.grayscale == TRANSPARENT_MARKER)


def test_preprocess_samples_large_buffers():
    data = preprocess(buffer_of(gray_noise_image(1024)))
    assert (data.width, data.height) == (512, 512)
    assert data.opaque_count == 512 * 512


def test_preprocess_mismatched_buffer_is_not_well_formed():
    buffer = PixelBuffer(width=16, height=16, pixels=np.ones((100, 4)))
    data = preprocess(buffer)
    assert not data.is_well_formed
    assert data.opaque_count == 100


def test_extract_opaque_on_fully_opaque_buffer():
    pixels = gray_noise_image(16).reshape(-1, 4)
    opaque, gray, count = extract_opaque(pixels, 16, 16)

    assert count == 256
    assert not np.any(is_transparent(gray))
    assert np.all(gray >= 0.0)
    assert np.array_equal(opaque, pixels)


def test_small_opaque_image_survives_sampling_unchanged():
    image = gray_noise_image(32)
    data = preprocess(buffer_of(image))
    sampled, w, h = sample_if_needed(data.opaque_pixels, data.width, data.height, max_pixels=1_000_000)

    assert (w, h) == (32, 32)
    assert np.array_equal(sampled, image.reshape(-1, 4))
    assert np.array_equal(to_grayscale(sampled), data.grayscale)
