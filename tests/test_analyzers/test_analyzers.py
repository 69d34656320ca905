"""Tests for the complexity analyzers."""

import numpy as np
import pytest

from texsizer.engine.analyzers.combined import CombinedAnalyzer
from texsizer.engine.analyzers.fast import FastAnalyzer
from texsizer.engine.analyzers.high_accuracy import HighAccuracyAnalyzer
from texsizer.engine.analyzers.normal_map import NormalMapAnalyzer, decode_normals
from texsizer.engine.analyzers.perceptual import PerceptualAnalyzer
from texsizer.engine.context import ComplexityResult, ProcessedPixelData
from tests.conftest import color_noise_image, flat_normal_image, processed, solid_image

STANDARD = [FastAnalyzer, HighAccuracyAnalyzer, PerceptualAnalyzer, CombinedAnalyzer]


@pytest.mark.parametrize("cls", STANDARD)
def test_scores_in_unit_range(cls, noise_data, solid_data, gradient_data):
    for data in (noise_data, solid_data, gradient_data):
        score = cls().analyze(data).score
        assert 0.0 <= score <= 1.0


@pytest.mark.parametrize("cls", STANDARD)
def test_noise_beats_solid(cls, noise_data, solid_data):
    assert cls().analyze(noise_data).score > cls().analyze(solid_data).score


@pytest.mark.parametrize("cls", [FastAnalyzer, HighAccuracyAnalyzer, PerceptualAnalyzer])
def test_solid_color_scores_zero(cls, solid_data):
    result = cls().analyze(solid_data)
    assert result.score == pytest.approx(0.0)
    assert result.summary.startswith("Very low complexity")


def test_fast_saturates_on_noise(noise_data):
    assert FastAnalyzer().analyze(noise_data).score == pytest.approx(1.0)


def test_high_accuracy_on_noise(noise_data):
    assert HighAccuracyAnalyzer().analyze(noise_data).score > 0.45


@pytest.mark.parametrize("cls", STANDARD)
def test_no_opaque_pixels_is_neutral(cls, transparent_data):
    assert cls().analyze(transparent_data).score == pytest.approx(0.5)


@pytest.mark.parametrize("cls", [FastAnalyzer, HighAccuracyAnalyzer, PerceptualAnalyzer])
def test_malformed_data_is_neutral(cls):
    data = ProcessedPixelData(
        width=16,
        height=16,
        grayscale=np.full(10, 0.5, dtype=np.float32),
        opaque_pixels=np.ones((10, 4), dtype=np.float32),
        opaque_count=10,
    )
    result = cls().analyze(data)
    assert result.score == 0.5
    assert "does not match" in result.summary


def test_perceptual_too_small():
    result = PerceptualAnalyzer().analyze(processed(color_noise_image(6)))
    assert result.score == 0.5
    assert "Too small" in result.summary


def test_perceptual_needs_enough_opaque_pixels():
    image = color_noise_image(32)
    image[..., 3] = 0.0
    image[0, :20, 3] = 1.0
    assert PerceptualAnalyzer().analyze(processed(image)).score == 0.5


def test_transparent_border_does_not_add_complexity():
    image = solid_image(64, color=(0.8, 0.2, 0.2))
    image[:, :32, 3] = 0.0
    data = processed(image)
    assert FastAnalyzer().analyze(data).score == pytest.approx(0.0)
    assert HighAccuracyAnalyzer().analyze(data).score == pytest.approx(0.0)


def test_combined_is_weighted_average(noise_data):
    fast = FastAnalyzer().analyze(noise_data).score
    high = HighAccuracyAnalyzer().analyze(noise_data).score
    perceptual = PerceptualAnalyzer().analyze(noise_data).score

    combined = CombinedAnalyzer(1.0, 2.0, 1.0).analyze(noise_data).score
    assert combined == pytest.approx((fast + 2 * high + perceptual) / 4)


def test_combined_zero_weights_fall_back_to_equal(gradient_data):
    fast = FastAnalyzer().analyze(gradient_data).score
    high = HighAccuracyAnalyzer().analyze(gradient_data).score
    perceptual = PerceptualAnalyzer().analyze(gradient_data).score

    result = CombinedAnalyzer(0.0, 0.0, 0.0).analyze(gradient_data)
    assert result.score == pytest.approx((fast + high + perceptual) / 3)
    assert "equal weights" in result.summary


def test_decode_normals():
    decoded = decode_normals(np.array([[0.5, 0.5, 1.0], [0.5, 0.5, 0.5], [1.0, 0.5, 0.5]]))
    assert decoded[0] == pytest.approx(np.array([0.0, 0.0, 1.0]))
    # Mid-gray has no direction and reads as flat
    assert decoded[1] == pytest.approx(np.array([0.0, 0.0, 1.0]))
    assert decoded[2] == pytest.approx(np.array([1.0, 0.0, 0.0]))


def test_flat_normal_map_scores_zero(flat_normal_data):
    assert NormalMapAnalyzer().analyze(flat_normal_data).score == pytest.approx(0.0, abs=1e-6)


def test_bumpy_normal_map_scores_high():
    data = processed(color_noise_image(64), is_normal_map=True)
    assert NormalMapAnalyzer().analyze(data).score > 0.8


def test_normal_map_too_small():
    data = processed(flat_normal_image(3), is_normal_map=True)
    assert NormalMapAnalyzer().analyze(data).score == 0.5


def test_complexity_result_clamps():
    assert ComplexityResult(1.7).score == 1.0
    assert ComplexityResult(-0.2).score == 0.0
    assert ComplexityResult(0.9).summary.startswith("Very high")
