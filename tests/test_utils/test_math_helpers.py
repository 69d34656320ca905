"""Tests for math helpers."""

import pytest

from texsizer.utils.math_helpers import (
    clamp01,
    closest_power_of_two,
    floor_power_of_two,
    is_power_of_two,
    lerp,
    normalize_with_percentile,
    safe_log2,
)


def test_clamp01():
    assert clamp01(-0.5) == 0.0
    assert clamp01(1.7) == 1.0
    assert clamp01(0.3) == pytest.approx(0.3)


def test_normalize_with_percentile_bounds():
    assert normalize_with_percentile(0.01, 0.05, 0.8) == 0.0
    assert normalize_with_percentile(0.05, 0.05, 0.8) == 0.0
    assert normalize_with_percentile(0.8, 0.05, 0.8) == 1.0
    assert normalize_with_percentile(3.0, 0.05, 0.8) == 1.0
    assert normalize_with_percentile(0.425, 0.05, 0.8) == pytest.approx(0.5)


@pytest.mark.parametrize("value,expected", [
    (0, 1), (1, 1), (2, 2), (5, 4), (6, 8), (7, 8), (300, 256), (384, 512), (1000, 1024),
])
def test_closest_power_of_two(value, expected):
    assert closest_power_of_two(value) == expected


def test_floor_power_of_two():
    assert floor_power_of_two(0) == 1
    assert floor_power_of_two(1) == 1
    assert floor_power_of_two(12) == 8
    assert floor_power_of_two(16) == 16
    assert floor_power_of_two(300) == 256


def test_is_power_of_two():
    assert is_power_of_two(1)
    assert is_power_of_two(64)
    assert not is_power_of_two(0)
    assert not is_power_of_two(12)


def test_lerp_and_log2():
    assert lerp(0.0, 3.0, 0.5) == pytest.approx(1.5)
    assert safe_log2(8) == pytest.approx(3.0)
    assert safe_log2(0) == 0.0
