"""Tests for the normal quantile function."""

import math

import numpy as np
import pytest
from scipy import stats

from benchrank.stats.quantile import normal_quantile, z_value


@pytest.mark.parametrize(
    "confidence,expected",
    [
        (0.80, 1.2815515655446004),
        (0.90, 1.6448536269514722),
        (0.95, 1.959963984540054),
        (0.98, 2.3263478740408408),
        (0.99, 2.5758293035489004),
        (0.995, 2.807033768343811),
    ],
)
def test_z_value_reference(confidence, expected):
    """Critical values match published references."""
    assert z_value(confidence) == pytest.approx(expected, abs=1e-10)


def test_normal_quantile_matches_scipy():
    """Quantiles agree with scipy across central and tail regions."""
    for p in [1e-8, 0.001, 0.02, 0.075, 0.3, 0.5, 0.7, 0.925, 0.98, 0.999999]:
        assert normal_quantile(p) == pytest.approx(stats.norm.ppf(p), rel=1e-10, abs=1e-12)


def test_z_value_strictly_increasing():
    """Critical values increase with the confidence level."""
    levels = np.linspace(0.01, 0.999, 200)
    values = [z_value(p) for p in levels]

    assert all(b > a for a, b in zip(values, values[1:]))
    assert all(v > 0 for v in values)


def test_normal_quantile_symmetry():
    """q(p) = -q(1 - p) and q(0.5) = 0."""
    assert normal_quantile(0.5) == pytest.approx(0.0, abs=1e-15)
    for p in [0.01, 0.2, 0.4]:
        assert normal_quantile(p) == pytest.approx(-normal_quantile(1 - p), abs=1e-12)


def test_z_value_grows_near_one():
    """Critical values grow without bound as the level approaches 1."""
    assert z_value(1 - 1e-12) > 7.0
    assert z_value(1 - 1e-12) > z_value(1 - 1e-9)


@pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5, float("nan")])
def test_out_of_domain_is_nan(p):
    """Probabilities outside (0, 1) give NaN rather than an error."""
    assert math.isnan(z_value(p))
    assert math.isnan(normal_quantile(p))
