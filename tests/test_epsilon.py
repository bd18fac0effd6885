"""Tests for the epsilon kernels."""

import math

import pytest

from cdslib.utils.epsilon import (
    SMALL_THRESHOLD,
    compute_epsilon,
    compute_epsilon_derivative,
    compute_extended_epsilon,
    compute_extended_epsilon_derivative,
    epsilon,
    epsilon_p,
    epsilon_pp,
)


def _ratio_args(x: float):
    """Arguments giving ``pn * qn / (pd * qd) == exp(x)``."""
    return (x, math.exp(x), 1.0, 1.0, 1.0)


def test_values_at_zero() -> None:
    assert epsilon(0.0) == 1.0
    assert epsilon_p(0.0) == 0.5
    assert epsilon_pp(0.0) == pytest.approx(1.0 / 3.0, rel=1e-15)


def test_closed_forms_at_one() -> None:
    """eps(1) = e - 1, eps'(1) = 1, eps''(1) = e - 2."""
    assert epsilon(1.0) == pytest.approx(math.e - 1.0, rel=1e-14)
    assert epsilon_p(1.0) == pytest.approx(1.0, rel=1e-14)
    assert epsilon_pp(1.0) == pytest.approx(math.e - 2.0, rel=1e-14)


@pytest.mark.parametrize("x", [-2.5, -0.3, 0.01, 0.7, 3.0])
def test_derivatives_match_finite_differences(x: float) -> None:
    h = 1e-5
    assert epsilon_p(x) == pytest.approx(
        (epsilon(x + h) - epsilon(x - h)) / (2 * h), rel=1e-7
    )
    assert epsilon_pp(x) == pytest.approx(
        (epsilon_p(x + h) - epsilon_p(x - h)) / (2 * h), rel=1e-6
    )


@pytest.mark.parametrize("boundary", [SMALL_THRESHOLD, -SMALL_THRESHOLD])
@pytest.mark.parametrize("kernel", [epsilon, epsilon_p, epsilon_pp])
def test_kernels_continuous_at_threshold(kernel, boundary: float) -> None:
    """Taylor branch just inside the threshold meets the closed form on it."""
    inside = math.nextafter(boundary, 0.0)
    assert kernel(inside) == pytest.approx(kernel(boundary), rel=1e-9)


@pytest.mark.parametrize("boundary", [SMALL_THRESHOLD, -SMALL_THRESHOLD])
@pytest.mark.parametrize(
    "kernel",
    [
        compute_epsilon,
        compute_epsilon_derivative,
        compute_extended_epsilon,
        compute_extended_epsilon_derivative,
    ],
)
def test_ratio_kernels_continuous_at_threshold(kernel, boundary: float) -> None:
    inside = math.nextafter(boundary, 0.0)
    assert kernel(*_ratio_args(inside)) == pytest.approx(
        kernel(*_ratio_args(boundary)), rel=1e-9
    )


@pytest.mark.parametrize("x", [2e-5, -2e-5, 1e-3])
def test_extended_epsilon_derivative_near_threshold(x: float) -> None:
    """Closed form just above the threshold agrees with the series."""
    series = -1.0 / 6.0 - x / 12.0 - x * x / 40.0 - x**3 / 180.0
    assert compute_extended_epsilon_derivative(*_ratio_args(x)) == pytest.approx(
        series, rel=1e-12
    )


@pytest.mark.parametrize("x", [1e-2, -1e-2])
def test_extended_kernels_agree_with_series(x: float) -> None:
    series = -0.5 - x / 6.0 - x * x / 24.0
    series_derivative = -1.0 / 6.0 - x / 12.0 - x * x / 40.0
    assert compute_extended_epsilon(*_ratio_args(x)) == pytest.approx(series, rel=1e-6)
    assert compute_extended_epsilon_derivative(*_ratio_args(x)) == pytest.approx(
        series_derivative, rel=1e-6
    )


def test_extended_epsilon_derivative_matches_finite_difference() -> None:
    x = 0.4
    h = 1e-5
    numeric = (
        compute_extended_epsilon(*_ratio_args(x + h))
        - compute_extended_epsilon(*_ratio_args(x - h))
    ) / (2 * h)
    assert compute_extended_epsilon_derivative(*_ratio_args(x)) == pytest.approx(
        numeric, rel=1e-6
    )


def test_compute_epsilon_matches_ratio_of_curve_values() -> None:
    """Discount and survival factors enter only through their ratio."""
    x = 0.3
    pn, qn = math.exp(-0.1), math.exp(-0.2)
    pd, qd = math.exp(-0.25), math.exp(-0.35)
    assert compute_epsilon(x, pn, qn, pd, qd) == pytest.approx(
        (math.exp(0.3) - 1.0) / x, rel=1e-14
    )
    assert compute_epsilon(x, pn, qn, pd, qd) == pytest.approx(epsilon(x), rel=1e-14)
