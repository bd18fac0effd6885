"""Numerically stable kernels for integrating products of exponentials.

Integrating ``exp(-a - x s)`` over a unit interval gives ratios such as
``(1 - exp(-x)) / x`` whose numerator and denominator both vanish as
``x -> 0``. Every kernel below switches to a truncated Taylor series for
``|x| < SMALL_THRESHOLD``; the closed forms are used above it.

The ``compute_*`` kernels are called with ``dhrt`` and the curve values at
both ends of a segment, ``pn * qn / (pd * qd) == exp(dhrt)``. Their closed
forms cancel to ``O(dhrt**k)`` near the threshold and are evaluated from
``dhrt`` in extended precision.
"""

from __future__ import annotations

import math
from typing import Callable

import mpmath

SMALL_THRESHOLD = 1e-5

_CLOSED_FORM_DPS = 40


def _closed_form(x: float, expression: Callable) -> float:
    """Evaluate ``expression`` at ``x`` with 40 significant digits."""
    with mpmath.workdps(_CLOSED_FORM_DPS):
        return float(expression(mpmath.mpf(x)))



def epsilon(x: float) -> float:
    """``(exp(x) - 1) / x``, equal to 1 at ``x = 0``."""
    if abs(x) < SMALL_THRESHOLD:
        return 1.0 + x * (1.0 / 2.0 + x * (1.0 / 6.0 + x / 24.0))
    return math.expm1(x) / x


def epsilon_p(x: float) -> float:
    """First derivative of :func:`epsilon`."""
    if abs(x) < SMALL_THRESHOLD:
        return 1.0 / 2.0 + x * (1.0 / 3.0 + x * (1.0 / 8.0 + x / 30.0))
    return ((x - 1.0) * math.expm1(x) + x) / (x * x)


def epsilon_pp(x: float) -> float:
    """Second derivative of :func:`epsilon`."""
    if abs(x) < SMALL_THRESHOLD:
        return 1.0 / 3.0 + x * (1.0 / 4.0 + x * (1.0 / 10.0 + x / 36.0))
    return _closed_form(x, lambda d: ((d * d - 2 * d + 2) * mpmath.exp(d) - 2) / d**3)


def compute_epsilon(dhrt: float, pn: float, qn: float, pd: float, qd: float) -> float:
    """``(ratio - 1) / dhrt``, i.e. :func:`epsilon` evaluated from the ratio."""
    if abs(dhrt) < SMALL_THRESHOLD:
        return epsilon(dhrt)
    return _closed_form(dhrt, lambda d: mpmath.expm1(d) / d)


def compute_epsilon_derivative(
    dhrt: float, pn: float, qn: float, pd: float, qd: float
) -> float:
    """Derivative of :func:`compute_epsilon` with respect to ``dhrt``."""
    if abs(dhrt) < SMALL_THRESHOLD:
        return epsilon_p(dhrt)
    return _closed_form(dhrt, lambda d: (mpmath.expm1(d) * (d - 1) + d) / d**2)


def compute_extended_epsilon(
    dhrt: float, pn: float, qn: float, pd: float, qd: float
) -> float:
    """``(1 - epsilon) / dhrt``, the kernel of the protection leg sensitivities."""
    if abs(dhrt) < SMALL_THRESHOLD:
        return -1.0 / 2.0 - dhrt / 6.0 - dhrt * dhrt / 24.0
    return _closed_form(dhrt, lambda d: (1 - mpmath.expm1(d) / d) / d)


def compute_extended_epsilon_derivative(
    dhrt: float, pn: float, qn: float, pd: float, qd: float
) -> float:
    """Derivative of :func:`compute_extended_epsilon` with respect to ``dhrt``."""
    if abs(dhrt) < SMALL_THRESHOLD:
        return -1.0 / 6.0 - dhrt / 12.0 - dhrt * dhrt / 40.0
    return _closed_form(dhrt, lambda d: (mpmath.exp(d) * (2 - d) - 2 - d) / d**3)
