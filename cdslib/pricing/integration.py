"""
Integration knots for the piecewise exponential CDS leg integrals.

Both legs are integrated segment by segment between the union of the
discount and credit curve nodes; within a segment ``H`` is linear in ``t`` for
both curves so the integrand is a single exponential.
"""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Half a day in ACT/365F years; knots closer than this are merged
HALF_DAY = 1.0 / 730.0


def get_integration_points(
    start: float,
    end: float,
    nodes_a: Sequence[float],
    nodes_b: Sequence[float],
) -> np.ndarray:
    """
    Integration knots covering ``[start, end]``.

    Args:
        start: Lower integration limit (curve year fraction)
        end: Upper integration limit
        nodes_a: Node times of the first curve
        nodes_b: Node times of the second curve

    Returns:
        Ascending knots starting at ``start`` and ending at ``end`` that
        contain every node strictly inside ``(start, end)``. Nodes within half
        a day of the previous knot are dropped and ``end`` replaces a final
        knot within half a day of it, so an interval shorter than half a day
        collapses to the single knot ``[end]``.
    """
    if end < start:
        raise ValueError(f"Integration end {end} is before start {start}")

    merged = np.concatenate(
        (np.asarray(nodes_a, dtype=float), np.asarray(nodes_b, dtype=float))
    )
    inside = np.sort(merged[(merged > start) & (merged < end)])
    candidates = np.concatenate(([start], inside, [end]))

    knots = [float(candidates[0])]
    for point in candidates[1:-1]:
        if point - knots[-1] > HALF_DAY:
            knots.append(float(point))

    if end - knots[-1] > HALF_DAY:
        knots.append(float(end))
    else:
        knots[-1] = float(end)

    logger.debug("Integration knots on [%.6f, %.6f]: %d", start, end, len(knots))
    return np.array(knots)


def truncate_set_inclusive(
    lower: float, upper: float, knots: Sequence[float]
) -> np.ndarray:
    """
    Restrict ``knots`` to ``[lower, upper]`` and make both bounds knots.

    A knot within half a day of a bound is replaced by that bound.
    """
    points = np.asarray(knots, dtype=float)
    inside = points[(points > lower) & (points < upper)]
    n = inside.size
    if n == 0:
        return np.array([lower, upper])

    add_lower = inside[0] - lower > HALF_DAY
    add_upper = upper - inside[-1] > HALF_DAY
    if n == 1 and not add_lower and not add_upper:
        return np.array([lower, upper])

    result = inside.copy()
    if not add_lower:
        result[0] = lower
    if not add_upper:
        result[-1] = upper
    if add_lower:
        result = np.concatenate(([lower], result))
    if add_upper:
        result = np.concatenate((result, [upper]))
    return result
