"""
ISDA-compliant zero rate curve.

The same curve type serves as the discount curve and as the survival curve:
``H(t) = r(t) * t`` is linear in ``t`` between node times, so discount
factors (survival probabilities) ``exp(-H)`` are piecewise exponential and
the CDS leg integrals have closed forms on every segment.
"""

import logging
import math
from datetime import date, datetime
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from cdslib.conventions.daycount import DayCountConvention
from cdslib.curves.base import BaseCurve, DateOrTime
from cdslib.curves.sensitivity import NodeId, PointSensitivities

logger = logging.getLogger(__name__)

DEFAULT_NODE_TIMES = (0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0)


class IsdaZeroRateCurve(BaseCurve):
    """
    Continuously compounded zero rate curve with ISDA interpolation.

    Interpolation is linear in ``r(t) * t`` between nodes. Before the first
    node the zero rate is flat; after the last node the last segment's
    forward rate is continued. A single node curve is flat.
    """

    def __init__(
        self,
        valuation_date: date,
        node_times: Sequence[float],
        zero_rates: Sequence[float],
        day_count: Union[str, DayCountConvention] = "ACT/365F",
        name: str = "",
    ):
        """
        Initialize the curve.

        Args:
            valuation_date: Curve valuation date
            node_times: Node times in years from valuation_date, strictly increasing
            zero_rates: Continuously compounded zero rates at node_times
            day_count: Day count converting dates to curve times
            name: Curve name, used as the key of its node sensitivities
        """
        super().__init__(valuation_date, name, day_count)

        times = np.asarray(node_times, dtype=float)
        rates = np.asarray(zero_rates, dtype=float)
        if times.ndim != 1 or times.size == 0:
            raise ValueError("Need at least 1 node")
        if times.shape != rates.shape:
            raise ValueError("Node times and zero rates must have same length")
        if not np.all(np.isfinite(times)) or not np.all(np.isfinite(rates)):
            raise ValueError("Node times and zero rates must be finite")
        if times[0] <= 0.0:
            raise ValueError(f"First node time must be positive: {times[0]}")
        if np.any(np.diff(times) <= 0.0):
            raise ValueError("Node times must be strictly increasing")

        self._times = times
        self._rates = rates
        self._rt = rates * times

        # H(t) falling between nodes means discount factors increase
        for i in np.nonzero(np.diff(self._rt) < 0.0)[0]:
            logger.warning(
                "Curve %s: r*t decreases between nodes %d and %d (%.8f -> %.8f)",
                name or "<unnamed>",
                i,
                i + 1,
                self._rt[i],
                self._rt[i + 1],
            )

    @property
    def node_times(self) -> Tuple[float, ...]:
        return tuple(float(t) for t in self._times)

    @property
    def zero_rates(self) -> Tuple[float, ...]:
        return tuple(float(r) for r in self._rates)

    def _segment(self, t: float) -> Optional[Tuple[int, float]]:
        """Segment index and weight for ``t``; None on the flat left part."""
        n = self._times.size
        if n == 1 or t <= self._times[0]:
            return None
        i = int(np.searchsorted(self._times, t, side="right")) - 1
        i = min(i, n - 2)
        t0 = self._times[i]
        t1 = self._times[i + 1]
        return i, (t - t0) / (t1 - t0)

    def zero_rate_year_fraction(self, t: float) -> float:
        """``H(t) = r(t) * t``."""
        segment = self._segment(t)
        if segment is None:
            return float(self._rates[0] * t)
        i, w = segment
        return float((1.0 - w) * self._rt[i] + w * self._rt[i + 1])

    def zero_rate(self, t: DateOrTime) -> float:
        """Continuously compounded zero rate at t."""
        time_frac = self._to_year_fraction(t)
        if time_frac <= 0.0:
            return float(self._rates[0])
        return self.zero_rate_year_fraction(time_frac) / time_frac

    def discount_factor(self, t: DateOrTime) -> float:
        """``exp(-H(t))``."""
        return math.exp(-self.zero_rate_year_fraction(self._to_year_fraction(t)))

    def survival_probability(self, t: DateOrTime) -> float:
        """Same value as discount_factor, read as a survival probability."""
        return self.discount_factor(t)

    def zero_rate_year_fraction_point_sensitivity(
        self, t: float
    ) -> PointSensitivities:
        """Sensitivity of ``H(t)`` to each node zero rate."""
        segment = self._segment(t)
        if segment is None:
            return self._sensitivity({0: t})
        i, w = segment
        return self._sensitivity(
            {i: self._times[i] * (1.0 - w), i + 1: self._times[i + 1] * w}
        )

    def zero_rate_point_sensitivity(self, t: DateOrTime) -> PointSensitivities:
        """Sensitivity of ``exp(-H(t))`` to each node zero rate."""
        time_frac = self._to_year_fraction(t)
        df = self.discount_factor(time_frac)
        return self.zero_rate_year_fraction_point_sensitivity(time_frac) * (-df)

    def _sensitivity(self, values: dict) -> PointSensitivities:
        return PointSensitivities(
            {NodeId(self.name, index): float(value) for index, value in values.items()}
        )

    def with_zero_rates(self, zero_rates: Sequence[float]) -> "IsdaZeroRateCurve":
        """Copy of the curve with new zero rates at the same nodes."""
        return IsdaZeroRateCurve(
            self.valuation_date,
            self._times,
            zero_rates,
            day_count=self._day_count,
            name=self.name,
        )

    def bumped_node(self, index: int, amount: float) -> "IsdaZeroRateCurve":
        """Copy of the curve with one node zero rate shifted by ``amount``."""
        if not 0 <= index < self._times.size:
            raise IndexError(f"Node index {index} out of range")
        rates = self._rates.copy()
        rates[index] += amount
        return self.with_zero_rates(rates)

    def shift_parallel(self, shift_bp: float) -> "IsdaZeroRateCurve":
        """
        Create a parallel shifted version of the curve.

        Args:
            shift_bp: Parallel shift of every zero rate in basis points
        """
        return self.with_zero_rates(self._rates + shift_bp / 10000.0)

    def get_node_info(self) -> list[tuple[float, float, float]]:
        """Node information as (time, zero_rate, discount_factor) tuples."""
        return [
            (float(t), float(r), math.exp(-rt))
            for t, r, rt in zip(self._times, self._rates, self._rt, strict=True)
        ]


def create_flat_isda_curve(
    valuation_date: Union[date, datetime],
    rate: float,
    name: str = "",
    node_times: Sequence[float] = DEFAULT_NODE_TIMES,
    day_count: Union[str, DayCountConvention] = "ACT/365F",
) -> IsdaZeroRateCurve:
    """
    Create a flat curve, one node per entry of ``node_times``.

    Args:
        valuation_date: Curve valuation date
        rate: Continuously compounded zero rate (or hazard rate)
        name: Curve name
        node_times: Node times; every node carries the same rate
        day_count: Curve day count
    """
    return IsdaZeroRateCurve(
        valuation_date,
        node_times,
        [rate] * len(node_times),
        day_count=day_count,
        name=name,
    )
