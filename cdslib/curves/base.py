"""
Base curve classes and protocols for the ISDA credit model.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Protocol, Sequence, Union, runtime_checkable

from cdslib.conventions.daycount import (
    DayCountConvention,
    get_day_count_convention,
)
from cdslib.curves.sensitivity import PointSensitivities

DateOrTime = Union[datetime, date, float]


@runtime_checkable
class IsdaCompliantCurve(Protocol):
    """Capabilities the ISDA pricer needs from discount and survival curves.

    Times are year fractions from the curve valuation date in the curve's own
    day count; ``H(t) = r(t) * t`` is piecewise linear between node times.
    """

    name: str
    valuation_date: date

    @property
    def node_times(self) -> Sequence[float]:
        ...

    @property
    def day_count(self) -> DayCountConvention:
        ...

    def relative_year_fraction(self, dt: Union[datetime, date]) -> float:
        ...

    def zero_rate_year_fraction(self, t: float) -> float:
        ...

    def zero_rate_year_fraction_point_sensitivity(
        self, t: float
    ) -> PointSensitivities:
        ...

    def discount_factor(self, t: DateOrTime) -> float:
        ...

    def zero_rate_point_sensitivity(self, t: DateOrTime) -> PointSensitivities:
        ...


class BaseCurve(ABC):
    """Base implementation for curves measured from a valuation date."""

    def __init__(
        self,
        valuation_date: date,
        name: str = "",
        day_count: Union[str, DayCountConvention] = "ACT/365F",
    ):
        """
        Initialize base curve.

        Args:
            valuation_date: Curve valuation date
            name: Curve name, used as the key of its node sensitivities
            day_count: Day-count convention to convert dates to curve times
        """
        if isinstance(valuation_date, datetime):
            valuation_date = valuation_date.date()
        self.valuation_date = valuation_date
        self.name = name
        self._day_count = get_day_count_convention(day_count)

    @property
    def day_count(self) -> DayCountConvention:
        return self._day_count

    def relative_year_fraction(self, dt: Union[datetime, date]) -> float:
        """Year fraction from the valuation date to ``dt`` in the curve day count."""
        if isinstance(dt, datetime):
            dt = dt.date()
        return self._day_count.year_fraction(self.valuation_date, dt)

    def _to_year_fraction(self, t: DateOrTime) -> float:
        """Convert a date or datetime to the curve's year fraction basis."""
        if isinstance(t, (int, float)):
            return float(t)
        return self.relative_year_fraction(t)

    @abstractmethod
    def discount_factor(self, t: DateOrTime) -> float:
        """Get discount factor (or survival probability) at time t."""
        pass

    def __str__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.name})"
            if self.name
            else self.__class__.__name__
        )
