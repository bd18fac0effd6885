"""
QuantLib-backed day count conventions.

Credit curves measure time in ACT/365F from their valuation date while CDS
coupons accrue on ACT/360; both go through the same thin wrapper so the
pricer can compare conventions by name.
"""

from datetime import date, datetime
from typing import Union

import QuantLib as ql


def to_date(dt: Union[date, datetime]) -> date:
    """Convert datetime to date if needed."""
    return dt.date() if isinstance(dt, datetime) else dt


def _to_ql_date(dt: Union[date, datetime]) -> ql.Date:
    """Convert Python date/datetime to QuantLib Date."""
    py_date = to_date(dt)
    return ql.Date(py_date.day, py_date.month, py_date.year)


class DayCountConvention:
    """Base class for QuantLib-backed day count conventions."""

    def __init__(self, name: str, ql_daycount: ql.DayCounter):
        self.name = name
        self._ql_daycount = ql_daycount

    def year_fraction(
        self, start: Union[date, datetime], end: Union[date, datetime]
    ) -> float:
        """Year fraction between two dates; negative when end precedes start."""
        ql_start = _to_ql_date(start)
        ql_end = _to_ql_date(end)
        return self._ql_daycount.yearFraction(ql_start, ql_end)

    def day_count(
        self, start: Union[date, datetime], end: Union[date, datetime]
    ) -> int:
        """Calculate number of days between two dates."""
        ql_start = _to_ql_date(start)
        ql_end = _to_ql_date(end)
        return self._ql_daycount.dayCount(ql_start, ql_end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DayCountConvention):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"DayCountConvention({self.name!r})"


class Actual360(DayCountConvention):
    """ACT/360, the standard CDS coupon accrual convention."""

    def __init__(self):
        super().__init__("ACT/360", ql.Actual360())


class Actual365Fixed(DayCountConvention):
    """ACT/365F, the ISDA curve time convention."""

    def __init__(self):
        super().__init__("ACT/365F", ql.Actual365Fixed())


class Thirty360(DayCountConvention):
    """30/360 bond basis, used by some legacy CDS coupons."""

    def __init__(self):
        super().__init__("30/360", ql.Thirty360(ql.Thirty360.BondBasis))


ACT_360 = Actual360()
ACT_365F = Actual365Fixed()
THIRTY_360 = Thirty360()

# Names accepted for trade coupons and curve time
DAY_COUNT_CONVENTIONS = {
    "ACT/360": ACT_360,
    "ACTUAL/360": ACT_360,
    "ACT/365F": ACT_365F,
    "ACT/365": ACT_365F,
    "ACTUAL/365F": ACT_365F,
    "30/360": THIRTY_360,
    "30U/360": THIRTY_360,
}


def get_day_count_convention(
    name: Union[str, DayCountConvention],
) -> DayCountConvention:
    """Get a day count convention by name (instances pass through)."""
    if isinstance(name, DayCountConvention):
        return name
    convention = DAY_COUNT_CONVENTIONS.get(name.upper())
    if convention is None:
        raise ValueError(
            f"Unknown day count convention: {name}. "
            f"Available: {sorted(DAY_COUNT_CONVENTIONS)}"
        )
    return convention
