"""
QuantLib-backed business day calendars.

Only the operations the CDS schedule and the step-in/settlement offsets need
are exposed.
"""

from datetime import date, datetime
from typing import Union

import QuantLib as ql


def _to_ql_date(dt: Union[date, datetime]) -> ql.Date:
    """Convert Python date/datetime to QuantLib Date."""
    if isinstance(dt, datetime):
        dt = dt.date()
    return ql.Date(dt.day, dt.month, dt.year)


def _to_py_date(ql_date: ql.Date) -> date:
    """Convert QuantLib Date to Python date."""
    return date(ql_date.year(), ql_date.month(), ql_date.dayOfMonth())


class Calendar:
    """Base calendar class for QuantLib-backed business day calculations."""

    def __init__(self, name: str, ql_calendar: ql.Calendar):
        self.name = name
        self._ql_calendar = ql_calendar

    def is_business_day(self, dt: Union[date, datetime]) -> bool:
        """Check if date is a business day (not weekend or holiday)."""
        return self._ql_calendar.isBusinessDay(_to_ql_date(dt))

    def add_business_days(self, start_date: Union[date, datetime], days: int) -> date:
        """Add business days to a date."""
        ql_result = self._ql_calendar.advance(_to_ql_date(start_date), days, ql.Days)
        return _to_py_date(ql_result)

    def __str__(self) -> str:
        return self.name


class TargetCalendar(Calendar):
    """TARGET calendar (EUR)."""

    def __init__(self):
        super().__init__("TARGET", ql.TARGET())


class UnitedStatesCalendar(Calendar):
    """US settlement calendar, used for USD-denominated CDS."""

    def __init__(self):
        super().__init__("USNY", ql.UnitedStates(ql.UnitedStates.Settlement))


class WeekendCalendar(Calendar):
    """Simple calendar that only considers weekends as non-business days."""

    def __init__(self):
        super().__init__("WEEKEND", ql.WeekendsOnly())


# Pre-defined calendar instances
TARGET = TargetCalendar()
USNY = UnitedStatesCalendar()
WEEKEND_ONLY = WeekendCalendar()

# Calendar registry
CALENDARS = {
    "TARGET": TARGET,
    "EUR": TARGET,
    "USNY": USNY,
    "USD": USNY,
    "WEEKEND": WEEKEND_ONLY,
}


def get_calendar(name: Union[str, Calendar]) -> Calendar:
    """Get a calendar by name (instances pass through)."""
    if isinstance(name, Calendar):
        return name
    key = name.upper()
    if key not in CALENDARS:
        raise ValueError(
            f"Unknown calendar: {name}. Available: {list(CALENDARS.keys())}"
        )
    return CALENDARS[key]
