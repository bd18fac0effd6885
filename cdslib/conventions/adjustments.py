"""
Business day adjustments and day offsets.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from cdslib.conventions.calendars import Calendar, get_calendar
from cdslib.conventions.types import BusinessDayAdjustment


def adjust_date(
    dt: Union[date, datetime], adjustment: BusinessDayAdjustment, calendar: Calendar
) -> date:
    """Apply business day adjustment to a date."""
    if isinstance(dt, datetime):
        dt = dt.date()

    if adjustment == BusinessDayAdjustment.NO_ADJUSTMENT:
        return dt

    elif adjustment == BusinessDayAdjustment.FOLLOWING:
        while not calendar.is_business_day(dt):
            dt += timedelta(days=1)
        return dt

    elif adjustment == BusinessDayAdjustment.MODIFIED_FOLLOWING:
        original_month = dt.month
        adjusted = dt

        while not calendar.is_business_day(adjusted):
            adjusted += timedelta(days=1)

        # If month changed, use preceding instead
        if adjusted.month != original_month:
            adjusted = dt
            while not calendar.is_business_day(adjusted):
                adjusted -= timedelta(days=1)

        return adjusted

    elif adjustment == BusinessDayAdjustment.PRECEDING:
        while not calendar.is_business_day(dt):
            dt -= timedelta(days=1)
        return dt

    else:
        raise ValueError(f"Unknown business day adjustment: {adjustment}")


@dataclass(frozen=True)
class DaysAdjustment:
    """Offset of a number of days from a base date.

    With no calendar the offset counts calendar days (the CDS step-in rule);
    with a calendar it counts business days (the cash settlement rule).
    """

    days: int
    calendar: Optional[str] = None

    @classmethod
    def of_calendar_days(cls, days: int) -> "DaysAdjustment":
        return cls(days=days)

    @classmethod
    def of_business_days(cls, days: int, calendar: str) -> "DaysAdjustment":
        return cls(days=days, calendar=calendar)

    def adjust(self, base: Union[date, datetime]) -> date:
        if isinstance(base, datetime):
            base = base.date()
        if self.calendar is None:
            return base + timedelta(days=self.days)
        return get_calendar(self.calendar).add_business_days(base, self.days)
