"""Market conventions: day counts, calendars, adjustments and enums."""

from .adjustments import DaysAdjustment, adjust_date
from .calendars import Calendar, get_calendar
from .daycount import (
    ACT_360,
    ACT_365F,
    DayCountConvention,
    get_day_count_convention,
)
from .types import (
    BusinessDayAdjustment,
    BuySell,
    Frequency,
    PaymentOnDefault,
    ProtectionStartOfDay,
)

__all__ = [
    "ACT_360",
    "ACT_365F",
    "BusinessDayAdjustment",
    "BuySell",
    "Calendar",
    "DayCountConvention",
    "DaysAdjustment",
    "Frequency",
    "PaymentOnDefault",
    "ProtectionStartOfDay",
    "adjust_date",
    "get_calendar",
    "get_day_count_convention",
]
