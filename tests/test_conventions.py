"""Tests for day count and calendar lookups."""

from datetime import date

import pytest

from cdslib.conventions.adjustments import adjust_date
from cdslib.conventions.calendars import get_calendar
from cdslib.conventions.daycount import ACT_360, ACT_365F, get_day_count_convention
from cdslib.conventions.types import BusinessDayAdjustment


def test_day_count_lookup_by_alias() -> None:
    assert get_day_count_convention("act/360") is ACT_360
    assert get_day_count_convention("ACT/365") is ACT_365F
    assert get_day_count_convention(ACT_360) is ACT_360
    with pytest.raises(ValueError, match="Unknown day count convention"):
        get_day_count_convention("BUS/252")


def test_year_fractions() -> None:
    start, end = date(2024, 3, 20), date(2024, 6, 20)
    assert ACT_360.year_fraction(start, end) == pytest.approx(92 / 360)
    assert ACT_365F.year_fraction(start, end) == pytest.approx(92 / 365)
    assert ACT_365F.year_fraction(end, start) == pytest.approx(-92 / 365)
    assert get_day_count_convention("30/360").day_count(start, end) == 90
    assert ACT_360 != ACT_365F


def test_calendar_lookup() -> None:
    assert get_calendar("usd") is get_calendar("USNY")
    with pytest.raises(ValueError, match="Unknown calendar"):
        get_calendar("XXXX")


def test_modified_following_stays_in_month() -> None:
    weekend = get_calendar("WEEKEND")
    # 2024-08-31 is a Saturday
    assert adjust_date(date(2024, 8, 31), BusinessDayAdjustment.FOLLOWING, weekend) == date(2024, 9, 2)
    assert adjust_date(
        date(2024, 8, 31), BusinessDayAdjustment.MODIFIED_FOLLOWING, weekend
    ) == date(2024, 8, 30)
