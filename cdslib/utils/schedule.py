"""Coupon date helpers for CDS schedules."""

from __future__ import annotations

from datetime import date, datetime
from typing import List

from dateutil.relativedelta import relativedelta

# Standard CDS coupon roll months (20th of Mar/Jun/Sep/Dec)
ROLL_MONTHS = (3, 6, 9, 12)
ROLL_DAY = 20


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise TypeError(f"Unsupported date-like value: {value!r}")


def unadjusted_coupon_dates(
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    months: int,
) -> List[date]:
    """Generate unadjusted period boundaries rolling backward from the end date.

    The result starts with ``start_date`` and ends with ``end_date``; an
    irregular period, if any, is a short front stub.
    """
    start = _to_date(start_date)
    end = _to_date(end_date)
    if months <= 0:
        raise ValueError("months must be positive")
    if end <= start:
        raise ValueError("end_date must be after start_date")

    dates: List[date] = [end]
    step = 1
    while True:
        current = end - relativedelta(months=months * step)
        if current <= start:
            break
        dates.append(current)
        step += 1
    dates.append(start)
    dates.reverse()
    return dates


def previous_roll_date(value: date | datetime | str) -> date:
    """Latest standard CDS roll date (20 Mar/Jun/Sep/Dec) on or before ``value``."""
    dt = _to_date(value)
    back = 0
    while True:
        candidate = (dt - relativedelta(months=back)).replace(day=ROLL_DAY)
        if candidate.month in ROLL_MONTHS and candidate <= dt:
            return candidate
        back += 1
