"""Tests for CDS resolution and trade date logic."""

from datetime import date

import pytest

from cdslib.conventions.adjustments import DaysAdjustment
from cdslib.conventions.daycount import ACT_360
from cdslib.conventions.types import BuySell, ProtectionStartOfDay
from cdslib.errors import InvalidArgumentError
from cdslib.instruments.cds import Cds, CreditCouponPaymentPeriod


def test_resolved_periods(cds_5y) -> None:
    periods = cds_5y.payment_periods
    assert len(periods) == 21

    first = periods[0]
    assert first.start_date == date(2023, 12, 20)
    assert first.end_date == date(2024, 3, 20)
    assert first.effective_start_date == date(2023, 12, 19)
    assert first.effective_end_date == date(2024, 3, 19)
    assert first.payment_date == date(2024, 3, 20)
    assert first.year_fraction == pytest.approx(91 / 360)

    last = periods[-1]
    assert last.start_date == date(2028, 12, 20)
    assert last.end_date == date(2029, 3, 21)
    assert last.effective_end_date == date(2029, 3, 20)
    assert last.payment_date == date(2029, 3, 20)
    assert last.year_fraction == pytest.approx(91 / 360)

    assert cds_5y.protection_end_date == date(2029, 3, 20)
    assert cds_5y.accrual_start_date == date(2023, 12, 20)
    assert cds_5y.accrual_end_date == date(2029, 3, 21)
    assert cds_5y.day_count == ACT_360


def test_weekend_roll_dates_are_adjusted(cds_5y) -> None:
    # 2025-09-20 is a Saturday
    by_start = {p.start_date: p for p in cds_5y.payment_periods}
    before = next(p for p in cds_5y.payment_periods if p.start_date == date(2025, 6, 20))
    assert before.end_date == date(2025, 9, 22)
    assert before.payment_date == date(2025, 9, 22)
    assert date(2025, 9, 22) in by_start
    assert date(2025, 9, 20) not in by_start


def test_periods_are_contiguous(cds_5y) -> None:
    periods = cds_5y.payment_periods
    for previous, current in zip(periods, periods[1:]):
        assert current.start_date == previous.end_date


def test_protection_from_start_of_day_none() -> None:
    cds = Cds(
        buy_sell=BuySell.SELL,
        legal_entity_id="ACME",
        currency="USD",
        notional=1e6,
        fixed_rate=0.01,
        start_date=date(2023, 12, 20),
        end_date=date(2024, 12, 20),
        protection_start=ProtectionStartOfDay.NONE,
    ).resolve()
    last = cds.payment_periods[-1]
    assert last.end_date == date(2024, 12, 20)
    assert last.effective_end_date == date(2024, 12, 20)
    assert cds.payment_periods[0].effective_start_date == date(2023, 12, 20)
    assert cds.effective_start_date(date(2024, 3, 19)) == date(2024, 3, 19)
    assert cds.signed_notional() == -1e6


def test_effective_start_date(cds_5y) -> None:
    assert cds_5y.effective_start_date(date(2024, 3, 19)) == date(2024, 3, 18)
    # step-in before accrual start uses the accrual start
    assert cds_5y.effective_start_date(date(2023, 11, 1)) == date(2023, 12, 19)


def test_accrued_year_fraction(cds_5y) -> None:
    assert cds_5y.accrued_year_fraction(date(2024, 3, 19)) == pytest.approx(90 / 360)
    assert cds_5y.accrued_year_fraction(date(2024, 3, 20)) == 0.0
    assert cds_5y.accrued_year_fraction(date(2023, 12, 1)) == 0.0
    assert cds_5y.accrued_year_fraction(date(2029, 3, 21)) == 0.0
    with pytest.raises(InvalidArgumentError, match="not in any payment period"):
        cds_5y.accrued_year_fraction(date(2029, 6, 1))


def test_find_period_is_half_open(cds_5y) -> None:
    period = cds_5y.find_period(date(2024, 3, 20))
    assert period.start_date == date(2024, 3, 20)
    assert cds_5y.find_period(date(2030, 1, 1)) is None


def test_settlement_and_stepin_offsets(cds_5y) -> None:
    # Monday + 3 business days
    assert cds_5y.settlement_date(date(2024, 3, 18)) == date(2024, 3, 21)
    # Thursday + 3 business days skips the weekend
    assert cds_5y.settlement_date(date(2024, 3, 21)) == date(2024, 3, 26)
    assert cds_5y.stepin_date_offset.adjust(date(2024, 3, 22)) == date(2024, 3, 23)
    assert DaysAdjustment.of_business_days(1, "USNY").adjust(date(2024, 7, 3)) == date(2024, 7, 5)


def test_standard_trade_dates() -> None:
    cds = Cds.of_standard(
        BuySell.BUY, "ACME", "USD", 1e7, 0.01, date(2024, 3, 18), 5
    )
    assert cds.start_date == date(2023, 12, 20)
    assert cds.end_date == date(2029, 3, 20)


def test_invalid_terms() -> None:
    with pytest.raises(ValueError, match="after start_date"):
        Cds(
            buy_sell=BuySell.BUY,
            legal_entity_id="ACME",
            currency="USD",
            notional=1.0,
            fixed_rate=0.01,
            start_date=date(2025, 1, 1),
            end_date=date(2024, 1, 1),
        ).resolve()
    with pytest.raises(InvalidArgumentError, match="Notional"):
        Cds(
            buy_sell=BuySell.BUY,
            legal_entity_id="ACME",
            currency="USD",
            notional=-1.0,
            fixed_rate=0.01,
            start_date=date(2024, 1, 1),
            end_date=date(2025, 1, 1),
        ).resolve()
    with pytest.raises(ValueError, match="must be after start"):
        CreditCouponPaymentPeriod(
            start_date=date(2024, 3, 20),
            end_date=date(2024, 3, 20),
            effective_start_date=date(2024, 3, 19),
            effective_end_date=date(2024, 3, 19),
            payment_date=date(2024, 3, 20),
            year_fraction=0.0,
        )
