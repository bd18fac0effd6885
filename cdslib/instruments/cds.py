"""
Single-name credit default swap.

``Cds`` holds the trade terms; ``resolve()`` expands them into a
``ResolvedCds`` carrying the premium leg coupon periods the pricer consumes.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from cdslib.conventions.adjustments import DaysAdjustment, adjust_date
from cdslib.conventions.calendars import get_calendar
from cdslib.conventions.daycount import DayCountConvention, get_day_count_convention
from cdslib.conventions.types import (
    BusinessDayAdjustment,
    BuySell,
    Frequency,
    PaymentOnDefault,
    ProtectionStartOfDay,
)
from cdslib.errors import InvalidArgumentError
from cdslib.utils.schedule import previous_roll_date, unadjusted_coupon_dates


@dataclass(frozen=True)
class CreditCouponPaymentPeriod:
    """One premium leg coupon period.

    Attributes:
        start_date: Accrual start (first period: unadjusted)
        end_date: Accrual end
        effective_start_date: First day of protection for the period
        effective_end_date: Last day of protection for the period
        payment_date: Coupon payment date
        year_fraction: Accrual year fraction in the trade day count
        currency: Payment currency
        notional: Unsigned notional
        fixed_rate: CDS coupon rate
    """

    start_date: date
    end_date: date
    effective_start_date: date
    effective_end_date: date
    payment_date: date
    year_fraction: float
    currency: str = "USD"
    notional: float = 1.0
    fixed_rate: float = 0.0

    def __post_init__(self):
        if self.end_date <= self.start_date:
            raise ValueError(
                f"Period end {self.end_date} must be after start {self.start_date}"
            )

    def contains(self, dt: date) -> bool:
        return self.start_date <= dt < self.end_date


@dataclass(frozen=True)
class ResolvedCds:
    """CDS expanded into coupon periods, ready for pricing."""

    buy_sell: BuySell
    legal_entity_id: str
    currency: str
    notional: float
    fixed_rate: float
    payment_periods: Tuple[CreditCouponPaymentPeriod, ...]
    protection_end_date: date
    day_count: DayCountConvention
    payment_on_default: PaymentOnDefault = PaymentOnDefault.ACCRUED_PREMIUM
    protection_start: ProtectionStartOfDay = ProtectionStartOfDay.BEGINNING
    stepin_date_offset: DaysAdjustment = field(
        default_factory=lambda: DaysAdjustment.of_calendar_days(1)
    )
    settlement_date_offset: DaysAdjustment = field(
        default_factory=lambda: DaysAdjustment.of_business_days(3, "WEEKEND")
    )

    def __post_init__(self):
        if not self.payment_periods:
            raise ValueError("At least one payment period is required")
        if self.notional < 0.0:
            raise InvalidArgumentError(f"Notional must not be negative: {self.notional}")
        for previous, current in zip(self.payment_periods, self.payment_periods[1:]):
            if current.start_date < previous.end_date:
                raise ValueError(
                    f"Payment periods overlap at {current.start_date}"
                )
        if self.payment_periods[-1].effective_end_date > self.protection_end_date:
            raise ValueError("Last effective end date is after the protection end date")

    @property
    def accrual_start_date(self) -> date:
        return self.payment_periods[0].start_date

    @property
    def accrual_end_date(self) -> date:
        return self.payment_periods[-1].end_date

    def signed_notional(self) -> float:
        return self.buy_sell.normalize(self.notional)

    def effective_start_date(self, stepin_date: date) -> date:
        """First day of protection for a trade stepping in on ``stepin_date``."""
        start = max(stepin_date, self.accrual_start_date)
        if self.protection_start.is_beginning():
            return start - timedelta(days=1)
        return start

    def find_period(self, dt: date) -> Optional[CreditCouponPaymentPeriod]:
        for period in self.payment_periods:
            if period.contains(dt):
                return period
        return None

    def accrued_year_fraction(self, stepin_date: date) -> float:
        """Accrued premium year fraction at ``stepin_date``."""
        if stepin_date < self.accrual_start_date:
            return 0.0
        if stepin_date == self.accrual_end_date:
            return 0.0
        period = self.find_period(stepin_date)
        if period is None:
            raise InvalidArgumentError(
                f"Date {stepin_date} is not in any payment period of the trade"
            )
        return self.day_count.year_fraction(period.start_date, stepin_date)

    def settlement_date(self, valuation_date: date) -> date:
        return self.settlement_date_offset.adjust(valuation_date)


@dataclass(frozen=True)
class Cds:
    """Terms of a single-name CDS.

    Attributes:
        buy_sell: BUY for protection buyer
        legal_entity_id: Reference entity
        currency: Trade currency, key of the discount curve
        notional: Unsigned notional
        fixed_rate: Coupon rate (e.g. 0.01 for 100bp)
        start_date: Accrual start date
        end_date: Maturity date, the last day of protection
        payment_frequency: Coupon frequency
        day_count: Coupon accrual day count
        calendar: Business day calendar for coupon dates
        business_day_adjustment: Coupon date adjustment rule
        payment_on_default: Whether accrued premium is paid on default
        protection_start: Whether protection starts at the beginning of day
        stepin_date_offset: Step-in date from the valuation date
        settlement_date_offset: Cash settlement date from the valuation date
    """

    buy_sell: BuySell
    legal_entity_id: str
    currency: str
    notional: float
    fixed_rate: float
    start_date: date
    end_date: date
    payment_frequency: Frequency = Frequency.QUARTERLY
    day_count: Union[str, DayCountConvention] = "ACT/360"
    calendar: str = "WEEKEND"
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.FOLLOWING
    payment_on_default: PaymentOnDefault = PaymentOnDefault.ACCRUED_PREMIUM
    protection_start: ProtectionStartOfDay = ProtectionStartOfDay.BEGINNING
    stepin_date_offset: DaysAdjustment = field(
        default_factory=lambda: DaysAdjustment.of_calendar_days(1)
    )
    settlement_date_offset: DaysAdjustment = field(
        default_factory=lambda: DaysAdjustment.of_business_days(3, "WEEKEND")
    )

    @classmethod
    def of_standard(
        cls,
        buy_sell: BuySell,
        legal_entity_id: str,
        currency: str,
        notional: float,
        fixed_rate: float,
        trade_date: Union[date, datetime],
        tenor_years: int,
        **kwargs,
    ) -> "Cds":
        """
        Standard quarterly-roll CDS traded on ``trade_date``.

        Accrual starts on the roll date on or before the trade date; maturity
        is the first roll date after ``trade_date + tenor_years``.
        """
        if isinstance(trade_date, datetime):
            trade_date = trade_date.date()
        start = previous_roll_date(trade_date)
        end = previous_roll_date(trade_date + relativedelta(years=tenor_years, months=3))
        return cls(
            buy_sell=buy_sell,
            legal_entity_id=legal_entity_id,
            currency=currency,
            notional=notional,
            fixed_rate=fixed_rate,
            start_date=start,
            end_date=end,
            **kwargs,
        )

    def resolve(self) -> ResolvedCds:
        """Generate the coupon periods and return the resolved trade."""
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")

        day_count = get_day_count_convention(self.day_count)
        calendar = get_calendar(self.calendar)
        beginning = self.protection_start.is_beginning()
        one_day = timedelta(days=1)

        dates = unadjusted_coupon_dates(
            self.start_date, self.end_date, self.payment_frequency.months()
        )
        periods: List[CreditCouponPaymentPeriod] = []
        last = len(dates) - 2
        for k in range(last + 1):
            if k == 0:
                start = dates[0]
            else:
                start = adjust_date(dates[k], self.business_day_adjustment, calendar)
            if k == last:
                end = dates[k + 1] + one_day if beginning else dates[k + 1]
                payment = adjust_date(dates[k + 1], self.business_day_adjustment, calendar)
            else:
                end = adjust_date(dates[k + 1], self.business_day_adjustment, calendar)
                payment = end
            periods.append(
                CreditCouponPaymentPeriod(
                    start_date=start,
                    end_date=end,
                    effective_start_date=start - one_day if beginning else start,
                    effective_end_date=end - one_day if beginning else end,
                    payment_date=payment,
                    year_fraction=day_count.year_fraction(start, end),
                    currency=self.currency,
                    notional=self.notional,
                    fixed_rate=self.fixed_rate,
                )
            )

        return ResolvedCds(
            buy_sell=self.buy_sell,
            legal_entity_id=self.legal_entity_id,
            currency=self.currency,
            notional=self.notional,
            fixed_rate=self.fixed_rate,
            payment_periods=tuple(periods),
            protection_end_date=periods[-1].effective_end_date,
            day_count=day_count,
            payment_on_default=self.payment_on_default,
            protection_start=self.protection_start,
            stepin_date_offset=self.stepin_date_offset,
            settlement_date_offset=self.settlement_date_offset,
        )
