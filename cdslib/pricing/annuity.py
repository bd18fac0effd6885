"""
Risky annuity (premium leg per unit spread) under the ISDA standard model.

The annuity is the sum of the surviving coupons plus, when the trade pays
accrued premium on default, the expected accrued premium integrated over each
coupon period.
"""

import logging
import math
from datetime import date

import numpy as np

from cdslib.curves.base import IsdaCompliantCurve
from cdslib.instruments.cds import CreditCouponPaymentPeriod, ResolvedCds
from cdslib.pricing.integration import get_integration_points, truncate_set_inclusive
from cdslib.pricing.types import AccrualOnDefaultFormula, PriceType
from cdslib.utils.epsilon import SMALL_THRESHOLD, epsilon, epsilon_p

logger = logging.getLogger(__name__)


def accrual_on_default_schedule(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    effective_start_date: date,
) -> np.ndarray:
    """Integration knots shared by every coupon's accrual on default integral.

    A single coupon trade starts at the effective start; otherwise the
    schedule starts at the accrual start so that a forward starting trade
    gets the same knots as the ISDA C library.
    """
    if len(cds.payment_periods) == 1:
        start = effective_start_date
    else:
        start = cds.accrual_start_date
    return get_integration_points(
        discount_curve.relative_year_fraction(start),
        discount_curve.relative_year_fraction(cds.protection_end_date),
        discount_curve.node_times,
        credit_curve.node_times,
    )


def coupon_accrual_window(
    coupon: CreditCouponPaymentPeriod,
    effective_start_date: date,
    discount_curve: IsdaCompliantCurve,
    schedule: np.ndarray,
):
    """Knots of one coupon's accrual integral, or None if it has none."""
    start = max(coupon.effective_start_date, effective_start_date)
    if start >= coupon.effective_end_date:
        return None
    return truncate_set_inclusive(
        discount_curve.relative_year_fraction(start),
        discount_curve.relative_year_fraction(coupon.effective_end_date),
        schedule,
    )


def coupon_year_fraction_ratio(
    coupon: CreditCouponPaymentPeriod, discount_curve: IsdaCompliantCurve
) -> float:
    """Coupon year fraction over the same period measured in curve time."""
    curve_year_fraction = discount_curve.day_count.year_fraction(
        coupon.start_date, coupon.end_date
    )
    return coupon.year_fraction / curve_year_fraction


def single_period_accrual_on_default(
    coupon: CreditCouponPaymentPeriod,
    effective_start_date: date,
    schedule: np.ndarray,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    formula: AccrualOnDefaultFormula,
) -> float:
    """
    Expected accrued premium paid on default within one coupon period.

    Args:
        coupon: Coupon period
        effective_start_date: Effective start of the trade; earlier parts of
            the coupon are not integrated
        schedule: Knots from :func:`accrual_on_default_schedule`
        discount_curve: ISDA discount curve
        credit_curve: ISDA survival curve
        formula: Accrual on default formula

    Returns:
        Accrual on default value per unit spread, not yet rolled to the
        reference date.
    """
    knots = coupon_accrual_window(coupon, effective_start_date, discount_curve, schedule)
    if knots is None:
        return 0.0

    omega = formula.omega
    markit = formula is AccrualOnDefaultFormula.MARKIT_FIX
    eff_start = discount_curve.relative_year_fraction(coupon.effective_start_date)

    t = knots[0]
    ht0 = credit_curve.zero_rate_year_fraction(t)
    rt0 = discount_curve.zero_rate_year_fraction(t)
    b0 = math.exp(-rt0 - ht0)
    t0 = t - eff_start + omega
    pv = 0.0
    for j in range(1, len(knots)):
        t = knots[j]
        ht1 = credit_curve.zero_rate_year_fraction(t)
        rt1 = discount_curve.zero_rate_year_fraction(t)
        b1 = math.exp(-rt1 - ht1)
        dt = knots[j] - knots[j - 1]
        dht = ht1 - ht0
        dhrt = dht + rt1 - rt0

        if markit:
            if abs(dhrt) < SMALL_THRESHOLD:
                tpv = dht * dt * b0 * epsilon_p(-dhrt)
            else:
                tpv = dht * dt / dhrt * ((b0 - b1) / dhrt - b1)
        else:
            t1 = t - eff_start + omega
            if abs(dhrt) < SMALL_THRESHOLD:
                tpv = dht * b0 * (t0 * epsilon(-dhrt) + dt * epsilon_p(-dhrt))
            else:
                tpv = dht / dhrt * (t0 * b0 - t1 * b1 + dt / dhrt * (b0 - b1))
            t0 = t1

        pv += tpv
        ht0 = ht1
        rt0 = rt1
        b0 = b1

    return float(coupon_year_fraction_ratio(coupon, discount_curve) * pv)


def risky_annuity(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    reference_date: date,
    stepin_date: date,
    effective_start_date: date,
    price_type: PriceType,
    formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
) -> float:
    """
    Risky annuity (RPV01 per unit notional).

    Coupons ending after the step-in date contribute
    ``year_fraction * DF(payment) * Q(effective end)``; accrued premium on
    default is added when the trade pays it. The sum is rolled to
    ``reference_date`` and, for a clean price, the accrued year fraction at
    step-in is removed.
    """
    pv = 0.0
    for coupon in cds.payment_periods:
        if stepin_date < coupon.end_date:
            q = credit_curve.discount_factor(coupon.effective_end_date)
            p = discount_curve.discount_factor(coupon.payment_date)
            pv += coupon.year_fraction * p * q

    if cds.payment_on_default.is_accrued_interest():
        schedule = accrual_on_default_schedule(
            cds, discount_curve, credit_curve, effective_start_date
        )
        logger.debug("Accrual on default schedule: %d knots", len(schedule))
        for coupon in cds.payment_periods:
            pv += single_period_accrual_on_default(
                coupon, effective_start_date, schedule, discount_curve, credit_curve, formula
            )

    pv /= discount_curve.discount_factor(reference_date)

    if price_type.is_clean():
        pv -= cds.accrued_year_fraction(stepin_date)
    return float(pv)
