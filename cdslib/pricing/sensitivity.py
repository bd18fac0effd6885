"""
Analytic zero rate sensitivities of the CDS legs.

Each function differentiates the matching integrator in
:mod:`cdslib.pricing.protection` and :mod:`cdslib.pricing.annuity` term by
term, including the small ``dh + dr`` branches, and returns the result keyed
by curve node.
"""

import logging
import math
from datetime import date
from typing import Tuple

import numpy as np

from cdslib.curves.base import IsdaCompliantCurve
from cdslib.curves.sensitivity import PointSensitivities
from cdslib.instruments.cds import CreditCouponPaymentPeriod, ResolvedCds
from cdslib.pricing.annuity import (
    accrual_on_default_schedule,
    coupon_accrual_window,
    coupon_year_fraction_ratio,
)
from cdslib.pricing.protection import protection_schedule
from cdslib.pricing.types import AccrualOnDefaultFormula
from cdslib.utils.epsilon import (
    SMALL_THRESHOLD,
    compute_extended_epsilon,
    epsilon,
    epsilon_p,
    epsilon_pp,
)

logger = logging.getLogger(__name__)


def protection_leg_sensitivity(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    reference_date: date,
    effective_start_date: date,
    recovery_rate: float,
) -> PointSensitivities:
    """Sensitivity of the protection leg (per unit notional) to both curves."""
    knots = protection_schedule(cds, discount_curve, credit_curve, effective_start_date)
    if knots is None or len(knots) < 2:
        return PointSensitivities.none()

    n = len(knots)
    p = np.empty(n)
    q = np.empty(n)
    dht = np.empty(n - 1)
    drt = np.empty(n - 1)
    dhrt = np.empty(n - 1)

    pv = 0.0
    ht0 = credit_curve.zero_rate_year_fraction(knots[0])
    rt0 = discount_curve.zero_rate_year_fraction(knots[0])
    p[0] = math.exp(-rt0)
    q[0] = math.exp(-ht0)
    b0 = p[0] * q[0]
    for i in range(1, n):
        ht1 = credit_curve.zero_rate_year_fraction(knots[i])
        rt1 = discount_curve.zero_rate_year_fraction(knots[i])
        p[i] = math.exp(-rt1)
        q[i] = math.exp(-ht1)
        b1 = p[i] * q[i]
        dht[i - 1] = ht1 - ht0
        drt[i - 1] = rt1 - rt0
        dhrt[i - 1] = dht[i - 1] + drt[i - 1]
        if abs(dhrt[i - 1]) < SMALL_THRESHOLD:
            pv += dht[i - 1] * b0 * epsilon(-dhrt[i - 1])
        else:
            pv += (b0 - b1) * dht[i - 1] / dhrt[i - 1]
        ht0 = ht1
        rt0 = rt1
        b0 = b1

    # d(pv)/dp_i and d(pv)/dq_i, chained through each knot's point sensitivity
    eps0 = compute_extended_epsilon(-dhrt[0], p[1], q[1], p[0], q[0])
    sensi = discount_curve.zero_rate_point_sensitivity(knots[0]) * (-dht[0] * q[0] * eps0)
    sensi = sensi + credit_curve.zero_rate_point_sensitivity(knots[0]) * (
        drt[0] * p[0] * eps0 + p[0]
    )
    for i in range(1, n - 1):
        epsp = compute_extended_epsilon(-dhrt[i], p[i + 1], q[i + 1], p[i], q[i])
        epsm = compute_extended_epsilon(dhrt[i - 1], p[i - 1], q[i - 1], p[i], q[i])
        sensi = sensi + discount_curve.zero_rate_point_sensitivity(knots[i]) * (
            -dht[i] * q[i] * epsp - dht[i - 1] * q[i] * epsm
        )
        sensi = sensi + credit_curve.zero_rate_point_sensitivity(knots[i]) * (
            drt[i - 1] * p[i] * epsm + drt[i] * p[i] * epsp
        )
    eps_last = compute_extended_epsilon(
        dhrt[n - 2], p[n - 2], q[n - 2], p[n - 1], q[n - 1]
    )
    sensi = sensi + discount_curve.zero_rate_point_sensitivity(knots[n - 1]) * (
        -dht[n - 2] * q[n - 1] * eps_last
    )
    sensi = sensi + credit_curve.zero_rate_point_sensitivity(knots[n - 1]) * (
        drt[n - 2] * p[n - 1] * eps_last - p[n - 1]
    )

    lgd = 1.0 - recovery_rate
    df = discount_curve.discount_factor(reference_date)
    df_sensi = discount_curve.zero_rate_point_sensitivity(reference_date) * (
        -pv * lgd / (df * df)
    )
    return df_sensi + sensi * (lgd / df)


def single_period_accrual_on_default_sensitivity(
    coupon: CreditCouponPaymentPeriod,
    effective_start_date: date,
    schedule: np.ndarray,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    formula: AccrualOnDefaultFormula,
) -> Tuple[float, PointSensitivities]:
    """Accrual on default value of one coupon and its sensitivity."""
    knots = coupon_accrual_window(coupon, effective_start_date, discount_curve, schedule)
    if knots is None:
        return 0.0, PointSensitivities.none()

    omega = formula.omega
    markit = formula is AccrualOnDefaultFormula.MARKIT_FIX
    eff_start = discount_curve.relative_year_fraction(coupon.effective_start_date)

    t = knots[0]
    ht0 = credit_curve.zero_rate_year_fraction(t)
    ht0_sensi = credit_curve.zero_rate_year_fraction_point_sensitivity(t)
    rt0 = discount_curve.zero_rate_year_fraction(t)
    rt0_sensi = discount_curve.zero_rate_year_fraction_point_sensitivity(t)
    b0 = math.exp(-rt0 - ht0)
    b0_sensi = (ht0_sensi + rt0_sensi) * (-b0)
    t0 = t - eff_start + omega

    pv = 0.0
    pv_sensi = PointSensitivities.none()
    for j in range(1, len(knots)):
        t = knots[j]
        ht1 = credit_curve.zero_rate_year_fraction(t)
        ht1_sensi = credit_curve.zero_rate_year_fraction_point_sensitivity(t)
        rt1 = discount_curve.zero_rate_year_fraction(t)
        rt1_sensi = discount_curve.zero_rate_year_fraction_point_sensitivity(t)
        b1 = math.exp(-rt1 - ht1)
        b1_sensi = (ht1_sensi + rt1_sensi) * (-b1)

        dt = knots[j] - knots[j - 1]
        dht = ht1 - ht0
        dhrt = dht + rt1 - rt0
        dht_sensi = ht1_sensi - ht0_sensi
        dhrt_sensi = dht_sensi + rt1_sensi - rt0_sensi

        if markit:
            if abs(dhrt) < SMALL_THRESHOLD:
                eps = epsilon_p(-dhrt)
                tpv = dht * dt * b0 * eps
                tpv_sensi = (
                    dht_sensi * (dt * b0 * eps)
                    + b0_sensi * (dht * dt * eps)
                    + dhrt_sensi * (-dht * dt * b0 * epsilon_pp(-dhrt))
                )
            else:
                tpv = dht * dt / dhrt * ((b0 - b1) / dhrt - b1)
                tpv_sensi = (
                    dht_sensi * (dt / dhrt * ((b0 - b1) / dhrt - b1))
                    + dhrt_sensi
                    * (dht * dt / (dhrt * dhrt) * (b1 - 2.0 * (b0 - b1) / dhrt))
                    + b0_sensi * (dht * dt / (dhrt * dhrt))
                    + b1_sensi * (-dht * dt / dhrt * (1.0 + 1.0 / dhrt))
                )
        else:
            t1 = t - eff_start + omega
            if abs(dhrt) < SMALL_THRESHOLD:
                eps = epsilon(-dhrt)
                epsp = epsilon_p(-dhrt)
                weight = t0 * eps + dt * epsp
                tpv = dht * b0 * weight
                tpv_sensi = (
                    dht_sensi * (b0 * weight)
                    + b0_sensi * (dht * weight)
                    + dhrt_sensi * (-dht * b0 * (t0 * epsp + dt * epsilon_pp(-dhrt)))
                )
            else:
                bracket = t0 * b0 - t1 * b1 + dt / dhrt * (b0 - b1)
                tpv = dht / dhrt * bracket
                tpv_sensi = (
                    dhrt_sensi
                    * (
                        dht
                        / (dhrt * dhrt)
                        * (-2.0 * dt / dhrt * (b0 - b1) - t0 * b0 + t1 * b1)
                    )
                    + dht_sensi * (bracket / dhrt)
                    + b0_sensi * (dht / dhrt * (t0 + dt / dhrt))
                    + b1_sensi * (dht / dhrt * (-t1 - dt / dhrt))
                )
            t0 = t1

        pv += tpv
        pv_sensi = pv_sensi + tpv_sensi
        ht0 = ht1
        ht0_sensi = ht1_sensi
        rt0 = rt1
        rt0_sensi = rt1_sensi
        b0 = b1
        b0_sensi = b1_sensi

    ratio = coupon_year_fraction_ratio(coupon, discount_curve)
    return float(ratio * pv), pv_sensi * ratio


def risky_annuity_sensitivity(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    reference_date: date,
    stepin_date: date,
    effective_start_date: date,
    formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
) -> PointSensitivities:
    """Sensitivity of the risky annuity to both curves.

    Clean and dirty annuities differ by the accrued year fraction, which does
    not depend on the curves, so one sensitivity serves both.
    """
    pv = 0.0
    pv_sensi = PointSensitivities.none()
    for coupon in cds.payment_periods:
        if stepin_date < coupon.end_date:
            q = credit_curve.discount_factor(coupon.effective_end_date)
            q_sensi = credit_curve.zero_rate_point_sensitivity(coupon.effective_end_date)
            p = discount_curve.discount_factor(coupon.payment_date)
            p_sensi = discount_curve.zero_rate_point_sensitivity(coupon.payment_date)
            pv += coupon.year_fraction * p * q
            pv_sensi = (
                pv_sensi
                + p_sensi * (coupon.year_fraction * q)
                + q_sensi * (coupon.year_fraction * p)
            )

    if cds.payment_on_default.is_accrued_interest():
        schedule = accrual_on_default_schedule(
            cds, discount_curve, credit_curve, effective_start_date
        )
        for coupon in cds.payment_periods:
            coupon_pv, coupon_sensi = single_period_accrual_on_default_sensitivity(
                coupon, effective_start_date, schedule, discount_curve, credit_curve, formula
            )
            pv += coupon_pv
            pv_sensi = pv_sensi + coupon_sensi

    df = discount_curve.discount_factor(reference_date)
    df_sensi = discount_curve.zero_rate_point_sensitivity(reference_date) * (-pv / (df * df))
    return df_sensi + pv_sensi * (1.0 / df)
