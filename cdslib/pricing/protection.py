"""
Protection (default) leg of a CDS under the ISDA standard model.

The expected loss is integrated exactly between integration knots: on each
segment both ``H_disc`` and ``H_surv`` are linear in ``t``, so

    int b(t) dH_surv(t) = dh * (b0 - b1) / (dh + dr),    b = exp(-H_disc - H_surv)

with the ``epsilon`` limit used when ``dh + dr`` is close to zero.
"""

import logging
import math
from datetime import date

from cdslib.curves.base import IsdaCompliantCurve
from cdslib.instruments.cds import ResolvedCds
from cdslib.pricing.integration import get_integration_points
from cdslib.utils.epsilon import SMALL_THRESHOLD, epsilon

logger = logging.getLogger(__name__)


def protection_schedule(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    effective_start_date: date,
):
    """Integration knots from the effective start to the protection end."""
    start = discount_curve.relative_year_fraction(effective_start_date)
    end = discount_curve.relative_year_fraction(cds.protection_end_date)
    if end <= start:
        return None
    return get_integration_points(
        start, end, discount_curve.node_times, credit_curve.node_times
    )


def protection_full(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    reference_date: date,
    effective_start_date: date,
) -> float:
    """
    Protection leg value per unit of loss given default.

    Args:
        cds: Resolved trade
        discount_curve: ISDA discount curve
        credit_curve: ISDA survival curve
        reference_date: Date the value is rolled to (usually cash settlement)
        effective_start_date: First day of protection

    Returns:
        Value of receiving 1 on default between the effective start and the
        protection end, divided by the discount factor to ``reference_date``.
    """
    knots = protection_schedule(cds, discount_curve, credit_curve, effective_start_date)
    if knots is None:
        logger.debug("Empty protection interval, value is zero")
        return 0.0

    pv = 0.0
    ht0 = credit_curve.zero_rate_year_fraction(knots[0])
    rt0 = discount_curve.zero_rate_year_fraction(knots[0])
    b0 = math.exp(-ht0 - rt0)
    for t in knots[1:]:
        ht1 = credit_curve.zero_rate_year_fraction(t)
        rt1 = discount_curve.zero_rate_year_fraction(t)
        b1 = math.exp(-ht1 - rt1)
        dht = ht1 - ht0
        dhrt = dht + rt1 - rt0
        if abs(dhrt) < SMALL_THRESHOLD:
            pv += dht * b0 * epsilon(-dhrt)
        else:
            pv += (b0 - b1) * dht / dhrt
        ht0 = ht1
        rt0 = rt1
        b0 = b1

    return float(pv / discount_curve.discount_factor(reference_date))


def protection_leg(
    cds: ResolvedCds,
    discount_curve: IsdaCompliantCurve,
    credit_curve: IsdaCompliantCurve,
    reference_date: date,
    effective_start_date: date,
    recovery_rate: float,
) -> float:
    """Protection leg value per unit notional: ``(1 - R) * protection_full``."""
    full = protection_full(
        cds, discount_curve, credit_curve, reference_date, effective_start_date
    )
    return (1.0 - recovery_rate) * full
