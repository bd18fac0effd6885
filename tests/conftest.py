"""Shared market data and trades for the CDS pricer tests."""

from datetime import date

import pytest

from cdslib.conventions.types import BuySell
from cdslib.curves.isda import IsdaZeroRateCurve, create_flat_isda_curve
from cdslib.curves.provider import ConstantRecoveryRates, CreditRatesProvider
from cdslib.curves.sensitivity import NodeId
from cdslib.instruments.cds import Cds

VALUATION_DATE = date(2024, 3, 18)
CURRENCY = "USD"
ENTITY = "ACME"
DISCOUNT_NAME = "USD-DSC"
CREDIT_NAME = "ACME-CRD"
FLAT_RATE = 0.02
FLAT_HAZARD = 0.05
RECOVERY = 0.4
BUMP = 1e-6


def make_provider(discount_curve, credit_curve, recovery=RECOVERY, valuation_date=VALUATION_DATE):
    return CreditRatesProvider(
        valuation_date=valuation_date,
        discount_curves={CURRENCY: discount_curve},
        credit_curves={(ENTITY, CURRENCY): credit_curve},
        recovery_rate_curves={
            ENTITY: ConstantRecoveryRates(ENTITY, valuation_date, recovery)
        },
    )


@pytest.fixture
def flat_discount_curve():
    return create_flat_isda_curve(VALUATION_DATE, FLAT_RATE, name=DISCOUNT_NAME)


@pytest.fixture
def flat_credit_curve():
    return create_flat_isda_curve(VALUATION_DATE, FLAT_HAZARD, name=CREDIT_NAME)


@pytest.fixture
def flat_provider(flat_discount_curve, flat_credit_curve):
    return make_provider(flat_discount_curve, flat_credit_curve)


@pytest.fixture
def sloped_provider():
    """Upward sloping curves with nodes that do not line up."""
    discount = IsdaZeroRateCurve(
        VALUATION_DATE,
        [0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0],
        [0.010, 0.012, 0.015, 0.020, 0.022, 0.025, 0.027, 0.030],
        name=DISCOUNT_NAME,
    )
    credit = IsdaZeroRateCurve(
        VALUATION_DATE,
        [0.5, 1.0, 3.0, 5.0, 7.0, 10.0],
        [0.020, 0.025, 0.030, 0.035, 0.040, 0.045],
        name=CREDIT_NAME,
    )
    return make_provider(discount, credit)


@pytest.fixture
def tiny_hazard_provider():
    """Zero rates and a negligible hazard rate: every segment takes the small-rate branch."""
    discount = create_flat_isda_curve(VALUATION_DATE, 0.0, name=DISCOUNT_NAME)
    credit = create_flat_isda_curve(VALUATION_DATE, 1e-6, name=CREDIT_NAME)
    return make_provider(discount, credit)


@pytest.fixture
def cds_5y():
    """5y quarterly protection bought at 100bp, accruing from the last roll date."""
    return Cds(
        buy_sell=BuySell.BUY,
        legal_entity_id=ENTITY,
        currency=CURRENCY,
        notional=1.0,
        fixed_rate=0.01,
        start_date=date(2023, 12, 20),
        end_date=date(2029, 3, 20),
    ).resolve()


@pytest.fixture
def forward_cds():
    """Forward starting trade: accrual starts after the valuation date."""
    return Cds(
        buy_sell=BuySell.BUY,
        legal_entity_id=ENTITY,
        currency=CURRENCY,
        notional=1.0,
        fixed_rate=0.05,
        start_date=date(2024, 6, 20),
        end_date=date(2027, 6, 20),
    ).resolve()


@pytest.fixture
def reference_date(cds_5y):
    return cds_5y.settlement_date(VALUATION_DATE)


def bump_node(provider, node: NodeId, amount: float):
    """Copy of ``provider`` with one curve node zero rate shifted."""
    discount = provider.discount_factors(CURRENCY)
    credit = provider.survival_probabilities(ENTITY, CURRENCY)
    if node.curve_name == discount.name:
        return provider.with_discount_curve(CURRENCY, discount.bumped_node(node.index, amount))
    return provider.with_credit_curve(
        ENTITY, CURRENCY, credit.bumped_node(node.index, amount)
    )


@pytest.fixture
def finite_difference():
    """Central difference of ``measure(provider)`` for every node of both curves."""

    def _finite_difference(measure, provider, bump=BUMP):
        discount = provider.discount_factors(CURRENCY)
        credit = provider.survival_probabilities(ENTITY, CURRENCY)
        nodes = [NodeId(discount.name, i) for i in range(len(discount.node_times))]
        nodes += [NodeId(credit.name, i) for i in range(len(credit.node_times))]
        result = {}
        for node in nodes:
            up = measure(bump_node(provider, node, bump))
            down = measure(bump_node(provider, node, -bump))
            result[node] = (up - down) / (2.0 * bump)
        return result

    return _finite_difference
