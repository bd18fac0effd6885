"""Analytic curve sensitivities against central finite differences."""

from datetime import date

import pytest

from conftest import make_provider

from cdslib.curves.sensitivity import PointSensitivities
from cdslib.pricing.pricer import IsdaCdsProductPricer
from cdslib.pricing.types import AccrualOnDefaultFormula, PriceType

ALL_FORMULAS = list(AccrualOnDefaultFormula)


def assert_matches(analytic: PointSensitivities, numeric: dict, abs_tol: float = 1e-8) -> None:
    assert set(analytic) <= set(numeric)
    for node, expected in numeric.items():
        assert analytic.get(node) == pytest.approx(expected, rel=1e-4, abs=abs_tol), node


@pytest.mark.parametrize("provider_name", ["flat_provider", "sloped_provider", "tiny_hazard_provider"])
def test_protection_leg_sensitivity(provider_name, request, cds_5y, reference_date, finite_difference) -> None:
    provider = request.getfixturevalue(provider_name)
    pricer = IsdaCdsProductPricer()
    analytic = pricer.protection_leg_sensitivity(cds_5y, provider, reference_date)
    numeric = finite_difference(
        lambda p: pricer.protection_leg(cds_5y, p, reference_date), provider
    )
    assert not analytic.is_empty()
    assert_matches(analytic, numeric)


@pytest.mark.parametrize("formula", ALL_FORMULAS)
@pytest.mark.parametrize("provider_name", ["flat_provider", "sloped_provider", "tiny_hazard_provider"])
def test_risky_annuity_sensitivity(formula, provider_name, request, cds_5y, reference_date, finite_difference) -> None:
    provider = request.getfixturevalue(provider_name)
    pricer = IsdaCdsProductPricer(formula)
    analytic = pricer.risky_annuity_sensitivity(cds_5y, provider, reference_date)
    numeric = finite_difference(
        lambda p: pricer.risky_annuity(cds_5y, p, reference_date, PriceType.DIRTY), provider
    )
    assert_matches(analytic, numeric)


@pytest.mark.parametrize("formula", ALL_FORMULAS)
def test_forward_starting_sensitivities(formula, forward_cds, sloped_provider, finite_difference) -> None:
    pricer = IsdaCdsProductPricer(formula)
    reference_date = forward_cds.settlement_date(sloped_provider.valuation_date)
    numeric = finite_difference(
        lambda p: pricer.risky_annuity(forward_cds, p, reference_date, PriceType.CLEAN),
        sloped_provider,
    )
    assert_matches(
        pricer.risky_annuity_sensitivity(forward_cds, sloped_provider, reference_date), numeric
    )
    numeric = finite_difference(
        lambda p: pricer.protection_leg(forward_cds, p, reference_date), sloped_provider
    )
    assert_matches(
        pricer.protection_leg_sensitivity(forward_cds, sloped_provider, reference_date), numeric
    )


@pytest.mark.parametrize("formula", ALL_FORMULAS)
def test_present_value_sensitivity(formula, cds_5y, sloped_provider, reference_date, finite_difference) -> None:
    pricer = IsdaCdsProductPricer(formula)
    analytic = pricer.present_value_sensitivity(cds_5y, sloped_provider, reference_date)
    numeric = finite_difference(
        lambda p: pricer.present_value(cds_5y, p, reference_date, PriceType.CLEAN).amount,
        sloped_provider,
    )
    assert_matches(analytic, numeric)


def test_present_value_sensitivity_combines_legs(cds_5y, flat_provider, reference_date) -> None:
    pricer = IsdaCdsProductPricer()
    protection = pricer.protection_leg_sensitivity(cds_5y, flat_provider, reference_date)
    annuity = pricer.risky_annuity_sensitivity(cds_5y, flat_provider, reference_date)
    combined = pricer.present_value_sensitivity(cds_5y, flat_provider, reference_date)
    expected = protection - annuity * cds_5y.fixed_rate
    for node in expected:
        assert combined.get(node) == pytest.approx(expected.get(node), rel=1e-12, abs=1e-15)


def test_short_protection_window_covers_last_knot(cds_5y, flat_provider, finite_difference) -> None:
    """Two knot protection schedule: one segment, both ends carry sensitivity."""
    valuation = date(2029, 3, 18)
    discount = flat_provider.discount_factors("USD")
    credit = flat_provider.survival_probabilities("ACME", "USD")
    provider = make_provider(discount, credit, valuation_date=valuation)
    reference_date = cds_5y.settlement_date(valuation)
    pricer = IsdaCdsProductPricer()
    analytic = pricer.protection_leg_sensitivity(cds_5y, provider, reference_date)
    numeric = finite_difference(
        lambda p: pricer.protection_leg(cds_5y, p, reference_date), provider
    )
    assert_matches(analytic, numeric)
