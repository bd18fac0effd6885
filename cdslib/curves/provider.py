"""
Market data container for credit pricing.

Discount curves are stored by currency, survival curves by
(legal entity, currency) and recovery rates by legal entity.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Mapping, Protocol, Tuple, runtime_checkable

from cdslib.errors import ConfigurationError, InvalidArgumentError


@runtime_checkable
class RecoveryRates(Protocol):
    """Recovery rate source for one legal entity."""

    legal_entity_id: str
    valuation_date: date

    def recovery_rate(self, dt: date) -> float:
        ...


@dataclass(frozen=True)
class ConstantRecoveryRates:
    """Recovery rate that does not depend on the default date."""

    legal_entity_id: str
    valuation_date: date
    recovery: float

    def __post_init__(self):
        if not 0.0 <= self.recovery <= 1.0:
            raise InvalidArgumentError(
                f"Recovery rate must be in [0, 1]: {self.recovery}"
            )

    def recovery_rate(self, dt: date) -> float:
        return self.recovery


@dataclass(frozen=True)
class CreditRatesProvider:
    """Immutable bundle of the curves and recovery rates a CDS pricer reads."""

    valuation_date: date
    discount_curves: Mapping[str, object] = field(default_factory=dict)
    credit_curves: Mapping[Tuple[str, str], object] = field(default_factory=dict)
    recovery_rate_curves: Mapping[str, RecoveryRates] = field(default_factory=dict)

    def discount_factors(self, currency: str):
        """Discount curve for ``currency``."""
        try:
            return self.discount_curves[currency]
        except KeyError:
            raise ConfigurationError(
                f"Unable to find discount curve: {currency}"
            ) from None

    def survival_probabilities(self, legal_entity_id: str, currency: str):
        """Survival curve for ``legal_entity_id`` in ``currency``."""
        try:
            return self.credit_curves[(legal_entity_id, currency)]
        except KeyError:
            raise ConfigurationError(
                f"Unable to find credit curve: {legal_entity_id}, {currency}"
            ) from None

    def recovery_rates(self, legal_entity_id: str) -> RecoveryRates:
        """Recovery rates for ``legal_entity_id``."""
        try:
            return self.recovery_rate_curves[legal_entity_id]
        except KeyError:
            raise ConfigurationError(
                f"Unable to find recovery rate curve: {legal_entity_id}"
            ) from None

    def with_discount_curve(self, currency: str, curve) -> "CreditRatesProvider":
        curves: Dict[str, object] = dict(self.discount_curves)
        curves[currency] = curve
        return replace(self, discount_curves=curves)

    def with_credit_curve(
        self, legal_entity_id: str, currency: str, curve
    ) -> "CreditRatesProvider":
        curves: Dict[Tuple[str, str], object] = dict(self.credit_curves)
        curves[(legal_entity_id, currency)] = curve
        return replace(self, credit_curves=curves)

    def with_recovery_rates(
        self, legal_entity_id: str, recovery_rates: RecoveryRates
    ) -> "CreditRatesProvider":
        rates: Dict[str, RecoveryRates] = dict(self.recovery_rate_curves)
        rates[legal_entity_id] = recovery_rates
        return replace(self, recovery_rate_curves=rates)
