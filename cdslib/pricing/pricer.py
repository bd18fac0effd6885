"""
ISDA standard model pricer for single-name CDS.

The pricer validates the market data, works out the step-in and effective
start dates, and delegates to the leg integrators and their sensitivities.
"""

import logging
from datetime import date
from typing import Tuple, Union

from cdslib.curves.base import IsdaCompliantCurve
from cdslib.curves.provider import ConstantRecoveryRates, CreditRatesProvider
from cdslib.curves.sensitivity import PointSensitivities
from cdslib.errors import ConfigurationError, ExpiredTradeError, require_not_none
from cdslib.instruments.cds import ResolvedCds
from cdslib.pricing.annuity import risky_annuity as _risky_annuity
from cdslib.pricing.protection import protection_full, protection_leg as _protection_leg
from cdslib.pricing.sensitivity import (
    protection_leg_sensitivity as _protection_leg_sensitivity,
    risky_annuity_sensitivity as _risky_annuity_sensitivity,
)
from cdslib.pricing.types import (
    AccrualOnDefaultFormula,
    CurrencyAmount,
    PriceType,
    PricerConfig,
)

logger = logging.getLogger(__name__)


class IsdaCdsProductPricer:
    """
    Pricer for resolved CDS trades under the ISDA standard model.

    Every measure is a pure function of the trade, the rates provider and the
    reference date (normally the cash settlement date); the only pricer state
    is the accrual on default formula.
    """

    def __init__(
        self,
        formula: Union[str, AccrualOnDefaultFormula] = AccrualOnDefaultFormula.ORIGINAL_ISDA,
    ):
        require_not_none(formula=formula)
        self.formula = AccrualOnDefaultFormula.of(formula)
        self.omega = self.formula.omega

    @classmethod
    def from_config(cls, config: PricerConfig) -> "IsdaCdsProductPricer":
        require_not_none(config=config)
        return cls(config.formula)

    def __repr__(self) -> str:
        return f"IsdaCdsProductPricer(formula={self.formula.name})"

    # ------------------------------------------------------------------
    # Market data
    # ------------------------------------------------------------------
    @staticmethod
    def _is_expired(cds: ResolvedCds, rates_provider: CreditRatesProvider) -> bool:
        return cds.protection_end_date <= rates_provider.valuation_date

    @staticmethod
    def _dates(cds: ResolvedCds, rates_provider: CreditRatesProvider) -> Tuple[date, date]:
        stepin_date = cds.stepin_date_offset.adjust(rates_provider.valuation_date)
        return stepin_date, cds.effective_start_date(stepin_date)

    @staticmethod
    def _recovery_rate(cds: ResolvedCds, rates_provider: CreditRatesProvider) -> float:
        recovery_rates = rates_provider.recovery_rates(cds.legal_entity_id)
        if not isinstance(recovery_rates, ConstantRecoveryRates):
            raise ConfigurationError(
                "Recovery rates must be ConstantRecoveryRates, "
                f"got {type(recovery_rates).__name__}"
            )
        return recovery_rates.recovery_rate(cds.protection_end_date)

    @staticmethod
    def _curves(
        cds: ResolvedCds, rates_provider: CreditRatesProvider
    ) -> Tuple[IsdaCompliantCurve, IsdaCompliantCurve]:
        discount_curve = rates_provider.discount_factors(cds.currency)
        if not isinstance(discount_curve, IsdaCompliantCurve):
            raise ConfigurationError(
                f"Discount curve for {cds.currency} is not an ISDA compliant zero rate curve"
            )
        credit_curve = rates_provider.survival_probabilities(
            cds.legal_entity_id, cds.currency
        )
        if not isinstance(credit_curve, IsdaCompliantCurve):
            raise ConfigurationError(
                f"Credit curve for {cds.legal_entity_id} is not an ISDA compliant zero rate curve"
            )
        if discount_curve.day_count != credit_curve.day_count:
            raise ConfigurationError(
                "Day count conventions of discount curve and credit curve must be the same: "
                f"{discount_curve.day_count} != {credit_curve.day_count}"
            )
        return discount_curve, credit_curve

    @classmethod
    def _sensitivity_curves(
        cls, cds: ResolvedCds, rates_provider: CreditRatesProvider
    ) -> Tuple[IsdaCompliantCurve, IsdaCompliantCurve]:
        discount_curve, credit_curve = cls._curves(cds, rates_provider)
        # node sensitivities are keyed by curve name
        if discount_curve.name == credit_curve.name:
            raise ConfigurationError(
                "Discount curve and credit curve must have distinct names to key "
                f"their node sensitivities, both are named '{discount_curve.name}'"
            )
        return discount_curve, credit_curve

    # ------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------
    def price(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
        price_type: PriceType,
    ) -> float:
        """Price per unit notional: protection leg minus coupon leg."""
        require_not_none(
            cds=cds,
            rates_provider=rates_provider,
            reference_date=reference_date,
            price_type=price_type,
        )
        if self._is_expired(cds, rates_provider):
            logger.debug("CDS expired on %s, price is zero", cds.protection_end_date)
            return 0.0
        stepin_date, effective_start_date = self._dates(cds, rates_provider)
        recovery_rate = self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._curves(cds, rates_provider)

        protection = _protection_leg(
            cds, discount_curve, credit_curve, reference_date, effective_start_date, recovery_rate
        )
        rpv01 = _risky_annuity(
            cds,
            discount_curve,
            credit_curve,
            reference_date,
            stepin_date,
            effective_start_date,
            price_type,
            self.formula,
        )
        return protection - rpv01 * cds.fixed_rate

    def present_value(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
        price_type: PriceType,
    ) -> CurrencyAmount:
        price = self.price(cds, rates_provider, reference_date, price_type)
        return CurrencyAmount(cds.currency, cds.signed_notional() * price)

    def par_spread(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
    ) -> float:
        """Coupon rate that makes the clean price zero."""
        require_not_none(
            cds=cds, rates_provider=rates_provider, reference_date=reference_date
        )
        if self._is_expired(cds, rates_provider):
            raise ExpiredTradeError(
                f"CDS already expired: protection ended on {cds.protection_end_date}"
            )
        stepin_date, effective_start_date = self._dates(cds, rates_provider)
        recovery_rate = self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._curves(cds, rates_provider)

        protection = _protection_leg(
            cds, discount_curve, credit_curve, reference_date, effective_start_date, recovery_rate
        )
        annuity = _risky_annuity(
            cds,
            discount_curve,
            credit_curve,
            reference_date,
            stepin_date,
            effective_start_date,
            PriceType.CLEAN,
            self.formula,
        )
        return protection / annuity

    def rpv01(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
        price_type: PriceType,
    ) -> CurrencyAmount:
        """Risky annuity scaled by the signed notional."""
        annuity = self.risky_annuity(cds, rates_provider, reference_date, price_type)
        return CurrencyAmount(cds.currency, cds.signed_notional() * annuity)

    def recovery01(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
    ) -> CurrencyAmount:
        """Present value change per unit increase of the recovery rate."""
        require_not_none(
            cds=cds, rates_provider=rates_provider, reference_date=reference_date
        )
        if cds.protection_end_date < rates_provider.valuation_date:
            raise ExpiredTradeError(
                f"CDS already expired: protection ended on {cds.protection_end_date}"
            )
        _, effective_start_date = self._dates(cds, rates_provider)
        self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._curves(cds, rates_provider)

        full = protection_full(
            cds, discount_curve, credit_curve, reference_date, effective_start_date
        )
        return CurrencyAmount(cds.currency, -cds.signed_notional() * full)

    def present_value_sensitivity(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
    ) -> PointSensitivities:
        """Present value sensitivity to every discount and credit curve node."""
        require_not_none(
            cds=cds, rates_provider=rates_provider, reference_date=reference_date
        )
        if self._is_expired(cds, rates_provider):
            logger.debug("CDS expired on %s, no sensitivity", cds.protection_end_date)
            return PointSensitivities.none()
        stepin_date, effective_start_date = self._dates(cds, rates_provider)
        recovery_rate = self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._sensitivity_curves(cds, rates_provider)

        signed_notional = cds.signed_notional()
        protection_sensi = _protection_leg_sensitivity(
            cds, discount_curve, credit_curve, reference_date, effective_start_date, recovery_rate
        )
        annuity_sensi = _risky_annuity_sensitivity(
            cds,
            discount_curve,
            credit_curve,
            reference_date,
            stepin_date,
            effective_start_date,
            self.formula,
        )
        return protection_sensi * signed_notional + annuity_sensi * (
            -cds.fixed_rate * signed_notional
        )

    def protection_leg(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
    ) -> float:
        """Protection leg value per unit notional."""
        require_not_none(
            cds=cds, rates_provider=rates_provider, reference_date=reference_date
        )
        if self._is_expired(cds, rates_provider):
            return 0.0
        _, effective_start_date = self._dates(cds, rates_provider)
        recovery_rate = self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._curves(cds, rates_provider)
        return _protection_leg(
            cds, discount_curve, credit_curve, reference_date, effective_start_date, recovery_rate
        )

    def risky_annuity(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
        price_type: PriceType,
    ) -> float:
        """Risky annuity per unit notional."""
        require_not_none(
            cds=cds,
            rates_provider=rates_provider,
            reference_date=reference_date,
            price_type=price_type,
        )
        if self._is_expired(cds, rates_provider):
            return 0.0
        stepin_date, effective_start_date = self._dates(cds, rates_provider)
        self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._curves(cds, rates_provider)
        return _risky_annuity(
            cds,
            discount_curve,
            credit_curve,
            reference_date,
            stepin_date,
            effective_start_date,
            price_type,
            self.formula,
        )

    def protection_leg_sensitivity(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
    ) -> PointSensitivities:
        """Protection leg sensitivity per unit notional."""
        require_not_none(
            cds=cds, rates_provider=rates_provider, reference_date=reference_date
        )
        if self._is_expired(cds, rates_provider):
            return PointSensitivities.none()
        _, effective_start_date = self._dates(cds, rates_provider)
        recovery_rate = self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._sensitivity_curves(cds, rates_provider)
        return _protection_leg_sensitivity(
            cds, discount_curve, credit_curve, reference_date, effective_start_date, recovery_rate
        )

    def risky_annuity_sensitivity(
        self,
        cds: ResolvedCds,
        rates_provider: CreditRatesProvider,
        reference_date: date,
    ) -> PointSensitivities:
        """Risky annuity sensitivity per unit notional."""
        require_not_none(
            cds=cds, rates_provider=rates_provider, reference_date=reference_date
        )
        if self._is_expired(cds, rates_provider):
            return PointSensitivities.none()
        stepin_date, effective_start_date = self._dates(cds, rates_provider)
        self._recovery_rate(cds, rates_provider)
        discount_curve, credit_curve = self._sensitivity_curves(cds, rates_provider)
        return _risky_annuity_sensitivity(
            cds,
            discount_curve,
            credit_curve,
            reference_date,
            stepin_date,
            effective_start_date,
            self.formula,
        )


DEFAULT = IsdaCdsProductPricer(AccrualOnDefaultFormula.ORIGINAL_ISDA)
