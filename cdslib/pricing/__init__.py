"""
CDS pricing under the ISDA standard model.

Main APIs:
---------
    - IsdaCdsProductPricer: price, par spread, RPV01, recovery01 and sensitivities
    - PricerConfig: pricer configuration
"""

from cdslib.pricing.pricer import DEFAULT, IsdaCdsProductPricer
from cdslib.pricing.types import (
    AccrualOnDefaultFormula,
    CurrencyAmount,
    PriceType,
    PricerConfig,
)

__all__ = [
    "DEFAULT",
    "AccrualOnDefaultFormula",
    "CurrencyAmount",
    "IsdaCdsProductPricer",
    "PriceType",
    "PricerConfig",
]
