"""
Curves package - ISDA curves and the market data the CDS pricer reads.

Main APIs:
---------
    - IsdaZeroRateCurve: Discount and survival curve with ISDA interpolation
    - CreditRatesProvider: Curves and recovery rates by currency and entity
    - PointSensitivities: Node sensitivities returned by the pricer
"""

from cdslib.curves.base import BaseCurve, IsdaCompliantCurve
from cdslib.curves.isda import IsdaZeroRateCurve, create_flat_isda_curve
from cdslib.curves.provider import (
    ConstantRecoveryRates,
    CreditRatesProvider,
    RecoveryRates,
)
from cdslib.curves.sensitivity import NodeId, PointSensitivities

__all__ = [
    "BaseCurve",
    "ConstantRecoveryRates",
    "CreditRatesProvider",
    "IsdaCompliantCurve",
    "IsdaZeroRateCurve",
    "NodeId",
    "PointSensitivities",
    "RecoveryRates",
    "create_flat_isda_curve",
]
