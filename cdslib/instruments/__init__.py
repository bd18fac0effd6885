"""CDS instrument definitions."""

from cdslib.instruments.cds import Cds, CreditCouponPaymentPeriod, ResolvedCds

__all__ = ["Cds", "CreditCouponPaymentPeriod", "ResolvedCds"]
