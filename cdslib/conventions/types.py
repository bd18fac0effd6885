"""
Basic types and enums used across the CDS product and schedule code.
"""

from enum import Enum


class Frequency(Enum):
    """Coupon frequencies (value is the number of months per period)."""

    ANNUAL = 12
    SEMIANNUAL = 6
    QUARTERLY = 3
    MONTHLY = 1

    def months(self) -> int:
        return self.value


class BusinessDayAdjustment(Enum):
    """Business day adjustment rules."""

    NO_ADJUSTMENT = "NO_ADJUSTMENT"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"


class BuySell(Enum):
    """Protection direction; BUY means buying protection."""

    BUY = 1
    SELL = -1

    def normalize(self, amount: float) -> float:
        """Signed amount: positive when buying protection."""
        return abs(amount) * self.value


class ProtectionStartOfDay(Enum):
    """Whether protection starts at the beginning of the accrual start day."""

    NONE = "NONE"
    BEGINNING = "BEGINNING"

    def is_beginning(self) -> bool:
        return self is ProtectionStartOfDay.BEGINNING


class PaymentOnDefault(Enum):
    """What the protection buyer pays on a credit event."""

    ACCRUED_PREMIUM = "ACCRUED_PREMIUM"
    NONE = "NONE"

    def is_accrued_interest(self) -> bool:
        return self is PaymentOnDefault.ACCRUED_PREMIUM
