"""Enums and small value types used by the CDS pricer."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class AccrualOnDefaultFormula(Enum):
    """Formula for the accrued premium paid on default.

    ORIGINAL_ISDA: the ISDA standard model, with the half-day offset
    MARKIT_FIX: Markit's correction of the ISDA integrand
    CORRECT: exact integral of the accrued premium
    """

    ORIGINAL_ISDA = "ORIGINAL_ISDA"
    MARKIT_FIX = "MARKIT_FIX"
    CORRECT = "CORRECT"

    @property
    def omega(self) -> float:
        """Offset added to the accrual time inside the integrand."""
        if self is AccrualOnDefaultFormula.ORIGINAL_ISDA:
            return 1.0 / 730.0
        return 0.0

    @classmethod
    def of(cls, value: Union[str, "AccrualOnDefaultFormula"]) -> "AccrualOnDefaultFormula":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(
                f"Unknown accrual on default formula: {value}. "
                f"Available: {[f.name for f in cls]}"
            ) from None


class PriceType(Enum):
    """Whether a price includes the accrued premium."""

    CLEAN = "CLEAN"
    DIRTY = "DIRTY"

    def is_clean(self) -> bool:
        return self is PriceType.CLEAN


@dataclass(frozen=True)
class CurrencyAmount:
    """Amount in a currency."""

    currency: str
    amount: float

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:,.2f}"


@dataclass(frozen=True)
class PricerConfig:
    """Configuration for ``IsdaCdsProductPricer``.

    Attributes:
        formula: Accrual on default formula, enum member or its name
    """

    formula: Union[str, AccrualOnDefaultFormula] = AccrualOnDefaultFormula.ORIGINAL_ISDA

    def __post_init__(self):
        object.__setattr__(self, "formula", AccrualOnDefaultFormula.of(self.formula))
