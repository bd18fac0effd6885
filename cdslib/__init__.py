"""ISDA Standard Model CDS Pricing Engine.

This package prices single-name credit default swaps with the ISDA standard
model: protection leg, risky annuity with accrued premium on default, par
spread and analytic curve node sensitivities.

Key modules:
- pricing: Leg integrators, sensitivities and the pricer
- curves: ISDA zero rate curves, rates provider and point sensitivities
- instruments: CDS trade definition and coupon periods
- conventions: Day counts, calendars and market conventions
- utils: Numerical kernels and coupon date helpers
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Main modules are imported via subpackages
    "pricing",
    "curves",
    "instruments",
    "conventions",
    "utils",
    "errors",
]
