"""Exceptions raised by the CDS pricer entry points."""


class CdsPricingError(ValueError):
    """Base class for pricing failures caused by the caller's inputs."""

    pass


class InvalidArgumentError(CdsPricingError):
    """Raised when a required input is missing or malformed."""

    pass


class ConfigurationError(CdsPricingError):
    """Raised when market data or curves are not usable by the ISDA model.

    Covers non ISDA-compliant curves, non-constant recovery rates, mismatched
    day counts between discount and credit curves, and missing market data.
    """

    pass


class ExpiredTradeError(ConfigurationError):
    """Raised when a measure that needs a live trade is asked of an expired one."""

    pass


def require_not_none(**values) -> None:
    """Raise InvalidArgumentError naming the first argument that is None."""
    for name, value in values.items():
        if value is None:
            raise InvalidArgumentError(f"{name} must not be None")
