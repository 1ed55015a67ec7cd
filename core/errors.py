from __future__ import annotations


class PriceServiceError(Exception):
    """Base class for errors surfaced to callers of the price service."""

    status_code: int = 400


class InvalidAddressError(PriceServiceError):
    """Token address is not a valid chain address."""


class InvalidAmountError(PriceServiceError):
    """Amount is not numeric, has too many decimals, or is not positive."""


class PairNotFoundError(PriceServiceError):
    """Factory has no pair for the requested tokens."""


class InsufficientLiquidityError(PriceServiceError):
    """One of the pair reserves is zero."""


class ReserveFetchFailedError(PriceServiceError):
    """Catch-all for unexpected failures while computing a quote."""


class TransportError(PriceServiceError):
    """Raised when the chain node cannot be reached or answers garbage."""

    status_code = 502
