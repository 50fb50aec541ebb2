"""Domain models for the currency conversion service."""

from .constants import (
    Currency,
    ErrorKind,
    DEFAULT_SUPPORTED,
    DEFAULT_CACHE_TTL_SECONDS,
)  # re-export
from .rates import (
    ApiError,
    ConversionFailure,
    ConversionRequest,
    ConversionResult,
    ConversionSuccess,
    CurrencyResult,
)

__all__ = [
    "Currency",
    "ErrorKind",
    "DEFAULT_SUPPORTED",
    "DEFAULT_CACHE_TTL_SECONDS",
    "ApiError",
    "ConversionFailure",
    "ConversionRequest",
    "ConversionResult",
    "ConversionSuccess",
    "CurrencyResult",
]
