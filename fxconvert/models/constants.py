"""Domain constants and enumerations for validation.

``Currency`` is the closed set of codes the application knows about; a service
instance narrows it further to the codes it was constructed with.
"""

from enum import Enum
from typing import Tuple


class Currency(str, Enum):
    """Currency codes accepted by the rate API integration."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    THB = "THB"
    AUD = "AUD"
    CAD = "CAD"
    CHF = "CHF"


class ErrorKind(str, Enum):
    """Failure kinds produced locally (remote error payloads keep their own type)."""

    HTTP_ERROR = "HTTP_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


DEFAULT_SUPPORTED: Tuple[str, ...] = ("USD", "EUR", "JPY", "THB")
DEFAULT_CACHE_TTL_SECONDS = 60
