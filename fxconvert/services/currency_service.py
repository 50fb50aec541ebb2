"""Currency conversion service backed by the Frankfurter rate API.

Design:
- One outbound call per conversion: GET {api_url}/latest?base=&symbols=&amount=
- The call is wrapped once, at construction, in the interception pipeline
  (logging -> result cache -> argument guards); see services/rates/pipeline.py.
- Network, HTTP and parse failures come back as ``ConversionFailure`` values and
  are cached for the same TTL as successes. Bad arguments raise
  ``ValidationError`` instead and never reach the cache or the network.
- Supported currencies are fixed at construction and must be ``Currency`` codes.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Iterable, Optional, Tuple

import httpx

from fxconvert.core.errors import ValidationError
from fxconvert.models.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_SUPPORTED,
    Currency,
    ErrorKind,
)
from fxconvert.models.rates import (
    ConversionFailure,
    ConversionRequest,
    ConversionResult,
    ConversionSuccess,
)
from fxconvert.services.http_client import build_async_client
from fxconvert.services.rates.cache import ResultCache
from fxconvert.services.rates.call_log import with_logging
from fxconvert.services.rates.pipeline import build_pipeline
from fxconvert.services.response_validation import (
    Ok,
    is_number,
    is_valid_currency,
    parse_api_error,
    parse_currency_result,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.frankfurter.dev/v1"
UNKNOWN_FORMAT = "Unknown response format"


def _coerce_request(request: Any) -> ConversionRequest:
    """Build a checked ConversionRequest; raises KeyError, TypeError or ValidationError."""
    if isinstance(request, Mapping):
        request = ConversionRequest(
            from_=request.get("from", request.get("from_")),
            to=request["to"],
            amount=request["amount"],
        )
    elif not isinstance(request, ConversionRequest):
        raise TypeError(f"cannot build a conversion request from {type(request).__name__}")

    # the guards skip arguments whose amount is not a number
    if not is_number(request.amount):
        raise ValidationError(f"amount must be a number, got {request.amount!r}")
    if not math.isfinite(request.amount) or request.amount <= 0:
        raise ValidationError(f"amount must be a positive finite number, got {request.amount}")
    for code in (request.from_, request.to):
        if not isinstance(code, str):
            raise ValidationError(f"currency code must be a string, got {code!r}")
    return request


class CurrencyService:
    """Converts amounts between a fixed set of supported currencies."""

    def __init__(
        self,
        supported_currencies: Iterable[str] = DEFAULT_SUPPORTED,
        *,
        api_url: str = DEFAULT_API_URL,
        cache_ttl: timedelta = timedelta(seconds=DEFAULT_CACHE_TTL_SECONDS),
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        codes = tuple(supported_currencies)
        if not codes:
            raise ValueError("at least one supported currency is required")
        known = {c.value for c in Currency}
        for code in codes:
            if code not in known:
                raise ValueError(f"Unknown currency code '{code}'")
        self._supported: Tuple[str, ...] = codes
        self._api_url = api_url.rstrip("/")
        self._client = client
        self._timeout = timeout
        self._cache = ResultCache(cache_ttl, clock) if clock else ResultCache(cache_ttl)

        self._convert = build_pipeline(
            self._fetch_conversion,
            cache=self._cache,
            supported=self._supported,
            operation="convert",
        )
        self._list_supported = with_logging(
            lambda: self._supported, "get_supported_currencies"
        )
        logger.info("CurrencyService initialized with: %s", ", ".join(codes))

    @property
    def supported_currencies(self) -> Tuple[str, ...]:
        return self._supported

    @property
    def cache(self) -> ResultCache:
        return self._cache

    # Public API -----------------------------------------------
    def convert(self, request: ConversionRequest | Mapping[str, Any]) -> Awaitable[ConversionResult]:
        """Convert ``request.amount`` from ``request.from_`` to ``request.to``.

        Returns an awaitable; await it for the outcome. Raises
        ``ValidationError`` (when awaited) for a non-positive or non-finite
        amount or an unsupported currency code.
        """
        return self._convert(request)

    def get_supported_currencies(self) -> Tuple[str, ...]:
        return self._list_supported()

    def is_supported(self, currency: Any) -> bool:
        return is_valid_currency(currency, self._supported)

    async def aclose(self) -> None:
        """Close the injected HTTP client, if any. The service owns it once passed in."""
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> "CurrencyService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def clear_cache(self) -> int:
        removed = self._cache.clear()
        logger.info("rate cache cleared (%d entries)", removed)
        return removed

    # Internal --------------------------------------------------
    async def _get(self, request: ConversionRequest) -> httpx.Response:
        url = f"{self._api_url}/latest"
        params = request.as_params()
        if self._client is not None:
            return await self._client.get(url, params=params)
        async with build_async_client(timeout=self._timeout) as client:
            return await client.get(url, params=params)

    async def _fetch_conversion(self, request: Any) -> ConversionResult:
        try:
            req = _coerce_request(request)
        except (KeyError, TypeError) as e:
            raise ValidationError(f"malformed conversion request: {e}") from e

        try:
            response = await self._get(req)
        except httpx.RequestError as e:
            logger.warning("rate request failed: %s", e)
            return ConversionFailure.of(ErrorKind.NETWORK_ERROR, str(e) or type(e).__name__)

        if not response.is_success:
            return ConversionFailure.of(
                ErrorKind.HTTP_ERROR, f"HTTP Error: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError:
            return ConversionFailure.of(ErrorKind.PARSE_ERROR, UNKNOWN_FORMAT)

        parsed = parse_currency_result(data)
        if isinstance(parsed, Ok):
            return ConversionSuccess(data=parsed.value)

        api_error = parse_api_error(data)
        if isinstance(api_error, Ok):
            return ConversionFailure(error=api_error.value)

        logger.debug("unrecognized rate payload: %s", parsed.reason)
        return ConversionFailure.of(ErrorKind.PARSE_ERROR, UNKNOWN_FORMAT)
