from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Dict, List, Union

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from fxconvert.core.config import get_settings
from fxconvert.models.rates import (
    ConversionFailure,
    ConversionRequest,
    ConversionSuccess,
)
from fxconvert.services.currency_service import CurrencyService

"""Rates router exposing the conversion pipeline over HTTP.

Endpoints:
    - GET /rates/convert?from=USD&to=THB&amount=100 -> conversion outcome
    - GET /rates/currencies                         -> supported codes, in order
    - GET /rates/currencies/{code}                  -> membership check
    - DELETE /rates/cache                           -> drop memoized outcomes

Failed conversions (HTTP/parse/network) are returned with 200 and
``success: false``; argument errors become 422 via the error handlers.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


@lru_cache
def get_currency_service() -> CurrencyService:
    settings = get_settings()
    return CurrencyService(
        settings.supported_currencies,
        api_url=settings.api_base_url,
        cache_ttl=timedelta(seconds=settings.rates_cache_ttl_seconds),
        timeout=settings.http_timeout_seconds,
    )


class CurrencySupport(BaseModel):
    currency: str
    supported: bool


@router.get(
    "/convert",
    response_model=Union[ConversionSuccess, ConversionFailure],
    summary="Convert an amount between two supported currencies",
)
async def convert(
    from_: str = Query(..., alias="from", description="Source currency code"),
    to: str = Query(..., description="Target currency code"),
    amount: float = Query(..., description="Amount in the source currency"),
    svc: CurrencyService = Depends(get_currency_service),
):
    request = ConversionRequest(from_=from_.upper(), to=to.upper(), amount=amount)
    return await svc.convert(request)


@router.get("/currencies", summary="List supported currency codes")
async def list_currencies(
    svc: CurrencyService = Depends(get_currency_service),
) -> List[str]:
    return list(svc.get_supported_currencies())


@router.get(
    "/currencies/{code}",
    response_model=CurrencySupport,
    summary="Check whether a currency code is supported",
)
async def check_currency(
    code: str,
    svc: CurrencyService = Depends(get_currency_service),
):
    return CurrencySupport(currency=code.upper(), supported=svc.is_supported(code.upper()))


@router.delete("/cache", summary="Clear memoized conversion results")
async def clear_cache(
    svc: CurrencyService = Depends(get_currency_service),
) -> Dict[str, Union[str, int]]:
    removed = svc.clear_cache()
    return {"status": "cleared", "removed": removed}
