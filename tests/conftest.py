"""Shared fixtures: a scripted rate backend and a controllable clock."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List

import httpx
import pytest

from fxconvert.services.currency_service import CurrencyService

USD_THB = {"amount": 100, "base": "USD", "date": "2024-01-01", "rates": {"THB": 3500}}


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class Backend:
    """Records requests and answers with a configurable responder."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda r: httpx.Response(
            200, json=USD_THB
        )

    @property
    def calls(self) -> int:
        return len(self.requests)

    def reply_json(self, payload: Any, status: int = 200) -> None:
        self.responder = lambda r: httpx.Response(status, json=payload)

    def reply_text(self, body: str, status: int = 200) -> None:
        self.responder = lambda r: httpx.Response(status, text=body)

    def fail_with(self, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self.responder = _raise

    def echo_rates(self, rate: float = 2.0) -> None:
        """Answer with a rate result built from the query parameters."""

        def _echo(request: httpx.Request) -> httpx.Response:
            params: Dict[str, str] = dict(request.url.params)
            payload = {
                "amount": float(params["amount"]),
                "base": params["base"],
                "date": "2024-01-01",
                "rates": {params["symbols"]: float(params["amount"]) * rate},
            }
            return httpx.Response(200, content=json.dumps(payload).encode())

        self.responder = _echo

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_service(backend: Backend, clock: FakeClock):
    services: List[CurrencyService] = []

    def _make(currencies=("USD", "EUR", "JPY", "THB"), ttl_seconds: float = 60):
        client = httpx.AsyncClient(transport=httpx.MockTransport(backend.handle))
        svc = CurrencyService(
            currencies,
            api_url="https://rates.test/v1",
            cache_ttl=timedelta(seconds=ttl_seconds),
            client=client,
            clock=clock,
        )
        services.append(svc)
        return svc

    yield _make

    for svc in services:
        asyncio.run(svc.aclose())


@pytest.fixture
def service(make_service) -> CurrencyService:
    return make_service()
