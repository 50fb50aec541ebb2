from __future__ import annotations

"""Shared async HTTP client builder.

One place for timeouts and headers so every outbound call behaves the same.
Tests pass their own ``httpx.AsyncClient`` (usually on ``httpx.MockTransport``)
instead of calling this.
"""
from typing import Dict, Optional

import httpx

from fxconvert.core.config import Settings

USER_AGENT = "fxconvert/0.1"


def build_async_client(
    settings: Optional[Settings] = None,
    *,
    timeout: Optional[float] = None,
    extra_headers: Optional[Dict[str, str]] = None,
) -> httpx.AsyncClient:
    if timeout is None:
        timeout = settings.http_timeout_seconds if settings else 5.0
    headers: Dict[str, str] = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=headers,
    )
