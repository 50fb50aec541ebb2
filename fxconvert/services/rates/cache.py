from __future__ import annotations

import json
from dataclasses import asdict, dataclass, is_dataclass
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel

from fxconvert.core.logging import emit_record
from fxconvert.models.constants import DEFAULT_CACHE_TTL_SECONDS

"""Result cache for asynchronous operations.

Design:
    - One ResultCache per owning service; every call through the wrapped
      operation shares it, only entries are per key.
    - Key = "<operation>:<canonical JSON of the call arguments>". Argument order
      matters; identity does not (two equal requests share an entry).
    - Expiry is checked at read time only. Stale entries stay in memory until
      the next miss for the same key overwrites them.
    - Whatever the operation returns is stored, failures included.
    - No in-flight de-duplication: concurrent misses on one key each call the
      operation and the last write wins.
"""

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: datetime


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, float) and value.is_integer():
        # 100 and 100.0 name the same request
        return int(value)
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def make_key(
    operation: str, args: Sequence[Any], kwargs: Optional[Mapping[str, Any]] = None
) -> str:
    payload: Any = [_to_plain(a) for a in args]
    if kwargs:
        payload = {"args": payload, "kwargs": {k: _to_plain(v) for k, v in kwargs.items()}}
    return f"{operation}:{json.dumps(payload, default=str, ensure_ascii=False)}"


class ResultCache:
    """TTL-bound memo store shared by all calls of one decorated operation."""

    def __init__(
        self,
        ttl: timedelta = timedelta(seconds=DEFAULT_CACHE_TTL_SECONDS),
        clock: Callable[[], datetime] = _utcnow,
    ):
        if ttl <= timedelta(0):
            raise ValueError("cache ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for ``key`` if it has not expired."""
        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry.expires_at:
            return entry
        return None

    def now(self) -> datetime:
        return self._clock()

    def store(
        self, key: str, value: Any, started_at: Optional[datetime] = None
    ) -> CacheEntry:
        """Store ``value``; expiry counts from ``started_at`` (default: now)."""
        if started_at is None:
            started_at = self._clock()
        entry = CacheEntry(value=value, expires_at=started_at + self._ttl)
        self._entries[key] = entry
        return entry

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count


def with_cache(
    cache: ResultCache,
    fn: Callable[..., Awaitable[T]],
    operation: str,
) -> Callable[..., Awaitable[T]]:
    @wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        key = make_key(operation, args, kwargs)
        entry = cache.lookup(key)
        if entry is not None:
            emit_record("cache", operation, "hit")
            return entry.value
        emit_record("cache", operation, "miss")
        started_at = cache.now()
        result = await fn(*args, **kwargs)
        cache.store(key, result, started_at)
        return result

    return wrapper
