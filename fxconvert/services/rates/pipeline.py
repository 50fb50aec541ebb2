from __future__ import annotations

from typing import Awaitable, Callable, Tuple, TypeVar

from .cache import ResultCache, with_cache
from .call_log import with_logging
from .guards import with_validation

T = TypeVar("T")


def build_pipeline(
    fn: Callable[..., Awaitable[T]],
    *,
    cache: ResultCache,
    supported: Tuple[str, ...],
    operation: str,
) -> Callable[..., Awaitable[T]]:
    """Compose logging -> cache -> validation around an async operation.

    Per call: log entry, cache lookup, argument guards, the operation itself
    (skipped on a hit), cache write on a miss, then the resolved-value log.
    Built once per owning service so the cache outlives single calls.
    """
    validated = with_validation(fn, supported, operation)
    cached = with_cache(cache, validated, operation)
    return with_logging(cached, operation)

