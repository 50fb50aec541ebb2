"""Interception pipeline wrapped around the conversion call."""

from .cache import CacheEntry, ResultCache, make_key, with_cache
from .call_log import with_logging
from .guards import validate_amount, validate_currencies, with_validation
from .pipeline import build_pipeline

__all__ = [
    "CacheEntry",
    "ResultCache",
    "make_key",
    "with_cache",
    "with_logging",
    "validate_amount",
    "validate_currencies",
    "with_validation",
    "build_pipeline",
]
