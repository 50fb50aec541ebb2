"""Tests for the TTL result cache and its wrapper."""

import asyncio
import logging
from datetime import timedelta

import pytest

from fxconvert.core.errors import ValidationError
from fxconvert.models.rates import ConversionRequest
from fxconvert.services.rates.cache import ResultCache, make_key, with_cache


def test_key_is_value_based_and_order_sensitive() -> None:
    a = make_key("convert", [ConversionRequest("USD", "THB", 100)])
    b = make_key("convert", [ConversionRequest("USD", "THB", 100)])

    assert a == b
    assert a.startswith("convert:")
    assert make_key("convert", [1, 2]) != make_key("convert", [2, 1])
    assert make_key("convert", [1]) != make_key("other", [1])
    assert make_key("convert", [1], {"x": 1}) != make_key("convert", [1])


def test_lookup_respects_expiry(clock) -> None:
    cache = ResultCache(timedelta(seconds=10), clock)
    cache.store("k", "v")

    clock.advance(9.999)
    assert cache.lookup("k").value == "v"

    clock.advance(0.001)
    assert cache.lookup("k") is None
    # stale entries stay until overwritten
    assert len(cache) == 1


def test_ttl_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ResultCache(timedelta(0))


def test_clear_drops_entries(clock) -> None:
    cache = ResultCache(timedelta(seconds=10), clock)
    cache.store("a", 1)
    cache.store("b", 2)

    assert cache.clear() == 2
    assert cache.lookup("a") is None


def _counting(results):
    calls = []

    async def op(*args):
        calls.append(args)
        return results[len(calls) - 1]

    return op, calls


def test_wrapper_hits_within_ttl_and_refetches_after(clock, caplog) -> None:
    caplog.set_level(logging.INFO, logger="fxconvert.pipeline")
    cache = ResultCache(timedelta(seconds=60), clock)
    op, calls = _counting([{"n": 1}, {"n": 2}])
    cached = with_cache(cache, op, "convert")

    async def scenario():
        first = await cached("USD", "THB", 100)
        second = await cached("USD", "THB", 100)
        clock.advance(60)
        third = await cached("USD", "THB", 100)
        return first, second, third

    first, second, third = asyncio.run(scenario())

    assert len(calls) == 2
    assert second is first
    assert third == {"n": 2}
    stages = [r.payload for r in caplog.records if getattr(r, "stage", None) == "cache"]
    assert stages == ["miss", "hit", "miss"]


def test_wrapper_keys_on_every_argument(clock) -> None:
    cache = ResultCache(timedelta(seconds=60), clock)
    op, calls = _counting(list(range(10)))
    cached = with_cache(cache, op, "convert")

    async def scenario():
        for args in [("USD", "THB", 100), ("EUR", "THB", 100), ("USD", "JPY", 100), ("USD", "THB", 50)]:
            await cached(*args)
            await cached(*args)

    asyncio.run(scenario())

    assert len(calls) == 4
    assert len(cache) == 4


def test_exceptions_are_not_cached(clock) -> None:
    cache = ResultCache(timedelta(seconds=60), clock)

    async def op(request):
        raise ValidationError("bad")

    cached = with_cache(cache, op, "convert")

    with pytest.raises(ValidationError):
        asyncio.run(cached({"amount": -1}))
    assert len(cache) == 0


def test_concurrent_misses_both_invoke(clock) -> None:
    cache = ResultCache(timedelta(seconds=60), clock)
    calls = []

    async def op(x):
        calls.append(x)
        await asyncio.sleep(0)
        return len(calls)

    cached = with_cache(cache, op, "convert")

    async def scenario():
        return await asyncio.gather(cached(1), cached(1))

    results = asyncio.run(scenario())

    assert len(calls) == 2
    assert sorted(results) == [2, 2]
    assert cache.lookup(make_key("convert", [1])).value == 2


def test_key_treats_integral_floats_as_ints() -> None:
    assert make_key("convert", [ConversionRequest("USD", "THB", 100)]) == make_key(
        "convert", [ConversionRequest("USD", "THB", 100.0)]
    )
    assert make_key("convert", [{"amount": 2.0}]) == make_key("convert", [{"amount": 2}])
    assert make_key("convert", [{"amount": 2.5}]) != make_key("convert", [{"amount": 2}])


def test_expiry_measured_from_before_the_call(clock) -> None:
    cache = ResultCache(timedelta(seconds=60), clock)

    async def slow(x):
        clock.advance(45)
        return x

    cached = with_cache(cache, slow, "convert")
    asyncio.run(cached(1))

    clock.advance(15)
    assert cache.lookup(make_key("convert", [1])) is None
