"""Structural validation of decoded rate API responses.

The rate API returns plain JSON. Before it is treated as typed data it is
classified by two predicates, evaluated in order:

  is_currency_result(x)  numeric amount, string base, string date, mapping rates
  is_api_error(x)        message and type keys present

Anything matching neither is a PARSE_ERROR for the caller. The ``parse_*``
helpers wrap the predicates and model construction into a tagged ``Ok`` /
``Err`` result so callers branch on a value instead of catching exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any, Generic, Iterable, TypeVar, Union

from pydantic import ValidationError as SchemaError

from fxconvert.models.rates import ApiError, CurrencyResult

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: str


Parsed = Union[Ok[T], Err]


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid amount
    return isinstance(value, Real) and not isinstance(value, bool)


def is_currency_result(obj: Any) -> bool:
    return (
        isinstance(obj, Mapping)
        and is_number(obj.get("amount"))
        and isinstance(obj.get("base"), str)
        and isinstance(obj.get("date"), str)
        and isinstance(obj.get("rates"), Mapping)
    )


def is_api_error(obj: Any) -> bool:
    return isinstance(obj, Mapping) and "message" in obj and "type" in obj


def is_valid_currency(value: Any, supported: Iterable[str]) -> bool:
    return isinstance(value, str) and value in tuple(supported)


def parse_currency_result(obj: Any) -> Parsed[CurrencyResult]:
    if not is_currency_result(obj):
        return Err("not a rate result")
    try:
        return Ok(CurrencyResult.model_validate(dict(obj)))
    except SchemaError as e:
        return Err(f"invalid rate result: {e.error_count()} field error(s)")


def parse_api_error(obj: Any) -> Parsed[ApiError]:
    if not is_api_error(obj):
        return Err("not an error payload")
    return Ok(ApiError(message=str(obj["message"]), type=str(obj["type"])))
