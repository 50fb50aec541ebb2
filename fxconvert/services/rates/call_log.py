from __future__ import annotations

import asyncio
import inspect
import json
from functools import wraps
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from fxconvert.core.logging import emit_record

F = TypeVar("F", bound=Callable[..., Any])


def describe(value: Any) -> str:
    """Serialize a value for a log record (models dumped to JSON)."""
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    try:
        return json.dumps(value, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def with_logging(fn: F, operation: str) -> F:
    """Record the call arguments and the resolved result of ``fn``.

    Works for plain and async callables. An awaitable result is handed back
    still pending: futures get a done callback, coroutines are wrapped in one
    that records the value once awaited. Values and exceptions pass through
    unchanged.
    """

    def _resolved(value: Any) -> None:
        emit_record("return", operation, describe(value))

    def _raised(exc: BaseException) -> None:
        emit_record("raise", operation, f"{type(exc).__name__}: {exc}")

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        arg_text = ", ".join(
            [describe(a) for a in args] + [f"{k}={describe(v)}" for k, v in kwargs.items()]
        )
        emit_record("call", operation, arg_text)
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            _raised(e)
            raise

        if asyncio.isfuture(result):

            def _on_done(fut: "asyncio.Future[Any]") -> None:
                if fut.cancelled():
                    return
                exc = fut.exception()
                if exc is not None:
                    _raised(exc)
                else:
                    _resolved(fut.result())

            result.add_done_callback(_on_done)
            return result

        if inspect.isawaitable(result):

            async def _observe() -> Any:
                try:
                    value = await result
                except Exception as e:
                    _raised(e)
                    raise
                _resolved(value)
                return value

            return _observe()

        _resolved(result)
        return result

    return wrapper  # type: ignore[return-value]
