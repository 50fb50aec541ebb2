from __future__ import annotations

import math
from collections.abc import Mapping
from functools import wraps
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, TypeVar

from fxconvert.core.errors import ValidationError
from fxconvert.core.logging import emit_record
from fxconvert.services.response_validation import is_number, is_valid_currency

"""Argument guards run before the conversion call.

Arguments are inspected structurally: a mapping key or an attribute named
``amount`` / ``from`` / ``to`` qualifies, whatever the argument's type. Objects
use ``from_`` for the reserved word. Guards never mutate arguments; they either
raise ``ValidationError`` or let the call through unchanged.
"""

F = TypeVar("F", bound=Callable[..., Any])

_MISSING = object()


def _field(obj: Any, *names: str) -> Any:
    if isinstance(obj, Mapping):
        for name in names:
            if name in obj:
                return obj[name]
        return _MISSING
    for name in names:
        value = getattr(obj, name, _MISSING)
        if value is not _MISSING:
            return value
    return _MISSING


def _is_structured(obj: Any) -> bool:
    return obj is not None and not isinstance(obj, (str, bytes, int, float, bool))


def validate_amount(args: Sequence[Any], operation: str = "convert") -> Optional[float]:
    """Check the first argument carrying a numeric ``amount``.

    Returns the validated amount, or None when no argument carries one.
    """
    for arg in args:
        if not _is_structured(arg):
            continue
        amount = _field(arg, "amount")
        if amount is _MISSING or not is_number(amount):
            continue
        if not math.isfinite(amount):
            raise ValidationError("amount must be a finite number")
        if amount <= 0:
            raise ValidationError(f"amount must be positive, got {amount}")
        emit_record("validate", operation, {"amount": amount})
        return amount
    return None


def validate_currencies(args: Sequence[Any], supported: Iterable[str]) -> None:
    supported = tuple(supported)
    for arg in args:
        if not _is_structured(arg):
            continue
        for names in (("from", "from_"), ("to",)):
            code = _field(arg, *names)
            if isinstance(code, str) and not is_valid_currency(code, supported):
                raise ValidationError(
                    f"Invalid currency: {code} (supported: {', '.join(supported)})"
                )


def with_validation(
    fn: F, supported: Tuple[str, ...], operation: str = "convert"
) -> F:
    """Wrap ``fn`` so its arguments are validated before it is invoked.

    The wrapper is synchronous: for an async ``fn`` the guards run when the
    wrapper is called and the coroutine is returned untouched.
    """

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        values = list(args) + list(kwargs.values())
        validate_amount(values, operation)
        validate_currencies(values, supported)
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
