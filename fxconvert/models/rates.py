from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Union

from pydantic import BaseModel, ConfigDict

from .constants import ErrorKind


@dataclass(frozen=True)
class ConversionRequest:
    """One conversion call: ``amount`` of ``from_`` expressed in ``to``.

    Fields are unconstrained; amount and currency checks live in the argument
    validator and raise ``ValidationError``.
    """

    from_: str
    to: str
    amount: float

    def as_params(self) -> Dict[str, str]:
        return {
            "base": self.from_,
            "symbols": self.to,
            "amount": format_amount(self.amount),
        }


def format_amount(amount: float) -> str:
    # 100.0 -> "100", 12.5 -> "12.5"
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


class CurrencyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: float
    base: str
    date: str
    rates: Dict[str, float]


class ApiError(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    type: str


class ConversionSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    data: CurrencyResult


class ConversionFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ApiError

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "ConversionFailure":
        return cls(error=ApiError(message=message, type=kind.value))


ConversionResult = Union[ConversionSuccess, ConversionFailure]
