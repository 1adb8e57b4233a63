"""Validating construction helpers shared by the data models."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from stays.errors import BookingError

M = TypeVar("M", bound=BaseModel)


def describe_errors(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable sentence."""
    parts: list[str] = []
    for err in exc.errors():
        msg = err["msg"].removeprefix("Value error, ")
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def build_validated(model: type[M], error_cls: type[BookingError], **data: Any) -> M:
    """Construct ``model`` or raise ``error_cls`` describing what was wrong."""
    try:
        return model(**data)
    except ValidationError as exc:
        raise error_cls(describe_errors(exc)) from None


def float_to_decimal(value: Any) -> Any:
    """Route floats through ``str`` so 0.1 becomes Decimal('0.1'), not its binary expansion."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value
