"""Date-range models: availability windows, blocked ranges and stay requests.

All ranges are half-open ``[start, end)`` over calendar dates, so a stay
checking out on the day another checks in does not overlap it.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stays.errors import InvalidStayRange

from .base import build_validated


class DateRange(BaseModel):
    """A half-open ``[start_date, end_date)`` span of nights."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.end_date <= self.start_date:
            raise ValueError("end date must be after start date")
        return self

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    @classmethod
    def build(cls, start_date: date | str, end_date: date | str, **extra):
        return build_validated(
            cls, InvalidStayRange, start_date=start_date, end_date=end_date, **extra
        )


class AvailabilityWindow(DateRange):
    """A host-declared range during which the property can be booked."""


class BlockedRange(DateRange):
    """A range explicitly closed to booking (maintenance, owner use, a confirmed stay)."""

    reason: Optional[str] = None


class StayRequest(BaseModel):
    """The dates and party size a guest asks for."""

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date
    guest_count: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> "StayRequest":
        if self.check_out <= self.check_in:
            raise ValueError("check-out date must be after check-in date")
        return self

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @classmethod
    def build(
        cls,
        check_in: date | str,
        check_out: date | str,
        guest_count: int = 1,
    ) -> "StayRequest":
        """Validate and build a stay, raising ``InvalidStayRange`` on bad input."""
        return build_validated(
            cls,
            InvalidStayRange,
            check_in=check_in,
            check_out=check_out,
            guest_count=guest_count,
        )
