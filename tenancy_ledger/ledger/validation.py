"""Input checks shared by ledger commands."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from tenancy_ledger.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_text(value: str | None, field_name: str) -> str:
    """Return the stripped value or raise if it is blank."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def to_amount(value: Any, field_name: str, *, positive: bool = True) -> Decimal:
    """Parse a money amount.

    ``positive`` requires > 0 (payments, expenses); otherwise >= 0 (rent,
    advance).
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be finite")
    if positive and amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def to_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}") from e


def to_date(value: date | str | None, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD)") from e
