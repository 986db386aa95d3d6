"""Month keys (``YYYY-MM``), the only billing period the ledger knows."""

import re
from datetime import date

from tenancy_ledger.exceptions import ValidationError

_MONTH_KEY = re.compile(r"(\d{4})-(0[1-9]|1[0-2])")


def month_key(year: int, month: int) -> str:
    """Format a month key; ``month`` is 1-12."""
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be 1-12, got {month}")
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a month key into (year, month)."""
    match = _MONTH_KEY.fullmatch(key or "")
    if match is None:
        raise ValidationError(f"Invalid month key {key!r}; expected YYYY-MM")
    return int(match.group(1)), int(match.group(2))


def validate_month_key(key: str) -> str:
    parse_month_key(key)
    return key


def month_key_of(day: date) -> str:
    return month_key(day.year, day.month)


def current_month_key(today: date | None = None) -> str:
    return month_key_of(today or date.today())


def shift_month(key: str, delta: int) -> str:
    """Move ``delta`` months from ``key``; rolls across year boundaries.

    >>> shift_month("2024-01", -1)
    '2023-12'
    """
    year, month = parse_month_key(key)
    index = year * 12 + (month - 1) + delta
    return month_key(index // 12, index % 12 + 1)


def trailing_months(key: str, count: int) -> list[str]:
    """The ``count`` months ending at ``key``, oldest first."""
    if count < 1:
        raise ValidationError("count must be >= 1")
    return [shift_month(key, -offset) for offset in range(count - 1, -1, -1)]
