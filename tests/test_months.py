"""Tests for month key helpers."""

from datetime import date

import pytest

from tenancy_ledger.exceptions import ValidationError
from tenancy_ledger.months import (
    current_month_key,
    month_key,
    month_key_of,
    parse_month_key,
    shift_month,
    trailing_months,
    validate_month_key,
)


class TestMonthKey:
    def test_format_pads(self) -> None:
        assert month_key(2024, 3) == "2024-03"

    def test_invalid_month(self) -> None:
        with pytest.raises(ValidationError):
            month_key(2024, 13)

    def test_parse(self) -> None:
        assert parse_month_key("2023-12") == (2023, 12)

    @pytest.mark.parametrize("key", ["2024-3", "2024-00", "2024-13", "24-01", "", "2024/01", "2024-03\n", " 2024-03", None])
    def test_parse_rejects(self, key) -> None:
        with pytest.raises(ValidationError):
            parse_month_key(key)

    def test_validate_returns_key(self) -> None:
        assert validate_month_key("2024-05") == "2024-05"

    def test_month_key_of(self) -> None:
        assert month_key_of(date(2024, 2, 29)) == "2024-02"

    def test_current_month_key(self) -> None:
        assert current_month_key(date(2025, 7, 4)) == "2025-07"


class TestShiftMonth:
    def test_back_across_year(self) -> None:
        assert shift_month("2024-01", -1) == "2023-12"

    def test_forward_across_year(self) -> None:
        assert shift_month("2023-11", 3) == "2024-02"

    def test_zero(self) -> None:
        assert shift_month("2024-06", 0) == "2024-06"

    def test_trailing_months_oldest_first(self) -> None:
        assert trailing_months("2024-02", 4) == ["2023-11", "2023-12", "2024-01", "2024-02"]

    def test_trailing_months_requires_positive_count(self) -> None:
        with pytest.raises(ValidationError):
            trailing_months("2024-02", 0)
