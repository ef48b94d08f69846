"""Tests for tuition formatting helpers."""

from __future__ import annotations

import pytest

from schoolhouse.formatting import (
    PAYMENT_PLAN_MONTHS,
    format_currency,
    format_monthly,
    monthly_payments,
)

# ---------- format_currency ----------


class TestFormatCurrency:
    def test_thousands_separator(self) -> None:
        assert format_currency(12_500) == "$12,500"

    def test_rounds_half_up(self) -> None:
        assert format_currency(1_312.5) == "$1,313"
        assert format_currency(1_312.49) == "$1,312"

    def test_none_is_zero(self) -> None:
        assert format_currency(None) == "$0"

    def test_negative(self) -> None:
        assert format_currency(-50) == "-$50"

    def test_tiny_negative_rounds_to_zero(self) -> None:
        assert format_currency(-0.2) == "$0"


# ---------- monthly payments ----------


class TestMonthlyPayments:
    def test_plans(self) -> None:
        assert PAYMENT_PLAN_MONTHS == (10, 12)
        assert monthly_payments(6_000) == {10: 600.0, 12: 500.0}

    def test_format_monthly(self) -> None:
        assert format_monthly(7_500, 12) == "$625 / month"

    def test_format_monthly_rounds(self) -> None:
        assert format_monthly(1_000, 12) == "$83 / month"

    @pytest.mark.parametrize("months", [0, -1])
    def test_non_positive_months_rejected(self, months: int) -> None:
        with pytest.raises(ValueError, match="months"):
            format_monthly(1_000, months)
