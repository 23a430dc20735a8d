"""
Amount Normalization Tests
==========================

Tests for decimal/thousands separator disambiguation.

Usage:
    pytest tests/test_amount.py -v
"""

from decimal import Decimal

import pytest

from extraction.amount import normalize_amount


class TestNormalizeAmount:
    """Tests for the rightmost-separator heuristic."""

    @pytest.mark.parametrize("raw, expected", [
        ("1.234,56", Decimal("1234.56")),
        ("1,234.56", Decimal("1234.56")),
        ("1 234.56", Decimal("1234.56")),
        ("1234", Decimal("1234")),
        ("12,5", Decimal("12.50")),
        ("0.99", Decimal("0.99")),
    ])
    def test_common_formats(self, raw, expected):
        assert normalize_amount(raw, 2) == expected

    def test_three_digit_tail_is_read_as_decimal(self):
        """A single grouping separator before three digits is truncated to the currency's decimals."""
        assert normalize_amount("1.234", 2) == Decimal("1.23")

    def test_long_tail_is_grouping(self):
        """More than three characters after the separator means it is not a decimal mark."""
        assert normalize_amount("1.2345", 2) == Decimal("12345")

    def test_fraction_padded(self):
        assert str(normalize_amount("7,5", 2)) == "7.50"

    def test_three_decimal_currency(self):
        assert normalize_amount("1,234", 3) == Decimal("1.234")

    def test_trailing_separator(self):
        assert normalize_amount("12.", 2) == Decimal("12.00")

    def test_leading_separator_is_not_decimal(self):
        assert normalize_amount(".50", 2) == Decimal("50")


class TestZeroDecimalCurrency:
    """Tests for currencies without minor units."""

    def test_separators_stripped(self):
        assert normalize_amount("1.234", 0) == Decimal("1234")

    def test_mixed_separators(self):
        assert normalize_amount("1,234,567", 0) == Decimal("1234567")


class TestParseFailures:
    """Unparsable tokens become zero instead of raising."""

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "-5", "1e5", "NaN"])
    def test_unparsable_is_zero(self, raw):
        assert normalize_amount(raw, 2) == Decimal(0)

    def test_none_is_zero(self):
        assert normalize_amount(None, 2) == Decimal(0)
