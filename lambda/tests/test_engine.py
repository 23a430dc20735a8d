"""
Extraction Engine Tests
=======================

Tests for pattern selection, first-match-wins and directionality.

Usage:
    pytest tests/test_engine.py -v
"""

from decimal import Decimal
from unittest.mock import Mock

from extraction import CurrencyCatalog, extract_money
from models import Currency, Direction

EXPENSE_PATTERN = r"you paid (?P<amount>[\d.,]+)\s*(?P<currency>eur|usd|€|\$)?"
INCOME_PATTERN = r"you received (?P<amount>[\d.,]+)\s*(?P<currency>eur|usd|€|\$)?"


class TestGenericExtraction:
    """Tests for extraction with the generic money pattern."""

    def test_no_digits(self, eur):
        fetch = Mock()

        result = extract_money("Your package is on its way", eur, list_currencies=fetch)

        assert result.currency is None
        assert result.amount == Decimal(0)
        assert result.is_expense is False
        fetch.assert_not_called()

    def test_dollar_amount(self, eur, usd):
        result = extract_money("$12.34", eur, list_currencies=Mock(return_value=[usd]))

        assert result.currency is usd
        assert result.amount == Decimal("12.34")
        assert result.direction == Direction.UNKNOWN
        assert result.is_expense is False

    def test_local_currency_no_fetch(self, eur):
        fetch = Mock()

        result = extract_money("Card payment 1.234,56 EUR", eur, list_currencies=fetch)

        assert result.currency is eur
        assert result.amount == Decimal("1234.56")
        fetch.assert_not_called()

    def test_zero_decimal_currency(self, eur, jpy):
        result = extract_money("¥1.234", eur, list_currencies=Mock(return_value=[jpy]))

        assert result.currency is jpy
        assert result.amount == Decimal("1234")

    def test_bare_number_has_no_currency(self, eur):
        """Generic matches without a currency token stay uncertain."""
        result = extract_money("Order 12345 shipped yesterday", eur)

        assert result.currency is None
        assert result.amount == Decimal("12345")

    def test_unknown_currency_uses_local_decimals(self, jpy):
        result = extract_money("Paid 1.500 XYZ", jpy, list_currencies=Mock(return_value=[]))

        assert result.currency is None
        assert result.amount == Decimal("1500")


class TestDirectionalExtraction:
    """Tests for expense/income pattern selection."""

    def test_expense_pattern(self, eur):
        result = extract_money(
            "You paid 12,50 at Bakery", eur, EXPENSE_PATTERN, INCOME_PATTERN
        )

        assert result.direction == Direction.EXPENSE
        assert result.is_expense is True
        assert result.currency is eur  # No currency in the match: local implied
        assert result.amount == Decimal("12.50")

    def test_income_pattern(self, eur, usd):
        result = extract_money(
            "You received 100.00 USD from Alice",
            eur,
            EXPENSE_PATTERN,
            INCOME_PATTERN,
            list_currencies=Mock(return_value=[usd]),
        )

        assert result.direction == Direction.INCOME
        assert result.is_expense is False
        assert result.currency is usd
        assert result.amount == Decimal("100.00")

    def test_expense_tried_before_income(self, eur):
        """When both match, the expense pattern wins."""
        result = extract_money(
            "You paid 5 € and you received 7 €", eur, EXPENSE_PATTERN, INCOME_PATTERN
        )

        assert result.direction == Direction.EXPENSE
        assert result.amount == Decimal("5.00")

    def test_fallback_to_generic(self, eur):
        """Directional patterns that do not match fall back to the generic pattern."""
        result = extract_money("Refund of 3,20 € processed", eur, EXPENSE_PATTERN, INCOME_PATTERN)

        assert result.direction == Direction.UNKNOWN
        assert result.currency is eur
        assert result.amount == Decimal("3.20")

    def test_invalid_pattern_ignored(self, eur):
        result = extract_money("You received 8 €", eur, r"paid (", INCOME_PATTERN)

        assert result.direction == Direction.INCOME
        assert result.amount == Decimal("8.00")

    def test_pattern_without_amount_group(self, eur):
        """A directional match with no amount yields nothing, not an expense."""
        result = extract_money("Payment declined", eur, r"payment declined")

        assert result.currency is None
        assert result.amount == Decimal(0)
        assert result.is_expense is False


class TestFirstMatchWins:
    """Only the first match with an amount is used."""

    def test_skips_matches_without_amount(self, eur, usd):
        fetch = Mock(return_value=[usd])
        pattern = r"(?P<currency>EUR|USD)\s*(?P<amount>[\d.,]*)"

        result = extract_money(
            "USD pending, EUR 12,50 charged, USD 99", eur, pattern, list_currencies=fetch
        )

        assert result.currency is eur
        assert result.amount == Decimal("12.50")
        assert fetch.call_count == 1

    def test_later_matches_ignored(self, eur):
        pattern = r"(?P<amount>\d+) (?P<currency>EUR)"

        result = extract_money("10 EUR then 20 EUR", eur, pattern)

        assert result.amount == Decimal("10.00")

    def test_shared_catalog(self, eur, usd):
        """A caller-provided catalog is reused across calls."""
        fetch = Mock(return_value=[usd])
        catalog = CurrencyCatalog(eur, fetch)

        extract_money("$1.00", eur, catalog=catalog)
        extract_money("$2.00", eur, catalog=catalog)

        assert fetch.call_count == 1


class TestLocalCurrencyPreferred:
    """The local currency is checked for every affix before any remote lookup."""

    def test_post_affix_resolved_locally(self, eur):
        """A leading word in front of the amount does not trigger a remote fetch."""
        fetch = Mock(return_value=[])

        result = extract_money("Refund of 3,20 € processed", eur, list_currencies=fetch)

        assert result.currency is eur
        assert result.amount == Decimal("3.20")
        assert fetch.call_count == 0

    def test_local_wins_over_remote_symbol(self, eur):
        sek = Currency(code="SEK", symbol="kr", id="9", decimal_places=2)
        fetch = Mock(return_value=[sek])

        result = extract_money("kr 3,20 €", eur, list_currencies=fetch)

        assert result.currency is eur
        assert result.amount == Decimal("3.20")
        fetch.assert_not_called()

    def test_remote_used_when_no_affix_is_local(self, eur):
        sek = Currency(code="SEK", symbol="kr", id="9", decimal_places=2)
        fetch = Mock(return_value=[sek])

        result = extract_money("Betalt 45,00 kr", eur, list_currencies=fetch)

        assert result.currency is sek
        assert result.amount == Decimal("45.00")
        assert fetch.call_count == 1
