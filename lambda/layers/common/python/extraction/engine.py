"""
Money Extraction Engine
=======================

Picks the pattern to apply (expense, income, generic), walks its matches
in textual order and returns the first one that has an amount, with its
currency and direction.
"""

import re
from typing import Callable, Optional

from aws_lambda_powertools import Logger

from models import Currency, Direction, ExtractionResult, MoneyMatch

from .amount import normalize_amount
from .currency import CurrencyCatalog, decimal_places_for, resolve_currency
from .patterns import MONEY_PATTERN, InvalidPatternError, compile_pattern, find_money

logger = Logger()


def _compile_optional(pattern: Optional[str], kind: str) -> Optional[re.Pattern]:
    """Compile a directional pattern; unset or broken patterns count as not configured."""
    if not pattern:
        return None
    try:
        return compile_pattern(pattern)
    except InvalidPatternError as e:
        logger.warning(f"Ignoring {kind} pattern: {e}")
        return None


def _resolve_match_currency(
    match: MoneyMatch,
    catalog: CurrencyCatalog,
    directional: bool
) -> Optional[Currency]:
    """
    Currency of the first candidate token that resolves.

    Every candidate is compared with the local currency before the remote
    catalog is consulted, so "of 3,20 €" resolves "€" locally even though
    "of" comes first.
    """
    candidates = match.currency_candidates
    if not candidates:
        return resolve_currency("", catalog, directional=directional)

    for token in candidates:
        if catalog.local.matches_token(token):
            return catalog.local

    for token in candidates:
        currency = resolve_currency(token, catalog, directional=directional)
        if currency is not None:
            return currency

    logger.debug(f"No currency found for tokens: {candidates}")
    return None


def extract_money(
    text: str,
    local_currency: Currency,
    expense_pattern: Optional[str] = None,
    income_pattern: Optional[str] = None,
    list_currencies: Optional[Callable[[], list[Currency]]] = None,
    catalog: Optional[CurrencyCatalog] = None,
) -> ExtractionResult:
    """
    Extract amount, currency and direction from notification text.

    Selection order:
    1. Expense pattern, if configured and it matches
    2. Income pattern, if configured and it matches
    3. Generic money pattern (direction unknown)

    Args:
        text: Notification body
        local_currency: The user's default currency
        expense_pattern: Optional user regex for expense notifications
        income_pattern: Optional user regex for income notifications
        list_currencies: Fetches the remote currency catalog; called at most once
        catalog: Prebuilt catalog, overrides local_currency/list_currencies

    Returns:
        ExtractionResult; amount 0 and no currency if nothing was found
    """
    text = text or ""
    catalog = catalog or CurrencyCatalog(local_currency, list_currencies)

    matches = []
    direction = Direction.UNKNOWN
    directional = False

    for pattern, candidate in (
        (_compile_optional(expense_pattern, "expense"), Direction.EXPENSE),
        (_compile_optional(income_pattern, "income"), Direction.INCOME),
    ):
        if pattern is None:
            continue
        matches = find_money(text, pattern)
        if matches:
            direction = candidate
            directional = True
            break

    if not matches:
        matches = find_money(text, MONEY_PATTERN)

    if not matches:
        logger.warning("regex did not match")
        return ExtractionResult()

    for match in matches:
        currency = _resolve_match_currency(match, catalog, directional)

        if not match.amount_token.strip():
            continue

        decimals = decimal_places_for(currency, catalog.local)
        amount = normalize_amount(match.amount_token, decimals)

        logger.debug(
            f"Extracted {amount} {currency.code if currency else '?'} "
            f"({direction.value}) from match at {match.span}"
        )
        return ExtractionResult(currency=currency, amount=amount, direction=direction)

    logger.info(f"No {direction.value} match carried an amount")
    return ExtractionResult()
