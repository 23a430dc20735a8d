"""
Amount Normalization
====================

Turns a raw amount token with locale-dependent separators into an exact
Decimal.

Notifications mix formats freely ("1.234,56", "1,234.56", "1 234.56",
"1234"), so the rightmost "." or "," is taken as the decimal mark when at
most three characters follow it. Everything else is grouping.

Known limitation: a grouped integer with a single separator ("1.234") is
read as a decimal and truncated to the currency's decimal places (1.23).
"""

import re
from decimal import Decimal, InvalidOperation

from aws_lambda_powertools import Logger

logger = Logger()

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[.,]")

MAX_FRACTION_LENGTH = 3


def _to_decimal(whole: str, fraction: str = "") -> Decimal:
    """Build a Decimal from digit strings, raising ValueError on anything else."""
    if not whole.isdecimal() or (fraction and not fraction.isdecimal()):
        raise ValueError(f"not a plain number: {whole!r}.{fraction!r}")
    try:
        return Decimal(f"{whole}.{fraction}" if fraction else whole)
    except InvalidOperation as e:
        raise ValueError(str(e)) from e


def normalize_amount(raw: str, decimal_places: int) -> Decimal:
    """
    Convert a raw amount token to a Decimal.

    Args:
        raw: Amount token as matched, may contain spaces, dots and commas
        decimal_places: Decimal places of the resolved currency

    Returns:
        Amount as Decimal; Decimal(0) if the token cannot be parsed
    """
    s = _WHITESPACE.sub("", raw or "")

    try:
        if decimal_places <= 0:
            return _to_decimal(_SEPARATORS.sub("", s))

        dec_pos = max(s.rfind("."), s.rfind(","))

        if dec_pos > 0 and len(s) - dec_pos - 1 <= MAX_FRACTION_LENGTH:
            whole = _SEPARATORS.sub("", s[:dec_pos])
            fraction = _SEPARATORS.sub("", s[dec_pos + 1:])
            fraction = fraction[:decimal_places].ljust(decimal_places, "0")
            return _to_decimal(whole, fraction)

        return _to_decimal(_SEPARATORS.sub("", s))

    except ValueError as e:
        logger.warning(f"Failed to parse amount '{raw}': {e}")
        return Decimal(0)
