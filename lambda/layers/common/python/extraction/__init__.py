"""
Notification Extractor - Money Extraction Engine
================================================

Finds amount, currency and direction in free-form notification text.
"""

from .patterns import (
    MONEY_PATTERN,
    InvalidPatternError,
    compile_pattern,
    find_money,
    scan_notification,
)
from .currency import CurrencyCatalog, resolve_currency, decimal_places_for
from .amount import normalize_amount
from .engine import extract_money

__all__ = [
    "MONEY_PATTERN",
    "InvalidPatternError",
    "compile_pattern",
    "find_money",
    "scan_notification",
    "CurrencyCatalog",
    "resolve_currency",
    "decimal_places_for",
    "normalize_amount",
    "extract_money",
]
