"""
Money Patterns
==============

Regular expressions used to find money in notification text.

The generic pattern finds a number with an optional short currency-like
token on either side. User patterns (expense/income) are arbitrary regexes
that may expose the same named groups: ``currency`` or
``preCurrency``/``postCurrency``, and ``amount``.
"""

import re
from typing import Optional

from models import MoneyMatch, ScanOutcome, ScanResult

# Up to three non-digit, non-whitespace chars before and after a run of
# digits with dots, commas or spaces. Must be bounded by whitespace or the
# ends of the text. The run is at least two chars long, so a lone digit
# only counts when followed by whitespace ("5 €", not "#5 shipped").
MONEY_PATTERN = re.compile(
    r"(?:^|\s)"
    r"(?P<preCurrency>[^\r\n\t\f\v 0-9]{0,3})"
    r"\s*"
    r"(?P<amount>\d[.,\s\d]+(?:[.,]\d+)?)"
    r"\s*"
    r"(?P<postCurrency>[^\r\n\t\f\v 0-9]{0,3})"
    r"(?:$|\s)"
)

# JavaScript-style named groups, as typed into the mobile app settings
_JS_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")


class InvalidPatternError(ValueError):
    """Raised when a user-supplied pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile a user-supplied expense/income pattern, case-insensitive.

    Args:
        pattern: Raw regex from the app settings

    Returns:
        Compiled pattern

    Raises:
        InvalidPatternError: If the regex does not compile
    """
    source = _JS_NAMED_GROUP.sub("(?P<", pattern)
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def named_group(match: re.Match, name: str) -> str:
    """Value of a named group, or "" if the pattern has no such group or it did not participate."""
    if name not in match.re.groupindex:
        return ""
    return match.group(name) or ""


def to_money_match(match: re.Match) -> MoneyMatch:
    """Pull the currency and amount tokens out of a regex match."""
    return MoneyMatch(
        amount_token=named_group(match, "amount"),
        span=match.span(),
        currency_group=named_group(match, "currency").strip(),
        pre_currency=named_group(match, "preCurrency").strip(),
        post_currency=named_group(match, "postCurrency").strip(),
    )


def find_money(text: str, pattern: Optional[re.Pattern] = None) -> list[MoneyMatch]:
    """All matches of ``pattern`` (default: the generic pattern) in textual order."""
    pattern = pattern or MONEY_PATTERN
    return [to_money_match(m) for m in pattern.finditer(text or "")]


def scan_notification(text: str) -> ScanResult:
    """
    Classify notification text with the generic money pattern.

    A notification is only worth acting on if at least one number carries a
    currency affix; bare numbers are phone numbers, dates, counters...
    """
    matches = find_money(text)
    if not matches:
        return ScanResult(outcome=ScanOutcome.NO_MATCH)

    if not any(m.has_currency_affix for m in matches):
        return ScanResult(outcome=ScanOutcome.UNGATED, matches=matches)

    return ScanResult(outcome=ScanOutcome.MATCHED, matches=matches)
