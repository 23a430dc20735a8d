"""
Extraction Data Models
======================

Results of scanning notification text for money.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from .currency import Currency


class Direction(str, Enum):
    """Transaction direction implied by the pattern that matched."""
    EXPENSE = "expense"
    INCOME = "income"
    UNKNOWN = "unknown"

    @property
    def sign(self) -> int:
        """-1 for expenses, +1 for income, 0 when unknown."""
        if self is Direction.EXPENSE:
            return -1
        if self is Direction.INCOME:
            return 1
        return 0


class ScanOutcome(str, Enum):
    """Classification of a notification by the generic money pattern."""
    MATCHED = "matched"  # At least one amount with a currency affix
    NO_MATCH = "no_match"  # No amount at all
    UNGATED = "ungated"  # Amounts found, none with a currency affix


@dataclass(frozen=True)
class MoneyMatch:
    """One regex match over the input text."""
    amount_token: str
    span: tuple[int, int]
    currency_group: str = ""
    pre_currency: str = ""
    post_currency: str = ""

    @property
    def currency_candidates(self) -> list[str]:
        """Currency tokens to try, in order: explicit group, else the affixes."""
        if self.currency_group:
            return [self.currency_group]
        return [t for t in (self.pre_currency, self.post_currency) if t]

    @property
    def has_currency_affix(self) -> bool:
        return bool(self.pre_currency or self.post_currency)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of the generic scan plus the matches that produced it."""
    outcome: ScanOutcome
    matches: list[MoneyMatch] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.outcome == ScanOutcome.MATCHED


@dataclass(frozen=True)
class ExtractionResult:
    """
    Money extracted from a notification.

    Constructed once per extraction call and never mutated.
    """

    currency: Optional[Currency] = None
    amount: Decimal = Decimal(0)
    direction: Direction = Direction.UNKNOWN

    @property
    def is_expense(self) -> bool:
        return self.direction.sign < 0

    @property
    def found(self) -> bool:
        return self.amount > 0
