"""
Processing Result Data Model
============================

Represents the result of processing one notification event.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class ProcessingDecision(str, Enum):
    """Terminal states of the notification pipeline."""
    IGNORED = "ignored"  # Own app, removal event or no package name
    NO_MATCH = "no_match"  # No money in the text
    UNGATED = "ungated"  # Numbers found but no currency next to them
    APP_NOT_USED = "app_not_used"  # Known app the user has not enabled
    AUTO_ADDED = "auto_added"  # Transaction created in Firefly
    REVIEW_PROMPTED = "review_prompted"  # User asked to create it manually


@dataclass
class ProcessingResult:
    """
    Complete result of processing a notification.

    Captures the decision and what was extracted for logging and metrics.
    """

    # Core result
    success: bool = False
    decision: ProcessingDecision = ProcessingDecision.IGNORED

    # Source
    app_id: Optional[str] = None
    title: Optional[str] = None

    # Extraction
    amount: Optional[Decimal] = None
    currency_code: Optional[str] = None
    direction: Optional[str] = None

    # Firefly results
    transaction_id: Optional[str] = None

    # Error handling
    auto_add_attempted: bool = False
    error_message: Optional[str] = None

    # Timing
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None

    @property
    def auto_add_failed(self) -> bool:
        """True when auto-add was tried and fell back to a review prompt."""
        return self.auto_add_attempted and self.decision == ProcessingDecision.REVIEW_PROMPTED

    def to_dict(self) -> dict:
        """Convert to dictionary for the API response."""
        return {
            "success": self.success,
            "decision": self.decision.value,
            "app_id": self.app_id,
            "title": self.title,
            "amount": str(self.amount) if self.amount is not None else None,
            "currency_code": self.currency_code,
            "direction": self.direction,
            "transaction_id": self.transaction_id,
            "auto_add_attempted": self.auto_add_attempted,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
        }

    def to_summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Processing Result: {self.decision.value}",
            f"Success: {self.success}",
        ]

        if self.app_id:
            lines.append(f"App: {self.app_id}")

        if self.amount is not None:
            lines.append(f"Amount: {self.amount} {self.currency_code or '?'} ({self.direction})")

        if self.transaction_id:
            lines.append(f"Firefly Transaction: {self.transaction_id}")

        if self.error_message:
            lines.append(f"Error: {self.error_message}")

        return "\n".join(lines)
