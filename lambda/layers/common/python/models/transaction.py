"""
Transaction Request Model
=========================

A single-split Firefly III transaction built from a notification.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Firefly III transaction types we create."""
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"


@dataclass
class TransactionRequest:
    """Request body for POST /v1/transactions."""

    type: TransactionType
    date: datetime
    amount: Decimal
    description: str
    notes: str = ""
    source_account_id: Optional[str] = None
    destination_account_id: Optional[str] = None

    def to_payload(self) -> dict:
        """
        Build the Firefly payload.

        Duplicate-hash detection, rule application and webhooks are always
        requested.
        """
        split = {
            "type": self.type.value,
            "date": self.date.isoformat(),
            "amount": str(self.amount),
            "description": self.description,
            "notes": self.notes,
            "order": 0,
        }
        if self.source_account_id is not None:
            split["source_id"] = self.source_account_id
        if self.destination_account_id is not None:
            split["destination_id"] = self.destination_account_id

        return {
            "group_title": None,
            "error_if_duplicate_hash": True,
            "apply_rules": True,
            "fire_webhooks": True,
            "transactions": [split],
        }
