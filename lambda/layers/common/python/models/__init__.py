"""
Notification Extractor - Data Models
====================================

Typed data models for notification money extraction.
"""

from .currency import Currency, DEFAULT_DECIMAL_PLACES
from .app_settings import AppSettings
from .notification import NotificationEvent, NotificationState, NotificationTransaction
from .extraction import Direction, ExtractionResult, MoneyMatch, ScanOutcome, ScanResult
from .transaction import TransactionRequest, TransactionType
from .processing_result import ProcessingResult, ProcessingDecision

__all__ = [
    "Currency",
    "DEFAULT_DECIMAL_PLACES",
    "AppSettings",
    "NotificationEvent",
    "NotificationState",
    "NotificationTransaction",
    "Direction",
    "ExtractionResult",
    "MoneyMatch",
    "ScanOutcome",
    "ScanResult",
    "TransactionRequest",
    "TransactionType",
    "ProcessingResult",
    "ProcessingDecision",
]
