"""
Device Notification Utilities
=============================

Sends notifications back to the user's device through the push gateway
webhook: a confirmation when a transaction was created, or a prompt to
create one manually.
"""

from typing import Optional

import httpx
from aws_lambda_powertools import Logger

from models import NotificationTransaction

from .secrets import require_secret

logger = Logger()

CHANNEL_CREATED = "extract_transaction_created"
CHANNEL_PROMPT = "extract_transaction"


class Notifier:
    """Push gateway client for the two notification channels."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.webhook_url = webhook_url or require_secret("NOTIFY_WEBHOOK_URL")
        self._transport = transport

    def _send(self, channel: str, title: str, body: str, payload: str = "") -> None:
        with httpx.Client(timeout=10.0, transport=self._transport) as client:
            response = client.post(self.webhook_url, json={
                "channel": channel,
                "priority": "low",
                "title": title,
                "body": body,
                "payload": payload,
            })
            response.raise_for_status()
        logger.debug(f"Sent '{title}' notification on {channel}")

    def notify_transaction_created(self, source_title: str) -> None:
        """Confirm that a transaction was created from a notification."""
        self._send(
            CHANNEL_CREATED,
            "Transaction created",
            f"Transaction created based on notification {source_title}",
        )

    def prompt_review(self, transaction: NotificationTransaction) -> None:
        """Ask the user to create a transaction from a notification."""
        source = transaction.title or transaction.app_name
        self._send(
            CHANNEL_PROMPT,
            "Create Transaction?",
            f"Click to create a transaction based on the notification {source}",
            payload=transaction.to_json(),
        )
