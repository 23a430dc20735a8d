"""
Process Notification Lambda Handler
===================================

Main Lambda entry point for notifications forwarded by the companion app.
Finds money in the notification text and either auto-adds a Firefly
transaction or prompts the user to create one.
"""

import json
import hashlib
import os
from datetime import datetime
from typing import Callable, Optional

import boto3
from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from extraction import extract_money, scan_notification
from models import (
    AppSettings,
    Direction,
    NotificationEvent,
    NotificationState,
    NotificationTransaction,
    ProcessingDecision,
    ProcessingResult,
    ScanOutcome,
    TransactionRequest,
    TransactionType,
)
from utils.firefly_client import FireflyClient
from utils.notifier import Notifier
from utils.supabase_client import SupabaseClient

# Initialize AWS Lambda Powertools
logger = Logger()
metrics = Metrics()
tracer = Tracer()

# Notifications from the companion app itself are never processed
OWN_APP_PREFIX = os.environ.get("OWN_APP_PREFIX", "com.dreautall.waterflyiii")

# DynamoDB for idempotency
_idempotency_table = None


def _get_idempotency_table():
    """Get or create cached idempotency table resource."""
    global _idempotency_table
    if _idempotency_table is None:
        dynamodb = boto3.resource("dynamodb")
        _idempotency_table = dynamodb.Table(os.environ.get("IDEMPOTENCY_TABLE", "notification-idempotency-prod"))
    return _idempotency_table


class AutoAddError(Exception):
    """Raised when a transaction cannot be created without the user."""


@logger.inject_lambda_context
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """
    Main Lambda handler for forwarded notifications.

    Expected payload (from the companion app):
    {
        "packageName": "com.bank.app",
        "title": "Card payment",
        "text": "You paid 12,50 EUR at Bakery",
        "postTime": "2025-12-30T09:15:00Z",
        "state": "posted"
    }
    """
    logger.debug("Received notification event", extra={"event": event})

    try:
        notification = NotificationEvent.from_dict(_parse_request_body(event))
    except (ValueError, TypeError, AttributeError) as e:
        return _error_response(400, f"Invalid notification: {e}")

    metrics.add_metric(name="NotificationsReceived", unit=MetricUnit.Count, value=1)

    try:
        idempotency_key = _generate_idempotency_key(notification)
        if _is_duplicate_request(idempotency_key):
            logger.info(f"Duplicate notification from {notification.package_name}")
            return _success_response({"message": "Already processed"})

        result = process_notification(
            notification,
            settings_factory=SupabaseClient,
            notifier_factory=Notifier,
            api_factory=FireflyClient,
        )

        _record_idempotency(idempotency_key, result)
        _record_metrics(result)

        return _success_response({**result.to_dict(), "message": result.to_summary()})

    except Exception as e:
        logger.exception(f"Unhandled error processing notification: {e}")
        metrics.add_metric(name="ProcessingErrors", unit=MetricUnit.Count, value=1)
        return _error_response(500, str(e))


@tracer.capture_method
def process_notification(
    notification: NotificationEvent,
    settings_factory: Callable[[], SupabaseClient],
    notifier_factory: Callable[[], Notifier],
    api_factory: Callable[[], FireflyClient],
) -> ProcessingResult:
    """
    Run one notification through the pipeline.

    Steps:
    1. Drop removals and our own notifications
    2. Scan for money with a currency next to it
    3. Register the app and stop unless the user enabled it
    4. Auto-add if enabled, falling back to a review prompt on any failure

    Clients are only created once a notification passes the gate.
    """
    app_id = notification.package_name
    result = ProcessingResult(app_id=app_id, title=notification.title)
    result.started_at = datetime.utcnow()

    try:
        if not app_id or app_id.startswith(OWN_APP_PREFIX):
            result.decision = ProcessingDecision.IGNORED
            return result

        if notification.state == NotificationState.REMOVED:
            result.decision = ProcessingDecision.IGNORED
            return result

        scan = scan_notification(notification.text or "")
        if scan.outcome == ScanOutcome.NO_MATCH:
            logger.debug(f"{app_id}: no money found")
            result.decision = ProcessingDecision.NO_MATCH
            return result

        if scan.outcome == ScanOutcome.UNGATED:
            logger.debug(f"{app_id}: no money with currency found")
            result.decision = ProcessingDecision.UNGATED
            return result

        settings = settings_factory()
        try:
            app_settings = _load_app_settings(settings, app_id)
        finally:
            settings.close()

        if app_settings is None:
            logger.debug(f"{app_id}: app not used")
            result.decision = ProcessingDecision.APP_NOT_USED
            return result

        notifier = notifier_factory()

        if app_settings.auto_add:
            result.auto_add_attempted = True
            logger.debug(f"{app_id}: trying to auto-add transaction")
            try:
                _auto_add(notification, app_settings, api_factory, result)
            except Exception as e:
                logger.exception(f"Error while auto-adding transaction from {app_id}: {e}")
                result.error_message = str(e)
            else:
                result.success = True
                result.decision = ProcessingDecision.AUTO_ADDED
                _confirm_auto_add(notifier, notification)
                return result

        notifier.prompt_review(NotificationTransaction.from_event(notification))
        result.success = True
        result.decision = ProcessingDecision.REVIEW_PROMPTED
        return result

    finally:
        result.completed_at = datetime.utcnow()
        delta = result.completed_at - result.started_at
        result.duration_ms = int(delta.total_seconds() * 1000)


def _load_app_settings(settings: SupabaseClient, app_id: str) -> Optional[AppSettings]:
    """Register the app and return its settings, or None if the user has not enabled it."""
    settings.register_known_app(app_id)

    if not settings.is_app_used(app_id):
        return None

    return settings.get_app_settings(app_id)


def _auto_add(
    notification: NotificationEvent,
    app_settings: AppSettings,
    api_factory: Callable[[], FireflyClient],
    result: ProcessingResult
) -> None:
    """
    Create the Firefly transaction for a notification.

    Raises on anything that needs the user: unknown amount, foreign
    currency, missing default account, or a Firefly error.
    """
    api = api_factory()
    try:
        local_currency = api.get_default_currency()
        extraction = extract_money(
            notification.text or "",
            local_currency,
            app_settings.expense_pattern,
            app_settings.income_pattern,
            list_currencies=api.list_currencies,
        )
        currency = extraction.currency or local_currency

        result.amount = extraction.amount
        result.currency_code = currency.code
        result.direction = extraction.direction.value

        if not extraction.found:
            raise AutoAddError("Can't auto-add TX without an amount")

        if currency.code.upper() != local_currency.code.upper():
            raise AutoAddError("Can't auto-add TX with foreign currency")

        if app_settings.default_account_id is None:
            raise AutoAddError("Can't auto-add TX with no default account ID")

        request = TransactionRequest(
            type=TransactionType.WITHDRAWAL,
            date=notification.posted_at,
            amount=extraction.amount,
            description=notification.title or notification.package_name or "",
            notes=notification.text or "",
        )
        if extraction.direction == Direction.INCOME:
            request.type = TransactionType.DEPOSIT
            request.destination_account_id = app_settings.default_account_id
        else:
            request.source_account_id = app_settings.default_account_id

        group = api.create_transaction(request)
        result.transaction_id = str(group.get("id"))
    finally:
        api.close()


def _confirm_auto_add(notifier: Notifier, notification: NotificationEvent) -> None:
    """Tell the user about the new transaction; the transaction stands either way."""
    try:
        notifier.notify_transaction_created(notification.title or notification.package_name or "")
    except Exception as e:
        logger.warning(f"Failed to send confirmation notification: {e}")


def _generate_idempotency_key(notification: NotificationEvent) -> str:
    """Generate idempotency key for deduplication of redelivered events."""
    key_data = f"{notification.package_name}:{notification.post_time}:{notification.text}"
    return hashlib.sha256(key_data.encode()).hexdigest()[:32]


def _is_duplicate_request(idempotency_key: str) -> bool:
    """Check if this notification was already processed."""
    try:
        response = _get_idempotency_table().get_item(Key={"id": idempotency_key})
        return "Item" in response
    except Exception as e:
        logger.warning(f"Idempotency check failed: {e}")
        return False


def _record_idempotency(idempotency_key: str, result: ProcessingResult) -> None:
    """Record processed notification for idempotency."""
    try:
        _get_idempotency_table().put_item(Item={
            "id": idempotency_key,
            "success": result.success,
            "decision": result.decision.value,
            "processed_at": datetime.utcnow().isoformat(),
            "expiration": int(datetime.utcnow().timestamp()) + 86400  # 24 hour TTL
        })
    except Exception as e:
        logger.warning(f"Failed to record idempotency: {e}")


def _record_metrics(result: ProcessingResult) -> None:
    """Record CloudWatch metrics."""
    if result.decision == ProcessingDecision.IGNORED:
        metrics.add_metric(name="NotificationsIgnored", unit=MetricUnit.Count, value=1)
    elif result.decision in (ProcessingDecision.NO_MATCH, ProcessingDecision.UNGATED):
        metrics.add_metric(name="MoneyNotFound", unit=MetricUnit.Count, value=1)
    elif result.decision == ProcessingDecision.AUTO_ADDED:
        metrics.add_metric(name="TransactionsAutoAdded", unit=MetricUnit.Count, value=1)
    elif result.decision == ProcessingDecision.REVIEW_PROMPTED:
        metrics.add_metric(name="ReviewPrompts", unit=MetricUnit.Count, value=1)

    if result.auto_add_failed:
        metrics.add_metric(name="AutoAddFailures", unit=MetricUnit.Count, value=1)

    if result.duration_ms:
        metrics.add_metric(name="ProcessingDuration", unit=MetricUnit.Milliseconds, value=result.duration_ms)


def _parse_request_body(event: dict) -> dict:
    """Parse request body from API Gateway event, or take a direct invocation as-is."""
    if "body" not in event:
        return event
    body = event.get("body") or "{}"
    if isinstance(body, str):
        return json.loads(body)
    return body


def _success_response(data: dict) -> dict:
    """Create success API Gateway response."""
    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": "application/json"
        },
        "body": json.dumps(data)
    }


def _error_response(status_code: int, message: str) -> dict:
    """Create error API Gateway response."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json"
        },
        "body": json.dumps({"error": message})
    }
