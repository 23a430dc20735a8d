"""
Review Notification Lambda Handler
==================================

Called when the user taps a "Create Transaction?" prompt. Decodes the
prompt payload, re-runs money extraction with the app's patterns and
returns a prefilled transaction form for the app to show.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from extraction import extract_money
from models import Direction, NotificationTransaction, TransactionType
from utils.firefly_client import FireflyClient
from utils.supabase_client import SupabaseClient

logger = Logger()
metrics = Metrics()
tracer = Tracer()

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, X-Api-Key, x-api-key",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


@logger.inject_lambda_context
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """
    Build a prefilled transaction form from a review payload.

    Expected payload from the app:
    {
        "payload": "{\"appName\": ..., \"title\": ..., \"body\": ..., \"date\": ...}"
    }
    The payload may also be sent as an object, or as the body itself.
    """
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return _cors_preflight_response()

    try:
        transaction = parse_review_payload(_parse_request_body(event))
    except (ValueError, TypeError, AttributeError) as e:
        return _error_response(400, f"Invalid review payload: {e}")

    try:
        api = FireflyClient()
        try:
            settings = SupabaseClient()
            try:
                form = build_review_form(transaction, settings, api)
            finally:
                settings.close()
        finally:
            api.close()

        metrics.add_metric(name="ReviewFormsBuilt", unit=MetricUnit.Count, value=1)
        return _success_response(form)

    except Exception as e:
        logger.exception(f"Error building review form: {e}")
        return _error_response(500, str(e))


def parse_review_payload(body: Any) -> NotificationTransaction:
    """Accept {"payload": "<json>"}, {"payload": {...}} or the payload object itself."""
    payload = body.get("payload", body) if isinstance(body, dict) else body
    if isinstance(payload, str):
        return NotificationTransaction.from_json(payload)
    return NotificationTransaction.from_dict(payload)


@tracer.capture_method
def build_review_form(
    transaction: NotificationTransaction,
    settings: SupabaseClient,
    api: FireflyClient
) -> dict:
    """
    Re-run extraction on a notification and prefill a transaction form.

    Fields the extraction could not determine are left empty for the user.
    """
    app_settings = settings.get_app_settings(transaction.app_name)
    local_currency = api.get_default_currency()

    extraction = extract_money(
        transaction.body,
        local_currency,
        app_settings.expense_pattern,
        app_settings.income_pattern,
        list_currencies=api.list_currencies,
    )
    currency = extraction.currency or local_currency

    if extraction.direction == Direction.INCOME:
        tx_type = TransactionType.DEPOSIT
        account_field = "destinationAccountId"
    else:
        tx_type = TransactionType.WITHDRAWAL
        account_field = "sourceAccountId"

    logger.info(
        f"Review form for {transaction.app_name}: "
        f"{extraction.amount} {currency.code} ({extraction.direction.value})"
    )

    return {
        **transaction.to_dict(),
        "type": tx_type.value,
        "amount": str(extraction.amount) if extraction.found else None,
        "currencyCode": currency.code,
        "currencyId": currency.id,
        "direction": extraction.direction.value,
        account_field: app_settings.default_account_id,
        "notes": transaction.body,
    }


def _parse_request_body(event: dict) -> Any:
    """Parse request body from API Gateway event, or take a direct invocation as-is."""
    if "body" not in event:
        return event
    body = event.get("body") or "{}"
    if isinstance(body, str):
        return json.loads(body)
    return body


def _cors_preflight_response() -> dict:
    """Handle CORS preflight OPTIONS request."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": ""
    }


def _success_response(data: dict) -> dict:
    """Create success API Gateway response."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": json.dumps(data)
    }


def _error_response(status_code: int, message: str) -> dict:
    """Create error API Gateway response."""
    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": json.dumps({"error": message})
    }
