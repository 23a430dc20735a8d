"""
Firefly III API Client
======================

Handles the Firefly III operations the notification pipeline needs:
currency lookup and transaction creation.
"""

import os
from typing import Optional

import httpx
from aws_lambda_powertools import Logger

from models import Currency, TransactionRequest

from .secrets import require_secret

logger = Logger()

FIREFLY_TIMEOUT = float(os.environ.get("FIREFLY_TIMEOUT", "30"))

# Firefly caps page size at 50 for most endpoints
PAGE_LIMIT = 50


class FireflyClient:
    """
    Firefly III API client authenticated with a personal access token.

    Handles:
    - Default currency and currency catalog lookup
    - Transaction creation
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        base_url = base_url or require_secret("FIREFLY_URL")
        token = token or require_secret("FIREFLY_TOKEN")

        self.base_url = f"{base_url.rstrip('/')}/api/v1"
        self._client = httpx.Client(
            timeout=FIREFLY_TIMEOUT,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.api+json",
                "Content-Type": "application/json",
            },
        )

    def close(self) -> None:
        self._client.close()

    def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict] = None,
        params: Optional[dict] = None
    ) -> dict:
        """
        Make an API request to Firefly.

        Raises:
            FireflyValidationError: On HTTP 422
            FireflyAPIError: On any other failure
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            response = self._client.request(method=method, url=url, json=data, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Firefly request failed: {method} {endpoint}: {e}")
            raise FireflyAPIError(f"Firefly request failed: {e}") from e

        if response.status_code == 422:
            raise FireflyValidationError.from_response(response)

        if response.status_code not in (200, 201):
            logger.error(f"Firefly API error: {response.status_code} - {response.text}")
            raise FireflyAPIError(
                f"Firefly API returned {response.status_code}",
                status_code=response.status_code,
                response_body=response.text
            )

        return response.json()

    # =========================================================================
    # CURRENCY OPERATIONS
    # =========================================================================

    def get_default_currency(self) -> Currency:
        """Get the user's default (local) currency."""
        result = self._make_request("GET", "currencies/default")
        return Currency.from_dict(result.get("data", {}))

    def list_currencies(self) -> list[Currency]:
        """
        List all currencies, following pagination.

        Returns:
            Currencies in catalog order
        """
        currencies: list[Currency] = []
        page = 1

        while True:
            result = self._make_request(
                "GET",
                "currencies",
                params={"page": page, "limit": PAGE_LIMIT}
            )
            currencies.extend(Currency.from_dict(item) for item in result.get("data", []))

            pagination = result.get("meta", {}).get("pagination", {})
            if page >= int(pagination.get("total_pages", 1) or 1):
                break
            page += 1

        logger.debug(f"Fetched {len(currencies)} currencies")
        return currencies

    # =========================================================================
    # TRANSACTION OPERATIONS
    # =========================================================================

    def create_transaction(self, request: TransactionRequest) -> dict:
        """
        Create a transaction.

        Args:
            request: Single-split transaction request

        Returns:
            Created transaction group resource ({"id", "type", "attributes"})
        """
        result = self._make_request("POST", "transactions", data=request.to_payload())

        group = result.get("data")
        if not group:
            raise FireflyAPIError("Firefly returned no transaction", response_body=str(result))

        logger.info(f"Created Firefly transaction {group.get('id')}: {request.amount} ({request.type.value})")
        return group


class FireflyAPIError(Exception):
    """Raised when the Firefly API returns an error."""

    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class FireflyValidationError(FireflyAPIError):
    """Raised when Firefly rejects a request body (HTTP 422)."""

    def __init__(self, message: str, errors: Optional[dict] = None, response_body: str = ""):
        super().__init__(message, status_code=422, response_body=response_body)
        self.errors = errors or {}

    @classmethod
    def from_response(cls, response: httpx.Response) -> "FireflyValidationError":
        try:
            body = response.json()
        except ValueError:
            return cls("unknown", response_body=response.text)
        return cls(
            body.get("message") or "unknown",
            errors=body.get("errors"),
            response_body=response.text,
        )
