"""
Currency Resolution
===================

Maps a textual currency token (code or symbol) to a Firefly currency.
The local (default) currency is checked first; the remote catalog is only
fetched when the token is something else, and at most once per catalog.
"""

from typing import Callable, Optional

from aws_lambda_powertools import Logger

from models import Currency, DEFAULT_DECIMAL_PLACES

logger = Logger()


class CurrencyCatalog:
    """
    The local currency plus a lazily fetched remote currency list.

    Create one per extraction call. Concurrent extractions must not share
    an instance.
    """

    def __init__(
        self,
        local: Currency,
        fetch: Optional[Callable[[], list[Currency]]] = None
    ):
        self.local = local
        self._fetch = fetch
        self._remote: Optional[list[Currency]] = None
        self.fetch_count = 0

    def remote_currencies(self) -> list[Currency]:
        """
        Remote currencies, fetched on first use.

        A failed fetch is logged and remembered as an empty list so the
        remote catalog is never hit twice for the same catalog.
        """
        if self._remote is not None:
            return self._remote

        if self._fetch is None:
            self._remote = []
            return self._remote

        self.fetch_count += 1
        try:
            self._remote = list(self._fetch())
        except Exception as e:
            logger.warning(f"currency lookup failed: {e}")
            self._remote = []

        return self._remote


def resolve_currency(
    token: str,
    catalog: CurrencyCatalog,
    directional: bool = False
) -> Optional[Currency]:
    """
    Resolve a currency token against the catalog.

    Args:
        token: Raw currency token from the match (code or symbol)
        catalog: Local currency and remote catalog for this call
        directional: True if the match came from an expense/income pattern

    Returns:
        Matching currency, or None if it cannot be determined
    """
    token = (token or "").strip()

    if not token:
        # A directional pattern implies a local-currency transaction
        return catalog.local if directional else None

    if catalog.local.matches_token(token):
        return catalog.local

    for currency in catalog.remote_currencies():
        if currency.matches_token(token):
            return currency

    logger.debug(f"No currency found for token: {token}")
    return None


def decimal_places_for(currency: Optional[Currency], local: Currency) -> int:
    """Decimal places of the currency, else of the local currency, else 2."""
    if currency is not None and currency.decimal_places is not None:
        return currency.decimal_places
    if local.decimal_places is not None:
        return local.decimal_places
    return DEFAULT_DECIMAL_PLACES
