"""
Supabase Client Utilities
=========================

HTTP-based Supabase client for the per-app notification settings.
Uses httpx for direct REST API calls to avoid heavy SDK dependencies.
"""

from typing import Optional
from datetime import datetime, timezone

import httpx
from aws_lambda_powertools import Logger

from models import AppSettings

from .secrets import require_secret

logger = Logger()

APPS_TABLE = "notification_apps"


def _get_headers(key: str) -> dict:
    """Get headers for Supabase REST API."""
    return {
        "apikey": key,
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
        "Prefer": "return=representation",
    }


class SupabaseClient:
    """
    Settings store for notifying apps.
    Uses httpx for direct REST API calls.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        url = url or require_secret("SUPABASE_URL")
        key = key or require_secret("SUPABASE_KEY")

        self.rest_url = f"{url.rstrip('/')}/rest/v1"
        self._client = httpx.Client(timeout=30.0, headers=_get_headers(key), transport=transport)

    def close(self) -> None:
        self._client.close()

    def _query(self, table: str, params: dict = None) -> list[dict]:
        """Execute a SELECT query."""
        response = self._client.get(f"{self.rest_url}/{table}", params=params or {})
        response.raise_for_status()
        return response.json()

    def _upsert(self, table: str, data: dict, ignore_duplicates: bool = False) -> None:
        """Insert a record, merging or skipping on primary key conflict."""
        resolution = "ignore-duplicates" if ignore_duplicates else "merge-duplicates"
        response = self._client.post(
            f"{self.rest_url}/{table}",
            json=data,
            headers={"Prefer": f"resolution={resolution},return=minimal"},
        )
        response.raise_for_status()

    # =========================================================================
    # NOTIFICATION APP OPERATIONS
    # =========================================================================

    def register_known_app(self, app_id: str) -> None:
        """Remember that an app posted a notification with money in it."""
        self._upsert(APPS_TABLE, {
            "app_id": app_id,
            "first_seen_at": datetime.now(timezone.utc).isoformat(),
        }, ignore_duplicates=True)
        logger.debug(f"Registered known app: {app_id}")

    def _get_app_row(self, app_id: str) -> Optional[dict]:
        results = self._query(APPS_TABLE, {"app_id": f"eq.{app_id}", "limit": "1"})
        return results[0] if results else None

    def is_app_used(self, app_id: str) -> bool:
        """Check if the user enabled money extraction for this app."""
        row = self._get_app_row(app_id)
        return bool(row and row.get("used"))

    def get_app_settings(self, app_id: str) -> AppSettings:
        """Get extraction settings for an app, defaults if it has none."""
        row = self._get_app_row(app_id)
        if not row:
            return AppSettings(app_id=app_id)
        return AppSettings.from_dict(row)
