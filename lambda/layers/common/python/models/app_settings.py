"""
Notification App Settings
=========================

Per-source-app configuration for money extraction and auto-add.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AppSettings:
    """
    Settings for one notifying app.

    Maps to the notification_apps table. An app becomes "known" the first
    time it posts a notification with money in it; it is "used" once the
    user enables it.
    """

    app_id: str
    used: bool = False
    auto_add: bool = False
    expense_pattern: Optional[str] = None
    income_pattern: Optional[str] = None
    default_account_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create AppSettings from database row dictionary."""
        account_id = data.get("default_account_id")
        return cls(
            app_id=data.get("app_id", ""),
            used=bool(data.get("used", False)),
            auto_add=bool(data.get("auto_add", False)),
            expense_pattern=data.get("expense_pattern") or None,
            income_pattern=data.get("income_pattern") or None,
            default_account_id=str(account_id) if account_id is not None else None,
        )
