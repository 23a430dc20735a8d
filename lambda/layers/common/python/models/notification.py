"""
Notification Data Models
========================

Incoming notification events and the pending-review payload that is
handed back to the user when a transaction could not be auto-added.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class NotificationState(str, Enum):
    """Notification lifecycle state reported by the device."""
    POSTED = "posted"
    REMOVED = "removed"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None when it is unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class NotificationEvent:
    """A notification captured on the device and forwarded to us."""

    package_name: Optional[str] = None
    text: Optional[str] = None
    title: Optional[str] = None
    post_time: Optional[str] = None
    state: NotificationState = NotificationState.POSTED

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationEvent":
        """Create NotificationEvent from the forwarded JSON body."""
        state = str(data.get("state") or NotificationState.POSTED.value).lower()
        if state == "remove":
            state = NotificationState.REMOVED.value
        return cls(
            package_name=data.get("packageName") or data.get("package_name"),
            text=data.get("text"),
            title=data.get("title"),
            post_time=data.get("postTime") or data.get("post_time"),
            state=NotificationState(state),
        )

    @property
    def posted_at(self) -> datetime:
        """Post time of the notification, or now when it is missing or broken."""
        return parse_timestamp(self.post_time) or datetime.now(timezone.utc)


@dataclass(frozen=True)
class NotificationTransaction:
    """
    Payload of a "create transaction?" prompt.

    Serialized into the prompt and deserialized again by the manual review
    flow, which re-runs extraction on the body.
    """

    app_name: str
    title: str
    body: str
    date: datetime

    def to_dict(self) -> dict:
        return {
            "appName": self.app_name,
            "title": self.title,
            "body": self.body,
            "date": self.date.isoformat(timespec="seconds"),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationTransaction":
        date = parse_timestamp(data.get("date"))
        if date is None:
            raise ValueError(f"Invalid payload date: {data.get('date')!r}")
        return cls(
            app_name=data.get("appName", ""),
            title=data.get("title", ""),
            body=data.get("body", ""),
            date=date,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "NotificationTransaction":
        return cls.from_dict(json.loads(payload))

    @classmethod
    def from_event(cls, event: NotificationEvent) -> "NotificationTransaction":
        return cls(
            app_name=event.package_name or "",
            title=event.title or "",
            body=event.text or "",
            date=event.posted_at.replace(microsecond=0),
        )
