"""Notification event data structures."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any

from .fingerprint import fingerprint

DEFAULT_TITLE = "Peppermint Tracker"
DEFAULT_BODY = "New update!"


class DeliveryOutcome(Enum):
    """Terminal state of one event on one surface."""

    RENDERED = "rendered"
    SUPPRESSED = "suppressed"


def _section(payload: Any, key: str) -> Optional[Dict[str, Any]]:
    """Return a payload section if it is a mapping, else None."""
    if not isinstance(payload, dict):
        return None
    value = payload.get(key)
    return value if isinstance(value, dict) else None


def has_platform_notification(payload: Any) -> bool:
    """True when the push carries a ``notification`` section the platform displays itself."""
    return _section(payload, "notification") is not None


@dataclass
class NotificationEvent:
    """One logical notification as received by a surface."""

    title: str
    body: str
    arrival_time: float = field(default_factory=time.time)
    data: Dict[str, Any] = field(default_factory=dict)
    has_platform_notification: bool = False

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.title, self.body)

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        now: Optional[float] = None,
        default_title: str = DEFAULT_TITLE,
        default_body: str = DEFAULT_BODY,
    ) -> "NotificationEvent":
        """
        Build an event from an inbound push payload.

        Reads ``title`` and ``body`` from the ``data`` section. Missing,
        empty or non-string values fall back to the defaults, and payloads
        that are not mappings are treated as empty.

        Args:
            payload: ``{"notification": {...}?, "data": {...}?}``.
            now: Arrival time; defaults to the current time.
            default_title: Title used when the payload has none.
            default_body: Body used when the payload has none.

        Returns:
            NotificationEvent.
        """
        data = _section(payload, "data") or {}
        title = data.get("title")
        body = data.get("body")

        return cls(
            title=title if isinstance(title, str) and title else default_title,
            body=body if isinstance(body, str) and body else default_body,
            arrival_time=time.time() if now is None else now,
            data=dict(data),
            has_platform_notification=has_platform_notification(payload),
        )

    def __str__(self) -> str:
        return f"{self.title}: {self.body}"

    def __repr__(self) -> str:
        return (
            f"NotificationEvent(title={self.title!r}, "
            f"body={self.body!r}, fingerprint={self.fingerprint!r})"
        )
