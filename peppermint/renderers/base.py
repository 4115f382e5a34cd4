"""Base renderer interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class NotificationOptions:
    """Options of the platform "show notification" call."""

    body: str
    tag: str
    icon: str = "/icon-192.png"
    badge: str = "/icon-96.png"
    require_interaction: bool = False
    renotify: bool = False
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "body": self.body,
            "icon": self.icon,
            "badge": self.badge,
            "tag": self.tag,
            "requireInteraction": self.require_interaction,
            "renotify": self.renotify,
            "data": dict(self.data),
        }


@dataclass
class ShownNotification:
    """A notification currently displayed by the platform."""

    title: str
    options: NotificationOptions
    shown_at: datetime = field(default_factory=datetime.now)
    surface: str = "unknown"

    @property
    def tag(self) -> str:
        return self.options.tag

    def __str__(self) -> str:
        return f"{self.title}: {self.options.body} [{self.tag}]"


class Renderer(ABC):
    """Platform call that makes a notification visible to the user."""

    @abstractmethod
    def is_available(self) -> bool:
        """False when notifications are unsupported or not permitted."""
        pass

    @abstractmethod
    def show(self, title: str, options: NotificationOptions, surface: str = "unknown") -> None:
        """
        Display a notification.

        Raises:
            RenderError: If the platform refused the call.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return renderer name for logging."""
        pass

    def close(self, tag: str) -> int:
        """Close live notifications with ``tag``; returns how many were closed."""
        return 0


class NotificationRegistry(ABC):
    """Query side of the platform's list of displayed notifications."""

    @abstractmethod
    def get_notifications(self, tag: Optional[str] = None) -> List[ShownNotification]:
        """Return live notifications, optionally only those with ``tag``."""
        pass
