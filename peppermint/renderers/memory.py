"""In-process notification platform."""

import logging
from threading import Lock
from typing import List, Optional

from ..errors import RenderError
from .base import NotificationOptions, NotificationRegistry, Renderer, ShownNotification

logger = logging.getLogger(__name__)

PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"
PERMISSION_DEFAULT = "default"


class MemoryRenderer(Renderer, NotificationRegistry):
    """
    Notification platform kept in memory.

    Shares one tray between all surfaces that use it. A notification with
    the same tag as a live one replaces it instead of adding a second
    entry, like browsers do. Every call to :meth:`show` is also recorded
    in :attr:`history`, so replaced notifications still count as renders.
    """

    def __init__(self, permission: str = PERMISSION_GRANTED, supported: bool = True):
        self.permission = permission
        self.supported = supported
        self.history: List[ShownNotification] = []
        self._tray: List[ShownNotification] = []
        self._fail_next: Optional[Exception] = None
        self._lock = Lock()

    @property
    def name(self) -> str:
        return "MemoryRenderer"

    def is_available(self) -> bool:
        return self.supported and self.permission == PERMISSION_GRANTED

    def fail_next(self, error: Optional[Exception] = None) -> None:
        """Make the next :meth:`show` call raise."""
        self._fail_next = error or RenderError("platform refused notification")

    def show(self, title: str, options: NotificationOptions, surface: str = "unknown") -> None:
        with self._lock:
            if self._fail_next is not None:
                error, self._fail_next = self._fail_next, None
                raise error

            shown = ShownNotification(title=title, options=options, surface=surface)
            self.history.append(shown)

            replaced = [n for n in self._tray if n.tag == options.tag]
            for old in replaced:
                self._tray.remove(old)
            self._tray.append(shown)

        if replaced:
            logger.debug(f"Replaced notification with tag {options.tag}")

    def get_notifications(self, tag: Optional[str] = None) -> List[ShownNotification]:
        with self._lock:
            return [n for n in self._tray if tag is None or n.tag == tag]

    def close(self, tag: str) -> int:
        """Close every live notification with ``tag``; returns how many."""
        with self._lock:
            closing = [n for n in self._tray if n.tag == tag]
            for n in closing:
                self._tray.remove(n)
        return len(closing)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tray)
