"""Suppression by querying the platform's displayed notifications."""

import logging
import time
from threading import Lock
from typing import Callable, Dict, Optional

from ..core.fingerprint import DEFAULT_TAG_PREFIX, make_tag
from ..renderers.base import NotificationRegistry
from .suppression import DEFAULT_WINDOW_SECONDS, ClaimCoordinator

logger = logging.getLogger(__name__)


class RegistryCoordinator(ClaimCoordinator):
    """
    Refuse a claim when the platform already shows a notification with the
    same tag.

    Claims made in this process are also held as pending for the
    suppression window, since the render that follows a claim may not have
    reached the registry yet. A notification created by another process
    between the query and the render is not caught.
    """

    def __init__(
        self,
        registry: NotificationRegistry,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.window_seconds = window_seconds
        self.tag_prefix = tag_prefix
        self._clock = clock
        self._pending: Dict[str, float] = {}
        self._lock = Lock()

    def expire(self, now: Optional[float] = None) -> None:
        if now is None:
            now = self._clock()
        with self._lock:
            self._expire_locked(now)

    def _expire_locked(self, now: float) -> None:
        expired = [
            key
            for key, claimed_at in self._pending.items()
            if now - claimed_at >= self.window_seconds
        ]
        for key in expired:
            del self._pending[key]

    def try_claim(self, fingerprint: str, now: Optional[float] = None) -> bool:
        if now is None:
            now = self._clock()
        tag = make_tag(self.tag_prefix, fingerprint)

        with self._lock:
            self._expire_locked(now)
            if fingerprint in self._pending:
                logger.debug(f"Tag {tag} pending in this process")
                return False

            try:
                live = self.registry.get_notifications(tag)
            except Exception as e:
                # Without the registry we can only fall back to tag replacement.
                logger.warning(f"Notification registry query failed: {e}")
                live = []

            if live:
                logger.debug(f"Tag {tag} already displayed")
                return False

            self._pending[fingerprint] = now
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
