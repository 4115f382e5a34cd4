"""Duplicate-notification suppression with time-based expiration."""

import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from ..channels.base import BroadcastChannel
from ..core.fingerprint import DEFAULT_TAG_PREFIX, fingerprint_from_tag, make_tag

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 1.0

NOTIFICATION_SHOWN = "notification-shown"


@dataclass
class SuppressionRecord:
    """Marker that some surface already claimed a fingerprint."""

    fingerprint: str
    claimed_at: float
    origin: str = "local"

    def is_expired(self, now: float, window_seconds: float) -> bool:
        return now - self.claimed_at >= window_seconds


class ClaimCoordinator(ABC):
    """Interface every surface consults before rendering."""

    @abstractmethod
    def try_claim(self, fingerprint: str, now: Optional[float] = None) -> bool:
        """Claim a fingerprint. Returns False if it is already claimed."""
        pass

    @abstractmethod
    def expire(self, now: Optional[float] = None) -> None:
        """Drop records older than the suppression window."""
        pass

    def start(self) -> None:
        """Attach to shared infrastructure."""

    def stop(self) -> None:
        """Detach from shared infrastructure."""


class SuppressionCoordinator(ClaimCoordinator):
    """
    Replicated suppression store.

    Each surface keeps a local mirror of claimed fingerprints. Successful
    claims are announced on a broadcast channel and announcements from
    other surfaces are mirrored with the same expiry. There is no central
    authority, so two claims inside the propagation delay can both win.
    """

    def __init__(
        self,
        channel: Optional[BroadcastChannel] = None,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the coordinator.

        Args:
            channel: Broadcast channel shared with the other surfaces.
                     None keeps the store purely local.
            window_seconds: Suppression window (default 1s).
            tag_prefix: Prefix used for the tags carried on the channel.
            clock: Time source for records mirrored from other surfaces.
        """
        self.window_seconds = window_seconds
        self.tag_prefix = tag_prefix
        self._channel = channel
        self._clock = clock
        self._records: "OrderedDict[str, SuppressionRecord]" = OrderedDict()
        self._lock = Lock()
        self._subscribed = False
        self._running = False

    @property
    def channel(self) -> Optional[BroadcastChannel]:
        return self._channel

    def start(self) -> None:
        """Subscribe to the channel and start it."""
        if self._channel is None or self._running:
            return
        if not self._subscribed:
            self._channel.subscribe(self._on_message)
            self._subscribed = True
        self._channel.start()
        self._running = True

    def stop(self) -> None:
        if self._channel is not None and self._running:
            self._channel.stop()
            self._running = False

    def _is_live(self, record: SuppressionRecord, now: float, clock_now: float) -> bool:
        # Mirrored records are stamped on arrival by our own clock; local
        # claims carry the caller's time.
        reference = now if record.origin == "local" else clock_now
        return not record.is_expired(reference, self.window_seconds)

    def _expire_locked(self, now: float) -> None:
        # Callers may pass their own timestamps, so insertion order is not
        # guaranteed to follow claimed_at; scan everything.
        clock_now = self._clock()
        expired_keys = [
            key
            for key, record in self._records.items()
            if not self._is_live(record, now, clock_now)
        ]
        for key in expired_keys:
            del self._records[key]

    def _insert_locked(self, record: SuppressionRecord) -> None:
        self._records.pop(record.fingerprint, None)
        self._records[record.fingerprint] = record

    def expire(self, now: Optional[float] = None) -> None:
        with self._lock:
            self._expire_locked(self._clock() if now is None else now)

    def try_claim(self, fingerprint: str, now: Optional[float] = None) -> bool:
        """
        Claim a fingerprint for rendering.

        Args:
            fingerprint: Content fingerprint of the notification.
            now: Current time; defaults to the coordinator clock.

        Returns:
            True if the caller may render, False if suppressed.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            self._expire_locked(now)

            record = self._records.get(fingerprint)
            if record is not None and self._is_live(record, now, self._clock()):
                logger.debug(
                    f"Fingerprint {fingerprint} already claimed by {record.origin}"
                )
                return False

            self._insert_locked(SuppressionRecord(fingerprint=fingerprint, claimed_at=now))

        self._announce(fingerprint)
        return True

    def _announce(self, fingerprint: str) -> None:
        if self._channel is None:
            return
        message = {
            "type": NOTIFICATION_SHOWN,
            "tag": make_tag(self.tag_prefix, fingerprint),
        }
        try:
            self._channel.publish(message)
        except Exception as e:
            # Fire-and-forget: the local claim still stands.
            logger.warning(f"Failed to announce claim {message['tag']}: {e}")

    def _on_message(self, message: Dict, sender: str = "remote") -> None:
        """Mirror a claim announced by another surface."""
        if not isinstance(message, dict) or message.get("type") != NOTIFICATION_SHOWN:
            logger.debug(f"Ignoring channel message: {message!r}")
            return

        tag = message.get("tag")
        token = fingerprint_from_tag(tag, self.tag_prefix) if isinstance(tag, str) else None
        if token is None:
            logger.debug(f"Ignoring foreign tag: {tag!r}")
            return

        now = self._clock()
        with self._lock:
            self._expire_locked(now)
            self._insert_locked(
                SuppressionRecord(fingerprint=token, claimed_at=now, origin=sender)
            )
        logger.debug(f"Mirrored claim {tag} from {sender}")

    def clear(self) -> None:
        """Clear all records."""
        with self._lock:
            self._records.clear()

    def __contains__(self, fingerprint: str) -> bool:
        with self._lock:
            return fingerprint in self._records

    def __len__(self) -> int:
        """Return number of live records."""
        with self._lock:
            return len(self._records)
