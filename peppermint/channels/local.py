"""In-process broadcast hub."""

import logging
from threading import Lock
from typing import Dict, List

from .base import BroadcastChannel

logger = logging.getLogger(__name__)


class LocalBroadcastHub:
    """Connects channel endpoints living in the same process."""

    def __init__(self):
        self._endpoints: List["LocalBroadcastChannel"] = []
        self._lock = Lock()

    def endpoint(self, channel_id: str) -> "LocalBroadcastChannel":
        """Create a new endpoint attached to this hub."""
        return LocalBroadcastChannel(self, channel_id)

    def _attach(self, endpoint: "LocalBroadcastChannel") -> None:
        with self._lock:
            if endpoint not in self._endpoints:
                self._endpoints.append(endpoint)

    def _detach(self, endpoint: "LocalBroadcastChannel") -> None:
        with self._lock:
            if endpoint in self._endpoints:
                self._endpoints.remove(endpoint)

    def _broadcast(self, message: Dict, sender: "LocalBroadcastChannel") -> None:
        with self._lock:
            targets = [e for e in self._endpoints if e is not sender]

        for target in targets:
            try:
                target._deliver(dict(message), sender.channel_id)
            except Exception as e:
                logger.error(f"Error delivering to {target.channel_id}: {e}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)


class LocalBroadcastChannel(BroadcastChannel):
    """Endpoint of a :class:`LocalBroadcastHub`. Delivery is synchronous."""

    def __init__(self, hub: LocalBroadcastHub, channel_id: str):
        super().__init__(channel_id)
        self._hub = hub

    def publish(self, message: Dict) -> None:
        self._hub._broadcast(message, self)

    def start(self) -> None:
        self._hub._attach(self)

    def stop(self) -> None:
        self._hub._detach(self)
