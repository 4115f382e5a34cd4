"""Base broadcast channel interface."""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List

# Signature: (message: dict, sender: str)
MessageCallback = Callable[[Dict, str], None]


class BroadcastChannel(ABC):
    """
    Fire-and-forget channel shared by the surfaces of one device.

    Messages are delivered to every other subscriber, never back to the
    publisher. No acknowledgement and no ordering guarantee.
    """

    def __init__(self, channel_id: str):
        self.channel_id = channel_id
        self._callbacks: List[MessageCallback] = []

    def subscribe(self, callback: MessageCallback) -> None:
        """Register a callback for messages from other surfaces."""
        self._callbacks.append(callback)

    def _deliver(self, message: Dict, sender: str) -> None:
        for callback in list(self._callbacks):
            callback(message, sender)

    @abstractmethod
    def publish(self, message: Dict) -> None:
        """Send a message to all other surfaces."""
        pass

    def start(self) -> None:
        """Start receiving messages."""

    def stop(self) -> None:
        """Stop receiving messages and release resources."""
