"""Broadcast channels shared by the surfaces of a device."""

from .base import BroadcastChannel
from .local import LocalBroadcastChannel, LocalBroadcastHub
from .filesystem import FileBroadcastChannel

__all__ = [
    "BroadcastChannel",
    "LocalBroadcastChannel",
    "LocalBroadcastHub",
    "FileBroadcastChannel",
]
