"""Notification renderers for Peppermint."""

from .base import NotificationOptions, NotificationRegistry, Renderer, ShownNotification
from .log import LogRenderer
from .memory import MemoryRenderer
from .sms import TwilioRenderer

__all__ = [
    "NotificationOptions",
    "NotificationRegistry",
    "Renderer",
    "ShownNotification",
    "LogRenderer",
    "MemoryRenderer",
    "TwilioRenderer",
]
