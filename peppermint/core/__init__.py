"""Core notification types for Peppermint."""

from .event import DeliveryOutcome, NotificationEvent
from .fingerprint import fingerprint, make_tag

__all__ = ["DeliveryOutcome", "NotificationEvent", "fingerprint", "make_tag"]
