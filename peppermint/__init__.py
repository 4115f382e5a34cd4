"""Peppermint Tracker push notification delivery."""

__version__ = "0.1.0"
