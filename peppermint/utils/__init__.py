"""Utility modules for Peppermint."""

from .logging import setup_logging
from .signals import install_signal_handlers

__all__ = ["setup_logging", "install_signal_handlers"]
