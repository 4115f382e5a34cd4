"""Graceful shutdown signal handling."""

import signal
import logging
from threading import Event
from typing import Optional

logger = logging.getLogger(__name__)


def install_signal_handlers(shutdown_event: Optional[Event] = None) -> Event:
    """
    Set an event on SIGINT or SIGTERM.

    Args:
        shutdown_event: Event to set; a new one is created if omitted.

    Returns:
        Event that will be set when shutdown is requested.
    """
    if shutdown_event is None:
        shutdown_event = Event()

    def handler(signum, frame):
        sig_name = signal.Signals(signum).name
        logger.info(f"Received {sig_name}, shutting down surface...")
        shutdown_event.set()

    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)

    logger.debug("Signal handlers installed for SIGINT and SIGTERM")
    return shutdown_event
