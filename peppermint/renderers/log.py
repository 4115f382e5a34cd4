"""Renderer that prints notifications instead of displaying them."""

import logging

from .base import NotificationOptions, Renderer

logger = logging.getLogger(__name__)


class LogRenderer(Renderer):
    """Dry-run renderer: prints to stdout and logs."""

    def __init__(self, echo: bool = True):
        self.echo = echo
        self.count = 0

    @property
    def name(self) -> str:
        return "LogRenderer"

    def is_available(self) -> bool:
        return True

    def show(self, title: str, options: NotificationOptions, surface: str = "unknown") -> None:
        self.count += 1
        line = f"[{surface}] {title}: {options.body} (tag={options.tag})"
        if self.echo:
            print(f"[NOTIFY] {line}")
        logger.info(f"Notification shown: {line}")
