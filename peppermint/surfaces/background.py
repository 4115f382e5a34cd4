"""Background worker surface."""

import logging
from typing import Callable, Optional

from ..renderers.base import NotificationRegistry
from .base import BaseSurface

logger = logging.getLogger(__name__)

DEFAULT_LINK = "/"


class BackgroundSurface(BaseSurface):
    """
    Surface that runs with or without open pages.

    It is the fallback renderer: it steps aside only while
    ``has_focused_client`` reports a visible, focused page that handles
    the same push. It also handles clicks on displayed notifications.
    """

    def __init__(
        self,
        *args,
        surface_name: str = "worker",
        has_focused_client: Optional[Callable[[], bool]] = None,
        open_window: Optional[Callable[[str], None]] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self._surface_name = surface_name
        self.has_focused_client = has_focused_client
        self.open_window = open_window

    @property
    def name(self) -> str:
        return self._surface_name

    def is_eligible(self) -> bool:
        if self.has_focused_client is not None and self.has_focused_client():
            return False
        return True

    def _link_for(self, tag: str) -> str:
        if isinstance(self.renderer, NotificationRegistry):
            for shown in self.renderer.get_notifications(tag):
                link = shown.options.data.get("link")
                if link:
                    return str(link)
        return DEFAULT_LINK

    def on_click(self, tag: str) -> str:
        """
        Handle a click on a displayed notification.

        Closes the notification and opens its link.

        Args:
            tag: Tag of the clicked notification.

        Returns:
            The link that was opened ("/" if the payload carried none).
        """
        link = self._link_for(tag)
        closed = self.renderer.close(tag)
        logger.info(f"{self.name}: clicked {tag}, closed {closed}, opening {link}")
        if self.open_window is not None:
            self.open_window(link)
        return link
