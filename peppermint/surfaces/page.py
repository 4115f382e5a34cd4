"""Foreground page surface."""

import logging
from enum import Enum

from .base import BaseSurface

logger = logging.getLogger(__name__)


class Visibility(Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"


class PageSurface(BaseSurface):
    """
    Surface for an open page.

    Renders only while the page is visible and focused; otherwise it leaves
    the notification to the background worker and does not even claim.
    """

    def __init__(
        self,
        *args,
        surface_name: str = "page",
        visibility: Visibility = Visibility.HIDDEN,
        has_focus: bool = False,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self._surface_name = surface_name
        self.visibility = visibility
        self.has_focus = has_focus

    @property
    def name(self) -> str:
        return self._surface_name

    def is_eligible(self) -> bool:
        return self.visibility is Visibility.VISIBLE and self.has_focus

    def set_visibility(self, visibility: Visibility) -> None:
        logger.debug(f"{self.name}: visibility {self.visibility.value} -> {visibility.value}")
        self.visibility = visibility

    def set_focus(self, has_focus: bool) -> None:
        logger.debug(f"{self.name}: focus {self.has_focus} -> {has_focus}")
        self.has_focus = has_focus
