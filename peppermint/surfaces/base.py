"""Base delivery surface."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..core.event import DEFAULT_BODY, DEFAULT_TITLE, DeliveryOutcome, NotificationEvent
from ..core.fingerprint import DEFAULT_TAG_PREFIX, make_tag
from ..filters.suppression import ClaimCoordinator
from ..renderers.base import NotificationOptions, Renderer

logger = logging.getLogger(__name__)


class BaseSurface(ABC):
    """
    Abstract base class for delivery surfaces.

    A surface receives push payloads and decides on its own whether to
    render them. Every payload ends as RENDERED or SUPPRESSED; nothing is
    retried.
    """

    def __init__(
        self,
        coordinator: ClaimCoordinator,
        renderer: Renderer,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        default_title: str = DEFAULT_TITLE,
        default_body: str = DEFAULT_BODY,
        icon: str = "/icon-192.png",
        badge: str = "/icon-96.png",
        require_interaction: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the surface.

        Args:
            coordinator: Suppression coordinator shared with the other surfaces.
            renderer: Platform call used to display notifications.
            tag_prefix: Prefix for notification tags.
            default_title: Title for payloads without one.
            default_body: Body for payloads without one.
            icon: Notification icon URL.
            badge: Notification badge URL.
            require_interaction: Keep notifications until the user acts.
            clock: Time source for arrival times.
        """
        self.coordinator = coordinator
        self.renderer = renderer
        self.tag_prefix = tag_prefix
        self.default_title = default_title
        self.default_body = default_body
        self.icon = icon
        self.badge = badge
        self.require_interaction = require_interaction
        self.clock = clock

        self.rendered = 0
        self.suppressed = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Return surface name for logging."""
        pass

    @abstractmethod
    def is_eligible(self) -> bool:
        """Whether this surface may render at all right now."""
        pass

    def start(self) -> None:
        """Attach to the coordinator."""
        self.coordinator.start()
        logger.info(f"Started {self.name}")

    def stop(self) -> None:
        """Detach from the coordinator."""
        self.coordinator.stop()
        logger.info(
            f"Stopped {self.name} "
            f"(rendered {self.rendered}, suppressed {self.suppressed})"
        )

    def _suppress(self, reason: str) -> DeliveryOutcome:
        self.suppressed += 1
        logger.debug(f"{self.name}: suppressed ({reason})")
        return DeliveryOutcome.SUPPRESSED

    def build_options(self, event: NotificationEvent) -> NotificationOptions:
        return NotificationOptions(
            body=event.body,
            tag=make_tag(self.tag_prefix, event.fingerprint),
            icon=self.icon,
            badge=self.badge,
            require_interaction=self.require_interaction,
            data=dict(event.data),
        )

    def handle(self, payload: Any, now: Optional[float] = None) -> DeliveryOutcome:
        """
        Handle one push payload.

        Args:
            payload: Inbound push payload.
            now: Arrival time; defaults to the current time.

        Returns:
            DeliveryOutcome.RENDERED if this surface displayed the
            notification, DeliveryOutcome.SUPPRESSED otherwise.
        """
        if now is None:
            now = self.clock()

        event = NotificationEvent.from_payload(
            payload,
            now=now,
            default_title=self.default_title,
            default_body=self.default_body,
        )

        # The platform displays these itself.
        if event.has_platform_notification:
            return self._suppress("platform notification payload")

        if not self.is_eligible():
            return self._suppress("not eligible")

        if not self.renderer.is_available():
            logger.info(f"{self.name}: notifications unavailable via {self.renderer.name}")
            return self._suppress("renderer unavailable")

        token = event.fingerprint
        if not self.coordinator.try_claim(token, now):
            return self._suppress(f"duplicate {token}")

        options = self.build_options(event)
        try:
            self.renderer.show(event.title, options, surface=self.name)
        except Exception as e:
            # The claim is kept and the event is not retried.
            logger.error(f"{self.name}: failed to show {options.tag}: {e}", exc_info=True)
            return self._suppress("render failed")

        self.rendered += 1
        logger.info(f"{self.name}: showed {event} (tag={options.tag})")
        return DeliveryOutcome.RENDERED
