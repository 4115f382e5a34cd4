"""Fan-out of push payloads to the delivery surfaces of a device."""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..channels.base import BroadcastChannel
from ..channels.filesystem import FileBroadcastChannel
from ..channels.local import LocalBroadcastHub
from ..config import Config
from ..errors import ConfigError
from ..filters.registry import RegistryCoordinator
from ..filters.suppression import ClaimCoordinator, SuppressionCoordinator
from ..renderers.base import NotificationRegistry, Renderer
from ..surfaces.background import BackgroundSurface
from ..surfaces.base import BaseSurface
from ..surfaces.page import PageSurface, Visibility
from .event import DeliveryOutcome

logger = logging.getLogger(__name__)


def build_coordinator(
    config: Config,
    renderer: Renderer,
    channel: Optional[BroadcastChannel] = None,
    clock: Callable[[], float] = time.time,
) -> ClaimCoordinator:
    """
    Create the coordinator selected by ``coordination.strategy``.

    Raises:
        ConfigError: If the registry strategy is used with a renderer that
                     cannot be queried.
    """
    delivery = config.delivery
    strategy = config.coordination.strategy

    if strategy == "broadcast":
        return SuppressionCoordinator(
            channel=channel,
            window_seconds=delivery.window_seconds,
            tag_prefix=delivery.tag_prefix,
            clock=clock,
        )

    if strategy == "registry":
        if not isinstance(renderer, NotificationRegistry):
            raise ConfigError(f"{renderer.name} has no notification registry to query")
        return RegistryCoordinator(
            registry=renderer,
            window_seconds=delivery.window_seconds,
            tag_prefix=delivery.tag_prefix,
            clock=clock,
        )

    raise ConfigError(f"Unknown coordination strategy {strategy!r}")


def build_surface(
    config: Config,
    renderer: Renderer,
    coordinator: ClaimCoordinator,
    kind: Optional[str] = None,
    name: Optional[str] = None,
    visible: Optional[bool] = None,
    focused: Optional[bool] = None,
    clock: Callable[[], float] = time.time,
    has_focused_client: Optional[Callable[[], bool]] = None,
) -> BaseSurface:
    """
    Create a surface from the ``[surface]`` section, with overrides.

    ``has_focused_client`` is only used by workers, which defer to a
    focused page while it returns True.
    """
    delivery = config.delivery
    kind = kind or config.surface.kind
    options = dict(
        tag_prefix=delivery.tag_prefix,
        default_title=delivery.default_title,
        default_body=delivery.default_body,
        icon=delivery.icon,
        badge=delivery.badge,
        require_interaction=delivery.require_interaction,
        clock=clock,
    )

    if kind == "worker":
        return BackgroundSurface(
            coordinator,
            renderer,
            surface_name=name or config.surface.name or "worker",
            has_focused_client=has_focused_client,
            **options,
        )

    if kind == "page":
        is_visible = config.surface.visible if visible is None else visible
        return PageSurface(
            coordinator,
            renderer,
            surface_name=name or config.surface.name or "page",
            visibility=Visibility.VISIBLE if is_visible else Visibility.HIDDEN,
            has_focus=config.surface.focused if focused is None else focused,
            **options,
        )

    raise ConfigError(f"Unknown surface kind {kind!r}")


def build_process_surface(
    config: Config,
    renderer: Renderer,
    channel_dir: Optional[Path] = None,
    **overrides,
) -> BaseSurface:
    """
    Create the single surface of a surface process.

    With the broadcast strategy its claims travel through a
    :class:`FileBroadcastChannel` on ``coordination.channel_dir``.
    """
    channel = None
    if config.coordination.strategy == "broadcast":
        channel = FileBroadcastChannel(
            channel_dir or config.coordination.channel_dir,
            channel_id=overrides.get("name") or config.surface.name or None,
            retention_seconds=config.coordination.retention_seconds,
        )
    coordinator = build_coordinator(config, renderer, channel)
    return build_surface(config, renderer, coordinator, **overrides)


class PushDispatcher:
    """
    Push transport stand-in.

    Delivers every payload to each attached surface, or to a subset of
    them, and records the outcomes. Surfaces read their arrival time from
    their own clock, so every surface of a device shares one timeline.
    """

    def __init__(self, surfaces: Optional[Iterable[BaseSurface]] = None):
        self._surfaces: List[BaseSurface] = list(surfaces or [])
        self._receiving: Optional[List[BaseSurface]] = None
        self._dispatched = 0
        self._rendered = 0

    @property
    def surfaces(self) -> List[BaseSurface]:
        return list(self._surfaces)

    def attach(self, surface: BaseSurface) -> None:
        self._surfaces.append(surface)

    def detach(self, surface: BaseSurface) -> None:
        if surface in self._surfaces:
            self._surfaces.remove(surface)

    def receiving(self) -> List[BaseSurface]:
        """Surfaces the current payload goes to (all attached between dispatches)."""
        if self._receiving is not None:
            return list(self._receiving)
        return self.surfaces

    def has_focused_page(self) -> bool:
        """True if a visible, focused page receives the current payload."""
        return any(
            isinstance(surface, PageSurface) and surface.is_eligible()
            for surface in self.receiving()
        )

    def dispatch(
        self,
        payload: Any,
        only: Optional[Iterable[str]] = None,
    ) -> Dict[str, DeliveryOutcome]:
        """
        Deliver a payload.

        Args:
            payload: Push payload.
            only: Names of the surfaces that receive it (all if None).

        Returns:
            Mapping of surface name to outcome.
        """
        targets = set(only) if only is not None else None
        receiving = [
            surface
            for surface in self._surfaces
            if targets is None or surface.name in targets
        ]
        outcomes: Dict[str, DeliveryOutcome] = {}

        self._receiving = receiving
        try:
            for surface in receiving:
                outcomes[surface.name] = surface.handle(payload)
        finally:
            self._receiving = None

        self._dispatched += 1
        self._rendered += sum(1 for o in outcomes.values() if o is DeliveryOutcome.RENDERED)
        logger.debug(f"Dispatched to {len(outcomes)} surface(s): {outcomes}")
        return outcomes

    @property
    def stats(self) -> Dict[str, int]:
        return {"dispatched": self._dispatched, "rendered": self._rendered}


class Device:
    """
    All surfaces of one recipient device living in this process.

    Surfaces share one renderer, one clock and, depending on the strategy,
    either an in-process broadcast hub or the renderer's registry. Workers
    defer to any visible, focused page that receives the same push.
    """

    def __init__(
        self,
        config: Config,
        renderer: Renderer,
        clock: Callable[[], float] = time.time,
        open_window: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.renderer = renderer
        self.clock = clock
        self.open_window = open_window
        self.hub = LocalBroadcastHub()
        self.dispatcher = PushDispatcher()

    def _add(self, kind: str, name: str, **overrides) -> BaseSurface:
        channel = self.hub.endpoint(name) if self.config.coordination.strategy == "broadcast" else None
        coordinator = build_coordinator(self.config, self.renderer, channel, clock=self.clock)
        surface = build_surface(
            self.config,
            self.renderer,
            coordinator,
            kind=kind,
            name=name,
            clock=self.clock,
            **overrides,
        )
        surface.start()
        self.dispatcher.attach(surface)
        return surface

    def add_worker(self, name: str = "worker") -> BackgroundSurface:
        worker = self._add("worker", name, has_focused_client=self.dispatcher.has_focused_page)
        worker.open_window = self.open_window
        return worker

    def add_page(self, name: str = "page", visible: bool = False, focused: bool = False) -> PageSurface:
        return self._add("page", name, visible=visible, focused=focused)

    def remove(self, surface: BaseSurface) -> None:
        """Close a surface (page closed, worker terminated)."""
        self.dispatcher.detach(surface)
        surface.stop()

    def deliver(
        self,
        payload: Any,
        only: Optional[Iterable[str]] = None,
    ) -> Dict[str, DeliveryOutcome]:
        return self.dispatcher.dispatch(payload, only=only)

    def click(self, tag: str) -> Optional[str]:
        """
        Route a click on a displayed notification to the first worker.

        Returns:
            The link that was opened, or None without a worker.
        """
        for surface in self.dispatcher.surfaces:
            if isinstance(surface, BackgroundSurface):
                return surface.on_click(tag)
        logger.warning(f"No worker to handle click on {tag}")
        return None

    def close(self) -> None:
        for surface in self.dispatcher.surfaces:
            self.remove(surface)
