"""Overlay state machine driven by route activations and keyboard input."""

import logging
from dataclasses import dataclass
from typing import Protocol

from photo_share.domain.overlay import (
    CLOSE_KEYS,
    CLOSED,
    KEY_BINDINGS,
    Direction,
    OverlayOpen,
    OverlayState,
    match_overlay_route,
    overlay_path,
)
from photo_share.services.navigation import NavigationResolver

_logger = logging.getLogger(__name__)


class RouteHost(Protocol):
    """Addressable state owned by the host routing layer."""

    def replace(self, location: str) -> None:
        """Replace the current location without pushing a new entry."""


@dataclass
class OverlayRouter:
    """Maps route activations and key presses onto ``OverlayState``.

    The router only reads the identifier registry (through the resolver);
    opening, moving and closing never write it.
    """

    resolver: NavigationResolver
    host: RouteHost
    state: OverlayState = CLOSED

    def activate(self, item_id: str, origin: str | None = None) -> OverlayState:
        """Open the overlay on ``item_id`` over the surface at ``origin``."""
        if isinstance(self.state, OverlayOpen) and origin is None:
            origin = self.state.origin
        self.state = OverlayOpen(item_id=item_id, origin=origin)
        return self.state

    def handle_key(self, key: str) -> OverlayState:
        """Translate a key press into navigation or close.

        Unknown keys are ignored.
        """
        if key in CLOSE_KEYS:
            return self.close()
        direction = KEY_BINDINGS.get(key)
        if direction is None:
            return self.state
        return self.navigate(direction)

    def navigate(self, direction: Direction) -> OverlayState:
        """Move to the neighbour in ``direction`` when one exists."""
        current = self.state
        if not isinstance(current, OverlayOpen):
            return current
        target = self.resolver.resolve(current.item_id, direction)
        if target is None:
            _logger.debug("No %s neighbour for %s", direction.value, current.item_id)
            return current
        self.state = OverlayOpen(item_id=target, origin=current.origin)
        self.host.replace(overlay_path(target))
        return self.state

    def close(self) -> OverlayState:
        """Close the overlay and return the host to the background address."""
        current = self.state
        if not isinstance(current, OverlayOpen):
            return current
        self.state = CLOSED
        self.host.replace(current.origin or "/")
        return self.state

    def follow_route(self, path: str) -> OverlayState:
        """Sync with a location the host already navigated to."""
        item_id = match_overlay_route(path)
        if item_id is None:
            self.state = CLOSED
        elif not self.is_showing(item_id):
            self.activate(item_id)
        return self.state

    def is_showing(self, item_id: str) -> bool:
        """Return true while the overlay is open on ``item_id``."""
        return isinstance(self.state, OverlayOpen) and self.state.item_id == item_id
