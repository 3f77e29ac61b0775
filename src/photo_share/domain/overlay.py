"""Overlay state and background/overlay composition."""

import re
from dataclasses import dataclass, field
from enum import StrEnum

_OVERLAY_ROUTE = re.compile(r"^/photos/(?P<photo_id>[^/]+)/view/?$")


class Direction(StrEnum):
    """Keyboard traversal direction inside the overlay."""

    NEXT = "next"
    PREV = "prev"


KEY_BINDINGS: dict[str, Direction] = {
    "ArrowRight": Direction.NEXT,
    "ArrowLeft": Direction.PREV,
}

CLOSE_KEYS = frozenset({"Escape"})


@dataclass(frozen=True)
class OverlayClosed:
    """No overlay is shown."""


@dataclass(frozen=True)
class OverlayOpen:
    """An overlay shows ``item_id`` over the surface found at ``origin``."""

    item_id: str
    origin: str | None = None


OverlayState = OverlayClosed | OverlayOpen

CLOSED = OverlayClosed()


@dataclass(frozen=True)
class SurfaceView:
    """A rendered surface: a list page or a photo detail."""

    kind: str
    path: str
    payload: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class CompositeView:
    """Two-slot render: a preserved background and an optional overlay."""

    background: SurfaceView | None
    overlay: SurfaceView | None
    location: str

    def to_dict(self) -> dict[str, object]:
        return {
            "location": self.location,
            "background": _surface_dict(self.background),
            "overlay": _surface_dict(self.overlay),
        }


def overlay_path(item_id: str) -> str:
    """Return the intercepted address of a photo."""
    return f"/photos/{item_id}/view"


def detail_path(item_id: str) -> str:
    """Return the full-page address of a photo."""
    return f"/photos/{item_id}"


def match_overlay_route(path: str) -> str | None:
    """Return the photo id when ``path`` is an interceptable overlay address."""
    match = _OVERLAY_ROUTE.match(path)
    if match is None:
        return None
    return match.group("photo_id")


def compose(
    background: SurfaceView | None,
    overlay: SurfaceView | None,
    state: OverlayState,
) -> CompositeView:
    """Combine the background and overlay slots for the given state.

    A closed state drops the overlay slot but keeps the background as is.
    """
    if isinstance(state, OverlayOpen):
        return CompositeView(
            background=background,
            overlay=overlay,
            location=overlay_path(state.item_id),
        )
    location = background.path if background is not None else "/"
    return CompositeView(background=background, overlay=None, location=location)


def _surface_dict(surface: SurfaceView | None) -> dict[str, object] | None:
    if surface is None:
        return None
    return {"kind": surface.kind, "path": surface.path, **surface.payload}
