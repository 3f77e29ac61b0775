"""Tests for the overlay state machine and view composition."""

from dataclasses import dataclass, field

from photo_share.domain.overlay import (
    CLOSED,
    Direction,
    OverlayOpen,
    SurfaceView,
    compose,
    match_overlay_route,
)
from photo_share.services.navigation import NavigationResolver
from photo_share.services.overlay import OverlayRouter
from photo_share.services.registry import IdentifierRegistry


@dataclass
class RecordingHost:
    locations: list[str] = field(default_factory=list)

    def replace(self, location: str) -> None:
        self.locations.append(location)


def _router(ids: list[str]) -> tuple[OverlayRouter, RecordingHost, IdentifierRegistry]:
    registry = IdentifierRegistry()
    registry.write(ids)
    host = RecordingHost()
    return OverlayRouter(NavigationResolver(registry), host), host, registry


def test_arrow_keys_walk_the_list() -> None:
    router, host, _ = _router(["A", "B", "C"])
    router.activate("B", origin="/")

    router.handle_key("ArrowRight")
    assert router.state == OverlayOpen(item_id="C", origin="/")

    router.handle_key("ArrowRight")
    assert router.state == OverlayOpen(item_id="C", origin="/")

    router.handle_key("ArrowLeft")
    router.handle_key("ArrowLeft")
    assert router.state == OverlayOpen(item_id="A", origin="/")

    assert host.locations == [
        "/photos/C/view",
        "/photos/B/view",
        "/photos/A/view",
    ]


def test_navigation_does_not_write_registry() -> None:
    router, _, registry = _router(["A", "B", "C"])
    router.activate("A")

    router.navigate(Direction.NEXT)
    router.close()

    assert registry.read() == ("A", "B", "C")


def test_direct_link_overlay_ignores_navigation() -> None:
    router, host, _ = _router([])
    router.activate("X")

    router.handle_key("ArrowRight")
    router.handle_key("ArrowLeft")

    assert router.state == OverlayOpen(item_id="X")
    assert host.locations == []


def test_unbound_keys_are_ignored() -> None:
    router, host, _ = _router(["A", "B"])
    router.activate("A")

    router.handle_key("Enter")

    assert router.state == OverlayOpen(item_id="A")
    assert host.locations == []


def test_keys_while_closed_do_nothing() -> None:
    router, host, _ = _router(["A", "B"])

    assert router.handle_key("ArrowRight") == CLOSED
    assert host.locations == []


def test_close_returns_to_origin() -> None:
    router, host, _ = _router(["A", "B"])
    router.activate("A", origin="/categories/landscape")
    router.navigate(Direction.NEXT)

    assert router.close() == CLOSED
    assert host.locations[-1] == "/categories/landscape"


def test_close_without_origin_goes_home() -> None:
    router, host, _ = _router([])
    router.activate("X")

    router.close()

    assert host.locations == ["/"]


def test_reactivation_keeps_origin() -> None:
    router, _, _ = _router(["A", "B"])
    router.activate("A", origin="/profile")

    router.activate("B")

    assert router.state == OverlayOpen(item_id="B", origin="/profile")


def test_follow_route_syncs_state() -> None:
    router, _, _ = _router(["A", "B"])

    router.follow_route("/photos/A/view")
    assert router.is_showing("A")

    router.follow_route("/")
    assert router.state == CLOSED


def test_match_overlay_route() -> None:
    assert match_overlay_route("/photos/abc/view") == "abc"
    assert match_overlay_route("/photos/abc") is None
    assert match_overlay_route("/users/abc/photos") is None


def test_compose_keeps_background_when_overlay_opens_and_closes() -> None:
    background = SurfaceView(kind="photo_list", path="/", payload={"photos": []})
    overlay = SurfaceView(kind="photo", path="/photos/A/view")

    opened = compose(background, overlay, OverlayOpen(item_id="A", origin="/"))
    closed = compose(background, overlay, CLOSED)

    assert opened.background is background
    assert opened.overlay is overlay
    assert opened.location == "/photos/A/view"
    assert closed.background is background
    assert closed.overlay is None
    assert closed.location == "/"


def test_composite_view_to_dict() -> None:
    background = SurfaceView(kind="photo_list", path="/", payload={"page": 1})

    view = compose(background, None, CLOSED).to_dict()

    assert view == {
        "location": "/",
        "background": {"kind": "photo_list", "path": "/", "page": 1},
        "overlay": None,
    }


def test_escape_closes_and_returns_to_origin() -> None:
    router, host, registry = _router(["A", "B"])
    router.activate("B", origin="/categories/landscape")

    assert router.handle_key("Escape") == CLOSED
    assert host.locations == ["/categories/landscape"]
    assert registry.read() == ("A", "B")


def test_escape_while_closed_does_nothing() -> None:
    router, host, _ = _router(["A"])

    assert router.handle_key("Escape") == CLOSED
    assert host.locations == []
