"""Per-client view sessions tying the registry, list adapter and overlay."""

import asyncio
import logging
from dataclasses import dataclass, field
from uuid import uuid4

from photo_share.domain.overlay import (
    CompositeView,
    OverlayOpen,
    SurfaceView,
    compose,
)
from photo_share.services.navigation import NavigationResolver
from photo_share.services.overlay import OverlayRouter
from photo_share.services.registry import IdentifierRegistry, ListSyncAdapter

_logger = logging.getLogger(__name__)


@dataclass
class ViewSession:
    """Rendering context of one client.

    Acts as the route host of its overlay router. At most one list adapter is
    mounted at a time; mounting another tears the previous one down first.
    """

    id: str
    location: str = "/"
    background: SurfaceView | None = None
    overlay: SurfaceView | None = None
    list_adapter: ListSyncAdapter | None = None
    notices: list[str] = field(default_factory=list)
    registry: IdentifierRegistry = field(default_factory=IdentifierRegistry)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    router: OverlayRouter = field(init=False)

    def __post_init__(self) -> None:
        self.router = OverlayRouter(
            resolver=NavigationResolver(self.registry), host=self
        )

    def replace(self, location: str) -> None:
        """Record the location requested by the overlay router."""
        self.location = location

    def mount_list(self, surface: SurfaceView, photo_ids: tuple[str, ...]) -> None:
        """Render a list surface as the background and publish its ids."""
        adapter = self.list_adapter
        if adapter is not None and adapter.mounted and adapter.path == surface.path:
            adapter.update(photo_ids)
        else:
            self.unmount_list()
            adapter = ListSyncAdapter(registry=self.registry, path=surface.path)
            adapter.mount(photo_ids)
            self.list_adapter = adapter
        self.background = surface
        self._navigate_to(surface.path)

    def unmount_list(self) -> None:
        """Tear down the mounted list surface, if any."""
        if self.list_adapter is not None:
            self.list_adapter.unmount()
            self.list_adapter = None
        self.background = None

    def show_standalone(self, surface: SurfaceView) -> None:
        """Render a non-list surface (full-page detail) as the only view."""
        self.unmount_list()
        self.background = surface
        self._navigate_to(surface.path)

    def open_overlay(self, item_id: str, surface: SurfaceView) -> None:
        """Show ``surface`` as an overlay, keeping the current background."""
        origin = self.background.path if self.background is not None else None
        self.router.activate(item_id, origin=origin)
        self.overlay = surface
        self.location = surface.path

    def close_overlay(self) -> None:
        """Close the overlay; the background is left untouched."""
        self.router.close()
        self.overlay = None

    def showing(self, item_id: str) -> bool:
        """Return true while the overlay displays ``item_id``."""
        return self.router.is_showing(item_id)

    def current_overlay_id(self) -> str | None:
        state = self.router.state
        return state.item_id if isinstance(state, OverlayOpen) else None

    def notify(self, message: str) -> None:
        """Queue a message for the side channel (toast)."""
        self.notices.append(message)

    def drain_notices(self) -> list[str]:
        notices, self.notices = self.notices, []
        return notices

    def render(self) -> CompositeView:
        return compose(self.background, self.overlay, self.router.state)

    def _navigate_to(self, path: str) -> None:
        self.location = path
        if not isinstance(self.router.follow_route(path), OverlayOpen):
            self.overlay = None


@dataclass
class ViewSessionStore:
    """In-process map of view sessions keyed by the session cookie."""

    max_sessions: int = 10_000
    _sessions: dict[str, ViewSession] = field(default_factory=dict)

    def get_or_create(self, session_id: str | None) -> ViewSession:
        """Return the session for ``session_id``, or a new one.

        Unknown ids are not adopted; a new session always gets a server id.
        """
        if session_id is not None:
            existing = self.get(session_id)
            if existing is not None:
                return existing
        session = ViewSession(id=uuid4().hex)
        if len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            self._sessions.pop(oldest).unmount_list()
            _logger.info("Evicted view session", extra={"session_id": oldest})
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> ViewSession | None:
        return self._sessions.get(session_id)
