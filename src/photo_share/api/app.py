"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, replace

from fastapi import (
    Depends,
    FastAPI,
    Header,
    HTTPException,
    Query,
    Request,
    Response,
    status,
)
from fastapi.responses import JSONResponse, RedirectResponse

from photo_share.api.internal import router as internal_router
from photo_share.api.models import KeyPress, PhotoCreateRequest
from photo_share.app_logging import configure_logging
from photo_share.containers import AppContainer
from photo_share.domain.models import ActingIdentity
from photo_share.domain.overlay import SurfaceView, detail_path, overlay_path
from photo_share.domain.photos import LikeState, Photo, PhotoDraft, PhotoPage
from photo_share.domain.results import MutationError, MutationResult
from photo_share.services.identity import bearer_token
from photo_share.services.views import ViewSession

_ERROR_STATUS = {
    MutationError.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    MutationError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    MutationError.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_CONTENT,
    MutationError.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_logger = logging.getLogger(__name__)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_identity(
    request: Request, authorization: str | None = Header(default=None)
) -> ActingIdentity | None:
    """Resolve the acting identity from the verified bearer token."""
    token = bearer_token(authorization)
    if token is None:
        return None
    return get_container(request).identity_resolver.resolve(token)


async def get_view_session(request: Request, response: Response) -> ViewSession:
    """Return the caller's view session, issuing a cookie for new ones."""
    container = get_container(request)
    cookie_name = container.settings.session_cookie_name
    session_id = request.cookies.get(cookie_name)
    session = container.view_sessions.get_or_create(session_id)
    if session.id != session_id:
        response.set_cookie(cookie_name, session.id, httponly=True, samesite="lax")
    return session


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(internal_router)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        _logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Something went wrong on our side."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def latest_photos(
        request: Request,
        page: int = Query(default=1, ge=1),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Render the latest photos as the list background."""
        result = await asyncio.to_thread(container.photo_queries.list_latest, page)
        surface = _list_surface(request, "Latest photos", result)
        async with session.lock:
            session.mount_list(surface, result.photo_ids)
            return session.render().to_dict()

    @app.get("/users/{author_id}/photos")
    async def author_photos(
        author_id: str,
        request: Request,
        page: int = Query(default=1, ge=1),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Render an author's photos as the list background."""
        result = await asyncio.to_thread(
            container.photo_queries.list_by_author, author_id, page
        )
        surface = _list_surface(request, "Posted photos", result)
        async with session.lock:
            session.mount_list(surface, result.photo_ids)
            return session.render().to_dict()

    @app.get("/categories/{category_name}")
    async def category_photos(
        category_name: str,
        request: Request,
        page: int = Query(default=1, ge=1),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Render a category's photos as the list background."""
        found = await asyncio.to_thread(
            container.photo_queries.list_by_category, category_name, page
        )
        if found is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        category, result = found
        surface = _list_surface(request, category.label, result)
        async with session.lock:
            session.mount_list(surface, result.photo_ids)
            return session.render().to_dict()

    @app.get("/profile")
    async def profile_photos(
        request: Request,
        page: int = Query(default=1, ge=1),
        identity: ActingIdentity | None = Depends(get_identity),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Render the signed-in user's own photos."""
        if identity is None:
            raise _please_sign_in()
        result = await asyncio.to_thread(
            container.photo_queries.list_by_author, identity.user_id, page
        )
        surface = _list_surface(request, "My photos", result)
        async with session.lock:
            session.mount_list(surface, result.photo_ids)
            return session.render().to_dict()

    @app.get("/photos/{photo_id}")
    async def photo_page(
        photo_id: str,
        identity: ActingIdentity | None = Depends(get_identity),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Render the full-page detail view."""
        photo = await asyncio.to_thread(container.photo_queries.get_photo, photo_id)
        if photo is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        surface = await _photo_surface(
            container, photo, identity, detail_path(photo_id)
        )
        comments = await asyncio.to_thread(
            container.photo_queries.list_comments, photo_id
        )
        surface.payload["comments"] = [asdict(comment) for comment in comments]
        async with session.lock:
            session.show_standalone(surface)
            return session.render().to_dict()

    @app.get("/photos/{photo_id}/view")
    async def photo_overlay(
        photo_id: str,
        identity: ActingIdentity | None = Depends(get_identity),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Render the detail view as an overlay over the current background."""
        photo = await asyncio.to_thread(container.photo_queries.get_photo, photo_id)
        if photo is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        surface = await _photo_surface(
            container, photo, identity, overlay_path(photo_id)
        )
        async with session.lock:
            session.open_overlay(photo_id, surface)
            return session.render().to_dict()

    @app.post("/overlay/keys")
    async def overlay_key(
        body: KeyPress,
        identity: ActingIdentity | None = Depends(get_identity),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Move the overlay on arrow keys; Escape closes it."""
        async with session.lock:
            before = session.current_overlay_id()
            session.router.handle_key(body.key)
            after = session.current_overlay_id()
            if after is None:
                session.overlay = None
            elif after != before:
                session.overlay = await _overlay_surface(container, after, identity)
            return session.render().to_dict()

    @app.post("/overlay/close")
    async def overlay_close(
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Close the overlay, keeping the background as rendered."""
        async with session.lock:
            session.close_overlay()
            return session.render().to_dict()

    @app.get("/notices")
    async def notices(
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Drain messages queued for the toast side channel."""
        return {"notices": session.drain_notices()}

    @app.post("/photos", response_model=None)
    async def create_photo(
        body: PhotoCreateRequest,
        identity: ActingIdentity | None = Depends(get_identity),
    ) -> RedirectResponse:
        """Post a photo and redirect to its detail page."""
        gateway = container.mutations.for_identity(identity)
        result = await gateway.create(
            PhotoDraft(
                image_url=body.image_url,
                title=body.title,
                category_id=body.category_id,
                description=body.description,
            )
        )
        photo = _unwrap(result)
        return RedirectResponse(
            url=detail_path(photo.id), status_code=status.HTTP_303_SEE_OTHER
        )

    @app.delete("/photos/{photo_id}")
    async def delete_photo(
        photo_id: str,
        identity: ActingIdentity | None = Depends(get_identity),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Delete a photo; an overlay showing it closes on success."""
        from_overlay = session.showing(photo_id)
        result = await container.mutations.for_identity(identity).delete(photo_id)
        if result.ok:
            async with session.lock:
                if session.showing(photo_id):
                    session.close_overlay()
                return {"status": "ok", "view": session.render().to_dict()}
        _surface_late_failure(session, photo_id, from_overlay, result)
        raise _http_error(result)

    @app.post("/photos/{photo_id}/like")
    async def toggle_like(
        photo_id: str,
        identity: ActingIdentity | None = Depends(get_identity),
        session: ViewSession = Depends(get_view_session),
    ) -> dict[str, object]:
        """Like or unlike a photo."""
        from_overlay = session.showing(photo_id)
        result = await container.mutations.for_identity(identity).toggle_like(photo_id)
        if not result.ok:
            _surface_late_failure(session, photo_id, from_overlay, result)
            raise _http_error(result)
        state = _unwrap(result)
        async with session.lock:
            if session.showing(photo_id) and session.overlay is not None:
                session.overlay = replace(
                    session.overlay,
                    payload={**session.overlay.payload, "like": asdict(state)},
                )
        return {"liked": state.liked, "liked_count": state.liked_count}

    return app


def _list_surface(request: Request, title: str, result: PhotoPage) -> SurfaceView:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return SurfaceView(
        kind="photo_list",
        path=path,
        payload={
            "title": title,
            "photos": [asdict(photo) for photo in result.photos],
            "page": result.page,
            "total_pages": result.total_pages,
        },
    )


async def _photo_surface(
    container: AppContainer,
    photo: Photo,
    identity: ActingIdentity | None,
    path: str,
) -> SurfaceView:
    like = await asyncio.to_thread(
        container.photo_queries.get_like_state,
        photo.id,
        identity.user_id if identity is not None else None,
    )
    return SurfaceView(
        kind="photo",
        path=path,
        payload={"photo": asdict(photo), "like": asdict(like)},
    )


async def _overlay_surface(
    container: AppContainer, photo_id: str, identity: ActingIdentity | None
) -> SurfaceView:
    photo = await asyncio.to_thread(container.photo_queries.get_photo, photo_id)
    if photo is None:
        return SurfaceView(kind="not_found", path=overlay_path(photo_id))
    return await _photo_surface(container, photo, identity, overlay_path(photo_id))


def _surface_late_failure(
    session: ViewSession,
    photo_id: str,
    from_overlay: bool,
    result: MutationResult,
) -> None:
    """Route a failure to the toast channel when its overlay already closed."""
    if from_overlay and not session.showing(photo_id) and result.message:
        session.notify(result.message)


def _unwrap(result: MutationResult) -> Photo | LikeState:
    if not result.ok or result.value is None:
        raise _http_error(result)
    return result.value


def _please_sign_in() -> HTTPException:
    return _http_error(
        MutationResult.failure(MutationError.UNAUTHORIZED, "Please sign in.")
    )


def _http_error(result: MutationResult) -> HTTPException:
    error = result.error or MutationError.INTERNAL
    detail: dict[str, object] = {"error": error.value, "message": result.message}
    if result.field is not None:
        detail["field"] = result.field
    return HTTPException(status_code=_ERROR_STATUS[error], detail=detail)
