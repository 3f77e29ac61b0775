"""Internal endpoints used between service instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from photo_share.api.models import InvalidateRequest

if TYPE_CHECKING:
    from photo_share.containers import AppContainer

router = APIRouter(prefix="/internal", tags=["internal"])


def _get_internal_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.internal_token


async def require_internal(
    x_internal_token: str | None = Header(default=None),
    internal_token: str = Depends(_get_internal_token),
) -> None:
    """Ensure requests include the shared internal token."""
    if not x_internal_token or x_internal_token != internal_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/cache/invalidate", dependencies=[Depends(require_internal)])
async def invalidate_cache(
    body: InvalidateRequest, request: Request
) -> dict[str, object]:
    """Apply a peer's invalidation to the local cache only."""
    container: AppContainer = request.app.state.container
    removed = container.cache.invalidate_tags(body.tags)
    return {"status": "ok", "removed": removed}
