"""Translation of Supabase client failures into domain errors."""

from typing import Any

import httpx
from supabase import PostgrestAPIError

from photo_share.domain.results import DuplicateLikeError, PersistenceError

UNIQUE_VIOLATION = "23505"


def execute(query: Any, action: str) -> Any:
    """Run a PostgREST query, raising PersistenceError on backend failure."""
    try:
        return query.execute()
    except PostgrestAPIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise DuplicateLikeError(f"Failed to {action}: duplicate row") from exc
        raise PersistenceError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc
