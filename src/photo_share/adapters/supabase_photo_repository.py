"""Supabase-backed photo repository."""

import math
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from photo_share.adapters.supabase_errors import execute
from photo_share.domain.photos import Photo, PhotoDraft, PhotoPage
from photo_share.domain.results import PersistenceError
from photo_share.services.photos import PhotoRepository

_PHOTO_COLUMNS = "*, photo_likes(count)"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo persistence."""

    client: Client

    def create_photo(self, author_id: str, draft: PhotoDraft) -> Photo:
        """Create a photo row and return it."""
        response = execute(
            self.client.table("photos").insert(
                {
                    "author_id": author_id,
                    "category_id": draft.category_id,
                    "title": draft.title.strip(),
                    "description": draft.description,
                    "image_url": draft.image_url,
                }
            ),
            "create photo",
        )
        if not response.data:
            raise PersistenceError("Failed to create photo")
        return _parse_photo(response.data[0])

    def get_photo(self, photo_id: str) -> Photo | None:
        """Return a photo by id, if present."""
        response = execute(
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("id", photo_id)
            .limit(1),
            "load photo",
        )
        if not response.data:
            return None
        return _parse_photo(response.data[0])

    def delete_photo(self, photo_id: str) -> bool:
        """Delete a photo row; return false when nothing matched."""
        response = execute(
            self.client.table("photos").delete().eq("id", photo_id),
            "delete photo",
        )
        return bool(response.data)

    def list_photos(
        self,
        page: int,
        take: int,
        author_id: str | None = None,
        category_id: str | None = None,
    ) -> PhotoPage:
        """Return one page of photos, newest first."""
        start = (page - 1) * take
        query = self.client.table("photos").select(_PHOTO_COLUMNS, count="exact")
        if author_id is not None:
            query = query.eq("author_id", author_id)
        if category_id is not None:
            query = query.eq("category_id", category_id)
        response = execute(
            query.order("created_at", desc=True).range(start, start + take - 1),
            "list photos",
        )
        total = response.count or 0
        return PhotoPage(
            photos=[_parse_photo(row) for row in response.data or []],
            page=page,
            total_pages=max(1, math.ceil(total / take)),
        )


def _parse_photo(row: dict[str, object]) -> Photo:
    """Parse a photo row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Photo(
        id=str(row["id"]),
        author_id=str(row["author_id"]),
        category_id=str(row.get("category_id", "")),
        title=str(row.get("title", "")),
        description=str(row.get("description") or ""),
        image_url=str(row.get("image_url", "")),
        liked_count=_parse_like_count(row.get("photo_likes")),
        created_at=created_at,
    )


def _parse_like_count(raw: object) -> int:
    """Read the embedded ``photo_likes(count)`` aggregate."""
    if isinstance(raw, list) and raw and isinstance(raw[0], dict):
        return int(raw[0].get("count", 0))
    return 0
