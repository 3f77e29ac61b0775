"""Supabase-backed like repository."""

from dataclasses import dataclass

from supabase import Client

from photo_share.adapters.supabase_errors import execute
from photo_share.services.photos import LikeRepository


@dataclass
class SupabaseLikeRepository(LikeRepository):
    """Stores likes in ``photo_likes``, unique on (user_id, photo_id)."""

    client: Client

    def has_like(self, user_id: str, photo_id: str) -> bool:
        """Return true when the user likes the photo."""
        response = execute(
            self.client.table("photo_likes")
            .select("photo_id")
            .eq("user_id", user_id)
            .eq("photo_id", photo_id)
            .limit(1),
            "load like",
        )
        return bool(response.data)

    def add_like(self, user_id: str, photo_id: str) -> None:
        """Insert a like; the unique constraint rejects repeats."""
        execute(
            self.client.table("photo_likes").insert(
                {"user_id": user_id, "photo_id": photo_id}
            ),
            "add like",
        )

    def remove_like(self, user_id: str, photo_id: str) -> None:
        """Delete a like if present."""
        execute(
            self.client.table("photo_likes")
            .delete()
            .eq("user_id", user_id)
            .eq("photo_id", photo_id),
            "remove like",
        )

    def count_likes(self, photo_id: str) -> int:
        """Return the number of likes of a photo."""
        response = execute(
            self.client.table("photo_likes")
            .select("photo_id", count="exact")
            .eq("photo_id", photo_id)
            .limit(1),
            "count likes",
        )
        return int(response.count or 0)
