"""Supabase-backed comment repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from photo_share.adapters.supabase_errors import execute
from photo_share.domain.photos import Comment
from photo_share.services.photos import CommentRepository


@dataclass
class SupabaseCommentRepository(CommentRepository):
    """Reads photo comments from ``photo_comments``."""

    client: Client

    def list_comments(self, photo_id: str) -> list[Comment]:
        """Return comments of a photo, oldest first."""
        response = execute(
            self.client.table("photo_comments")
            .select("*")
            .eq("photo_id", photo_id)
            .order("created_at"),
            "list comments",
        )
        return [_parse_comment(row) for row in response.data or []]


def _parse_comment(row: dict[str, object]) -> Comment:
    created_raw = row.get("created_at")
    return Comment(
        id=str(row["id"]),
        photo_id=str(row["photo_id"]),
        author_id=str(row["author_id"]),
        content=str(row.get("content", "")),
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )
