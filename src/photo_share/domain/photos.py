"""Domain models for photos and their related records."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Photo:
    """Represents a posted photo."""

    id: str
    author_id: str
    category_id: str
    title: str
    description: str
    image_url: str
    liked_count: int
    created_at: datetime | None = None


@dataclass(frozen=True)
class PhotoDraft:
    """Client-supplied fields for a new photo.

    The owner is never part of the draft; it comes from the acting identity.
    """

    image_url: str
    title: str
    category_id: str
    description: str = ""


@dataclass(frozen=True)
class PhotoPage:
    """One page of a photo listing."""

    photos: list[Photo]
    page: int
    total_pages: int

    @property
    def photo_ids(self) -> tuple[str, ...]:
        return tuple(photo.id for photo in self.photos)


@dataclass(frozen=True)
class Category:
    """Represents a photo category."""

    id: str
    name: str
    label: str
    description: str
    image_url: str | None = None


@dataclass(frozen=True)
class Comment:
    """Represents a comment left on a photo."""

    id: str
    photo_id: str
    author_id: str
    content: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class LikeState:
    """Like state of a photo for one identity."""

    photo_id: str
    liked: bool
    liked_count: int
