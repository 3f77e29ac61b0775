"""Read-side services for photos, backed by the tagged cache."""

import logging
from dataclasses import dataclass
from typing import Protocol

from photo_share.domain import cache_tags
from photo_share.domain.photos import (
    Category,
    Comment,
    LikeState,
    Photo,
    PhotoDraft,
    PhotoPage,
)
from photo_share.services.cache import Cache

_logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photos."""

    def create_photo(self, author_id: str, draft: PhotoDraft) -> Photo:
        """Create a photo and return it."""

    def get_photo(self, photo_id: str) -> Photo | None:
        """Return a photo by id, if present."""

    def delete_photo(self, photo_id: str) -> bool:
        """Delete a photo; return false when no row was removed."""

    def list_photos(
        self,
        page: int,
        take: int,
        author_id: str | None = None,
        category_id: str | None = None,
    ) -> PhotoPage:
        """Return one page of photos, newest first."""


class LikeRepository(Protocol):
    """Persistence interface for likes, unique per (user, photo)."""

    def has_like(self, user_id: str, photo_id: str) -> bool:
        """Return true when the user likes the photo."""

    def add_like(self, user_id: str, photo_id: str) -> None:
        """Insert a like; raise DuplicateLikeError if it already exists."""

    def remove_like(self, user_id: str, photo_id: str) -> None:
        """Delete a like if present."""

    def count_likes(self, photo_id: str) -> int:
        """Return the number of likes of a photo."""


class CategoryRepository(Protocol):
    """Persistence interface for categories."""

    def get_category(self, category_id: str) -> Category | None:
        """Return a category by id, if present."""

    def get_by_name(self, name: str) -> Category | None:
        """Return a category by its URL name, if present."""


class CommentRepository(Protocol):
    """Persistence interface for photo comments."""

    def list_comments(self, photo_id: str) -> list[Comment]:
        """Return comments of a photo, oldest first."""


@dataclass
class PhotoQueryService:
    """Serves photo reads, caching each result under the tags it depends on."""

    photos: PhotoRepository
    likes: LikeRepository
    categories: CategoryRepository
    comments: CommentRepository
    cache: Cache
    listing_ttl_seconds: int = 300
    detail_ttl_seconds: int = 3600
    page_size: int = 15

    def list_latest(self, page: int = 1) -> PhotoPage:
        """Return the newest photos across all authors."""
        return self.photos.list_photos(page=page, take=self.page_size)

    def list_by_category(
        self, category_name: str, page: int = 1
    ) -> tuple[Category, PhotoPage] | None:
        """Return a category and one page of its photos."""
        category = self.categories.get_by_name(category_name)
        if category is None:
            return None
        photos = self.photos.list_photos(
            page=page, take=self.page_size, category_id=category.id
        )
        return category, photos

    def list_by_author(self, author_id: str, page: int = 1) -> PhotoPage:
        """Return one page of an author's photos."""
        cache_key = f"photos:author:{author_id}:{page}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, PhotoPage):
            return cached
        result = self.photos.list_photos(
            page=page, take=self.page_size, author_id=author_id
        )
        self.cache.set(
            cache_key,
            result,
            ttl_seconds=self.listing_ttl_seconds,
            tags={cache_tags.photos_by_author_tag(author_id)},
        )
        return result

    def get_photo(self, photo_id: str) -> Photo | None:
        """Return a photo; both detail addresses read through here."""
        cache_key = f"photos:detail:{photo_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Photo):
            return cached
        photo = self.photos.get_photo(photo_id)
        if photo is None:
            return None
        self.cache.set(
            cache_key,
            photo,
            ttl_seconds=self.detail_ttl_seconds,
            tags={
                cache_tags.photo_detail_tag(photo_id),
                cache_tags.photo_like_count_tag(photo_id),
            },
        )
        return photo

    def get_like_state(self, photo_id: str, user_id: str | None) -> LikeState:
        """Return whether ``user_id`` likes the photo, with the current count."""
        count = self._like_count(photo_id)
        if user_id is None:
            return LikeState(photo_id=photo_id, liked=False, liked_count=count)
        cache_key = f"photos:liked:{photo_id}:{user_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, bool):
            liked = cached
        else:
            liked = self.likes.has_like(user_id, photo_id)
            self.cache.set(
                cache_key,
                liked,
                ttl_seconds=self.detail_ttl_seconds,
                tags={cache_tags.photo_liked_tag(photo_id, user_id)},
            )
        return LikeState(photo_id=photo_id, liked=liked, liked_count=count)

    def list_comments(self, photo_id: str) -> list[Comment]:
        """Return a photo's comments."""
        cache_key = f"photos:comments:{photo_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        comments = self.comments.list_comments(photo_id)
        self.cache.set(
            cache_key,
            comments,
            ttl_seconds=self.detail_ttl_seconds,
            tags={cache_tags.photo_comments_tag(photo_id)},
        )
        return comments

    def _like_count(self, photo_id: str) -> int:
        cache_key = f"photos:likes:{photo_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, int):
            return cached
        count = self.likes.count_likes(photo_id)
        self.cache.set(
            cache_key,
            count,
            ttl_seconds=self.detail_ttl_seconds,
            tags={cache_tags.photo_like_count_tag(photo_id)},
        )
        _logger.debug("Loaded like count for %s: %s", photo_id, count)
        return count
