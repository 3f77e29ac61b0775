"""Mutation gateway for creating, deleting and liking photos."""

import asyncio
import logging
from dataclasses import dataclass

from photo_share.domain import cache_tags
from photo_share.domain.models import ActingIdentity
from photo_share.domain.photos import LikeState, Photo, PhotoDraft
from photo_share.domain.results import (
    DuplicateLikeError,
    MutationError,
    MutationResult,
    PersistenceError,
)
from photo_share.services.guard import DuplicateSubmissionError, SubmissionGuard
from photo_share.services.invalidation import CacheInvalidationCoordinator
from photo_share.services.photos import (
    CategoryRepository,
    LikeRepository,
    PhotoRepository,
)

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
_IMAGE_URL_SCHEMES = ("https://", "http://")

_logger = logging.getLogger(__name__)


@dataclass
class MutationGateway:
    """Runs writes on behalf of the identity it was built for.

    The identity is resolved from the verified session before construction;
    nothing in a payload can change who a write is attributed to. Cache tags
    are invalidated only after the persistence write returned successfully.
    """

    identity: ActingIdentity | None
    photos: PhotoRepository
    likes: LikeRepository
    categories: CategoryRepository
    coordinator: CacheInvalidationCoordinator
    guard: SubmissionGuard

    async def create(self, draft: PhotoDraft) -> MutationResult[Photo]:
        """Create a photo owned by the acting identity."""
        if self.identity is None:
            return _unauthorized()
        invalid = _validate_draft(draft)
        if invalid is not None:
            return invalid
        user_id = self.identity.user_id
        try:
            with self.guard.hold("create", user_id, draft.image_url):
                category = await asyncio.to_thread(
                    self.categories.get_category, draft.category_id
                )
                if category is None:
                    return MutationResult.failure(
                        MutationError.VALIDATION_FAILED,
                        "Choose an existing category.",
                        field="category_id",
                    )
                photo = await asyncio.to_thread(
                    self.photos.create_photo, user_id, draft
                )
        except DuplicateSubmissionError:
            return _duplicate_submission()
        except PersistenceError:
            _logger.exception("Failed to create photo", extra={"user_id": user_id})
            return _internal()
        await self.coordinator.invalidate(cache_tags.tags_for_create(user_id))
        _logger.info("Photo created", extra={"photo_id": photo.id})
        return MutationResult.success(photo)

    async def delete(self, photo_id: str) -> MutationResult[Photo]:
        """Delete a photo owned by the acting identity."""
        if self.identity is None:
            return _unauthorized()
        user_id = self.identity.user_id
        try:
            with self.guard.hold("delete", user_id, photo_id):
                photo = await asyncio.to_thread(self.photos.get_photo, photo_id)
                if photo is None:
                    return _not_found()
                if photo.author_id != user_id:
                    return MutationResult.failure(
                        MutationError.UNAUTHORIZED,
                        "You can only delete your own photos.",
                    )
                deleted = await asyncio.to_thread(self.photos.delete_photo, photo_id)
                if not deleted:
                    return _not_found()
        except DuplicateSubmissionError:
            return _duplicate_submission()
        except PersistenceError:
            _logger.exception(
                "Failed to delete photo",
                extra={"user_id": user_id, "photo_id": photo_id},
            )
            return _internal()
        await self.coordinator.invalidate(
            cache_tags.tags_for_delete(photo.id, photo.author_id)
        )
        _logger.info("Photo deleted", extra={"photo_id": photo_id})
        return MutationResult.success(photo)

    async def toggle_like(self, photo_id: str) -> MutationResult[LikeState]:
        """Like the photo, or remove the like when it is already liked."""
        if self.identity is None:
            return _unauthorized()
        user_id = self.identity.user_id
        try:
            with self.guard.hold("like", user_id, photo_id):
                photo = await asyncio.to_thread(self.photos.get_photo, photo_id)
                if photo is None:
                    return _not_found()
                liked = await asyncio.to_thread(self.likes.has_like, user_id, photo_id)
                if liked:
                    await asyncio.to_thread(self.likes.remove_like, user_id, photo_id)
                else:
                    await asyncio.to_thread(self.likes.add_like, user_id, photo_id)
        except DuplicateSubmissionError:
            return _duplicate_submission()
        except DuplicateLikeError:
            _logger.info(
                "Like already recorded",
                extra={"user_id": user_id, "photo_id": photo_id},
            )
            return MutationResult.failure(
                MutationError.VALIDATION_FAILED, "You already like this photo."
            )
        except PersistenceError:
            _logger.exception(
                "Failed to toggle like",
                extra={"user_id": user_id, "photo_id": photo_id},
            )
            return _internal()
        await self.coordinator.invalidate(cache_tags.tags_for_like(photo_id, user_id))
        count = await self._count_after_toggle(photo, removed=liked)
        return MutationResult.success(
            LikeState(photo_id=photo_id, liked=not liked, liked_count=count)
        )

    async def _count_after_toggle(self, photo: Photo, removed: bool) -> int:
        try:
            return await asyncio.to_thread(self.likes.count_likes, photo.id)
        except PersistenceError:
            _logger.warning(
                "Failed to count likes after toggle", extra={"photo_id": photo.id}
            )
            return max(0, photo.liked_count + (-1 if removed else 1))


@dataclass
class MutationGatewayFactory:
    """Builds a gateway bound to the identity of the current request."""

    photos: PhotoRepository
    likes: LikeRepository
    categories: CategoryRepository
    coordinator: CacheInvalidationCoordinator
    guard: SubmissionGuard

    def for_identity(self, identity: ActingIdentity | None) -> MutationGateway:
        return MutationGateway(
            identity=identity,
            photos=self.photos,
            likes=self.likes,
            categories=self.categories,
            coordinator=self.coordinator,
            guard=self.guard,
        )


def _validate_draft(draft: PhotoDraft) -> MutationResult[Photo] | None:
    title = draft.title.strip()
    if not title:
        return _invalid("Enter a title.", "title")
    if len(title) > MAX_TITLE_LENGTH:
        return _invalid(
            f"Title must be at most {MAX_TITLE_LENGTH} characters.", "title"
        )
    if len(draft.description) > MAX_DESCRIPTION_LENGTH:
        return _invalid(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters.",
            "description",
        )
    if not draft.image_url.startswith(_IMAGE_URL_SCHEMES):
        return _invalid("Upload a photo first.", "image_url")
    if not draft.category_id.strip():
        return _invalid("Choose a category.", "category_id")
    return None


def _invalid(message: str, field: str) -> MutationResult:
    return MutationResult.failure(MutationError.VALIDATION_FAILED, message, field)


def _unauthorized() -> MutationResult:
    return MutationResult.failure(MutationError.UNAUTHORIZED, "Please sign in.")


def _not_found() -> MutationResult:
    return MutationResult.failure(MutationError.NOT_FOUND, "Photo not found.")


def _internal() -> MutationResult:
    return MutationResult.failure(
        MutationError.INTERNAL, "Something went wrong. Please try again."
    )


def _duplicate_submission() -> MutationResult:
    return MutationResult.failure(
        MutationError.VALIDATION_FAILED, "This request is already being processed."
    )
