"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from photo_share.config import Settings
from photo_share.containers import AppContainer
from photo_share.domain.models import ActingIdentity
from photo_share.domain.photos import (
    Category,
    Comment,
    Photo,
    PhotoDraft,
    PhotoPage,
)
from photo_share.domain.results import DuplicateLikeError, PersistenceError
from photo_share.services.cache import InMemoryCache
from photo_share.services.guard import SubmissionGuard
from photo_share.services.identity import IdentityResolver
from photo_share.services.invalidation import (
    CacheInvalidationCoordinator,
    InvalidationTransport,
    LocalInvalidationTransport,
)
from photo_share.services.mutations import MutationGatewayFactory
from photo_share.services.photos import (
    CategoryRepository,
    CommentRepository,
    LikeRepository,
    PhotoQueryService,
    PhotoRepository,
)
from photo_share.services.views import ViewSessionStore

_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def make_photo(
    photo_id: str,
    author_id: str = "alice",
    category_id: str = "cat-1",
    minutes: int = 0,
) -> Photo:
    """Build a photo; larger ``minutes`` means newer."""
    return Photo(
        id=photo_id,
        author_id=author_id,
        category_id=category_id,
        title=f"Photo {photo_id}",
        description="",
        image_url=f"https://img.example.com/{photo_id}.jpg",
        liked_count=0,
        created_at=_EPOCH + timedelta(minutes=minutes),
    )


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[str, Photo] = field(default_factory=dict)
    fail_writes: bool = False
    writes: list[str] = field(default_factory=list)
    reads: int = 0

    def add(self, photo: Photo) -> Photo:
        self.photos[photo.id] = photo
        return photo

    def create_photo(self, author_id: str, draft: PhotoDraft) -> Photo:
        self.writes.append("create")
        if self.fail_writes:
            raise PersistenceError("database unavailable")
        photo = Photo(
            id=uuid4().hex,
            author_id=author_id,
            category_id=draft.category_id,
            title=draft.title.strip(),
            description=draft.description,
            image_url=draft.image_url,
            liked_count=0,
            created_at=datetime.now(tz=UTC),
        )
        self.photos[photo.id] = photo
        return photo

    def get_photo(self, photo_id: str) -> Photo | None:
        self.reads += 1
        return self.photos.get(photo_id)

    def delete_photo(self, photo_id: str) -> bool:
        self.writes.append("delete")
        if self.fail_writes:
            raise PersistenceError("database unavailable")
        return self.photos.pop(photo_id, None) is not None

    def list_photos(
        self,
        page: int,
        take: int,
        author_id: str | None = None,
        category_id: str | None = None,
    ) -> PhotoPage:
        self.reads += 1
        matches = [
            photo
            for photo in self.photos.values()
            if (author_id is None or photo.author_id == author_id)
            and (category_id is None or photo.category_id == category_id)
        ]
        matches.sort(key=lambda photo: photo.created_at or _EPOCH, reverse=True)
        start = (page - 1) * take
        total_pages = max(1, -(-len(matches) // take))
        return PhotoPage(
            photos=matches[start : start + take], page=page, total_pages=total_pages
        )


@dataclass
class InMemoryLikeRepository(LikeRepository):
    """In-memory like repository enforcing one like per (user, photo)."""

    likes: set[tuple[str, str]] = field(default_factory=set)
    fail_writes: bool = False
    writes: int = 0

    def has_like(self, user_id: str, photo_id: str) -> bool:
        return (user_id, photo_id) in self.likes

    def add_like(self, user_id: str, photo_id: str) -> None:
        if self.fail_writes:
            raise PersistenceError("database unavailable")
        if (user_id, photo_id) in self.likes:
            raise DuplicateLikeError("duplicate like")
        self.writes += 1
        self.likes.add((user_id, photo_id))

    def remove_like(self, user_id: str, photo_id: str) -> None:
        if self.fail_writes:
            raise PersistenceError("database unavailable")
        self.writes += 1
        self.likes.discard((user_id, photo_id))

    def count_likes(self, photo_id: str) -> int:
        return sum(1 for _, liked_photo in self.likes if liked_photo == photo_id)


@dataclass
class InMemoryCategoryRepository(CategoryRepository):
    """In-memory category repository for tests."""

    categories: dict[str, Category] = field(
        default_factory=lambda: {
            "cat-1": Category(
                id="cat-1",
                name="landscape",
                label="Landscape",
                description="Mountains and seas",
            )
        }
    )

    def get_category(self, category_id: str) -> Category | None:
        return self.categories.get(category_id)

    def get_by_name(self, name: str) -> Category | None:
        for category in self.categories.values():
            if category.name == name:
                return category
        return None


@dataclass
class InMemoryCommentRepository(CommentRepository):
    """In-memory comment repository for tests."""

    comments: list[Comment] = field(default_factory=list)

    def list_comments(self, photo_id: str) -> list[Comment]:
        return [comment for comment in self.comments if comment.photo_id == photo_id]


@dataclass
class FakeIdentityResolver(IdentityResolver):
    """Maps fixed tokens to identities."""

    tokens: dict[str, str] = field(
        default_factory=lambda: {"alice-token": "alice", "bob-token": "bob"}
    )

    def resolve(self, access_token: str) -> ActingIdentity | None:
        user_id = self.tokens.get(access_token)
        return ActingIdentity(user_id=user_id) if user_id else None


@dataclass
class RecordingTransport(InvalidationTransport):
    """Records every invalidation and applies it to a local cache."""

    local: LocalInvalidationTransport
    calls: list[frozenset[str]] = field(default_factory=list)
    fail: bool = False

    async def invalidate(self, tags: frozenset[str]) -> None:
        if self.fail:
            raise ConnectionError("cache backend unreachable")
        self.calls.append(tags)
        await self.local.invalidate(tags)

    @property
    def tags(self) -> set[str]:
        return set().union(*self.calls) if self.calls else set()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        internal_token="internal-token",
    )


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def like_repository() -> InMemoryLikeRepository:
    return InMemoryLikeRepository()


@pytest.fixture
def category_repository() -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository()


@pytest.fixture
def comment_repository() -> InMemoryCommentRepository:
    return InMemoryCommentRepository()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def transport(cache: InMemoryCache) -> RecordingTransport:
    return RecordingTransport(local=LocalInvalidationTransport(cache))


@pytest.fixture
def photo_queries(
    photo_repository: InMemoryPhotoRepository,
    like_repository: InMemoryLikeRepository,
    category_repository: InMemoryCategoryRepository,
    comment_repository: InMemoryCommentRepository,
    cache: InMemoryCache,
) -> PhotoQueryService:
    return PhotoQueryService(
        photos=photo_repository,
        likes=like_repository,
        categories=category_repository,
        comments=comment_repository,
        cache=cache,
        page_size=3,
    )


@pytest.fixture
def mutations(
    photo_repository: InMemoryPhotoRepository,
    like_repository: InMemoryLikeRepository,
    category_repository: InMemoryCategoryRepository,
    transport: RecordingTransport,
) -> MutationGatewayFactory:
    return MutationGatewayFactory(
        photos=photo_repository,
        likes=like_repository,
        categories=category_repository,
        coordinator=CacheInvalidationCoordinator(transport),
        guard=SubmissionGuard(),
    )


@pytest.fixture
def container(
    settings: Settings,
    cache: InMemoryCache,
    photo_queries: PhotoQueryService,
    mutations: MutationGatewayFactory,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cache=cache,
        identity_resolver=FakeIdentityResolver(),
        photo_queries=photo_queries,
        mutations=mutations,
        view_sessions=ViewSessionStore(),
        close_resources=close_resources,
    )
