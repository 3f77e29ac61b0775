"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_share.adapters.peer_notifier import HttpxPeerNotifier
from photo_share.adapters.supabase_category_repository import (
    SupabaseCategoryRepository,
)
from photo_share.adapters.supabase_comment_repository import (
    SupabaseCommentRepository,
)
from photo_share.adapters.supabase_identity_resolver import SupabaseIdentityResolver
from photo_share.adapters.supabase_like_repository import SupabaseLikeRepository
from photo_share.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_share.config import Settings, parse_peer_urls
from photo_share.services.cache import Cache, InMemoryCache
from photo_share.services.guard import SubmissionGuard
from photo_share.services.identity import IdentityResolver
from photo_share.services.invalidation import (
    CacheInvalidationCoordinator,
    InvalidationTransport,
    LocalInvalidationTransport,
    PeerBroadcastTransport,
)
from photo_share.services.mutations import MutationGatewayFactory
from photo_share.services.photos import PhotoQueryService
from photo_share.services.views import ViewSessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: Cache
    identity_resolver: IdentityResolver
    photo_queries: PhotoQueryService
    mutations: MutationGatewayFactory
    view_sessions: ViewSessionStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    like_repository = SupabaseLikeRepository(supabase_client)
    category_repository = SupabaseCategoryRepository(supabase_client)
    comment_repository = SupabaseCommentRepository(supabase_client)
    cache = InMemoryCache()
    local_transport = LocalInvalidationTransport(cache)
    peer_urls = parse_peer_urls(resolved_settings.cache_peer_urls)
    notifier: HttpxPeerNotifier | None = None
    transport: InvalidationTransport = local_transport
    if peer_urls:
        notifier = HttpxPeerNotifier.create(
            peer_urls=peer_urls, internal_token=resolved_settings.internal_token
        )
        transport = PeerBroadcastTransport(local=local_transport, notifier=notifier)
    coordinator = CacheInvalidationCoordinator(transport)
    photo_queries = PhotoQueryService(
        photos=photo_repository,
        likes=like_repository,
        categories=category_repository,
        comments=comment_repository,
        cache=cache,
        listing_ttl_seconds=resolved_settings.listing_ttl_seconds,
        detail_ttl_seconds=resolved_settings.detail_ttl_seconds,
        page_size=resolved_settings.page_size,
    )
    mutations = MutationGatewayFactory(
        photos=photo_repository,
        likes=like_repository,
        categories=category_repository,
        coordinator=coordinator,
        guard=SubmissionGuard(),
    )

    async def close_resources() -> None:
        if notifier is not None:
            await notifier.close()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        identity_resolver=SupabaseIdentityResolver(supabase_client),
        photo_queries=photo_queries,
        mutations=mutations,
        view_sessions=ViewSessionStore(
            max_sessions=resolved_settings.max_view_sessions
        ),
        close_resources=close_resources,
    )
