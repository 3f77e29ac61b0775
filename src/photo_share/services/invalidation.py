"""Cache invalidation transports and the coordinator used after writes."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from photo_share.services.cache import Cache

_logger = logging.getLogger(__name__)


class InvalidationTransport(Protocol):
    """Delivers tag invalidations to every cache sharing the namespace."""

    async def invalidate(self, tags: frozenset[str]) -> None:
        """Invalidate the tags wherever they may be cached."""


class PeerNotifier(Protocol):
    """Sends invalidated tags to the other instances of the service."""

    async def broadcast(self, tags: frozenset[str]) -> None:
        """Deliver the tags to every known peer."""


@dataclass
class LocalInvalidationTransport(InvalidationTransport):
    """Invalidates the cache of this process only."""

    cache: Cache

    async def invalidate(self, tags: frozenset[str]) -> None:
        """Drop local entries for the tags."""
        removed = self.cache.invalidate_tags(tags)
        _logger.debug("Invalidated %s local cache entries", removed)


@dataclass
class PeerBroadcastTransport(InvalidationTransport):
    """Invalidates locally, then signals every peer instance."""

    local: LocalInvalidationTransport
    notifier: PeerNotifier

    async def invalidate(self, tags: frozenset[str]) -> None:
        """Apply the tags here and broadcast them to peers."""
        await self.local.invalidate(tags)
        await self.notifier.broadcast(tags)


@dataclass
class CacheInvalidationCoordinator:
    """Fires tag invalidations once a write has durably succeeded.

    Transport failures never propagate: the write already happened, so the
    worst outcome is a cache that stays stale until its TTL runs out.
    """

    transport: InvalidationTransport

    async def invalidate(self, tags: Iterable[str]) -> bool:
        """Invalidate ``tags`` and report whether delivery succeeded."""
        tag_set = frozenset(tags)
        if not tag_set:
            return True
        try:
            await self.transport.invalidate(tag_set)
        except Exception:
            _logger.exception(
                "Cache invalidation failed; entries stay stale until expiry",
                extra={"tags": sorted(tag_set)},
            )
            return False
        _logger.info("Invalidated cache tags: %s", ", ".join(sorted(tag_set)))
        return True
