"""Tag-addressable cache abstractions."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for read results that can be invalidated by tag."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(
        self, key: str, value: object, ttl_seconds: int, tags: Iterable[str] = ()
    ) -> None:
        """Store a cached value with a TTL in seconds under the given tags."""

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop every entry registered under any of the tags."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime
    tags: frozenset[str]


@dataclass
class InMemoryCache(Cache):
    """Per-process cache with a tag index."""

    _entries: dict[str, _CacheEntry]
    _keys_by_tag: dict[str, set[str]]

    def __init__(self) -> None:
        self._entries = {}
        self._keys_by_tag = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._drop(key)
            return None
        return entry.value

    def set(
        self, key: str, value: object, ttl_seconds: int, tags: Iterable[str] = ()
    ) -> None:
        """Store a cached value with a TTL and register it under its tags."""
        self._drop(key)
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        entry = _CacheEntry(value=value, expires_at=expires_at, tags=frozenset(tags))
        self._entries[key] = entry
        for tag in entry.tags:
            self._keys_by_tag.setdefault(tag, set()).add(key)

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop entries for the given tags and return how many were removed."""
        removed = 0
        for tag in tags:
            for key in self._keys_by_tag.pop(tag, set()):
                if self._drop(key):
                    removed += 1
        return removed

    def keys_for_tag(self, tag: str) -> frozenset[str]:
        """Return the keys currently registered under ``tag``."""
        return frozenset(self._keys_by_tag.get(tag, ()))

    def _drop(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        for tag in entry.tags:
            keys = self._keys_by_tag.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._keys_by_tag[tag]
        return True
