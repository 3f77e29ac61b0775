"""Tests for the tagged in-memory cache."""

from datetime import UTC, datetime, timedelta

from photo_share.services.cache import InMemoryCache


def test_get_returns_stored_value() -> None:
    cache = InMemoryCache()
    cache.set("k", {"v": 1}, ttl_seconds=60, tags={"t"})

    assert cache.get("k") == {"v": 1}


def test_expired_entries_are_dropped() -> None:
    cache = InMemoryCache()
    cache.set("k", 1, ttl_seconds=60, tags={"t"})
    cache._entries["k"].expires_at = datetime.now(tz=UTC) - timedelta(seconds=1)

    assert cache.get("k") is None
    assert cache.keys_for_tag("t") == set()


def test_invalidate_tags_drops_every_tagged_entry() -> None:
    cache = InMemoryCache()
    cache.set("a", 1, ttl_seconds=60, tags={"t1"})
    cache.set("b", 2, ttl_seconds=60, tags={"t1", "t2"})
    cache.set("c", 3, ttl_seconds=60, tags={"t3"})

    removed = cache.invalidate_tags({"t1", "t2"})

    assert removed == 2
    assert cache.get("a") is None
    assert cache.get("b") is None
    assert cache.get("c") == 3
    assert cache.keys_for_tag("t2") == set()


def test_invalidate_unknown_tag_is_noop() -> None:
    cache = InMemoryCache()
    cache.set("a", 1, ttl_seconds=60, tags={"t1"})

    assert cache.invalidate_tags({"missing"}) == 0
    assert cache.get("a") == 1


def test_overwrite_moves_entry_to_new_tags() -> None:
    cache = InMemoryCache()
    cache.set("a", 1, ttl_seconds=60, tags={"old"})
    cache.set("a", 2, ttl_seconds=60, tags={"new"})

    assert cache.invalidate_tags({"old"}) == 0
    assert cache.get("a") == 2
    assert cache.keys_for_tag("new") == {"a"}


def test_keys_for_tag_returns_a_snapshot() -> None:
    cache = InMemoryCache()
    cache.set("k", 1, ttl_seconds=60, tags={"t"})

    keys = cache.keys_for_tag("t")
    cache.invalidate_tags({"t"})

    assert keys == frozenset({"k"})
    assert cache.keys_for_tag("t") == frozenset()
