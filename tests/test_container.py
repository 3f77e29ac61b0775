"""Tests for container wiring."""

import asyncio

from photo_share.containers import build_container
from photo_share.services.invalidation import (
    LocalInvalidationTransport,
    PeerBroadcastTransport,
)


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.photo_queries is not None
    transport = container.mutations.coordinator.transport
    assert isinstance(transport, LocalInvalidationTransport)
    asyncio.run(container.close_resources())


def test_build_container_broadcasts_to_peers(settings) -> None:
    settings.cache_peer_urls = "http://peer-a:8000, http://peer-b:8000/"
    container = build_container(settings)

    transport = container.mutations.coordinator.transport
    assert isinstance(transport, PeerBroadcastTransport)
    assert transport.notifier.peer_urls == [
        "http://peer-a:8000",
        "http://peer-b:8000",
    ]
    asyncio.run(container.close_resources())
