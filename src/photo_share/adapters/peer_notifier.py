"""HTTP broadcast of cache invalidations to peer instances."""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from photo_share.services.invalidation import PeerNotifier

INVALIDATE_PATH = "/internal/cache/invalidate"

_logger = logging.getLogger(__name__)


class PeerBroadcastError(RuntimeError):
    """Raised when at least one peer did not acknowledge an invalidation."""


@dataclass
class HttpxPeerNotifier(PeerNotifier):
    """Posts invalidated tags to every configured peer."""

    peer_urls: list[str]
    internal_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, peer_urls: list[str], internal_token: str) -> "HttpxPeerNotifier":
        """Create a notifier with a managed httpx session."""
        return cls(
            peer_urls=peer_urls,
            internal_token=internal_token,
            http_client=httpx.AsyncClient(),
        )

    async def broadcast(self, tags: frozenset[str]) -> None:
        """Send the tags to all peers concurrently."""
        if not self.peer_urls:
            return
        payload = {"tags": sorted(tags)}
        results = await asyncio.gather(
            *(self._send(url, payload) for url in self.peer_urls),
            return_exceptions=True,
        )
        failed = []
        for url, result in zip(self.peer_urls, results, strict=True):
            if isinstance(result, Exception):
                _logger.warning("Peer %s missed invalidation: %s", url, result)
                failed.append(url)
        if failed:
            raise PeerBroadcastError(f"Unreachable peers: {', '.join(failed)}")

    async def _send(self, base_url: str, payload: dict[str, object]) -> None:
        response = await self.http_client.post(
            f"{base_url.rstrip('/')}{INVALIDATE_PATH}",
            json=payload,
            headers={"X-Internal-Token": self.internal_token},
            timeout=5,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
