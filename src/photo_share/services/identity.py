"""Resolution of the acting identity from request credentials."""

from typing import Protocol

from photo_share.domain.models import ActingIdentity


class IdentityResolver(Protocol):
    """Verifies an access token and returns who it belongs to."""

    def resolve(self, access_token: str) -> ActingIdentity | None:
        """Return the identity for a valid token, or None."""


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
