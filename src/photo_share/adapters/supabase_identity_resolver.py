"""Supabase Auth-backed identity resolver."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from photo_share.domain.models import ActingIdentity
from photo_share.services.identity import IdentityResolver

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityResolver(IdentityResolver):
    """Validates access tokens against Supabase Auth."""

    client: Client

    def resolve(self, access_token: str) -> ActingIdentity | None:
        """Return the user behind ``access_token`` when Supabase accepts it."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return ActingIdentity(user_id=str(response.user.id))
