"""Domain models for the photo sharing service."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActingIdentity:
    """The authenticated principal a request acts on behalf of."""

    user_id: str
