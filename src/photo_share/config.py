"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    internal_token: str
    cache_peer_urls: str | None = None
    listing_ttl_seconds: int = 300
    detail_ttl_seconds: int = 3600
    page_size: int = 15
    session_cookie_name: str = "view_session"
    max_view_sessions: int = 10_000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_peer_urls(raw: str | None) -> list[str]:
    """Parse the comma-separated list of peer base URLs from env."""
    if raw is None:
        return []
    urls: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().rstrip("/")
        if not value:
            continue
        if value.startswith(("http://", "https://")) and value not in urls:
            urls.append(value)
    return urls
