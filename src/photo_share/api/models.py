"""Pydantic models for request payloads."""

from pydantic import BaseModel, Field


class PhotoCreateRequest(BaseModel):
    """Fields a client may send when posting a photo.

    Ownership is not accepted from the client; unknown fields such as an
    author id are ignored.
    """

    image_url: str
    title: str
    category_id: str
    description: str = ""


class KeyPress(BaseModel):
    """Keyboard input forwarded from the overlay."""

    key: str = Field(min_length=1, max_length=32)


class InvalidateRequest(BaseModel):
    """Tags to drop from this instance's cache."""

    tags: list[str] = Field(default_factory=list)
