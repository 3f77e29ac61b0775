"""Typed outcomes returned by the mutation layer."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class MutationError(StrEnum):
    """Expected failure kinds of a mutation."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    INTERNAL = "internal"


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """Either a success payload or a typed failure."""

    value: T | None = None
    error: MutationError | None = None
    message: str | None = None
    field: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "MutationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls, error: MutationError, message: str, field: str | None = None
    ) -> "MutationResult[T]":
        return cls(error=error, message=message, field=field)


class PersistenceError(RuntimeError):
    """Raised by repositories when the backend write or read fails."""


class DuplicateLikeError(PersistenceError):
    """Raised when a like already exists for the (user, photo) pair."""
