"""Double-submit protection for mutations."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


class DuplicateSubmissionError(RuntimeError):
    """Raised when the same action is already in flight."""


@dataclass
class SubmissionGuard:
    """Tracks in-flight mutations so a repeated submit never reaches storage."""

    _in_flight: set[tuple[str, ...]] = field(default_factory=set)

    @contextmanager
    def hold(self, *key: str) -> Iterator[None]:
        """Claim ``key`` for the duration of the block."""
        if key in self._in_flight:
            raise DuplicateSubmissionError(":".join(key))
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)
