"""Shared identifier registry and the list adapter that feeds it."""

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class IdentifierRegistry:
    """Holds the ordered photo ids of the list surface currently mounted.

    The registry is a plain mutable cell. Writes notify nobody; readers poll it
    at the moment they need it (a navigation event).
    """

    _sequence: tuple[str, ...] = field(default_factory=tuple)

    def write(self, sequence: Sequence[str]) -> None:
        """Replace the stored sequence wholesale."""
        self._sequence = tuple(sequence)

    def read(self) -> tuple[str, ...]:
        """Return the current snapshot."""
        return self._sequence

    def clear(self) -> None:
        """Reset to the empty sequence."""
        self._sequence = ()


@dataclass
class ListSyncAdapter:
    """Publishes a list surface's rendered ids into the registry.

    ``mount`` and ``update`` write synchronously so the registry reflects the
    list before the rendered page is handed back. ``unmount`` always clears.
    """

    registry: IdentifierRegistry
    path: str
    mounted: bool = False

    def mount(self, sequence: Sequence[str]) -> None:
        """Write the first rendered sequence."""
        self.registry.write(sequence)
        self.mounted = True

    def update(self, sequence: Sequence[str]) -> None:
        """Write a re-rendered sequence."""
        if not self.mounted:
            raise RuntimeError("List adapter updated before mount")
        self.registry.write(sequence)

    def unmount(self) -> None:
        """Clear the registry on teardown."""
        self.registry.clear()
        self.mounted = False
