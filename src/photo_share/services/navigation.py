"""Keyboard traversal over the registered identifier sequence."""

from dataclasses import dataclass

from photo_share.domain.overlay import Direction
from photo_share.services.registry import IdentifierRegistry


@dataclass
class NavigationResolver:
    """Computes the neighbour of the photo shown in the overlay."""

    registry: IdentifierRegistry

    def resolve(self, current_id: str, direction: Direction) -> str | None:
        """Return the adjacent id, or None when there is no neighbour.

        An id missing from the sequence is not an error: an overlay opened
        from a shared link has no list behind it.
        """
        sequence = self.registry.read()
        try:
            index = sequence.index(current_id)
        except ValueError:
            return None
        target = index + 1 if direction is Direction.NEXT else index - 1
        if 0 <= target < len(sequence):
            return sequence[target]
        return None
