"""Particle dataclass: a moving point that wanders between random targets."""

from __future__ import annotations

from dataclasses import dataclass, replace

from linkfield.model.vector import Vec2


@dataclass
class Particle:
    """A point in the field, seeking its current target.

    ``target`` is always inside the world disc; it is re-drawn once reached
    (within ``radius``) or once the dwell budget since ``target_since`` runs out.
    """

    position: Vec2
    radius: float  # arrival threshold, fixed after creation
    target: Vec2
    target_since: float  # clock time the target was assigned

    def distance_to_target(self) -> float:
        return self.position.distance(self.target)

    def copy(self) -> Particle:
        """Shallow copy; Vec2 is immutable so this is a full snapshot."""
        return replace(self)
