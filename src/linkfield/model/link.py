"""Link dataclass: an undirected, timestamped connection between two particles."""

from __future__ import annotations

from dataclasses import dataclass

Pair = tuple[int, int]


def canonical_pair(a: int, b: int) -> Pair:
    """Order a particle-index pair as (min, max) so either orientation matches."""
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True)
class Link:
    """A proximity-graph edge between particles ``a`` and ``b``.

    Identity is the unordered index pair; ``a < b`` always holds after
    construction. ``since`` is when the pair was first seen in its current
    unbroken run of ticks.
    """

    a: int
    b: int
    since: float

    def __post_init__(self) -> None:
        if self.a > self.b:
            # Frozen dataclass: bypass __setattr__ to store the canonical order
            a, b = self.b, self.a
            object.__setattr__(self, "a", a)
            object.__setattr__(self, "b", b)

    @property
    def pair(self) -> Pair:
        return (self.a, self.b)

    def age(self, now: float) -> float:
        """Seconds since the link formed (never negative)."""
        return max(0.0, now - self.since)
