"""Distance ranking of particles around a subject."""

from __future__ import annotations

from collections.abc import Sequence

from linkfield.model.particle import Particle


def rank_by_distance(subject: Particle, candidates: Sequence[Particle]) -> list[Particle]:
    """Return ``candidates`` ordered by ascending distance to ``subject``.

    The sort is stable, so equally distant candidates keep their relative
    order. Sorting the whole field is O(n log n) per particle; a spatial index
    can replace this for large fields as long as the ordering is the same.

    Args:
        subject: Particle whose position is the reference point.
        candidates: Particles to rank. May include ``subject`` itself.

    Returns:
        A new list; ``candidates`` is not modified.
    """
    origin = subject.position
    return sorted(candidates, key=lambda other: origin.distance(other.position))


def nearest_neighbour(subject: Particle, field: Sequence[Particle]) -> Particle | None:
    """Closest particle to ``subject`` in a field that contains ``subject``.

    Rank 0 is the subject's own entry, so the neighbour is rank 1.
    Returns None for a field of fewer than two particles.
    """
    if len(field) < 2:
        return None
    return rank_by_distance(subject, field)[1]
