"""Proximity graph: undirected particle pairs from a triangulation."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from linkfield.engine.triangulation import EMPTY, Triangulation, next_halfedge
from linkfield.model.link import Pair, canonical_pair


def iter_edges(triangles: Sequence[int], halfedges: Sequence[int]) -> Iterator[Pair]:
    """Yield one ``(min, max)`` particle pair per geometric edge.

    An interior edge shows up as two opposite halfedges and is yielded only
    from the one with the larger index. A hull edge has no opposite and is
    yielded unconditionally.

    Args:
        triangles: Flat triangle vertex array.
        halfedges: Opposite-halfedge array, ``EMPTY`` on the hull.
    """
    for e, opposite in enumerate(halfedges):
        if opposite == EMPTY or e > opposite:
            yield canonical_pair(triangles[e], triangles[next_halfedge(e)])


def extract(triangles: Sequence[int], halfedges: Sequence[int]) -> set[Pair]:
    """Candidate edge set of a triangulation, as canonical index pairs."""
    return set(iter_edges(triangles, halfedges))


def extract_from(triangulation: Triangulation) -> set[Pair]:
    """``extract`` for a ``Triangulation`` value."""
    return extract(triangulation.triangles, triangulation.halfedges)
