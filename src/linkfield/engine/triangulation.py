"""Delaunay triangulation in flat triangle / halfedge form.

The rest of the engine works on two parallel integer arrays:

- ``triangles[e]`` is the particle index where halfedge ``e`` starts; every
  three consecutive entries form one counter-clockwise triangle.
- ``halfedges[e]`` is the index of the opposite halfedge in the neighbouring
  triangle, or ``EMPTY`` if ``e`` lies on the convex hull.

Halfedge ``e`` runs from ``triangles[e]`` to ``triangles[next_halfedge(e)]``.
The triangulation itself comes from ``scipy.spatial.Delaunay``; this module
only converts its simplex/neighbour arrays into that layout.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from scipy.spatial import Delaunay, QhullError

logger = logging.getLogger(__name__)

# Opposite-halfedge marker for hull edges
EMPTY = -1


def next_halfedge(e: int) -> int:
    """Next halfedge around the same triangle."""
    return e - 2 if e % 3 == 2 else e + 1


def prev_halfedge(e: int) -> int:
    """Previous halfedge around the same triangle."""
    return e + 2 if e % 3 == 0 else e - 1


@dataclass(frozen=True)
class Triangulation:
    """Flat triangle and opposite-halfedge arrays (see module docstring)."""

    triangles: tuple[int, ...] = ()
    halfedges: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if len(self.triangles) != len(self.halfedges):
            raise ValueError(
                f"triangles ({len(self.triangles)}) and halfedges "
                f"({len(self.halfedges)}) must have the same length"
            )
        if len(self.triangles) % 3 != 0:
            raise ValueError(f"triangles length {len(self.triangles)} is not a multiple of 3")

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    def is_empty(self) -> bool:
        return not self.triangles


def triangulate(points: Sequence[tuple[float, float]]) -> Triangulation:
    """Triangulate a 2D point set.

    Args:
        points: ``(x, y)`` pairs; the i-th point is particle index i.

    Returns:
        The triangulation. Empty when there are fewer than three points or
        when all points are collinear or coincident.
    """
    if len(points) < 3:
        return Triangulation()

    coords = np.asarray(points, dtype=np.float64)
    try:
        delaunay = Delaunay(coords)
    except QhullError as e:
        logger.warning("Degenerate point set (%d points), no triangulation: %s", len(points), e)
        return Triangulation()

    simplices, neighbors = _orient_ccw(coords, delaunay.simplices, delaunay.neighbors)
    return _to_halfedges(simplices, neighbors)


def _orient_ccw(
    coords: np.ndarray,
    simplices: np.ndarray,
    neighbors: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Flip clockwise simplices so every triangle winds counter-clockwise.

    ``neighbors[t, k]`` is the triangle opposite vertex k, so the neighbour
    columns are swapped together with the vertex columns.
    """
    simplices = simplices.copy()
    neighbors = neighbors.copy()

    p0 = coords[simplices[:, 0]]
    p1 = coords[simplices[:, 1]]
    p2 = coords[simplices[:, 2]]
    cross = (p1[:, 0] - p0[:, 0]) * (p2[:, 1] - p0[:, 1]) - (p1[:, 1] - p0[:, 1]) * (
        p2[:, 0] - p0[:, 0]
    )
    clockwise = cross < 0

    simplices[clockwise] = simplices[clockwise][:, [0, 2, 1]]
    neighbors[clockwise] = neighbors[clockwise][:, [0, 2, 1]]
    return simplices, neighbors


def _to_halfedges(simplices: np.ndarray, neighbors: np.ndarray) -> Triangulation:
    """Build the flat arrays from oriented simplices and their neighbours."""
    triangles = [int(v) for v in simplices.reshape(-1)]
    halfedges = [EMPTY] * len(triangles)

    for t in range(len(simplices)):
        for j in range(3):
            e = 3 * t + j
            # Edge v_j -> v_{j+1} is opposite vertex v_{j+2}
            u = int(neighbors[t, (j + 2) % 3])
            if u == -1:
                continue
            start = triangles[e]
            end = triangles[next_halfedge(e)]
            for k in range(3):
                f = 3 * u + k
                if triangles[f] == end and triangles[next_halfedge(f)] == start:
                    halfedges[e] = f
                    break

    return Triangulation(triangles=tuple(triangles), halfedges=tuple(halfedges))
