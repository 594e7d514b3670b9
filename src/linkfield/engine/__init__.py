"""Simulation engine: motion rule, particle field, proximity graph, link registry, tick driver."""

from linkfield.engine.field import ParticleField
from linkfield.engine.graph import extract, extract_from, iter_edges
from linkfield.engine.motion import (
    advance,
    cubic_ease_out,
    random_point_in_radius,
    retarget_if_due,
    sample_target,
    step_particle,
)
from linkfield.engine.ranking import nearest_neighbour, rank_by_distance
from linkfield.engine.registry import LinkRegistry, ReconcileStats
from linkfield.engine.simulation import (
    Simulation,
    TickResult,
    create_simulation,
    tick_simulation,
)
from linkfield.engine.triangulation import (
    EMPTY,
    Triangulation,
    next_halfedge,
    prev_halfedge,
    triangulate,
)

__all__ = [
    "EMPTY",
    "LinkRegistry",
    "ParticleField",
    "ReconcileStats",
    "Simulation",
    "TickResult",
    "Triangulation",
    "advance",
    "create_simulation",
    "cubic_ease_out",
    "extract",
    "extract_from",
    "iter_edges",
    "nearest_neighbour",
    "next_halfedge",
    "prev_halfedge",
    "random_point_in_radius",
    "rank_by_distance",
    "retarget_if_due",
    "sample_target",
    "step_particle",
    "tick_simulation",
]
