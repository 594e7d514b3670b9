"""Domain model: Vec2, Particle, Link."""

from linkfield.model.link import Link, Pair, canonical_pair
from linkfield.model.particle import Particle
from linkfield.model.vector import ORIGIN, ZERO, Vec2

__all__ = [
    "ORIGIN",
    "ZERO",
    "Link",
    "Pair",
    "Particle",
    "Vec2",
    "canonical_pair",
]
