"""Tests for the domain model: Vec2, Particle, Link."""

import math

import pytest

from linkfield.model.link import Link, canonical_pair
from linkfield.model.particle import Particle
from linkfield.model.vector import ZERO, Vec2


class TestVec2:
    """Tests for Vec2 arithmetic."""

    def test_add_and_sub(self):
        """Addition and subtraction work component-wise."""
        assert Vec2(1.0, 2.0) + Vec2(3.0, 4.0) == Vec2(4.0, 6.0)
        assert Vec2(1.0, 2.0) - Vec2(3.0, 4.0) == Vec2(-2.0, -2.0)

    def test_scale_both_sides(self):
        """Scalar multiplication works from either side."""
        assert Vec2(1.0, -2.0) * 3.0 == Vec2(3.0, -6.0)
        assert 3.0 * Vec2(1.0, -2.0) == Vec2(3.0, -6.0)

    def test_length_and_distance(self):
        """Length and distance are Euclidean."""
        assert Vec2(3.0, 4.0).length() == 5.0
        assert Vec2(1.0, 1.0).distance(Vec2(4.0, 5.0)) == 5.0

    def test_normalize_gives_unit_vector(self):
        """normalize() returns a vector of length 1 in the same direction."""
        unit = Vec2(10.0, 0.0).normalize()
        assert unit == Vec2(1.0, 0.0)
        assert math.isclose(Vec2(3.0, -4.0).normalize().length(), 1.0)

    def test_normalize_zero_vector_is_zero(self):
        """A zero-length vector normalizes to zero instead of failing."""
        assert Vec2(0.0, 0.0).normalize() == ZERO

    def test_normalize_tiny_vector_is_zero(self):
        """Vectors below the epsilon are treated as zero-length."""
        assert Vec2(1e-15, -1e-15).normalize() == ZERO

    def test_is_immutable(self):
        """Vec2 is frozen."""
        v = Vec2(1.0, 2.0)
        with pytest.raises(AttributeError):
            v.x = 5.0  # type: ignore[misc]


class TestParticle:
    """Tests for Particle dataclass."""

    def test_distance_to_target(self):
        """distance_to_target measures position to target."""
        p = Particle(position=Vec2(0.0, 0.0), radius=5.0, target=Vec2(6.0, 8.0), target_since=0.0)
        assert p.distance_to_target() == 10.0

    def test_copy_is_independent(self):
        """Moving the original does not move the copy."""
        p = Particle(position=Vec2(1.0, 1.0), radius=5.0, target=Vec2(2.0, 2.0), target_since=0.0)
        snapshot = p.copy()

        p.position = Vec2(9.0, 9.0)

        assert snapshot.position == Vec2(1.0, 1.0)
        assert snapshot is not p


class TestLink:
    """Tests for Link dataclass."""

    def test_canonical_pair_orders_indices(self):
        """canonical_pair returns (min, max)."""
        assert canonical_pair(5, 2) == (2, 5)
        assert canonical_pair(2, 5) == (2, 5)
        assert canonical_pair(3, 3) == (3, 3)

    def test_constructor_canonicalizes(self):
        """Link(a=7, b=3) is stored as a=3, b=7."""
        link = Link(a=7, b=3, since=1.0)
        assert link.a == 3
        assert link.b == 7
        assert link.pair == (3, 7)

    def test_equal_regardless_of_orientation(self):
        """Links over the same pair and time compare equal."""
        assert Link(a=1, b=2, since=0.5) == Link(a=2, b=1, since=0.5)

    def test_age(self):
        """age() is now minus since."""
        assert Link(a=0, b=1, since=10.0).age(12.5) == 2.5

    def test_age_never_negative(self):
        """A clock reading before since yields age 0."""
        assert Link(a=0, b=1, since=10.0).age(9.0) == 0.0

    def test_is_immutable(self):
        """Link is frozen."""
        link = Link(a=0, b=1, since=0.0)
        with pytest.raises(AttributeError):
            link.since = 5.0  # type: ignore[misc]
