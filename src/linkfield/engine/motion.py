"""Per-particle motion rule: wander toward a target, keep away from the nearest neighbour.

One step for one particle:
1. Re-target if the target is reached or the dwell budget ran out
2. Find the nearest other particle in the start-of-tick snapshot
3. Turn the neighbour distance into an eased blend weight
4. Move ``speed`` units along the blend of "toward target" and "away from neighbour"
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from linkfield.engine.ranking import nearest_neighbour
from linkfield.errors import TargetSamplingError
from linkfield.model.vector import ORIGIN, Vec2

if TYPE_CHECKING:
    from linkfield.config import SimulationConfig
    from linkfield.model.particle import Particle

logger = logging.getLogger(__name__)


class _OutOfBounds(Exception):
    """A sampled target fell outside the world disc."""


def map_range(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    """Linearly map ``value`` from one range onto another (no clamping)."""
    if in_max == in_min:
        return out_min
    return out_min + (value - in_min) * (out_max - out_min) / (in_max - in_min)


def cubic_ease_out(t: float) -> float:
    """Cubic ease-out on [0, 1]: fast start, gentle landing."""
    t -= 1.0
    return t * t * t + 1.0


def random_point_in_radius(origin: Vec2, radius: float, rng: random.Random) -> Vec2:
    """Uniformly distributed point in the disc of ``radius`` around ``origin``."""
    r = radius * math.sqrt(rng.random())
    theta = rng.random() * 2.0 * math.pi
    return Vec2(origin.x + r * math.cos(theta), origin.y + r * math.sin(theta))


def sample_target(
    origin: Vec2,
    radius: float,
    world_radius: float,
    rng: random.Random,
    max_attempts: int,
) -> Vec2:
    """Draw a point near ``origin`` that lies inside the world disc.

    Rejection sampling: candidates outside ``world_radius`` of the world
    origin are discarded and redrawn, up to ``max_attempts`` draws.

    Raises:
        TargetSamplingError: If every draw fell outside the world.
    """

    def draw() -> Vec2:
        candidate = random_point_in_radius(origin, radius, rng)
        if candidate.distance(ORIGIN) > world_radius:
            raise _OutOfBounds
        return candidate

    retryer = Retrying(
        stop=stop_after_attempt(max_attempts),
        retry=retry_if_exception_type(_OutOfBounds),
        reraise=True,
    )
    try:
        return retryer(draw)
    except _OutOfBounds as e:
        logger.error(
            "No in-bounds target after %d attempts around (%.1f, %.1f) r=%.1f",
            max_attempts,
            origin.x,
            origin.y,
            radius,
        )
        raise TargetSamplingError(
            f"Could not place a target within {world_radius} of the origin after "
            f"{max_attempts} attempts (sampling radius {radius} around "
            f"({origin.x:.1f}, {origin.y:.1f}))",
            attempts=max_attempts,
            origin=origin,
            radius=radius,
        ) from e


def dwell_budget(config: SimulationConfig, rng: random.Random) -> float:
    """Seconds a particle may chase one target: base time plus random jitter."""
    return config.target_time + config.target_time * config.target_jitter * rng.random()


def retarget_if_due(
    particle: Particle,
    config: SimulationConfig,
    now: float,
    rng: random.Random,
) -> bool:
    """Draw a new target if the current one is reached or has gone stale.

    Returns:
        True if the target was replaced.
    """
    reached = particle.distance_to_target() <= particle.radius
    if not reached and now - particle.target_since <= dwell_budget(config, rng):
        return False

    particle.target = sample_target(
        particle.position,
        config.target_radius,
        config.world_radius,
        rng,
        config.max_target_attempts,
    )
    particle.target_since = now
    return True


def target_weight(neighbour_distance: float, personal_space: float) -> float:
    """Share of the heading that goes to target-seeking, in [0, 1].

    A neighbour at distance 0 gives 0 (pure separation); at or beyond
    ``personal_space`` gives 1 (pure seeking).
    """
    spread = map_range(neighbour_distance, 0.0, personal_space, 0.0, 1.0)
    closeness = 1.0 - min(1.0, max(0.0, spread))
    return 1.0 - cubic_ease_out(closeness)


def advance(particle: Particle, neighbour: Particle | None, config: SimulationConfig) -> Vec2:
    """Move ``particle`` one step and return the heading it moved along.

    Degenerate vectors (particle on its target, neighbour on top of it)
    contribute nothing rather than failing.
    """
    if neighbour is None:
        weight = 1.0
        away = ORIGIN
    else:
        weight = target_weight(particle.position.distance(neighbour.position), config.personal_space)
        away = (particle.position - neighbour.position).normalize()

    toward = (particle.target - particle.position).normalize()
    heading = (toward * weight + away * (1.0 - weight)).normalize()
    particle.position = particle.position + heading * config.particle_speed
    return heading


def step_particle(
    particle: Particle,
    snapshot: Sequence[Particle],
    config: SimulationConfig,
    now: float,
    rng: random.Random,
) -> None:
    """Advance one particle by one tick.

    Args:
        particle: The live particle to mutate.
        snapshot: Copies of every particle (including this one) taken at the
            start of the tick. Never the live list.
        config: Motion parameters.
        now: Current clock time.
        rng: Source of randomness for targets and dwell jitter.
    """
    retarget_if_due(particle, config, now, rng)
    advance(particle, nearest_neighbour(particle, snapshot), config)
