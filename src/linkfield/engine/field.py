"""ParticleField: fixed-size particle storage driven by the motion rule."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from linkfield.engine.motion import random_point_in_radius, sample_target, step_particle
from linkfield.model.particle import Particle
from linkfield.model.vector import ORIGIN

if TYPE_CHECKING:
    from linkfield.config import SimulationConfig

logger = logging.getLogger(__name__)


@dataclass
class ParticleField:
    """Owns every particle for the lifetime of a simulation.

    List indices are the particles' identity: links refer to particles by
    index, so particles are never added, removed or reordered after creation.
    """

    particles: list[Particle] = field(default_factory=list)

    @classmethod
    def populate(cls, config: SimulationConfig, now: float, rng: random.Random) -> ParticleField:
        """Scatter ``config.particle_count`` particles uniformly over the world disc.

        Each particle starts with a target drawn from anywhere in the world.
        """
        particles = []
        for _ in range(config.particle_count):
            position = random_point_in_radius(ORIGIN, config.world_radius, rng)
            target = sample_target(
                ORIGIN,
                config.world_radius,
                config.world_radius,
                rng,
                config.max_target_attempts,
            )
            particles.append(
                Particle(
                    position=position,
                    radius=config.particle_radius,
                    target=target,
                    target_since=now,
                )
            )

        logger.debug("Populated field with %d particles", len(particles))
        return cls(particles=particles)

    def __len__(self) -> int:
        return len(self.particles)

    def snapshot(self) -> list[Particle]:
        """Independent copies of all particles, in index order."""
        return [p.copy() for p in self.particles]

    def positions(self) -> tuple[tuple[float, float], ...]:
        """Current positions as plain ``(x, y)`` tuples, in index order."""
        return tuple(p.position.as_tuple() for p in self.particles)

    def step(self, config: SimulationConfig, now: float, rng: random.Random) -> None:
        """Advance every particle by one tick.

        All particles read neighbours from a snapshot taken before any of them
        moves, so the result does not depend on iteration order.
        """
        snapshot = self.snapshot()
        for particle in self.particles:
            step_particle(particle, snapshot, config, now, rng)
