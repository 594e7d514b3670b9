"""Simulation tick driver.

Tick sequence:
1. Read the clock once; every timestamp in the tick uses that value
2. Step the particle field (snapshot, then move every particle)
3. Triangulate the new positions
4. Extract the candidate edge set from the triangulation
5. Reconcile candidates against the tracked links
6. Increment the tick counter and publish a TickResult
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from linkfield.clock import Clock, SystemClock
from linkfield.config import SimulationConfig
from linkfield.engine.field import ParticleField
from linkfield.engine.graph import extract_from
from linkfield.engine.registry import LinkRegistry, ReconcileStats
from linkfield.engine.triangulation import triangulate
from linkfield.model.link import Link

logger = logging.getLogger(__name__)

# Debug-log the link counts every N ticks
LOG_INTERVAL = 100


@dataclass(frozen=True)
class TickResult:
    """Read-only view of the simulation after one tick."""

    tick: int
    now: float
    positions: tuple[tuple[float, float], ...]
    links: tuple[Link, ...]
    stats: ReconcileStats = field(default_factory=ReconcileStats)


@dataclass
class Simulation:
    """Everything one running simulation owns.

    The particle field and the link registry are only touched by
    ``tick_simulation``; consumers read ``TickResult`` values.
    """

    config: SimulationConfig
    particle_field: ParticleField
    clock: Clock
    rng: random.Random
    registry: LinkRegistry = field(default_factory=LinkRegistry)
    tick: int = 0
    frozen: bool = False
    last_result: TickResult | None = None

    def toggle_freeze(self) -> bool:
        """Pause or resume ticking. Returns the new frozen state."""
        self.frozen = not self.frozen
        logger.info("Simulation %s at tick %d", "frozen" if self.frozen else "resumed", self.tick)
        return self.frozen

    def current_result(self) -> TickResult:
        """Latest result, or the initial state if no tick has run yet."""
        if self.last_result is not None:
            return self.last_result
        return TickResult(
            tick=self.tick,
            now=self.clock.now(),
            positions=self.particle_field.positions(),
            links=tuple(self.registry.links),
        )


def create_simulation(config: SimulationConfig, clock: Clock | None = None) -> Simulation:
    """Build a simulation with a freshly populated field.

    Args:
        config: Simulation parameters. Geometry is validated first.
        clock: Time source; defaults to the wall clock.

    Raises:
        ConfigurationError: If the configuration cannot produce a valid world.
    """
    config.validate_geometry()
    if clock is None:
        clock = SystemClock()

    rng = random.Random(config.seed)
    particle_field = ParticleField.populate(config, clock.now(), rng)

    logger.info(
        "Created simulation: %d particles, world radius %.0f, seed=%s",
        len(particle_field),
        config.world_radius,
        config.seed,
    )
    return Simulation(config=config, particle_field=particle_field, clock=clock, rng=rng)


def tick_simulation(sim: Simulation) -> TickResult:
    """Run one full tick to completion.

    Args:
        sim: The simulation to advance.

    Returns:
        The new TickResult. While frozen, the previous result unchanged.

    Side effects:
        - Mutates particle positions and targets
        - Replaces the registry's link set
        - Increments sim.tick
    """
    if sim.frozen:
        return sim.current_result()

    now = sim.clock.now()

    sim.particle_field.step(sim.config, now, sim.rng)
    positions = sim.particle_field.positions()

    triangulation = triangulate(positions)
    candidates = extract_from(triangulation)
    links = sim.registry.reconcile(candidates, now)

    sim.tick += 1
    result = TickResult(
        tick=sim.tick,
        now=now,
        positions=positions,
        links=tuple(links),
        stats=sim.registry.last_stats,
    )
    sim.last_result = result

    if sim.tick % LOG_INTERVAL == 0:
        logger.debug(
            "Link set after tick %d",
            sim.tick,
            extra={
                "tick": sim.tick,
                "particles": len(positions),
                "triangles": triangulation.triangle_count,
                "links": len(links),
                "new_links": result.stats.created,
                "kept_links": result.stats.retained,
                "dropped_links": result.stats.dropped,
            },
        )

    return result
