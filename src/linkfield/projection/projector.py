"""Frame projector: simulation state to a plain Frame for renderers.

A Frame carries particle positions and links with their ages. Colors,
easing and line widths are the renderer's business.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from linkfield.engine.simulation import Simulation, TickResult


@dataclass
class ParticleVisual:
    """A particle as the renderer sees it."""

    index: int
    x: float
    y: float
    radius: float = 0.0


@dataclass
class LinkVisual:
    """A link as the renderer sees it."""

    a: int
    b: int
    since: float
    age: float  # seconds since the link formed
    length: float  # current distance between the endpoints


@dataclass
class Frame:
    """Everything needed to draw one frame."""

    tick: int
    time: float
    frozen: bool = False
    link_distance_max: float = 0.0  # renderer skips links longer than this
    particles: list[ParticleVisual] = field(default_factory=list)
    links: list[LinkVisual] = field(default_factory=list)


def project(sim: Simulation, result: TickResult | None = None, now: float | None = None) -> Frame:
    """Build a Frame from a simulation's latest tick.

    Args:
        sim: The simulation (read only).
        result: Tick to project; defaults to the simulation's current result.
        now: Time used for link ages; defaults to the tick's own time.
    """
    if result is None:
        result = sim.current_result()
    if now is None:
        now = result.now

    radii = [p.radius for p in sim.particle_field.particles]
    particles = [
        ParticleVisual(index=i, x=x, y=y, radius=radii[i] if i < len(radii) else 0.0)
        for i, (x, y) in enumerate(result.positions)
    ]

    links = []
    for link in result.links:
        ax, ay = result.positions[link.a]
        bx, by = result.positions[link.b]
        links.append(
            LinkVisual(
                a=link.a,
                b=link.b,
                since=link.since,
                age=link.age(now),
                length=((bx - ax) ** 2 + (by - ay) ** 2) ** 0.5,
            )
        )

    return Frame(
        tick=result.tick,
        time=now,
        frozen=sim.frozen,
        link_distance_max=sim.config.link_distance_max,
        particles=particles,
        links=links,
    )


def frame_to_dict(frame: Frame) -> dict[str, Any]:
    """JSON-serializable form of a Frame."""
    return asdict(frame)


def empty_frame_dict() -> dict[str, Any]:
    """Placeholder sent to clients before the first frame exists."""
    return frame_to_dict(Frame(tick=-1, time=0.0))
