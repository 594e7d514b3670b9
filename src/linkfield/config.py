"""Simulation settings loaded from the environment.

All values can be overridden with ``LINKFIELD_``-prefixed environment
variables or a ``.env`` file, e.g. ``LINKFIELD_PARTICLE_COUNT=500``.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkfield.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Keeps the chance of exhausting the sampling budget below ~1e-6 per placement
MIN_EXPECTED_TARGET_HITS = 14.0


class SimulationConfig(BaseSettings):
    """Parameters of the particle field and its motion rule.

    Distances are in world units; the world is a disc of ``world_radius``
    centred on the origin. Times are in seconds.

    Example:
        >>> config = SimulationConfig(particle_count=50, seed=7)
        >>> config.validate_geometry()
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKFIELD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # World
    world_radius: float = Field(
        default=1600.0,
        gt=0,
        description="Radius of the containment disc around the origin",
    )
    particle_count: int = Field(
        default=150,
        ge=1,
        le=100000,
        description="Number of particles in the field",
    )

    # Particles
    particle_radius: float = Field(
        default=25.0,
        ge=0,
        description="Arrival threshold: a target closer than this counts as reached",
    )
    particle_speed: float = Field(
        default=0.5,
        gt=0,
        description="Distance travelled per tick",
    )

    # Wandering
    target_radius: float = Field(
        default=220.0,
        gt=0,
        description="New targets are drawn within this distance of the current position",
    )
    target_time: float = Field(
        default=8.0,
        gt=0,
        description="Base dwell budget before a target is abandoned",
    )
    target_jitter: float = Field(
        default=1.0,
        ge=0,
        description="Random extra dwell time, as a fraction of target_time",
    )
    max_target_attempts: int = Field(
        default=1000,
        ge=1,
        description="Rejection sampling budget for placing one target",
    )

    # Separation
    personal_space: float = Field(
        default=100.0,
        gt=0,
        description="Neighbour distance at which separation stops mattering",
    )

    # Rendering hint, passed through on frames
    link_distance_max: float = Field(
        default=400.0,
        gt=0,
        description="Links longer than this are not drawn by the renderer",
    )

    seed: int | None = Field(
        default=None,
        description="Seed for the simulation RNG (None for a random seed)",
    )

    def validate_geometry(self) -> None:
        """Check that targets can be placed inside the world within budget.

        For a particle on the world's edge, a sample from the target disc
        lands in the world with probability at least
        ``min(1/4, (world_radius / target_radius) ** 2)``. The attempt budget
        must make exhausting it practically impossible.

        Raises:
            ConfigurationError: If the world cannot hold a particle or the
                sampling budget is too small for the disc ratio.
        """
        if self.particle_radius >= self.world_radius:
            raise ConfigurationError(
                f"particle_radius ({self.particle_radius}) must be smaller than "
                f"world_radius ({self.world_radius})"
            )

        acceptance = min(0.25, (self.world_radius / self.target_radius) ** 2)
        expected_hits = self.max_target_attempts * acceptance
        if expected_hits < MIN_EXPECTED_TARGET_HITS:
            raise ConfigurationError(
                f"target_radius ({self.target_radius}) is too large for "
                f"world_radius ({self.world_radius}) with max_target_attempts="
                f"{self.max_target_attempts}: expected {expected_hits:.2f} in-bounds "
                f"samples per placement, need {MIN_EXPECTED_TARGET_HITS}"
            )

    def __repr__(self) -> str:
        return (
            f"SimulationConfig("
            f"particles={self.particle_count}, "
            f"world_radius={self.world_radius}, "
            f"speed={self.particle_speed}, "
            f"target_radius={self.target_radius}, "
            f"target_time={self.target_time}s, "
            f"seed={self.seed}"
            f")"
        )


@lru_cache
def get_simulation_config() -> SimulationConfig:
    """Load the configuration once and cache it.

    Call ``get_simulation_config.cache_clear()`` to reload.
    """
    config = SimulationConfig()
    logger.info("Loaded simulation configuration: %s", config)
    return config
