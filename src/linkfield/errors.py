"""Exceptions raised by linkfield.

The simulation core has no fallible I/O. The only failure it can meet is a
configuration under which a wander target can never be placed inside the
world, which is fatal at startup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from linkfield.model.vector import Vec2


class LinkfieldError(Exception):
    """Base class for all linkfield errors."""


class ConfigurationError(LinkfieldError):
    """The simulation configuration cannot produce a valid world."""


class TargetSamplingError(ConfigurationError):
    """Rejection sampling ran out of attempts placing a target in the world.

    Attributes:
        attempts: Number of samples drawn before giving up.
        origin: Centre of the sampling disc.
        radius: Radius of the sampling disc.
    """

    def __init__(self, message: str, attempts: int, origin: Vec2, radius: float) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.origin = origin
        self.radius = radius
