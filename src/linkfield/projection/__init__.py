"""Frame projection: simulation state to renderer-facing snapshots."""

from linkfield.projection.projector import (
    Frame,
    LinkVisual,
    ParticleVisual,
    empty_frame_dict,
    frame_to_dict,
    project,
)

__all__ = [
    "Frame",
    "LinkVisual",
    "ParticleVisual",
    "empty_frame_dict",
    "frame_to_dict",
    "project",
]
