"""System state, box and initial conditions."""

from .box import BoundaryShape, Box
from .builder import (
    MaxwellBoltzmannVelocities,
    UniformVelocities,
    VelocityInitializer,
    ZeroVelocities,
    build_system,
    build_system_from_parameters,
)
from .state import ParticleSystem, Snapshot

__all__ = [
    "BoundaryShape",
    "Box",
    "ParticleSystem",
    "Snapshot",
    "VelocityInitializer",
    "ZeroVelocities",
    "UniformVelocities",
    "MaxwellBoltzmannVelocities",
    "build_system",
    "build_system_from_parameters",
]
