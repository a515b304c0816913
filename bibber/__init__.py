"""
bibber - A small NVT molecular dynamics engine.

Point particles in a periodic cubic box, integrated with velocity Verlet
under a pluggable force law and held at a target temperature by a
Berendsen thermostat. Snapshots are written as GRO or XYZ trajectories.

Quick Start:
    >>> from bibber import simulate
    >>> from bibber.config import load_recipe
    >>> result = simulate.run(load_recipe("recipe.bibber"))
    >>> print(f"Final temperature: {result.final_temperature:.1f} K")
"""

__version__ = "0.1.0"

# High-level APIs
from . import simulate
from .config import Recipe, SimulationParameters, load_recipe, parse_recipe
from .engines import NVTEngine
from .errors import ConfigurationError, InvariantError, RecipeParseError
from .forcefields import ForceField, ForceProvider, LennardJonesForce, NoForce
from .integrators import BerendsenThermostat, VelocityVerletIntegrator

# Core components for advanced users
from .system import Box, ParticleSystem, Snapshot, build_system

__all__ = [
    "simulate",
    "Recipe",
    "SimulationParameters",
    "load_recipe",
    "parse_recipe",
    "NVTEngine",
    "ConfigurationError",
    "InvariantError",
    "RecipeParseError",
    "ForceField",
    "ForceProvider",
    "LennardJonesForce",
    "NoForce",
    "BerendsenThermostat",
    "VelocityVerletIntegrator",
    "Box",
    "ParticleSystem",
    "Snapshot",
    "build_system",
]
