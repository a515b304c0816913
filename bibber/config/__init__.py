"""Recipe parsing and simulation parameters."""

from .parameters import (
    DEFAULT_COUPLING_TIME,
    DEFAULT_PARTICLE_MASS,
    SimulationParameters,
)
from .recipe import DEFAULT_RECIPE_FILENAME, Recipe, load_recipe, parse_recipe

__all__ = [
    "DEFAULT_COUPLING_TIME",
    "DEFAULT_PARTICLE_MASS",
    "DEFAULT_RECIPE_FILENAME",
    "Recipe",
    "SimulationParameters",
    "load_recipe",
    "parse_recipe",
]
