"""
Recipe file parsing.

A recipe is a line-oriented text file of ``key value...`` entries::

    title       Argon in a box
    start       0:ns
    end         0.01:ns
    timestep    10:fs
    snapshot    1:ps
    temperature 300:K
    particles   100
    boundary    cubic 100:nm 100:nm 100:nm

Quantities are written ``value:unit``. Blank lines are ignored and ``#``
starts a comment. Every key is required and may appear only once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError, RecipeParseError
from ..system.box import BoundaryShape
from ..units import parse_length, parse_temperature, parse_time
from .parameters import SimulationParameters

LOGGER = logging.getLogger(__name__)

# Fixed recipe filename looked up in the working directory
DEFAULT_RECIPE_FILENAME = "recipe.bibber"


@dataclass(frozen=True)
class Recipe:
    """
    Parsed recipe with every quantity in SI units.

    Attributes:
        title: Free-text title.
        start: Start time (s).
        end: End time (s).
        timestep: Integration timestep (s).
        snapshot: Snapshot interval (s).
        temperature: Target temperature (K).
        particles: Number of particles.
        boundary_shape: Periodic cell shape.
        boundary: Edge lengths (m).
    """

    title: str
    start: float
    end: float
    timestep: float
    snapshot: float
    temperature: float
    particles: int
    boundary_shape: BoundaryShape
    boundary: tuple[float, float, float]

    @property
    def duration(self) -> float:
        """Time from start to end."""
        return self.end - self.start

    def to_parameters(self, **overrides: Any) -> SimulationParameters:
        """
        Build validated simulation parameters.

        Args:
            **overrides: Extra SimulationParameters fields, e.g.
                ``thermostat_coupling`` or ``particle_mass``.

        Raises:
            ConfigurationError: If any value is invalid.
        """
        return SimulationParameters(
            start_time=self.start,
            end_time=self.end,
            timestep=self.timestep,
            snapshot_interval=self.snapshot,
            target_temperature=self.temperature,
            box_lengths=self.boundary,
            n_particles=self.particles,
            boundary_shape=self.boundary_shape,
            title=self.title,
            **overrides,
        )


def _expect_arguments(arguments: list[str], expected: int, line: int) -> None:
    if len(arguments) < expected:
        raise RecipeParseError(
            f"too few arguments: expected {expected}, got {len(arguments)}", line
        )
    if len(arguments) > expected:
        raise RecipeParseError(
            f"too many arguments: expected {expected}, got {len(arguments)}", line
        )


def _single(parse: Callable[[str], Any]) -> Callable[[list[str], int], Any]:
    def parser(arguments: list[str], line: int) -> Any:
        _expect_arguments(arguments, 1, line)
        return parse(arguments[0])

    return parser


def _parse_title(arguments: list[str], line: int) -> str:
    return " ".join(arguments)


def _parse_count(text: str) -> int:
    try:
        value = float(text)
    except ValueError:
        raise ConfigurationError(f"cannot parse particle count {text!r}") from None
    if value < 0 or not value.is_integer():
        raise ConfigurationError(
            f"particle count must be a non-negative integer, got {text!r}"
        )
    return int(value)


def _parse_boundary(
    arguments: list[str], line: int
) -> tuple[BoundaryShape, tuple[float, float, float]]:
    _expect_arguments(arguments, 4, line)
    shape = BoundaryShape.parse(arguments[0])
    x, y, z = (parse_length(text) for text in arguments[1:])
    return shape, (x, y, z)


_PARSERS: dict[str, Callable[[list[str], int], Any]] = {
    "title": _parse_title,
    "start": _single(parse_time),
    "end": _single(parse_time),
    "timestep": _single(parse_time),
    "snapshot": _single(parse_time),
    "temperature": _single(parse_temperature),
    "particles": _single(_parse_count),
    "boundary": _parse_boundary,
}


def parse_recipe(text: str) -> Recipe:
    """
    Parse recipe text.

    Args:
        text: Recipe file contents.

    Returns:
        Parsed Recipe.

    Raises:
        RecipeParseError: On any syntax, unit or value error, with the line
            number where one applies.
    """
    values: dict[str, Any] = {}
    for number, raw in enumerate(text.splitlines(), start=1):
        words = raw.split("#", 1)[0].split()
        if not words:
            continue
        key, arguments = words[0], words[1:]
        parser = _PARSERS.get(key)
        if parser is None:
            raise RecipeParseError(f"unknown key {key!r}", number)
        if key in values:
            raise RecipeParseError(f"duplicate key {key!r}", number)
        try:
            values[key] = parser(arguments, number)
        except RecipeParseError:
            raise
        except ConfigurationError as exc:
            raise RecipeParseError(str(exc), number) from exc

    missing = [key for key in _PARSERS if key not in values]
    if missing:
        raise RecipeParseError(f"recipe is missing required keys: {', '.join(missing)}")

    shape, lengths = values["boundary"]
    return Recipe(
        title=values["title"],
        start=values["start"],
        end=values["end"],
        timestep=values["timestep"],
        snapshot=values["snapshot"],
        temperature=values["temperature"],
        particles=values["particles"],
        boundary_shape=shape,
        boundary=lengths,
    )


def load_recipe(path: str | Path = DEFAULT_RECIPE_FILENAME) -> Recipe:
    """
    Read and parse a recipe file.

    Raises:
        ConfigurationError: If the file cannot be read.
        RecipeParseError: If its contents do not parse.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise ConfigurationError(f"cannot read recipe {str(path)!r}: {exc}") from exc
    LOGGER.debug("Read recipe from %s", path)
    return parse_recipe(text)
