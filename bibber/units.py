"""
Unit tables and quantity parsing.

All quantities inside the engine are SI: metres, seconds, kilograms, kelvin.
Recipe files write quantities as ``value:unit`` (for example ``10:fs`` or
``100:nm``); the helpers here turn those into canonical floats.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from .errors import ConfigurationError

# Boltzmann constant (J/K)
BOLTZMANN: Final[float] = 1.380649e-23

# 0 degrees Celsius in kelvin
ZERO_CELSIUS: Final[float] = 273.15

NANOMETER: Final[float] = 1e-9
ANGSTROM: Final[float] = 1e-10
PICOSECOND: Final[float] = 1e-12


class Dimension(Enum):
    """Physical dimension of a quantity in a recipe."""

    TIME = "time"
    LENGTH = "length"
    TEMPERATURE = "temperature"


# Multiplicative factors to seconds
TIME_UNITS: Final[dict[str, float]] = {
    "s": 1.0,
    "ms": 1e-3,
    "us": 1e-6,
    "ns": 1e-9,
    "ps": 1e-12,
    "fs": 1e-15,
}

# Multiplicative factors to metres
LENGTH_UNITS: Final[dict[str, float]] = {
    "km": 1e3,
    "m": 1.0,
    "dm": 1e-1,
    "cm": 1e-2,
    "mm": 1e-3,
    "um": 1e-6,
    "nm": 1e-9,
    "pm": 1e-12,
    "fm": 1e-15,
}

# Additive offsets to kelvin
TEMPERATURE_UNITS: Final[dict[str, float]] = {
    "K": 0.0,
    "C": ZERO_CELSIUS,
}

_TABLES: Final[dict[Dimension, dict[str, float]]] = {
    Dimension.TIME: TIME_UNITS,
    Dimension.LENGTH: LENGTH_UNITS,
    Dimension.TEMPERATURE: TEMPERATURE_UNITS,
}


class UnitError(ConfigurationError):
    """A quantity has no unit, an unknown unit, or a unit of the wrong kind."""


def dimension_of(unit: str) -> Dimension | None:
    """Return the dimension a unit symbol belongs to, or None if unknown."""
    for dimension, table in _TABLES.items():
        if unit in table:
            return dimension
    return None


def split_quantity(text: str) -> tuple[float, str]:
    """
    Split ``value:unit`` into its number and unit symbol.

    Raises:
        UnitError: If the unit is missing.
        ConfigurationError: If the number does not parse.
    """
    number, sep, unit = text.partition(":")
    if not sep or not unit:
        raise UnitError(f"quantity {text!r} has no unit (expected value:unit)")
    try:
        value = float(number)
    except ValueError:
        raise ConfigurationError(
            f"cannot parse number {number!r} in {text!r}"
        ) from None
    return value, unit


def parse_quantity(text: str, dimension: Dimension) -> float:
    """
    Parse a quantity and convert it to the canonical SI value.

    Args:
        text: Quantity written as ``value:unit``.
        dimension: Expected dimension.

    Returns:
        Value in seconds, metres or kelvin.

    Raises:
        UnitError: Missing, unknown, or wrong-dimension unit.
        ConfigurationError: Unparseable number.
    """
    value, unit = split_quantity(text)
    table = _TABLES[dimension]
    if unit not in table:
        actual = dimension_of(unit)
        if actual is None:
            raise UnitError(f"unknown unit {unit!r} in {text!r}")
        raise UnitError(
            f"expected a {dimension.value} unit, got {actual.value} unit {unit!r}"
        )
    if dimension is Dimension.TEMPERATURE:
        return value + table[unit]
    return value * table[unit]


def parse_time(text: str) -> float:
    """Parse a time quantity into seconds."""
    return parse_quantity(text, Dimension.TIME)


def parse_length(text: str) -> float:
    """Parse a length quantity into metres."""
    return parse_quantity(text, Dimension.LENGTH)


def parse_temperature(text: str) -> float:
    """Parse a temperature quantity into kelvin (``K = C + 273.15``)."""
    return parse_quantity(text, Dimension.TEMPERATURE)


def to_picoseconds(seconds: float) -> float:
    return seconds / PICOSECOND


