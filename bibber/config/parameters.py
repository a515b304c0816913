"""Unit-normalized simulation parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Final

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError
from ..system.box import BoundaryShape, Box

# Berendsen coupling time (s). Not part of the recipe format.
DEFAULT_COUPLING_TIME: Final[float] = 1e-13

# Mass of every particle (kg)
DEFAULT_PARTICLE_MASS: Final[float] = 1e-24

# Relative slack when converting durations to step counts
_STEP_TOLERANCE: Final[float] = 1e-9


@dataclass(frozen=True)
class SimulationParameters:
    """
    Canonical, validated parameters of one run.

    All times in seconds, lengths in metres, temperature in kelvin, mass in
    kilograms. Construction raises ConfigurationError on any invalid value.

    Attributes:
        start_time: Simulated time at step 0.
        end_time: Simulated time at which the run completes.
        timestep: Integration timestep dt.
        snapshot_interval: Simulated time between snapshots.
        target_temperature: Thermostat setpoint.
        box_lengths: Edge lengths of the periodic cell.
        n_particles: Particle count N.
        boundary_shape: Cell shape; only cubic is supported.
        thermostat_coupling: Berendsen relaxation time tau.
        particle_mass: Mass of every particle.
        title: Free-text run title, carried into the trajectory.
    """

    start_time: float
    end_time: float
    timestep: float
    snapshot_interval: float
    target_temperature: float
    box_lengths: NDArray[np.floating]
    n_particles: int
    boundary_shape: BoundaryShape = BoundaryShape.CUBIC
    thermostat_coupling: float = DEFAULT_COUPLING_TIME
    particle_mass: float = DEFAULT_PARTICLE_MASS
    title: str = "bibber"
    _box: Box = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate every field."""
        for name in (
            "start_time",
            "end_time",
            "timestep",
            "snapshot_interval",
            "target_temperature",
            "thermostat_coupling",
            "particle_mass",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

        if self.timestep <= 0:
            raise ConfigurationError(f"timestep must be positive, got {self.timestep}")
        if self.snapshot_interval <= 0:
            raise ConfigurationError(
                f"snapshot interval must be positive, got {self.snapshot_interval}"
            )
        if self.snapshot_interval < self.timestep:
            raise ConfigurationError(
                f"snapshot interval {self.snapshot_interval:g} s is shorter than "
                f"the timestep {self.timestep:g} s"
            )
        if self.end_time < self.start_time:
            raise ConfigurationError(
                f"end time {self.end_time:g} s is before start time "
                f"{self.start_time:g} s"
            )
        if self.target_temperature <= 0:
            raise ConfigurationError(
                f"temperature must be positive, got {self.target_temperature} K"
            )
        if self.thermostat_coupling <= 0:
            raise ConfigurationError(
                f"thermostat coupling must be positive, got {self.thermostat_coupling}"
            )
        if self.thermostat_coupling < self.timestep:
            raise ConfigurationError(
                f"thermostat coupling {self.thermostat_coupling:g} s is shorter "
                f"than the timestep {self.timestep:g} s"
            )
        if self.particle_mass <= 0:
            raise ConfigurationError(
                f"particle mass must be positive, got {self.particle_mass}"
            )
        if int(self.n_particles) != self.n_particles or self.n_particles < 0:
            raise ConfigurationError(
                f"particle count must be a non-negative integer, got {self.n_particles}"
            )

        box = Box.from_dimensions(self.boundary_shape, self.box_lengths)
        object.__setattr__(self, "n_particles", int(self.n_particles))
        object.__setattr__(self, "box_lengths", box.lengths)
        object.__setattr__(self, "_box", box)

    @property
    def box(self) -> Box:
        """Return the simulation box."""
        return self._box

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def n_steps(self) -> int:
        """Number of timesteps from start to end (a partial last step counts)."""
        return math.ceil(self.duration / self.timestep - _STEP_TOLERANCE)

    @property
    def n_snapshots(self) -> int:
        """Number of snapshots after the initial one."""
        return math.floor(
            self.n_steps * self.timestep / self.snapshot_interval + _STEP_TOLERANCE
        )

    def snapshot_index(self, time: float) -> int:
        """Index of the last snapshot boundary at or before ``time``."""
        return math.floor(
            (time - self.start_time) / self.snapshot_interval + _STEP_TOLERANCE
        )
