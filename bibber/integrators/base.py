"""Base interfaces for integrators and thermostats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system import ParticleSystem

# positions -> (forces, potential energy)
ForceFunction = Callable[[NDArray[np.floating]], tuple[NDArray[np.floating], float]]


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators advance a ParticleSystem in place by one timestep. The
    system's cached forces must hold the forces at its current positions
    on entry and hold the forces at the new positions on return.
    """

    @abstractmethod
    def step(self, system: ParticleSystem, force_fn: ForceFunction) -> float:
        """
        Advance the system by one time step.

        Args:
            system: Particle system, mutated in place.
            force_fn: Computes (forces, potential energy) from positions.

        Returns:
            Potential energy at the new positions.
        """
        ...

    @property
    @abstractmethod
    def timestep(self) -> float:
        """Return the integration timestep."""
        ...


class ThermostatModifier(ABC):
    """
    Abstract base class for thermostat modifiers.

    Thermostats adjust velocities in place after each integration step to
    control temperature.
    """

    @abstractmethod
    def apply(self, system: ParticleSystem) -> float:
        """
        Apply thermostat modification to the system.

        Args:
            system: Particle system, mutated in place.

        Returns:
            Velocity scale factor that was applied (1.0 if none).
        """
        ...

    @property
    @abstractmethod
    def target_temperature(self) -> float:
        """Return target temperature."""
        ...
