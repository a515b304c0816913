"""Berendsen weak-coupling thermostat."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from .base import ThermostatModifier

if TYPE_CHECKING:
    from ..system import ParticleSystem

LOGGER = logging.getLogger(__name__)


def berendsen_scale_factor(
    temperature: float, target_temperature: float, dt: float, tau: float
) -> float:
    """
    Berendsen velocity scaling factor.

    lambda = sqrt(1 + (dt/tau) * (T_target/T - 1))

    Returns 1.0 when ``temperature <= 0``, where the ratio is undefined.
    A negative radicand (only possible for dt > tau) is clamped to zero.
    """
    if temperature <= 0.0:
        return 1.0
    scale_sq = 1.0 + (dt / tau) * (target_temperature / temperature - 1.0)
    if scale_sq < 0:
        scale_sq = 0.0
    return math.sqrt(scale_sq)


class BerendsenThermostat(ThermostatModifier):
    """
    Berendsen weak-coupling thermostat.

    Scales all velocities once per step so the instantaneous temperature
    relaxes toward the target with characteristic time tau:

        dT/dt = (T_target - T) / tau

    Temperature is computed with 3N degrees of freedom and no
    centre-of-mass correction. This is a first-order relaxation and does
    not sample the canonical ensemble.

    Attributes:
        target_temperature: Target temperature in K.
        tau: Coupling time constant in seconds.
        dt: Integration timestep in seconds.
    """

    def __init__(
        self,
        temperature: float,
        tau: float,
        dt: float,
    ) -> None:
        """
        Initialize Berendsen thermostat.

        Args:
            temperature: Target temperature in K.
            tau: Coupling time constant (same units as dt).
            dt: Integration timestep.
        """
        if tau <= 0:
            raise ValueError(f"Coupling time tau must be positive, got {tau}")
        if dt <= 0:
            raise ValueError(f"timestep must be positive, got {dt}")
        self._temperature = temperature
        self._tau = tau
        self._dt = dt

    @property
    def target_temperature(self) -> float:
        return self._temperature

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        self._temperature = value

    @property
    def tau(self) -> float:
        return self._tau

    @property
    def dt(self) -> float:
        return self._dt

    def scale_factor(self, temperature: float) -> float:
        """Scaling factor for a given instantaneous temperature."""
        return berendsen_scale_factor(
            temperature, self._temperature, self._dt, self._tau
        )

    def apply(self, system: ParticleSystem) -> float:
        """
        Apply Berendsen thermostat coupling.

        Args:
            system: Particle system, velocities rescaled in place.

        Returns:
            The factor lambda applied to every velocity.
        """
        current_temp = system.temperature

        if current_temp <= 0.0:
            LOGGER.debug("Zero temperature at step %d, skipping rescale", system.step)
            return 1.0

        scale = self.scale_factor(current_temp)
        if scale == 0.0:
            LOGGER.warning(
                "Berendsen factor clamped to zero at step %d (T = %.3g K, "
                "dt/tau = %.3g); velocities frozen",
                system.step,
                current_temp,
                self._dt / self._tau,
            )
        system.scale_velocities(scale)
        return scale
