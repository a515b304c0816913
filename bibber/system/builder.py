"""Initial particle placement and velocity policies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError
from ..units import BOLTZMANN
from .box import Box
from .state import ParticleSystem

if TYPE_CHECKING:
    from ..config import SimulationParameters

LOGGER = logging.getLogger(__name__)


class VelocityInitializer(ABC):
    """
    Policy producing the initial velocities.

    The thermostat corrects whatever the policy produces over the first
    steps of the run.
    """

    @abstractmethod
    def __call__(
        self, masses: NDArray[np.floating], rng: np.random.Generator
    ) -> NDArray[np.floating]:
        """
        Draw initial velocities.

        Args:
            masses: Particle masses, shape (N,).
            rng: Random generator.

        Returns:
            Velocities in m/s, shape (N, 3).
        """
        ...


class ZeroVelocities(VelocityInitializer):
    """All particles start at rest."""

    def __call__(
        self, masses: NDArray[np.floating], rng: np.random.Generator
    ) -> NDArray[np.floating]:
        return np.zeros((len(masses), 3), dtype=np.float64)


class UniformVelocities(VelocityInitializer):
    """Each component drawn uniformly from ``[-max_speed, max_speed)``."""

    def __init__(self, max_speed: float) -> None:
        if max_speed < 0:
            raise ValueError(f"max_speed must be non-negative, got {max_speed}")
        self.max_speed = max_speed

    def __call__(
        self, masses: NDArray[np.floating], rng: np.random.Generator
    ) -> NDArray[np.floating]:
        return rng.uniform(-self.max_speed, self.max_speed, size=(len(masses), 3))


class MaxwellBoltzmannVelocities(VelocityInitializer):
    """
    Components drawn from the Maxwell-Boltzmann distribution.

    sigma_v = sqrt(k_B T / m) for each component.
    """

    def __init__(self, temperature: float) -> None:
        if temperature < 0:
            raise ValueError(f"temperature must be non-negative, got {temperature}")
        self.temperature = temperature

    def __call__(
        self, masses: NDArray[np.floating], rng: np.random.Generator
    ) -> NDArray[np.floating]:
        sigma = np.sqrt(BOLTZMANN * self.temperature / masses)
        return rng.standard_normal((len(masses), 3)) * sigma[:, np.newaxis]


def uniform_positions(
    n_particles: int,
    box: Box,
    rng: np.random.Generator,
    min_separation: float = 0.0,
    max_attempts: int = 1000,
) -> NDArray[np.floating]:
    """
    Disperse particles uniformly over the box volume.

    With ``min_separation > 0`` each particle is redrawn until its
    minimum-image distance to all previously placed particles is at least
    ``min_separation``. Particles are never dropped, so the count is exactly
    ``n_particles``.

    Raises:
        ConfigurationError: If a particle cannot be placed in
            ``max_attempts`` draws.
    """
    if min_separation <= 0.0:
        return rng.uniform(0.0, 1.0, size=(n_particles, 3)) * box.lengths

    positions = np.empty((n_particles, 3), dtype=np.float64)
    for i in range(n_particles):
        for _ in range(max_attempts):
            candidate = rng.uniform(0.0, 1.0, size=3) * box.lengths
            if i == 0:
                break
            distances = box.minimum_image_distance(positions[:i], candidate)
            if np.min(distances) >= min_separation:
                break
        else:
            raise ConfigurationError(
                f"could not place particle {i} of {n_particles} with minimum "
                f"separation {min_separation:g} m after {max_attempts} attempts"
            )
        positions[i] = candidate
    return positions


def build_system(
    n_particles: int,
    box: Box,
    mass: float,
    velocities: VelocityInitializer | None = None,
    seed: int | None = None,
    start_time: float = 0.0,
    min_separation: float = 0.0,
) -> ParticleSystem:
    """
    Build a particle system with randomly dispersed particles.

    Args:
        n_particles: Number of particles N.
        box: Simulation box.
        mass: Mass of every particle in kg.
        velocities: Velocity policy. Defaults to ``ZeroVelocities``.
        seed: Random seed for reproducibility.
        start_time: Simulated time at step 0.
        min_separation: Minimum pair distance at placement, in metres.

    Returns:
        New ParticleSystem.
    """
    if n_particles < 0:
        raise ConfigurationError(
            f"particle count must be non-negative, got {n_particles}"
        )
    if velocities is None:
        velocities = ZeroVelocities()

    rng = np.random.default_rng(seed)
    masses = np.full(n_particles, mass, dtype=np.float64)
    positions = uniform_positions(n_particles, box, rng, min_separation=min_separation)
    initial_velocities = velocities(masses, rng)

    LOGGER.debug(
        "Placed %d particles in %s box, velocities from %s",
        n_particles,
        box.shape.value,
        type(velocities).__name__,
    )
    return ParticleSystem(
        positions, initial_velocities, masses, box, start_time=start_time
    )


def build_system_from_parameters(
    parameters: SimulationParameters,
    velocities: VelocityInitializer | None = None,
    seed: int | None = None,
    min_separation: float = 0.0,
) -> ParticleSystem:
    """Build the initial system described by simulation parameters."""
    return build_system(
        n_particles=parameters.n_particles,
        box=parameters.box,
        mass=parameters.particle_mass,
        velocities=velocities,
        seed=seed,
        start_time=parameters.start_time,
        min_separation=min_separation,
    )
