"""Particle system state."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError, InvariantError
from ..units import BOLTZMANN, PICOSECOND
from .box import Box


def kinetic_energy(
    masses: NDArray[np.floating], velocities: NDArray[np.floating]
) -> float:
    """Compute total kinetic energy: sum(0.5 * m * v^2)."""
    return float(0.5 * np.sum(masses[:, np.newaxis] * velocities**2))


def count_degrees_of_freedom(n_particles: int) -> int:
    """Translational degrees of freedom of N free point particles."""
    return 3 * n_particles


def instantaneous_temperature(ke: float, n_particles: int) -> float:
    """
    Temperature T = 2 KE / (f k_B) with f from ``count_degrees_of_freedom``.

    No centre-of-mass or constraint correction is applied. Returns 0 for an
    empty system.
    """
    if n_particles == 0:
        return 0.0
    return 2.0 * ke / (count_degrees_of_freedom(n_particles) * BOLTZMANN)


def _readonly(array: NDArray[np.floating]) -> NDArray[np.floating]:
    view = array.view()
    view.flags.writeable = False
    return view


class ParticleSystem:
    """
    N point particles in a periodic box.

    The particle count is fixed at construction. Arrays are exposed as
    read-only views; the state is changed in place only through
    ``displace``, ``accelerate``, ``scale_velocities``, ``set_forces`` and
    ``advance_clock``, none of which can change N.

    Attributes:
        box: Simulation box.
        start_time: Simulated time at step 0, in seconds.
        step: Number of completed integration steps.
        time: Elapsed simulated time in seconds.
    """

    def __init__(
        self,
        positions: ArrayLike,
        velocities: ArrayLike,
        masses: ArrayLike,
        box: Box,
        start_time: float = 0.0,
    ) -> None:
        """
        Initialize particle system.

        Args:
            positions: Positions in metres, shape (N, 3). Wrapped into the box.
            velocities: Velocities in m/s, shape (N, 3).
            masses: Masses in kg, shape (N,). All must be positive.
            box: Simulation box.
            start_time: Simulated time at step 0, in seconds.
        """
        masses = np.array(masses, dtype=np.float64)
        if masses.ndim != 1:
            raise ValueError(
                f"masses must be one-dimensional, got shape {masses.shape}"
            )
        if not np.all(np.isfinite(masses)) or np.any(masses <= 0):
            raise ConfigurationError("particle masses must be positive and finite")

        n_particles = len(masses)
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)
        # Empty systems may arrive as flat empty arrays
        if positions.size == 0:
            positions = positions.reshape(0, 3)
        if velocities.size == 0:
            velocities = velocities.reshape(0, 3)
        if positions.shape != (n_particles, 3):
            raise ValueError(
                f"positions shape {positions.shape} incompatible with "
                f"{n_particles} particles"
            )
        if velocities.shape != (n_particles, 3):
            raise ValueError(
                f"velocities shape {velocities.shape} incompatible with "
                f"{n_particles} particles"
            )

        self._n = n_particles
        self._masses = masses
        self._positions = box.wrap(positions)
        self._velocities = velocities
        self._forces = np.zeros((n_particles, 3), dtype=np.float64)
        self.box = box
        self.start_time = float(start_time)
        self.time = float(start_time)
        self.step = 0

    @classmethod
    def create(
        cls,
        positions: ArrayLike,
        masses: ArrayLike,
        box: Box,
        velocities: ArrayLike | None = None,
        start_time: float = 0.0,
    ) -> ParticleSystem:
        """
        Create a system with optional velocities (default zero).

        Args:
            positions: Positions in metres, shape (N, 3).
            masses: Masses in kg, shape (N,).
            box: Simulation box.
            velocities: Velocities in m/s, shape (N, 3). Defaults to zeros.
            start_time: Simulated time at step 0.
        """
        n_particles = len(np.atleast_1d(masses))
        if velocities is None:
            velocities = np.zeros((n_particles, 3), dtype=np.float64)
        return cls(positions, velocities, masses, box, start_time=start_time)

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return self._n

    @property
    def positions(self) -> NDArray[np.floating]:
        """Read-only positions, shape (N, 3)."""
        return _readonly(self._positions)

    @property
    def velocities(self) -> NDArray[np.floating]:
        """Read-only velocities, shape (N, 3)."""
        return _readonly(self._velocities)

    @property
    def masses(self) -> NDArray[np.floating]:
        """Read-only masses, shape (N,)."""
        return _readonly(self._masses)

    @property
    def forces(self) -> NDArray[np.floating]:
        """Read-only forces at the current positions, shape (N, 3)."""
        return _readonly(self._forces)

    @property
    def box_dimensions(self) -> NDArray[np.floating]:
        return self.box.lengths

    def _check_shape(self, name: str, array: NDArray[np.floating]) -> None:
        if array.shape != (self._n, 3):
            raise ValueError(
                f"{name} shape {array.shape} incompatible with {self._n} particles"
            )

    def displace(self, deltas: ArrayLike) -> None:
        """Move every particle by ``deltas`` and wrap into the box."""
        deltas = np.asarray(deltas, dtype=np.float64)
        self._check_shape("displacement", deltas)
        self._positions = self.box.wrap(self._positions + deltas)

    def accelerate(self, delta_v: ArrayLike) -> None:
        """Add ``delta_v`` to every particle velocity."""
        delta_v = np.asarray(delta_v, dtype=np.float64)
        self._check_shape("velocity delta", delta_v)
        self._velocities += delta_v

    def scale_velocities(self, factor: float) -> None:
        """Multiply all velocities by ``factor``."""
        self._velocities *= factor

    def set_forces(self, forces: ArrayLike) -> None:
        """Cache the forces at the current positions."""
        forces = np.asarray(forces, dtype=np.float64)
        self._check_shape("forces", forces)
        self._forces = forces.copy()

    def advance_clock(self, dt: float) -> None:
        """
        Count one completed step of length ``dt``.

        Time is recomputed from the step count rather than accumulated, so
        it carries no summation drift.
        """
        self.step += 1
        self.time = self.start_time + self.step * dt

    @property
    def kinetic_energy(self) -> float:
        """Compute total kinetic energy in joules."""
        return kinetic_energy(self._masses, self._velocities)

    @property
    def degrees_of_freedom(self) -> int:
        return count_degrees_of_freedom(self._n)

    @property
    def temperature(self) -> float:
        """Instantaneous temperature in kelvin."""
        return instantaneous_temperature(self.kinetic_energy, self._n)

    def check_invariants(self) -> None:
        """
        Verify the state is sound.

        Raises:
            InvariantError: Particle count changed, non-finite values, or a
                position outside ``[0, L)``.
        """
        if self._positions.shape != (self._n, 3) or self._velocities.shape != (
            self._n,
            3,
        ):
            raise InvariantError(
                f"particle count changed: expected {self._n}, have "
                f"{self._positions.shape[0]} positions and "
                f"{self._velocities.shape[0]} velocities"
            )
        if not np.all(np.isfinite(self._positions)):
            raise InvariantError(f"non-finite position at step {self.step}")
        if not np.all(np.isfinite(self._velocities)):
            raise InvariantError(f"non-finite velocity at step {self.step}")
        if not self.box.contains(self._positions):
            raise InvariantError(f"position escaped the box at step {self.step}")

    def snapshot(self, potential_energy: float = 0.0) -> Snapshot:
        """Create an immutable snapshot of this state."""
        return Snapshot(
            time=self.time,
            step=self.step,
            positions=self._positions.copy(),
            velocities=self._velocities.copy(),
            masses=self._masses.copy(),
            box_lengths=np.array(self.box.lengths),
            potential_energy=float(potential_energy),
        )

    def __repr__(self) -> str:
        return (
            f"ParticleSystem(n_particles={self._n}, step={self.step}, "
            f"time={self.time:.6g}, box={self.box.lengths.tolist()})"
        )


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable record of the system at one instant.

    Handed to reporters and trajectory writers.
    """

    time: float
    step: int
    positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    masses: NDArray[np.floating]
    box_lengths: NDArray[np.floating]
    potential_energy: float = 0.0

    def __post_init__(self) -> None:
        """Make arrays read-only."""
        self.positions.flags.writeable = False
        self.velocities.flags.writeable = False
        self.masses.flags.writeable = False
        self.box_lengths.flags.writeable = False

    @property
    def n_particles(self) -> int:
        return len(self.masses)

    @property
    def time_ps(self) -> float:
        return self.time / PICOSECOND

    @property
    def kinetic_energy(self) -> float:
        return kinetic_energy(self.masses, self.velocities)

    @property
    def temperature(self) -> float:
        return instantaneous_temperature(self.kinetic_energy, self.n_particles)

    @property
    def total_energy(self) -> float:
        return self.kinetic_energy + self.potential_energy
