"""Lennard-Jones force implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import numpy as np
from numpy.typing import NDArray

from .base import ForceProvider

if TYPE_CHECKING:
    from ..system import Box

# Argon parameters
ARGON_EPSILON: Final[float] = 1.65e-21  # J
ARGON_SIGMA: Final[float] = 3.4e-10  # m


class LennardJonesForce(ForceProvider):
    """
    Lennard-Jones 12-6 pair potential for identical particles.

    V(r) = 4 * epsilon * [(sigma/r)^12 - (sigma/r)^6]

    All pairs are evaluated with minimum-image separations, so the cutoff
    should not exceed half the box edge.

    Attributes:
        epsilon: Well depth in joules.
        sigma: Zero-crossing distance in metres.
        cutoff: Interaction cutoff in metres.
        shift: Shift the energy to zero at the cutoff.
    """

    def __init__(
        self,
        epsilon: float = ARGON_EPSILON,
        sigma: float = ARGON_SIGMA,
        cutoff: float | None = None,
        shift: bool = False,
    ) -> None:
        """
        Initialize Lennard-Jones force.

        Args:
            epsilon: Well depth in joules.
            sigma: Size parameter in metres.
            cutoff: Cutoff distance. Defaults to 2.5 * sigma.
            shift: Shift the potential so V(cutoff) = 0.
        """
        if epsilon < 0:
            raise ValueError(f"epsilon must be non-negative, got {epsilon}")
        if sigma <= 0:
            raise ValueError(f"sigma must be positive, got {sigma}")
        self.epsilon = epsilon
        self.sigma = sigma
        self.cutoff = 2.5 * sigma if cutoff is None else cutoff
        if self.cutoff <= 0:
            raise ValueError(f"cutoff must be positive, got {self.cutoff}")
        self.shift = shift

    def _energy_shift(self) -> float:
        if not self.shift:
            return 0.0
        sr6 = (self.sigma / self.cutoff) ** 6
        return 4.0 * self.epsilon * (sr6**2 - sr6)

    def compute(
        self, positions: NDArray[np.floating], box: Box
    ) -> NDArray[np.floating]:
        """Compute Lennard-Jones forces."""
        forces, _ = self.compute_with_energy(positions, box)
        return forces

    def compute_with_energy(
        self, positions: NDArray[np.floating], box: Box
    ) -> tuple[NDArray[np.floating], float]:
        """Compute Lennard-Jones forces and potential energy."""
        n = len(positions)
        forces = np.zeros((n, 3), dtype=np.float64)
        if n < 2:
            return forces, 0.0

        # Brute force all pairs (N^2)
        i_indices, j_indices = np.triu_indices(n, k=1)
        dr = box.displacement(positions[i_indices], positions[j_indices])
        r = np.linalg.norm(dr, axis=1)

        # Apply cutoff
        mask = r < self.cutoff
        if not np.any(mask):
            return forces, 0.0

        i_indices = i_indices[mask]
        j_indices = j_indices[mask]
        dr = dr[mask]
        r = r[mask]

        # Avoid division by zero for coincident particles
        r_safe = np.maximum(r, 1e-6 * self.sigma)

        sig_over_r_6 = (self.sigma / r_safe) ** 6
        sig_over_r_12 = sig_over_r_6**2

        energy = float(
            np.sum(4.0 * self.epsilon * (sig_over_r_12 - sig_over_r_6))
            - len(r) * self._energy_shift()
        )

        # F = -dV/dr = 24 * epsilon * [2*(sigma/r)^12 - (sigma/r)^6] / r
        force_mag = 24.0 * self.epsilon * (2.0 * sig_over_r_12 - sig_over_r_6) / r_safe

        # Force on j points along i -> j when repulsive
        force_vectors = force_mag[:, np.newaxis] * dr / r_safe[:, np.newaxis]

        # Newton's third law
        np.add.at(forces, j_indices, force_vectors)
        np.add.at(forces, i_indices, -force_vectors)

        return forces, energy
