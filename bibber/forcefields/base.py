"""Base interface for force providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system import Box


class ForceProvider(ABC):
    """
    Abstract base class for all force laws.

    A force provider is a pure, deterministic function of the particle
    positions and the box geometry. It must not keep state between calls or
    modify its inputs; the integrator depends on nothing else.
    """

    @abstractmethod
    def compute(
        self, positions: NDArray[np.floating], box: Box
    ) -> NDArray[np.floating]:
        """
        Compute forces on all particles.

        Args:
            positions: Particle positions in metres, shape (N, 3).
            box: Simulation box, for minimum-image separations.

        Returns:
            Forces in newtons, shape (N, 3).
        """
        ...

    def compute_with_energy(
        self, positions: NDArray[np.floating], box: Box
    ) -> tuple[NDArray[np.floating], float]:
        """
        Compute forces and potential energy.

        Default implementation computes forces only; subclasses should
        override if they can report an energy.

        Returns:
            Tuple of (forces array, potential energy in joules).
        """
        return self.compute(positions, box), 0.0
