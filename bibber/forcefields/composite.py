"""Composite force field and the no-op force law."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .base import ForceProvider

if TYPE_CHECKING:
    from ..system import Box


class NoForce(ForceProvider):
    """
    Zero force everywhere.

    Reduces the system to free particles under thermostat control.
    """

    def compute(
        self, positions: NDArray[np.floating], box: Box
    ) -> NDArray[np.floating]:
        return np.zeros((len(positions), 3), dtype=np.float64)

    def compute_with_energy(
        self, positions: NDArray[np.floating], box: Box
    ) -> tuple[NDArray[np.floating], float]:
        return self.compute(positions, box), 0.0


class ForceField(ForceProvider):
    """
    Composite force field combining multiple force providers.

    A ForceField is itself a ForceProvider whose forces and energy are the
    sums over its terms. An empty ForceField behaves like NoForce.

    Example:
        ff = ForceField([LennardJonesForce(), external_field])
        forces = ff.compute(system.positions, system.box)
    """

    def __init__(self, terms: list[ForceProvider] | None = None) -> None:
        """
        Initialize composite force field.

        Args:
            terms: List of force providers to combine.
        """
        self.terms: list[ForceProvider] = terms if terms is not None else []

    def add_term(self, term: ForceProvider) -> None:
        """Add a force term to the force field."""
        self.terms.append(term)

    def remove_term(self, term: ForceProvider) -> None:
        """Remove a force term from the force field."""
        self.terms.remove(term)

    def compute(
        self, positions: NDArray[np.floating], box: Box
    ) -> NDArray[np.floating]:
        """Compute total forces from all terms."""
        total_forces = np.zeros((len(positions), 3), dtype=np.float64)

        for term in self.terms:
            total_forces += term.compute(positions, box)

        return total_forces

    def compute_with_energy(
        self, positions: NDArray[np.floating], box: Box
    ) -> tuple[NDArray[np.floating], float]:
        """Compute total forces and potential energy from all terms."""
        total_forces = np.zeros((len(positions), 3), dtype=np.float64)
        total_energy = 0.0

        for term in self.terms:
            forces, energy = term.compute_with_energy(positions, box)
            total_forces += forces
            total_energy += energy

        return total_forces, total_energy
