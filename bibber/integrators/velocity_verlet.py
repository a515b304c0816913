"""Velocity Verlet integrator implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .base import ForceFunction, Integrator

if TYPE_CHECKING:
    from ..system import ParticleSystem


class VelocityVerletIntegrator(Integrator):
    """
    Velocity Verlet integrator (kick-drift-kick formulation).

    The standard symplectic integrator for molecular dynamics: time
    reversible, second order in positions and velocities, with bounded
    long-run energy drift for conservative forces.

    Algorithm:
        v(t + dt/2) = v(t) + 0.5 * dt * F(t) / m          # First kick
        r(t + dt) = wrap(r(t) + dt * v(t + dt/2))          # Drift
        v(t + dt) = v(t + dt/2) + 0.5 * dt * F(t+dt) / m   # Second kick

    F(t) is read from the system's force cache, which holds the forces at
    the current positions. Fixed timestep; no adaptive step control.

    Attributes:
        dt: Integration timestep in seconds.
    """

    def __init__(self, dt: float) -> None:
        """
        Initialize Velocity Verlet integrator.

        Args:
            dt: Integration timestep in seconds.
        """
        if dt <= 0:
            raise ValueError(f"timestep must be positive, got {dt}")
        self._dt = dt

    @property
    def timestep(self) -> float:
        """Return the integration timestep."""
        return self._dt

    def step(self, system: ParticleSystem, force_fn: ForceFunction) -> float:
        """
        Perform a complete Velocity Verlet step with one new force evaluation.

        Args:
            system: Particle system with synchronized velocities v(t) and
                forces F(t); mutated to r(t+dt), v(t+dt), F(t+dt).
            force_fn: Computes (forces, potential energy) from positions.

        Returns:
            Potential energy at r(t+dt).
        """
        dt = self._dt
        inv_masses = 1.0 / system.masses[:, np.newaxis]

        # First kick: v(t + dt/2) = v(t) + 0.5 * dt * a(t)
        system.accelerate(0.5 * dt * system.forces * inv_masses)

        # Drift: r(t + dt) = r(t) + dt * v(t + dt/2), wrapped into the box
        system.displace(dt * system.velocities)

        # Compute NEW forces at new positions
        forces_new, energy = force_fn(system.positions)
        system.set_forces(forces_new)

        # Second kick: v(t + dt) = v(t + dt/2) + 0.5 * dt * a(t + dt)
        system.accelerate(0.5 * dt * system.forces * inv_masses)

        return energy
