#!/usr/bin/env python
"""
Argon in a box with Lennard-Jones forces and a Berendsen thermostat.

This example demonstrates:
- Loading a recipe and overriding the particle mass
- Maxwell-Boltzmann initial velocities far from the target temperature
- Relaxation of the temperature toward the target
- Writing a GRO trajectory alongside the run

Usage:
    python examples/run_argon_nvt.py
"""

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend

import matplotlib.pyplot as plt

from bibber import simulate
from bibber.config import parse_recipe
from bibber.forcefields import LennardJonesForce
from bibber.io import GROWriter
from bibber.system import MaxwellBoltzmannVelocities
from bibber.units import NANOMETER, to_picoseconds

ARGON_MASS = 6.63e-26  # kg

RECIPE = """\
title       Argon LJ fluid
start       0:ps
end         20:ps
timestep    2:fs
snapshot    0.1:ps
temperature 120:K
particles   64
boundary    cubic 4:nm 4:nm 4:nm
"""


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    recipe = parse_recipe(RECIPE)

    with GROWriter(Path("argon_nvt.gro"), title=recipe.title) as writer:
        result = simulate.run(
            recipe,
            force_provider=LennardJonesForce(),
            velocities=MaxwellBoltzmannVelocities(300.0),
            min_separation=0.35 * NANOMETER,
            seed=42,
            writer=writer,
            log_snapshots=False,
            particle_mass=ARGON_MASS,
        )

    times = to_picoseconds(result.times)
    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    ax = axes[0]
    ax.plot(times, result.temperature, "b-", linewidth=0.8)
    ax.axhline(y=recipe.temperature, color="r", linestyle="--", label="Target")
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(times, result.kinetic_energy, "b-", label="KE", linewidth=0.8)
    ax.plot(times, result.potential_energy, "r-", label="PE", linewidth=0.8)
    ax.plot(times, result.total_energy, "k-", label="Total", linewidth=1.2)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Energy (J)")
    ax.set_title("Energy vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig("argon_nvt.png", dpi=150)

    print(f"Snapshots written: {result.n_snapshots}")
    print(f"Final temperature: {result.final_temperature:.2f} K")
    print(f"Steps per second:  {result.performance['steps_per_second']:.0f}")
    print("Saved argon_nvt.gro and argon_nvt.png")


if __name__ == "__main__":
    main()
