"""
Built-in plotting utilities for simulation results.

Example:
    >>> from bibber import simulate, plotting
    >>> result = simulate.run(recipe)
    >>> plotting.temperature(result, show=False)
    >>> plotting.save("temperature.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from .units import to_picoseconds

if TYPE_CHECKING:
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None

LOGGER = logging.getLogger(__name__)


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install bibber[plot]"
        )


def temperature(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot the temperature at every snapshot against the target.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    times = to_picoseconds(result.times)
    target = result.parameters.target_temperature

    ax.plot(times, result.temperature, "b.-", lw=0.8, label="Instantaneous")
    ax.axhline(y=target, color="r", linestyle="--", label=f"Target {target:.2f} K")

    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def energy(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot kinetic, potential and total energy at every snapshot.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    times = to_picoseconds(result.times)

    ax.plot(times, result.kinetic_energy, "b-", label="Kinetic", alpha=0.7, lw=0.8)
    ax.plot(times, result.potential_energy, "r-", label="Potential", alpha=0.7, lw=0.8)
    ax.plot(times, result.total_energy, "k-", label="Total", lw=1.5)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Energy (J)")
    ax.set_title("Energy vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def summary(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (12, 5),
) -> None:
    """
    Temperature and energy side by side.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, axes = plt.subplots(1, 2, figsize=figsize)
    times = to_picoseconds(result.times)
    target = result.parameters.target_temperature

    ax = axes[0]
    ax.plot(times, result.temperature, "b.-", lw=0.8)
    ax.axhline(y=target, color="r", linestyle="--", label=f"Target {target:.2f} K")
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(times, result.kinetic_energy, "b-", label="Kinetic", lw=0.8)
    ax.plot(times, result.potential_energy, "r-", label="Potential", lw=0.8)
    ax.plot(times, result.total_energy, "k-", label="Total", lw=1.5)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Energy (J)")
    ax.set_title(f"Energy ({result.system.n_particles} particles)")
    ax.legend()
    ax.grid(True, alpha=0.3)

    fig.suptitle(result.parameters.title)
    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save current figure to file.

    Args:
        filename: Output filename (e.g., "plot.png", "figure.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    LOGGER.info("Saved plot to %s", filename)


def close() -> None:
    """Close all figures."""
    _check_matplotlib()
    plt.close("all")


__all__ = ["temperature", "energy", "summary", "save", "close", "HAS_MATPLOTLIB"]
