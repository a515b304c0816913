"""
Simple high-level simulation API.

Example:
    >>> from bibber import simulate
    >>> from bibber.config import parse_recipe
    >>> result = simulate.run(parse_recipe(text))
    >>> print(result.temperature[-1])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from .config import Recipe, SimulationParameters
from .engines import NVTEngine, ThermoReporter, TrajectoryReporter, WriterReporter
from .system import build_system_from_parameters

if TYPE_CHECKING:
    from .forcefields import ForceProvider
    from .io import TrajectoryWriter
    from .system import ParticleSystem, Snapshot, VelocityInitializer


@dataclass
class SimulationResult:
    """Results from a simulation run."""

    parameters: SimulationParameters
    system: ParticleSystem

    # Per-snapshot series
    times: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    temperature: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    kinetic_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    potential_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    snapshots: list[Snapshot] = field(default_factory=list)
    performance: dict[str, float] = field(default_factory=dict)

    @property
    def total_energy(self) -> NDArray[np.floating]:
        return self.kinetic_energy + self.potential_energy

    @property
    def n_snapshots(self) -> int:
        return len(self.times)

    @property
    def final_temperature(self) -> float:
        return self.system.temperature


def run(
    config: Recipe | SimulationParameters,
    force_provider: ForceProvider | None = None,
    velocities: VelocityInitializer | None = None,
    seed: int | None = None,
    min_separation: float = 0.0,
    writer: TrajectoryWriter | None = None,
    keep_snapshots: bool = False,
    log_snapshots: bool = True,
    **overrides: Any,
) -> SimulationResult:
    """
    Build the initial system and run it to the end time.

    Args:
        config: Parsed recipe or simulation parameters.
        force_provider: Force law. Defaults to NoForce.
        velocities: Initial velocity policy. Defaults to zero velocities.
        seed: Random seed for placement and velocities.
        min_separation: Minimum pair distance at placement, in metres.
        writer: Open trajectory writer receiving every snapshot.
        keep_snapshots: Keep all snapshots in the result.
        log_snapshots: Log temperature and energies at every snapshot.
        **overrides: Extra SimulationParameters fields when ``config`` is
            a Recipe.

    Returns:
        SimulationResult with per-snapshot thermodynamics.
    """
    if isinstance(config, Recipe):
        parameters = config.to_parameters(**overrides)
    else:
        parameters = config

    system = build_system_from_parameters(
        parameters, velocities=velocities, seed=seed, min_separation=min_separation
    )
    engine = NVTEngine(system, parameters, force_provider=force_provider)

    thermo = ThermoReporter(log=log_snapshots)
    engine.add_reporter(thermo)
    trajectory = None
    if keep_snapshots:
        trajectory = TrajectoryReporter()
        engine.add_reporter(trajectory)
    if writer is not None:
        engine.add_reporter(WriterReporter(writer))

    engine.run()

    return SimulationResult(
        parameters=parameters,
        system=engine.system,
        times=thermo.times,
        temperature=thermo.temperature,
        kinetic_energy=thermo.kinetic_energy,
        potential_energy=thermo.potential_energy,
        snapshots=trajectory.snapshots if trajectory is not None else [],
        performance=engine.performance,
    )
