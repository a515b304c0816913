"""NVT simulation engine."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError
from ..forcefields import NoForce
from ..integrators import BerendsenThermostat, VelocityVerletIntegrator
from ..units import to_picoseconds
from .reporters import Reporter, ReporterGroup

if TYPE_CHECKING:
    from ..config import SimulationParameters
    from ..forcefields import ForceProvider
    from ..integrators import Integrator, ThermostatModifier
    from ..system import ParticleSystem, Snapshot

LOGGER = logging.getLogger(__name__)


class EngineStatus(Enum):
    """Lifecycle of an engine."""

    INITIALIZED = "initialized"
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"


class NVTEngine:
    """
    Constant N, V, T molecular dynamics engine.

    Owns one ParticleSystem for its lifetime and mutates it in place. Each
    step, in order:

    1. velocity Verlet half kick, drift (with wrapping), force evaluation
       and second half kick;
    2. thermostat rescaling;
    3. clock advance by dt;
    4. invariant check;
    5. a snapshot to the reporters whenever the elapsed time crosses a
       multiple of the snapshot interval measured from the start time.

    The initial state is reported before the first step. The engine moves
    from INITIALIZED to RUNNING on the first step and to COMPLETED once the
    elapsed time reaches the end time. A run can be stopped cooperatively
    (``stop()`` or a callback) and resumed later.

    Example usage:
        engine = NVTEngine(system, parameters, force_provider=LennardJonesForce())
        engine.add_reporter(ThermoReporter())
        engine.run()

    Attributes:
        system: Simulated particle system.
        parameters: Run parameters.
        integrator: Time integration algorithm.
        force_provider: Force computation module.
        thermostat: Temperature control.
    """

    def __init__(
        self,
        system: ParticleSystem,
        parameters: SimulationParameters,
        force_provider: ForceProvider | None = None,
        thermostat: ThermostatModifier | None = None,
        integrator: Integrator | None = None,
        progress_interval: int | None = None,
    ) -> None:
        """
        Initialize NVT engine.

        Args:
            system: Initial particle system (owned and mutated by the engine).
            parameters: Validated run parameters.
            force_provider: Force law. Defaults to NoForce.
            thermostat: Temperature control. Defaults to a Berendsen
                thermostat built from the parameters.
            integrator: Time integrator. Defaults to velocity Verlet.
            progress_interval: Steps between progress log lines. Defaults
                to a tenth of the run.
        """
        if not math.isclose(
            system.start_time, parameters.start_time, rel_tol=1e-12, abs_tol=1e-30
        ):
            raise ConfigurationError(
                f"system starts at {system.start_time:g} s but parameters start "
                f"at {parameters.start_time:g} s"
            )
        if integrator is not None and integrator.timestep != parameters.timestep:
            raise ConfigurationError(
                f"integrator timestep {integrator.timestep:g} s differs from "
                f"parameters timestep {parameters.timestep:g} s"
            )

        self._system = system
        self._parameters = parameters
        self._force_provider = (
            force_provider if force_provider is not None else NoForce()
        )
        self._integrator = (
            integrator
            if integrator is not None
            else VelocityVerletIntegrator(parameters.timestep)
        )
        self._thermostat = (
            thermostat
            if thermostat is not None
            else BerendsenThermostat(
                temperature=parameters.target_temperature,
                tau=parameters.thermostat_coupling,
                dt=parameters.timestep,
            )
        )

        self._reporters = ReporterGroup()
        self._status = EngineStatus.INITIALIZED
        self._stop_requested = False

        # Tracking
        self._n_steps = parameters.n_steps
        self._progress_interval = progress_interval or max(1, self._n_steps // 10)
        self._total_steps = 0
        self._wall_time = 0.0
        self._last_scale_factor = 1.0
        self._last_snapshot_index = parameters.snapshot_index(system.time)

        # Compute initial forces
        forces, self._potential_energy = self._compute_forces(system.positions)
        self._system.set_forces(forces)

    @property
    def system(self) -> ParticleSystem:
        """Return the simulated system."""
        return self._system

    @property
    def parameters(self) -> SimulationParameters:
        return self._parameters

    @property
    def status(self) -> EngineStatus:
        return self._status

    @property
    def integrator(self) -> Integrator:
        """Return integrator."""
        return self._integrator

    @property
    def force_provider(self) -> ForceProvider:
        """Return force provider."""
        return self._force_provider

    @property
    def thermostat(self) -> ThermostatModifier:
        """Return thermostat."""
        return self._thermostat

    @property
    def n_steps(self) -> int:
        """Total number of steps from start to end."""
        return self._n_steps

    @property
    def potential_energy(self) -> float:
        """Return last computed potential energy."""
        return self._potential_energy

    @property
    def kinetic_energy(self) -> float:
        """Return current kinetic energy."""
        return self._system.kinetic_energy

    @property
    def total_energy(self) -> float:
        """Return total energy."""
        return self.kinetic_energy + self.potential_energy

    @property
    def temperature(self) -> float:
        """Return current temperature."""
        return self._system.temperature

    @property
    def last_scale_factor(self) -> float:
        """Thermostat factor applied in the most recent step."""
        return self._last_scale_factor

    @property
    def performance(self) -> dict[str, float]:
        """Return performance statistics."""
        if self._wall_time == 0:
            return {"steps_per_second": 0.0, "wall_time": 0.0, "total_steps": 0}

        return {
            "steps_per_second": self._total_steps / self._wall_time,
            "wall_time": self._wall_time,
            "total_steps": self._total_steps,
        }

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def _compute_forces(
        self, positions: NDArray[np.floating]
    ) -> tuple[NDArray[np.floating], float]:
        """
        Compute forces and potential energy.

        Raises:
            ValueError: If the force provider returns the wrong shape.
        """
        forces, energy = self._force_provider.compute_with_energy(
            positions, self._system.box
        )
        forces = np.asarray(forces, dtype=np.float64)
        if forces.shape != (self._system.n_particles, 3):
            raise ValueError(
                f"{type(self._force_provider).__name__} returned forces of shape "
                f"{forces.shape} for {self._system.n_particles} particles"
            )
        return forces, float(energy)

    def _snapshot(self) -> Snapshot:
        return self._system.snapshot(potential_energy=self._potential_energy)

    def _start(self) -> None:
        """Report the initial state and enter RUNNING."""
        LOGGER.info(
            "Starting NVT run: %d particles, %d steps of %.3f fs, T = %.2f K",
            self._system.n_particles,
            self._n_steps,
            self._parameters.timestep * 1e15,
            self._parameters.target_temperature,
        )
        snapshot = self._snapshot()
        self._reporters.initialize(snapshot)
        self._reporters.report(snapshot)
        self._status = EngineStatus.RUNNING

    def step(self) -> Snapshot | None:
        """
        Perform a single simulation step.

        Returns:
            The snapshot emitted by this step, or None.

        Raises:
            RuntimeError: If the run is already complete.
            InvariantError: If the state became unsound.
        """
        if self._status is EngineStatus.COMPLETED:
            raise RuntimeError("simulation already completed")
        if self._status is EngineStatus.INITIALIZED:
            self._start()
        if self._system.step >= self._n_steps:
            self._status = EngineStatus.COMPLETED
            raise RuntimeError("simulation already completed")
        self._status = EngineStatus.RUNNING

        self._potential_energy = self._integrator.step(
            self._system, self._compute_forces
        )
        self._last_scale_factor = self._thermostat.apply(self._system)
        self._system.advance_clock(self._parameters.timestep)
        self._system.check_invariants()

        snapshot = None
        index = self._parameters.snapshot_index(self._system.time)
        if index > self._last_snapshot_index:
            self._last_snapshot_index = index
            snapshot = self._snapshot()
            self._reporters.report(snapshot)

        if self._system.step >= self._n_steps:
            self._status = EngineStatus.COMPLETED
            LOGGER.info(
                "Run completed at t = %.3f ps after %d steps",
                to_picoseconds(self._system.time),
                self._system.step,
            )

        return snapshot

    def run(
        self,
        callback: Callable[[NVTEngine], bool] | None = None,
    ) -> ParticleSystem:
        """
        Run until the end time or a cooperative stop.

        Args:
            callback: Optional callback called after each step.
                Return True to stop simulation early.

        Returns:
            The simulated system.

        Raises:
            RuntimeError: If the run is already complete.
        """
        if self._status is EngineStatus.COMPLETED:
            raise RuntimeError("simulation already completed")
        if self._status is EngineStatus.INITIALIZED:
            self._start()

        self._status = EngineStatus.RUNNING
        self._stop_requested = False
        start_time = time.perf_counter()
        steps_this_run = 0

        try:
            while self._system.step < self._n_steps:
                if self._stop_requested:
                    break

                self.step()
                self._total_steps += 1
                steps_this_run += 1

                if self._system.step % self._progress_interval == 0:
                    self._log_progress(start_time, steps_this_run)

                if callback is not None and callback(self):
                    self._stop_requested = True
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._reporters.finalize(self._snapshot())

        if self._system.step >= self._n_steps:
            self._status = EngineStatus.COMPLETED
        else:
            self._status = EngineStatus.STOPPED
            LOGGER.info(
                "Run stopped at t = %.3f ps (step %d of %d)",
                to_picoseconds(self._system.time),
                self._system.step,
                self._n_steps,
            )

        return self._system

    def _log_progress(self, start_time: float, steps_this_run: int) -> None:
        elapsed = time.perf_counter() - start_time
        remaining = (self._n_steps - self._system.step) * elapsed / steps_this_run
        LOGGER.info(
            "t = %10.3f ps  step %d/%d  T = %.2f K  est. rem. wall time %.0f s",
            to_picoseconds(self._system.time),
            self._system.step,
            self._n_steps,
            self._system.temperature,
            remaining,
        )

    def stop(self) -> None:
        """Signal the run to stop at the next step boundary."""
        self._stop_requested = True
