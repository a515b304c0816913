"""Reporter implementations for simulation output."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from ..io import TrajectoryWriter
    from ..system import Snapshot

LOGGER = logging.getLogger(__name__)


class Reporter(ABC):
    """
    Abstract base class for snapshot consumers.

    The engine hands every snapshot, in order, to each reporter. Which
    instants become snapshots is decided by the engine from the snapshot
    interval.
    """

    @abstractmethod
    def report(self, snapshot: Snapshot) -> None:
        """
        Consume one snapshot.

        Args:
            snapshot: Immutable system state.
        """
        ...

    def initialize(self, snapshot: Snapshot) -> None:
        """Initialize reporter (called before the first step)."""
        pass

    def finalize(self, snapshot: Snapshot) -> None:
        """Finalize reporter (called when a run returns)."""
        pass


class ReporterGroup:
    """Ordered collection of reporters."""

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        self._reporters: list[Reporter] = reporters if reporters else []

    def __len__(self) -> int:
        return len(self._reporters)

    def add(self, reporter: Reporter) -> None:
        """Add a reporter to the group."""
        self._reporters.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        """Remove a reporter from the group."""
        self._reporters.remove(reporter)

    def initialize(self, snapshot: Snapshot) -> None:
        """Initialize all reporters."""
        for reporter in self._reporters:
            reporter.initialize(snapshot)

    def report(self, snapshot: Snapshot) -> None:
        """Hand a snapshot to every reporter."""
        for reporter in self._reporters:
            reporter.report(snapshot)

    def finalize(self, snapshot: Snapshot) -> None:
        """Finalize all reporters."""
        for reporter in self._reporters:
            reporter.finalize(snapshot)


class TrajectoryReporter(Reporter):
    """Keeps every snapshot in memory."""

    def __init__(self) -> None:
        self._snapshots: list[Snapshot] = []

    def report(self, snapshot: Snapshot) -> None:
        """Store current frame."""
        self._snapshots.append(snapshot)

    @property
    def snapshots(self) -> list[Snapshot]:
        return list(self._snapshots)

    @property
    def n_frames(self) -> int:
        """Return number of stored frames."""
        return len(self._snapshots)

    @property
    def positions(self) -> np.ndarray:
        """Return positions as (n_frames, n_particles, 3) array."""
        return np.array([s.positions for s in self._snapshots])

    @property
    def velocities(self) -> np.ndarray:
        """Return velocities as (n_frames, n_particles, 3) array."""
        return np.array([s.velocities for s in self._snapshots])

    @property
    def times(self) -> np.ndarray:
        """Return times array."""
        return np.array([s.time for s in self._snapshots])

    def clear(self) -> None:
        """Clear stored trajectory."""
        self._snapshots.clear()


class ThermoReporter(Reporter):
    """
    Tracks temperature and energies at every snapshot.

    Each record is also logged at INFO level.
    """

    def __init__(self, log: bool = True) -> None:
        """
        Initialize thermo reporter.

        Args:
            log: Log one line per snapshot.
        """
        self._log = log
        self._steps: list[int] = []
        self._times: list[float] = []
        self._temperature: list[float] = []
        self._kinetic: list[float] = []
        self._potential: list[float] = []

    def report(self, snapshot: Snapshot) -> None:
        """Record temperature and energies."""
        ke = snapshot.kinetic_energy
        temperature = snapshot.temperature

        self._steps.append(snapshot.step)
        self._times.append(snapshot.time)
        self._temperature.append(temperature)
        self._kinetic.append(ke)
        self._potential.append(snapshot.potential_energy)

        if self._log:
            LOGGER.info(
                "t = %10.3f ps  step %8d  T = %10.3f K  KE = %.4e J  PE = %.4e J",
                snapshot.time_ps,
                snapshot.step,
                temperature,
                ke,
                snapshot.potential_energy,
            )

    @property
    def steps(self) -> np.ndarray:
        return np.array(self._steps)

    @property
    def times(self) -> np.ndarray:
        """Return times array."""
        return np.array(self._times)

    @property
    def temperature(self) -> np.ndarray:
        """Return temperature time series."""
        return np.array(self._temperature)

    @property
    def kinetic_energy(self) -> np.ndarray:
        """Return kinetic energy time series."""
        return np.array(self._kinetic)

    @property
    def potential_energy(self) -> np.ndarray:
        """Return potential energy time series."""
        return np.array(self._potential)

    @property
    def total_energy(self) -> np.ndarray:
        """Return total energy time series."""
        return self.kinetic_energy + self.potential_energy

    def clear(self) -> None:
        """Clear stored data."""
        self._steps.clear()
        self._times.clear()
        self._temperature.clear()
        self._kinetic.clear()
        self._potential.clear()


class WriterReporter(Reporter):
    """
    Forwards snapshots to a trajectory writer.

    The caller owns the writer: open it (or use it as a context manager)
    before the run and close it afterwards. Output is flushed whenever a
    run returns.
    """

    def __init__(self, writer: TrajectoryWriter) -> None:
        self.writer = writer

    def report(self, snapshot: Snapshot) -> None:
        self.writer.write(snapshot)

    def finalize(self, snapshot: Snapshot) -> None:
        self.writer.flush()


class CallbackReporter(Reporter):
    """
    Reporter that calls a user-defined function.

    Allows arbitrary custom reporting logic.
    """

    def __init__(self, callback: Callable[[Snapshot], Any]) -> None:
        """
        Initialize callback reporter.

        Args:
            callback: Function called with each snapshot.
        """
        self._callback = callback

    def report(self, snapshot: Snapshot) -> None:
        """Call the callback function."""
        self._callback(snapshot)
