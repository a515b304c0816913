"""Simulation engine and reporters."""

from .engine import EngineStatus, NVTEngine
from .reporters import (
    CallbackReporter,
    Reporter,
    ReporterGroup,
    ThermoReporter,
    TrajectoryReporter,
    WriterReporter,
)

__all__ = [
    "EngineStatus",
    "NVTEngine",
    "Reporter",
    "ReporterGroup",
    "TrajectoryReporter",
    "ThermoReporter",
    "WriterReporter",
    "CallbackReporter",
]
