"""Integrator and thermostat implementations."""

from .base import ForceFunction, Integrator, ThermostatModifier
from .thermostats import BerendsenThermostat, berendsen_scale_factor
from .velocity_verlet import VelocityVerletIntegrator

__all__ = [
    # Base classes
    "ForceFunction",
    "Integrator",
    "ThermostatModifier",
    # Integrators
    "VelocityVerletIntegrator",
    # Thermostats
    "BerendsenThermostat",
    "berendsen_scale_factor",
]
