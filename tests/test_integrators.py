"""Tests for the integrator and thermostat."""

import numpy as np
import pytest

from bibber.forcefields import LennardJonesForce, NoForce
from bibber.integrators import (
    BerendsenThermostat,
    VelocityVerletIntegrator,
    berendsen_scale_factor,
)
from bibber.system import Box, ParticleSystem
from bibber.system.state import instantaneous_temperature
from bibber.units import BOLTZMANN

ARGON_MASS = 6.63e-26
FS = 1e-15


def force_fn(provider, box):
    return lambda positions: provider.compute_with_energy(positions, box)


@pytest.fixture
def box():
    return Box.cubic(5e-9)


@pytest.fixture
def argon_dimer(box):
    """Two argon atoms released slightly inside the potential minimum."""
    center = box.lengths / 2
    positions = np.array([center, center + [3.6e-10, 0.0, 0.0]])
    system = ParticleSystem.create(positions, [ARGON_MASS, ARGON_MASS], box)
    forces, _ = LennardJonesForce().compute_with_energy(system.positions, box)
    system.set_forces(forces)
    return system


def system_at_temperature(temperature, n=50, mass=1e-24, seed=0):
    box = Box.cubic(1e-7)
    rng = np.random.default_rng(seed)
    positions = rng.uniform(0.0, 1e-7, size=(n, 3))
    velocities = rng.standard_normal((n, 3))
    system = ParticleSystem(positions, velocities, np.full(n, mass), box)
    system.scale_velocities(np.sqrt(temperature / system.temperature))
    return system


class TestVelocityVerlet:
    """Test velocity Verlet integration."""

    def test_invalid_timestep(self):
        with pytest.raises(ValueError):
            VelocityVerletIntegrator(0.0)

    def test_free_flight(self, box):
        """With zero force, positions advance by v * dt and velocities stay."""
        system = ParticleSystem(
            [[1e-9, 1e-9, 1e-9]], [[100.0, -50.0, 0.0]], [1e-24], box
        )
        integrator = VelocityVerletIntegrator(10 * FS)
        for _ in range(10):
            integrator.step(system, force_fn(NoForce(), box))
        assert np.allclose(system.velocities, [[100.0, -50.0, 0.0]])
        assert np.allclose(
            system.positions, [[1e-9 + 1e-11, 1e-9 - 5e-12, 1e-9]], rtol=1e-9, atol=0
        )

    def test_free_flight_wraps(self, box):
        system = ParticleSystem([[4.95e-9, 1e-9, 1e-9]], [[1e4, 0.0, 0.0]], [1e-24], box)
        integrator = VelocityVerletIntegrator(10 * FS)
        integrator.step(system, force_fn(NoForce(), box))
        assert system.positions[0, 0] == pytest.approx(5e-11, rel=1e-6)
        assert box.contains(system.positions)

    def test_uses_cached_forces(self, box):
        """The first half kick reads F(t) from the system, not a new evaluation."""
        calls = []

        def counting(positions):
            calls.append(1)
            return np.zeros((len(positions), 3)), 0.0

        system = ParticleSystem.create([[1e-9, 1e-9, 1e-9]], [1e-24], box)
        system.set_forces([[1e-12, 0.0, 0.0]])
        VelocityVerletIntegrator(FS).step(system, counting)
        assert len(calls) == 1
        # Half kick from the cached force, none from the zero new force
        assert system.velocities[0, 0] == pytest.approx(0.5 * FS * 1e-12 / 1e-24)

    def test_energy_conservation(self, argon_dimer, box):
        """Total energy of an argon dimer is conserved at dt = 1 fs."""
        integrator = VelocityVerletIntegrator(1 * FS)
        fn = force_fn(LennardJonesForce(), box)
        _, e_pot = fn(argon_dimer.positions)
        e0 = argon_dimer.kinetic_energy + e_pot
        energies = []
        for _ in range(2000):
            e_pot = integrator.step(argon_dimer, fn)
            energies.append(argon_dimer.kinetic_energy + e_pot)
        drift = np.max(np.abs(np.array(energies) - e0)) / abs(e0)
        assert drift < 1e-3
        # The dimer actually moved
        assert argon_dimer.kinetic_energy > 0

    def test_time_reversibility(self, argon_dimer, box):
        integrator = VelocityVerletIntegrator(1 * FS)
        fn = force_fn(LennardJonesForce(), box)
        initial = argon_dimer.positions.copy()
        for _ in range(500):
            integrator.step(argon_dimer, fn)
        argon_dimer.scale_velocities(-1.0)
        for _ in range(500):
            integrator.step(argon_dimer, fn)
        assert np.allclose(argon_dimer.positions, initial, rtol=0, atol=1e-14)

    def test_forces_cached_after_step(self, argon_dimer, box):
        provider = LennardJonesForce()
        VelocityVerletIntegrator(FS).step(argon_dimer, force_fn(provider, box))
        expected = provider.compute(argon_dimer.positions, box)
        assert np.allclose(argon_dimer.forces, expected, rtol=1e-12, atol=0)


class TestBerendsenScaleFactor:
    """Test the scaling factor formula."""

    def test_at_target(self):
        assert berendsen_scale_factor(300.0, 300.0, 1e-15, 1e-13) == 1.0

    def test_heating(self):
        """T = 150 K, target 300 K, dt/tau = 0.01: lambda = sqrt(1.01)."""
        factor = berendsen_scale_factor(150.0, 300.0, 1e-15, 1e-13)
        assert factor == pytest.approx(np.sqrt(1.01))
        assert factor > 1.0

    def test_cooling(self):
        assert berendsen_scale_factor(600.0, 300.0, 1e-15, 1e-13) < 1.0

    def test_zero_temperature_skips(self):
        assert berendsen_scale_factor(0.0, 300.0, 1e-15, 1e-13) == 1.0

    def test_negative_radicand_clamped(self):
        # dt > tau and T far above target
        assert berendsen_scale_factor(1e6, 1.0, 1.0, 0.5) == 0.0


class TestBerendsenThermostat:
    """Test applying the thermostat to a system."""

    def test_invalid_tau(self):
        with pytest.raises(ValueError):
            BerendsenThermostat(300.0, tau=0.0, dt=FS)

    def test_kinetic_energy_scales_by_lambda_squared(self):
        system = system_at_temperature(150.0)
        ke = system.kinetic_energy
        thermostat = BerendsenThermostat(300.0, tau=1e-13, dt=FS)
        factor = thermostat.apply(system)
        assert factor == pytest.approx(np.sqrt(1.01))
        assert system.kinetic_energy == pytest.approx(factor**2 * ke)

    def test_zero_temperature_leaves_system(self, box):
        system = ParticleSystem.create(np.ones((3, 3)), np.ones(3), box)
        thermostat = BerendsenThermostat(300.0, tau=1e-13, dt=FS)
        assert thermostat.apply(system) == 1.0
        assert np.allclose(system.velocities, 0.0)

    def test_clamped_factor_warns(self, caplog):
        """tau below dt can drive lambda to zero; the freeze is logged."""
        system = system_at_temperature(600.0)
        thermostat = BerendsenThermostat(300.0, tau=1 * FS, dt=10 * FS)
        with caplog.at_level("WARNING", logger="bibber.integrators.thermostats"):
            assert thermostat.apply(system) == 0.0
        assert "clamped to zero" in caplog.text
        assert system.temperature == 0.0

    def test_no_warning_when_coupled_normally(self, caplog):
        system = system_at_temperature(600.0)
        thermostat = BerendsenThermostat(300.0, tau=100 * FS, dt=10 * FS)
        with caplog.at_level("WARNING", logger="bibber.integrators.thermostats"):
            thermostat.apply(system)
        assert "clamped" not in caplog.text

    def test_geometric_convergence(self):
        """|T - T_target| shrinks by (1 - dt/tau) every step."""
        dt, tau, target = 10 * FS, 100 * FS, 300.0
        system = system_at_temperature(600.0)
        thermostat = BerendsenThermostat(target, tau=tau, dt=dt)
        deviations = [abs(system.temperature - target)]
        for k in range(1, 51):
            thermostat.apply(system)
            deviations.append(abs(system.temperature - target))
            expected = 300.0 * (1 - dt / tau) ** k
            assert deviations[-1] == pytest.approx(expected, rel=1e-9)
        assert all(b < a for a, b in zip(deviations, deviations[1:]))

    def test_converges_from_below(self):
        system = system_at_temperature(10.0)
        thermostat = BerendsenThermostat(300.0, tau=100 * FS, dt=10 * FS)
        for _ in range(300):
            thermostat.apply(system)
        assert system.temperature == pytest.approx(300.0, rel=1e-6)

    def test_target_setter(self):
        thermostat = BerendsenThermostat(300.0, tau=1e-13, dt=FS)
        thermostat.target_temperature = 350.0
        assert thermostat.target_temperature == 350.0
        assert thermostat.scale_factor(350.0) == 1.0

    def test_temperature_definition(self):
        """3N degrees of freedom, no centre-of-mass correction."""
        assert instantaneous_temperature(1.5 * BOLTZMANN, 1) == pytest.approx(1.0)
