"""Tests for initial system construction."""

import numpy as np
import pytest

from bibber.config import SimulationParameters
from bibber.errors import ConfigurationError
from bibber.system import (
    Box,
    MaxwellBoltzmannVelocities,
    UniformVelocities,
    ZeroVelocities,
    build_system,
    build_system_from_parameters,
)
from bibber.system.builder import uniform_positions
from bibber.units import BOLTZMANN, NANOMETER

MASS = 1e-24


@pytest.fixture
def box():
    return Box.cubic(100 * NANOMETER)


class TestPlacement:
    """Test random placement of particles."""

    def test_count_and_containment(self, box):
        system = build_system(1000, box, MASS, seed=1)
        assert system.n_particles == 1000
        assert box.contains(system.positions)

    def test_reproducible_with_seed(self, box):
        a = build_system(50, box, MASS, seed=42)
        b = build_system(50, box, MASS, seed=42)
        assert np.array_equal(a.positions, b.positions)

    def test_zero_velocities_by_default(self, box):
        system = build_system(10, box, MASS, seed=0)
        assert np.allclose(system.velocities, 0.0)
        assert system.temperature == 0.0

    def test_masses(self, box):
        system = build_system(10, box, MASS, seed=0)
        assert np.allclose(system.masses, MASS, rtol=1e-12, atol=0)

    def test_min_separation_keeps_count(self, box):
        """Overlapping draws are redrawn rather than dropped."""
        min_sep = 7 * NANOMETER
        system = build_system(100, box, MASS, seed=3, min_separation=min_sep)
        assert system.n_particles == 100
        pos = system.positions
        for i in range(len(pos)):
            d = box.minimum_image_distance(np.delete(pos, i, axis=0), pos[i])
            assert np.min(d) >= min_sep

    def test_min_separation_impossible(self):
        box = Box.cubic(1.0)
        rng = np.random.default_rng(0)
        with pytest.raises(ConfigurationError, match="could not place"):
            uniform_positions(10, box, rng, min_separation=5.0, max_attempts=20)

    def test_negative_count(self, box):
        with pytest.raises(ConfigurationError):
            build_system(-1, box, MASS)

    def test_start_time(self, box):
        system = build_system(1, box, MASS, start_time=2e-12)
        assert system.time == 2e-12


class TestVelocityPolicies:
    """Test initial velocity policies."""

    def test_zero(self):
        v = ZeroVelocities()(np.ones(4), np.random.default_rng(0))
        assert v.shape == (4, 3)
        assert np.allclose(v, 0.0)

    def test_uniform_bounds(self):
        v = UniformVelocities(3.0)(np.ones(500), np.random.default_rng(0))
        assert v.shape == (500, 3)
        assert np.all(np.abs(v) <= 3.0)

    def test_uniform_negative_speed(self):
        with pytest.raises(ValueError):
            UniformVelocities(-1.0)

    def test_maxwell_boltzmann_temperature(self, box):
        """Large samples land near the requested temperature."""
        system = build_system(
            20000, box, MASS, velocities=MaxwellBoltzmannVelocities(300.0), seed=5
        )
        assert system.temperature == pytest.approx(300.0, rel=0.05)

    def test_maxwell_boltzmann_component_spread(self):
        masses = np.full(20000, MASS)
        v = MaxwellBoltzmannVelocities(300.0)(masses, np.random.default_rng(7))
        expected = np.sqrt(BOLTZMANN * 300.0 / MASS)
        assert np.std(v) == pytest.approx(expected, rel=0.05)


class TestFromParameters:
    """Test building from validated parameters."""

    def test_build(self):
        params = SimulationParameters(
            start_time=1e-12,
            end_time=2e-12,
            timestep=1e-14,
            snapshot_interval=1e-13,
            target_temperature=300.0,
            box_lengths=[1e-8, 1e-8, 1e-8],
            n_particles=25,
        )
        system = build_system_from_parameters(params, seed=0)
        assert system.n_particles == 25
        assert system.time == 1e-12
        assert np.allclose(system.masses, params.particle_mass, rtol=1e-12, atol=0)
        assert np.allclose(system.box.lengths, 1e-8, rtol=1e-12, atol=0)
