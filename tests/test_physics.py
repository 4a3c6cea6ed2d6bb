"""
Unit Tests for the Trajectory Solver
====================================
Tests launch parameters, the closed-form solver and its validation.
Run: python -m pytest tests/ -v
"""

import sys
import os
import math
import logging
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from projectile_sim.environment import (
    LaunchParameters, ENVIRONMENTS, gravity_for, clamp, VELOCITY_BOUNDS,
)
from projectile_sim.solver import (
    solve, solve_parameters, time_of_flight, format_measurement, EMPTY_TRAJECTORY,
)
from projectile_sim.validation import (
    validate_against_reference, validate_against_integration, integrate_numerically,
)


LAUNCHES = [
    (50.0, 45.0, 0.0, 9.8),
    (1.0, 0.0, 0.0, 9.8),
    (150.0, 90.0, 0.0, 1.62),
    (12.0, 10.0, 50.0, 24.79),
    (30.0, 60.0, 10.0, 3.71),
    (80.0, 5.0, 3.0, 9.8),
]


class TestEnvironment:
    """Gravity presets and parameter clamping."""

    def test_gravity_constants(self):
        assert gravity_for('earth') == 9.8
        assert gravity_for('moon') == 1.62
        assert gravity_for('mars') == 3.71
        assert gravity_for('jupiter') == 24.79

    def test_unknown_environment_raises(self):
        with pytest.raises(ValueError):
            gravity_for('pluto')

    def test_create_clamps_to_control_ranges(self):
        p = LaunchParameters.create(initial_velocity=500, angle_deg=-10,
                                    initial_height=80)
        assert p.initial_velocity == 150.0
        assert p.angle_deg == 0.0
        assert p.initial_height == 50.0

    def test_updated_returns_new_instance(self):
        p = LaunchParameters.create()
        q = p.updated(angle_deg=95)
        assert q is not p
        assert p.angle_deg == 45.0
        assert q.angle_deg == 90.0

    def test_environment_binds_gravity(self):
        p = LaunchParameters.create().with_environment('mars')
        assert p.gravity == ENVIRONMENTS['mars']['gravity']
        assert p.environment_name == 'Mars'

    def test_gravity_cannot_be_set_directly(self):
        with pytest.raises(ValueError):
            LaunchParameters.create().updated(gravity=3.0)

    def test_parameters_are_frozen(self):
        p = LaunchParameters.create()
        with pytest.raises(AttributeError):
            p.angle_deg = 10.0

    def test_constructor_derives_gravity(self):
        p = LaunchParameters(environment='moon')
        assert p.gravity == 1.62
        assert p == LaunchParameters.create(environment='moon')

    def test_constructor_clamps(self):
        p = LaunchParameters(initial_velocity=500, angle_deg=120, initial_height=-5)
        assert (p.initial_velocity, p.angle_deg, p.initial_height) == (150.0, 90.0, 0.0)

    def test_constructor_rejects_gravity_and_unknown_environment(self):
        with pytest.raises(TypeError):
            LaunchParameters(gravity=3.0)
        with pytest.raises(ValueError):
            LaunchParameters(environment='pluto')

    def test_clamp(self):
        assert clamp(0.5, VELOCITY_BOUNDS) == 1.0
        assert clamp(75, VELOCITY_BOUNDS) == 75.0


class TestSolver:
    """Closed-form trajectory properties."""

    def test_reference_launch(self):
        """50 m/s @ 45° on Earth: T≈7.22 s, H≈63.8 m, R≈255.1 m."""
        traj = solve(50.0, 45.0, 0.0, 9.8)
        assert traj.time_of_flight == pytest.approx(7.2154, rel=1e-3)
        assert traj.max_height == pytest.approx(63.776, rel=1e-3)
        assert traj.max_range == pytest.approx(255.10, rel=1e-3)

    @pytest.mark.parametrize("v0, angle, h0, g", LAUNCHES)
    def test_last_sample_is_exact_impact(self, v0, angle, h0, g):
        traj = solve(v0, angle, h0, g)
        last = traj.samples[-1]
        assert last.y == 0.0
        assert last.t == traj.time_of_flight
        assert last.x == traj.max_range

    @pytest.mark.parametrize("v0, angle, h0, g", LAUNCHES)
    def test_no_sample_above_max_height(self, v0, angle, h0, g):
        traj = solve(v0, angle, h0, g)
        assert traj.max_height >= 0
        assert np.all(traj.y <= traj.max_height + 1e-6)
        assert np.all(traj.y >= 0)

    @pytest.mark.parametrize("v0, angle, h0, g", LAUNCHES + [(1.0, 0.0, 10.0, 9.8)])
    def test_time_is_increasing(self, v0, angle, h0, g):
        traj = solve(v0, angle, h0, g)
        assert traj.samples[0].t == 0.0
        assert len(traj) >= 2
        if traj.time_of_flight > 0:
            assert np.all(np.diff(traj.t) > 0)
        else:
            assert np.all(traj.t == 0.0)

    def test_impact_sample_not_repeated(self):
        traj = solve(1.0, 0.0, 10.0, 9.8)
        assert traj.samples[-2].t < traj.time_of_flight
        assert traj.samples[-1].t == traj.time_of_flight

    def test_range_independent_of_sampling(self):
        coarse = solve(40.0, 30.0, 5.0, 9.8, intervals=7)
        fine = solve(40.0, 30.0, 5.0, 9.8, intervals=500)
        vx = 40.0 * math.cos(math.radians(30.0))
        assert coarse.max_range == pytest.approx(vx * coarse.time_of_flight)
        assert coarse.max_range == pytest.approx(fine.max_range)
        assert len(fine) > len(coarse)

    def test_complementary_angles_same_range(self):
        for angle in [15.0, 30.0, 37.5]:
            a = solve(60.0, angle, 0.0, 9.8)
            b = solve(60.0, 90.0 - angle, 0.0, 9.8)
            assert abs(a.max_range - b.max_range) < 1e-6

    def test_about_one_hundred_samples(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        assert 100 <= len(traj) <= 102

    def test_short_flight_uses_min_step(self):
        # T = 2·vy/g ≈ 0.035 s, so dt is floored at 0.01 s
        traj = solve(1.0, 10.0, 0.0, 9.8)
        assert len(traj) <= 6
        assert traj.samples[-1].t == pytest.approx(traj.time_of_flight)

    def test_flat_launch_from_ground(self):
        traj = solve(20.0, 0.0, 0.0, 9.8)
        assert traj.time_of_flight == 0.0
        assert traj.is_degenerate
        assert len(traj) == 2
        assert traj.max_range == 0.0

    def test_degenerate_flight_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='projectile_sim.solver'):
            solve(20.0, 0.0, 0.0, 9.8)
        assert 'Degenerate flight' in caplog.text

    def test_impact_state(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        # Symmetric arc: lands at launch speed, mirrored angle
        assert traj.impact_velocity == pytest.approx(50.0, rel=1e-9)
        assert traj.impact_angle_deg == pytest.approx(-45.0, abs=1e-9)

    def test_speed_history(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        assert traj.speed[0] == pytest.approx(50.0)
        assert traj.speed[-1] == pytest.approx(traj.impact_velocity)
        assert np.min(traj.speed) == pytest.approx(50.0 * math.cos(math.radians(45)), rel=1e-3)

    def test_negative_discriminant_is_zero_duration(self):
        assert time_of_flight(vy=1.0, h0=-10.0, g=9.8) == 0.0
        traj = solve(1.0, 10.0, -10.0, 9.8)
        assert traj.is_degenerate
        assert traj.samples[-1].y == 0.0

    def test_solve_parameters(self):
        p = LaunchParameters.create(30.0, 60.0, 10.0, 'mars')
        traj = solve_parameters(p)
        assert traj.gravity == 3.71
        assert traj.max_height == pytest.approx(10.0 + (30 * math.sin(math.radians(60))) ** 2 / 7.42)

    def test_empty_trajectory(self):
        assert EMPTY_TRAJECTORY.is_empty
        assert EMPTY_TRAJECTORY.impact_point is None
        assert EMPTY_TRAJECTORY.x.size == 0

    def test_summary_and_formatting(self):
        text = solve(50.0, 45.0, 0.0, 9.8).summary()
        assert '255.10' in text
        assert format_measurement(float('nan')) == '0.00'
        assert format_measurement(float('inf')) == '0.00'
        assert format_measurement(3.14159) == '3.14'


class TestValidation:
    """Solver agrees with references and numerical integration."""

    def test_reference_cases(self):
        results = validate_against_reference(verbose=False)
        assert len(results) == 5
        for r in results:
            assert r.worst_error_pct < 0.1

    def test_numerical_integration(self):
        results = validate_against_integration(verbose=False)
        for r in results:
            assert r.worst_error_pct < 0.1

    def test_integration_matches_closed_form(self):
        p = LaunchParameters.create(50.0, 45.0, 0.0, 'earth')
        num = integrate_numerically(p)
        assert num['time_of_flight'] == pytest.approx(2 * 50 * math.sin(math.radians(45)) / 9.8, rel=1e-6)
        assert num['range'] == pytest.approx(2500 / 9.8, rel=1e-6)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
