"""
Unit Tests for Targets, Hit Detection and Game State
====================================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from projectile_sim.config import DEFAULT_CONFIG
from projectile_sim.environment import LaunchParameters
from projectile_sim.game import (
    GameEvent, GameMode, GamePhase, GameRunState, GameSession, RunResult,
    apply_transition, points_for_level,
)
from projectile_sim.hit_detection import DEFAULT_HIT_MARGIN, evaluate
from projectile_sim.solver import EMPTY_TRAJECTORY, solve, solve_parameters
from projectile_sim.targets import MAX_LEVEL, TARGETS, Target, target_for_level


# Launch speeds at 45° whose arcs pass through each level's target centre
HITTING_SPEED = {1: 29.17, 2: 39.60, 3: 46.02}


def hitting_parameters(level):
    return LaunchParameters.create(initial_velocity=HITTING_SPEED[level], angle_deg=45.0)


def make_session(level_params=1, mode=GameMode.GAME):
    return GameSession(config=DEFAULT_CONFIG.with_overrides(seed=3),
                       parameters=hitting_parameters(level_params), mode=mode)


class TestTargets:

    def test_three_levels(self):
        assert MAX_LEVEL == 3
        assert target_for_level(1) == TARGETS[0]
        assert target_for_level(3) == TARGETS[2]

    def test_out_of_range_clamps(self):
        assert target_for_level(7) == TARGETS[-1]
        assert target_for_level(0) == TARGETS[0]

    def test_progressively_farther_and_higher(self):
        for a, b in zip(TARGETS, TARGETS[1:]):
            assert b.x > a.x
            assert b.y > a.y


class TestHitDetection:

    def test_target_on_sample_is_hit(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        for i in [0, 17, 50, len(traj) - 1]:
            s = traj.samples[i]
            result = evaluate(traj, Target(s.x, s.y, 0.0))
            assert result.is_hit
            assert result.closest_distance == pytest.approx(0.0, abs=1e-12)

    def test_far_target_is_miss(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        excursion = max(traj.max_range, traj.max_height)
        far = Target(x=excursion * 3, y=excursion * 3, radius=2.0)
        result = evaluate(traj, far)
        assert not result.is_hit
        assert result.sample_index is None

    def test_elevated_target_hit_mid_flight(self):
        """The arc passes the apex target even though it lands 127 m beyond it."""
        traj = solve(50.0, 45.0, 0.0, 9.8)
        apex = Target(x=traj.max_range / 2, y=traj.max_height, radius=1.0)
        result = evaluate(traj, apex)
        assert result.is_hit
        assert 0 < result.sample_index < len(traj) - 1
        assert abs(traj.max_range - apex.x) > apex.radius + DEFAULT_HIT_MARGIN

    def test_first_sample_reported(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        result = evaluate(traj, Target(0.0, 0.0, 1.0))
        assert result.sample_index == 0

    def test_margin_is_configurable(self):
        traj = solve(50.0, 45.0, 0.0, 9.8)
        s = traj.samples[30]
        target = Target(s.x, s.y + 3.0, 0.5)
        assert evaluate(traj, target).is_hit
        assert not evaluate(traj, target, margin=0.0).is_hit

    def test_empty_trajectory_is_miss(self):
        result = evaluate(EMPTY_TRAJECTORY, TARGETS[0])
        assert not result.is_hit
        assert result.closest_distance == float('inf')

    @pytest.mark.parametrize("level", [1, 2, 3])
    def test_hitting_speeds(self, level):
        traj = solve_parameters(hitting_parameters(level))
        assert evaluate(traj, target_for_level(level)).is_hit
        # And they miss the next level up
        if level < MAX_LEVEL:
            assert not evaluate(traj, target_for_level(level + 1)).is_hit


class TestTransitions:
    """Pure run-state transitions."""

    def test_initial_state(self):
        s = GameRunState()
        assert s.mode is GameMode.GAME
        assert (s.level, s.score, s.last_result, s.running) == (1, 0, RunResult.NONE, False)
        assert s.phase is GamePhase.AWAITING_LAUNCH

    def test_points_for_level(self):
        assert [points_for_level(n) for n in (1, 2, 3)] == [100, 90, 80]

    def test_launch_then_hit(self):
        s = apply_transition(GameRunState(level=2), GameEvent.LAUNCH)
        assert s.phase is GamePhase.IN_FLIGHT
        s = apply_transition(s, GameEvent.COMPLETE, hit=True)
        assert s.phase is GamePhase.HIT
        assert s.score == 90
        assert not s.running

    def test_launch_then_miss(self):
        s = apply_transition(GameRunState(score=40), GameEvent.LAUNCH)
        s = apply_transition(s, GameEvent.COMPLETE, hit=False)
        assert s.phase is GamePhase.MISS
        assert s.score == 40

    def test_launch_while_in_flight_is_ignored(self):
        s = GameRunState(running=True)
        assert apply_transition(s, GameEvent.LAUNCH) is s

    def test_complete_when_idle_is_ignored(self):
        s = GameRunState()
        assert apply_transition(s, GameEvent.COMPLETE, hit=True) is s

    def test_next_level_from_hit_at_level_two(self):
        s = GameRunState(level=2, score=190, last_result=RunResult.HIT)
        n = apply_transition(s, GameEvent.NEXT_LEVEL)
        assert n.level == 3
        assert n.score == 190
        assert n.phase is GamePhase.AWAITING_LAUNCH

    @pytest.mark.parametrize("state", [
        GameRunState(last_result=RunResult.MISS),
        GameRunState(last_result=RunResult.NONE),
        GameRunState(level=3, last_result=RunResult.HIT),
        GameRunState(mode=GameMode.SANDBOX),
    ])
    def test_next_level_illegal(self, state):
        assert apply_transition(state, GameEvent.NEXT_LEVEL) is state

    def test_victory(self):
        s = GameRunState(level=3, last_result=RunResult.HIT, score=270)
        assert s.is_victory
        assert not s.can_advance

    def test_reset_keeps_score_and_level(self):
        s = GameRunState(level=2, score=100, last_result=RunResult.MISS, running=True)
        r = apply_transition(s, GameEvent.RESET)
        assert (r.level, r.score, r.last_result, r.running) == (2, 100, RunResult.NONE, False)

    @pytest.mark.parametrize("state", [
        GameRunState(level=3, score=270, last_result=RunResult.HIT),
        GameRunState(level=2, score=100, running=True),
        GameRunState(mode=GameMode.SANDBOX),
    ])
    def test_toggle_mode_resets_score_and_level(self, state):
        t = apply_transition(state, GameEvent.TOGGLE_MODE)
        assert t.mode is not state.mode
        assert t.score == 0
        assert t.level == 1
        assert t.last_result is RunResult.NONE
        assert not t.running

    def test_sandbox_completion_has_no_result(self):
        s = apply_transition(GameRunState(mode=GameMode.SANDBOX), GameEvent.LAUNCH)
        s = apply_transition(s, GameEvent.COMPLETE, hit=True)
        assert s.last_result is RunResult.NONE
        assert s.score == 0
        assert s.phase is GamePhase.SANDBOX


class TestGameSession:
    """End-to-end runs through the clock and playback engine."""

    def test_launch_and_hit(self):
        session = make_session(1)
        assert session.launch()
        assert session.state.phase is GamePhase.IN_FLIGHT
        assert session.engine.is_running

        state = session.run_until_idle()
        assert state.last_result is RunResult.HIT
        assert state.score == 100
        assert session.last_hit.is_hit
        assert not session.engine.is_running

    def test_miss(self):
        session = make_session(1)
        session.update_parameters(initial_velocity=10.0)
        session.launch()
        state = session.run_until_idle()
        assert state.last_result is RunResult.MISS
        assert state.score == 0

    def test_double_launch_ignored(self):
        session = make_session(1)
        assert session.launch()
        assert not session.launch()

    def test_parameters_locked_in_flight(self):
        session = make_session(1)
        session.launch()
        before = session.parameters
        assert not session.update_parameters(angle_deg=10.0)
        assert session.parameters is before

    def test_parameter_change_recomputes_trajectory(self):
        session = make_session(1)
        assert session.trajectory is EMPTY_TRAJECTORY
        assert session.update_parameters(initial_velocity=60.0)
        assert session.trajectory.max_range == pytest.approx(60.0 ** 2 / 9.8)
        assert session.state == GameRunState()

    def test_play_all_levels(self):
        session = make_session(1)
        for level in (1, 2, 3):
            session.set_parameters(hitting_parameters(level))
            session.launch()
            session.run_until_idle()
            assert session.state.last_result is RunResult.HIT
            if level < 3:
                assert session.next_level()
                assert session.trajectory is EMPTY_TRAJECTORY
                assert session.state.level == level + 1
        assert session.state.is_victory
        assert session.state.score == 100 + 90 + 80
        assert not session.next_level()

    def test_next_level_without_hit_ignored(self):
        session = make_session(1)
        assert not session.next_level()
        assert session.state.level == 1

    def test_reset_in_flight_cancels_completion(self):
        session = make_session(1)
        session.launch()
        for _ in range(10):
            session.tick()
        assert session.reset()
        assert session.clock.pending == 0
        assert session.trajectory is EMPTY_TRAJECTORY
        for _ in range(200):
            session.tick()
        assert session.state.last_result is RunResult.NONE
        assert session.state.score == 0

    def test_toggle_mode_in_flight(self):
        session = make_session(1)
        session.launch()
        session.run_until_idle()
        session.launch()
        session.tick()
        assert session.toggle_mode()
        assert session.state.mode is GameMode.SANDBOX
        assert session.state.score == 0
        assert session.target is None
        assert not session.engine.is_running

    def test_set_parameters_binds_environment(self):
        session = make_session(1)
        assert session.set_parameters(LaunchParameters(initial_velocity=500, environment='moon'))
        assert session.parameters.initial_velocity == 150.0
        assert session.trajectory.gravity == 1.62

    def test_sandbox_run(self):
        session = make_session(1, mode=GameMode.SANDBOX)
        session.launch()
        state = session.run_until_idle()
        assert state.phase is GamePhase.SANDBOX
        assert session.last_hit is None
        assert state.score == 0


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
