"""
Game State
==========
Mode, level, score and last result for a session, plus the orchestrator
that ties the solver, the playback engine and hit detection together.

All run-state changes go through apply_transition(), a pure function
over an immutable GameRunState. A request that is not legal in the
current state (launch while in flight, next level without a hit, ...)
returns the state unchanged; the UI can fire such requests at any
time, e.g. on a double click.

Game-mode phases:

  awaiting_launch --LAUNCH--> in_flight --COMPLETE(hit)--> hit
                                        --COMPLETE(miss)-> miss
  hit (level < 3) --NEXT_LEVEL--> awaiting_launch (level + 1)
  any             --RESET-------> awaiting_launch
  any             --TOGGLE_MODE-> other mode, score 0, level 1
"""

import logging
import numpy as np
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .clock import FrameClock
from .config import SimulatorConfig, DEFAULT_CONFIG
from .environment import LaunchParameters
from .hit_detection import HitResult, evaluate
from .playback import PlaybackEngine, PlaybackFrame
from .solver import Trajectory, EMPTY_TRAJECTORY, solve_parameters
from .targets import Target, MAX_LEVEL, target_for_level


logger = logging.getLogger(__name__)


class GameMode(Enum):
    SANDBOX = 'sandbox'
    GAME = 'game'


class RunResult(Enum):
    NONE = 'none'
    HIT = 'hit'
    MISS = 'miss'


class GamePhase(Enum):
    SANDBOX = 'sandbox'
    AWAITING_LAUNCH = 'awaiting_launch'
    IN_FLIGHT = 'in_flight'
    HIT = 'hit'
    MISS = 'miss'


class GameEvent(Enum):
    LAUNCH = 'launch'
    COMPLETE = 'complete'
    NEXT_LEVEL = 'next_level'
    RESET = 'reset'
    TOGGLE_MODE = 'toggle_mode'


def points_for_level(level: int) -> int:
    """Score awarded for a hit on `level`."""
    return 100 - (level - 1) * 10


@dataclass(frozen=True)
class GameRunState:
    mode: GameMode = GameMode.GAME
    level: int = 1
    score: int = 0
    last_result: RunResult = RunResult.NONE
    running: bool = False

    @property
    def phase(self) -> GamePhase:
        if self.running:
            return GamePhase.IN_FLIGHT
        if self.mode is GameMode.SANDBOX:
            return GamePhase.SANDBOX
        if self.last_result is RunResult.HIT:
            return GamePhase.HIT
        if self.last_result is RunResult.MISS:
            return GamePhase.MISS
        return GamePhase.AWAITING_LAUNCH

    @property
    def can_advance(self) -> bool:
        return (self.mode is GameMode.GAME and not self.running
                and self.last_result is RunResult.HIT
                and self.level < MAX_LEVEL)

    @property
    def is_victory(self) -> bool:
        return (self.mode is GameMode.GAME and not self.running
                and self.last_result is RunResult.HIT
                and self.level >= MAX_LEVEL)


def is_legal(state: GameRunState, event: GameEvent) -> bool:
    if event is GameEvent.LAUNCH:
        return not state.running
    if event is GameEvent.COMPLETE:
        return state.running
    if event is GameEvent.NEXT_LEVEL:
        return state.can_advance
    return True


def apply_transition(state: GameRunState, event: GameEvent,
                     hit: Optional[bool] = None) -> GameRunState:
    """
    Next run state for `event`. `hit` is the evaluation outcome and only
    matters for COMPLETE in game mode.
    """
    if not is_legal(state, event):
        logger.debug("Ignoring %s in phase %s", event.value, state.phase.value)
        return state

    if event is GameEvent.LAUNCH:
        return replace(state, running=True, last_result=RunResult.NONE)

    if event is GameEvent.COMPLETE:
        if state.mode is not GameMode.GAME:
            return replace(state, running=False)
        if hit:
            return replace(state, running=False, last_result=RunResult.HIT,
                           score=state.score + points_for_level(state.level))
        return replace(state, running=False, last_result=RunResult.MISS)

    if event is GameEvent.NEXT_LEVEL:
        return replace(state, level=state.level + 1,
                       last_result=RunResult.NONE, running=False)

    if event is GameEvent.RESET:
        return replace(state, last_result=RunResult.NONE, running=False)

    # TOGGLE_MODE
    mode = GameMode.SANDBOX if state.mode is GameMode.GAME else GameMode.GAME
    return GameRunState(mode=mode)


class GameSession:
    """
    Owns the launch parameters, the current trajectory, the playback
    engine and the frame clock. `state` and `trajectory` are immutable
    snapshots replaced on every transition.
    """

    def __init__(self, config: SimulatorConfig = DEFAULT_CONFIG,
                 parameters: Optional[LaunchParameters] = None,
                 mode: GameMode = GameMode.GAME,
                 clock: Optional[FrameClock] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config
        self.parameters = parameters if parameters is not None else LaunchParameters()
        self.clock = clock if clock is not None else FrameClock(config.frame_rate)
        self.engine = PlaybackEngine(config, clock=self.clock, rng=rng,
                                     on_complete=self._on_playback_complete)
        self.state = GameRunState(mode=mode)
        self.trajectory: Trajectory = EMPTY_TRAJECTORY
        self.last_hit: Optional[HitResult] = None

    @property
    def target(self) -> Optional[Target]:
        if self.state.mode is not GameMode.GAME:
            return None
        return target_for_level(self.state.level)

    def _solve(self) -> Trajectory:
        return solve_parameters(self.parameters,
                                intervals=self.config.sample_intervals,
                                min_dt=self.config.min_time_step)

    def _clear(self):
        self.engine.clear()
        self.trajectory = EMPTY_TRAJECTORY
        self.last_hit = None

    # ── Controls ──

    def set_parameters(self, parameters: LaunchParameters) -> bool:
        """Replace the launch parameters and re-solve; refused in flight."""
        if self.state.running:
            logger.debug("Parameter change ignored: in flight")
            return False
        self.parameters = parameters
        self.trajectory = self._solve()
        return True

    def update_parameters(self, **changes) -> bool:
        if self.state.running:
            logger.debug("Parameter change ignored: in flight")
            return False
        return self.set_parameters(self.parameters.updated(**changes))

    def launch(self) -> bool:
        if not is_legal(self.state, GameEvent.LAUNCH):
            logger.debug("Launch ignored in phase %s", self.state.phase.value)
            return False
        trajectory = self._solve()
        self.trajectory = trajectory
        self.last_hit = None
        self.state = apply_transition(self.state, GameEvent.LAUNCH)
        if not self.engine.launch(trajectory):
            # Nothing to animate; settle the run immediately
            self._on_playback_complete(trajectory)
        return True

    def next_level(self) -> bool:
        if not is_legal(self.state, GameEvent.NEXT_LEVEL):
            logger.debug("Next level ignored in phase %s", self.state.phase.value)
            return False
        self.state = apply_transition(self.state, GameEvent.NEXT_LEVEL)
        self._clear()
        logger.info("Advanced to level %d", self.state.level)
        return True

    def reset(self) -> bool:
        self.state = apply_transition(self.state, GameEvent.RESET)
        self._clear()
        return True

    def toggle_mode(self) -> bool:
        self.state = apply_transition(self.state, GameEvent.TOGGLE_MODE)
        self._clear()
        logger.info("Switched to %s mode", self.state.mode.value)
        return True

    # ── Frame loop ──

    def tick(self) -> PlaybackFrame:
        """Run one clock frame and return what should be drawn."""
        self.clock.step()
        return self.engine.frame()

    def run_until_idle(self, max_frames: int = 10_000) -> GameRunState:
        """Step frames until the current run has settled."""
        self.clock.run(max_frames, until=lambda: not self.state.running)
        return self.state

    def _on_playback_complete(self, trajectory: Trajectory):
        if not self.state.running:
            return
        hit = None
        if self.state.mode is GameMode.GAME:
            self.last_hit = evaluate(trajectory, target_for_level(self.state.level),
                                     margin=self.config.hit_margin)
            hit = self.last_hit.is_hit
        self.state = apply_transition(self.state, GameEvent.COMPLETE, hit=hit)
        if self.state.mode is GameMode.GAME:
            logger.info("Level %d: %s (closest approach %.2f m, score %d)",
                        self.state.level, self.state.last_result.value,
                        self.last_hit.closest_distance, self.state.score)
