"""
Projectile Sandbox & Target Game
================================
Drag-free ballistic projectile simulation under configurable gravity,
with real-time playback and a three-level target game:
  - Closed-form trajectory solver (sampled path + exact measurements)
  - Gravity presets for Earth, Moon, Mars and Jupiter
  - Frame-driven playback engine with a particle trail
  - Swept-path hit detection against per-level targets
  - Game state machine (modes, levels, score, results)

Validated against hand-derived references and scipy numerical
integration; matplotlib figures and GIF playback for inspection.
"""

from .environment import (
    ENVIRONMENTS, LaunchParameters, gravity_for,
    VELOCITY_BOUNDS, ANGLE_BOUNDS, HEIGHT_BOUNDS,
)
from .solver import (
    Trajectory, TrajectorySample, EMPTY_TRAJECTORY,
    solve, solve_parameters, time_of_flight, format_measurement,
)
from .targets import Target, TARGETS, MAX_LEVEL, target_for_level
from .hit_detection import HitResult, evaluate, DEFAULT_HIT_MARGIN
from .config import SimulatorConfig, DEFAULT_CONFIG
from .projection import ScreenTransform
from .clock import FrameClock
from .particles import Particle, ParticlePool
from .playback import PlaybackEngine, PlaybackFrame, PlaybackState
from .game import (
    GameMode, GamePhase, GameEvent, RunResult, GameRunState, GameSession,
    apply_transition, points_for_level,
)
from .validation import (
    validate_against_reference, validate_against_integration,
    run_all_validations, REFERENCE_CASES,
)

__version__ = "1.0.0"
__all__ = [
    'LaunchParameters', 'ENVIRONMENTS', 'gravity_for',
    'VELOCITY_BOUNDS', 'ANGLE_BOUNDS', 'HEIGHT_BOUNDS',
    'Trajectory', 'TrajectorySample', 'EMPTY_TRAJECTORY',
    'solve', 'solve_parameters', 'time_of_flight', 'format_measurement',
    'Target', 'TARGETS', 'MAX_LEVEL', 'target_for_level',
    'HitResult', 'evaluate', 'DEFAULT_HIT_MARGIN',
    'SimulatorConfig', 'DEFAULT_CONFIG', 'ScreenTransform', 'FrameClock',
    'Particle', 'ParticlePool',
    'PlaybackEngine', 'PlaybackFrame', 'PlaybackState',
    'GameMode', 'GamePhase', 'GameEvent', 'RunResult', 'GameRunState',
    'GameSession', 'apply_transition', 'points_for_level',
    'validate_against_reference', 'validate_against_integration',
    'run_all_validations', 'REFERENCE_CASES',
]
