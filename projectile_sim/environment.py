"""
Launch Environments & Parameters
================================
Gravity presets for the supported worlds and the immutable launch
parameter snapshot produced by the control layer.

Every control change builds a new LaunchParameters; values are clamped
here, at the boundary, so the solver never sees out-of-range input.

Coordinate system:
  x = downrange (horizontal, m)
  y = height    (vertical, up positive, m)
"""

from dataclasses import dataclass, field, replace
from typing import Tuple


# ── Gravity presets (m/s²) ────────────────────────────────────────────────
GRAVITY_EARTH    = 9.8
GRAVITY_MOON     = 1.62
GRAVITY_MARS     = 3.71
GRAVITY_JUPITER  = 24.79

ENVIRONMENTS = {
    'earth': {
        'name': 'Earth',
        'gravity': GRAVITY_EARTH,
        'color': '#00d4ff',
    },
    'moon': {
        'name': 'Moon',
        'gravity': GRAVITY_MOON,
        'color': '#e0e0e0',
    },
    'mars': {
        'name': 'Mars',
        'gravity': GRAVITY_MARS,
        'color': '#ff6b35',
    },
    'jupiter': {
        'name': 'Jupiter',
        'gravity': GRAVITY_JUPITER,
        'color': '#ffeb3b',
    },
}

# ── Control ranges ────────────────────────────────────────────────────────
VELOCITY_BOUNDS = (1.0, 150.0)    # m/s
ANGLE_BOUNDS    = (0.0, 90.0)     # degrees above horizontal
HEIGHT_BOUNDS   = (0.0, 50.0)     # m above ground


def clamp(value: float, bounds: Tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, float(value)))


def gravity_for(environment: str) -> float:
    """Gravitational acceleration (m/s²) for an environment key."""
    if environment not in ENVIRONMENTS:
        raise ValueError(
            f"Unknown environment '{environment}'. "
            f"Available: {list(ENVIRONMENTS.keys())}"
        )
    return ENVIRONMENTS[environment]['gravity']


@dataclass(frozen=True)
class LaunchParameters:
    """
    Snapshot of the launch controls.

    The three ranges are clamped on construction and `gravity` is derived
    from `environment`, so every instance satisfies the control ranges
    and the one-to-one environment binding. Derive new snapshots with
    `updated()` / `with_environment()`.
    """
    initial_velocity: float = 50.0    # m/s
    angle_deg: float = 45.0           # degrees above horizontal
    initial_height: float = 0.0       # m
    environment: str = 'earth'
    gravity: float = field(init=False)    # m/s², follows environment

    def __post_init__(self):
        object.__setattr__(self, 'initial_velocity',
                           clamp(self.initial_velocity, VELOCITY_BOUNDS))
        object.__setattr__(self, 'angle_deg',
                           clamp(self.angle_deg, ANGLE_BOUNDS))
        object.__setattr__(self, 'initial_height',
                           clamp(self.initial_height, HEIGHT_BOUNDS))
        object.__setattr__(self, 'gravity', gravity_for(self.environment))

    @classmethod
    def create(cls, initial_velocity: float = 50.0, angle_deg: float = 45.0,
               initial_height: float = 0.0,
               environment: str = 'earth') -> 'LaunchParameters':
        return cls(initial_velocity, angle_deg, initial_height, environment)

    def updated(self, **changes) -> 'LaunchParameters':
        """New snapshot with `changes` applied and clamped."""
        if 'gravity' in changes:
            raise ValueError("gravity follows the environment; "
                             "use with_environment()")
        return replace(self, **changes)

    def with_environment(self, environment: str) -> 'LaunchParameters':
        return self.updated(environment=environment)

    @property
    def environment_name(self) -> str:
        return ENVIRONMENTS[self.environment]['name']
