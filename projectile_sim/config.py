"""
Simulator configuration.

Gameplay and playback tunables. None of these change the reported
physics; they control sampling density, hit forgiveness, animation
cadence and the particle effect.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .solver import SAMPLE_INTERVALS, MIN_TIME_STEP
from .hit_detection import DEFAULT_HIT_MARGIN
from .projection import ScreenTransform


@dataclass(frozen=True)
class SimulatorConfig:
    # ── Solver sampling ──
    sample_intervals: int = SAMPLE_INTERVALS
    min_time_step: float = MIN_TIME_STEP      # s

    # ── Gameplay ──
    hit_margin: float = DEFAULT_HIT_MARGIN    # m

    # ── Playback ──
    frame_rate: float = 60.0                  # ticks per second
    particle_every: int = 3                   # spawn on every n-th tick
    particle_burst: Tuple[int, int] = (1, 3)  # inclusive min/max per burst
    particle_capacity: int = 256
    particle_gravity: float = 0.1             # px/tick² (screen y down)
    particle_spread: float = 4.0              # px

    # ── Drawing surface ──
    canvas_width: int = 800                   # px
    canvas_height: int = 600                  # px
    screen_scale: float = 4.0                 # px per metre
    screen_margin: float = 50.0               # px

    seed: Optional[int] = None

    def __post_init__(self):
        if self.sample_intervals < 1:
            raise ValueError("sample_intervals must be >= 1")
        if self.min_time_step <= 0:
            raise ValueError("min_time_step must be positive")
        if self.hit_margin < 0:
            raise ValueError("hit_margin must be >= 0")
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        if self.particle_every < 1:
            raise ValueError("particle_every must be >= 1")
        lo, hi = self.particle_burst
        if lo < 1 or hi < lo:
            raise ValueError(f"invalid particle_burst {self.particle_burst}")
        if self.particle_capacity < 1:
            raise ValueError("particle_capacity must be >= 1")

    @property
    def transform(self) -> ScreenTransform:
        return ScreenTransform.for_canvas(
            self.canvas_width, self.canvas_height,
            scale=self.screen_scale, margin=self.screen_margin,
        )

    def with_overrides(self, **changes) -> 'SimulatorConfig':
        return replace(self, **changes)


DEFAULT_CONFIG = SimulatorConfig()
