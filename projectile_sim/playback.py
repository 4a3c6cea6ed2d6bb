"""
Playback Engine
===============
Frame-by-frame traversal of a trajectory's samples for animation.

State machine over {idle, running}:

  idle    --launch(trajectory)-->  running   (fresh cursor, empty pool)
  running --cursor hits the end-->  idle     (fires on_complete)
  running --stop()------------->   idle      (cursor 0, pool cleared)

tick() is the pure per-frame advance; drawing code reads the frame it
returns (or frame()) and never mutates engine state. The engine only
reads the trajectory it was given. Completion is reported through the
`on_complete` callback.
"""

import logging
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .clock import FrameClock
from .config import SimulatorConfig, DEFAULT_CONFIG
from .particles import Particle, ParticlePool
from .solver import Trajectory, TrajectorySample


logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    IDLE = 'idle'
    RUNNING = 'running'


@dataclass(frozen=True)
class PlaybackFrame:
    """What a renderer needs for one tick."""
    index: int
    sample: Optional[TrajectorySample]
    particles: Tuple[Particle, ...]
    running: bool


class PlaybackEngine:

    def __init__(self, config: SimulatorConfig = DEFAULT_CONFIG,
                 clock: Optional[FrameClock] = None,
                 rng: Optional[np.random.Generator] = None,
                 on_complete: Optional[Callable[[Trajectory], None]] = None):
        self.config = config
        self.clock = clock
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.on_complete = on_complete
        self.transform = config.transform

        self.state = PlaybackState.IDLE
        self.trajectory: Optional[Trajectory] = None
        self.index = 0
        self.particles = ParticlePool(
            capacity=config.particle_capacity,
            gravity=config.particle_gravity,
            spread=config.particle_spread,
            rng=self.rng,
        )
        self._handle: Optional[int] = None
        self._shown: Optional[TrajectorySample] = None

    @property
    def is_running(self) -> bool:
        return self.state is PlaybackState.RUNNING

    @property
    def current_sample(self) -> Optional[TrajectorySample]:
        """Sample shown on the latest tick, or None when idle."""
        return self._shown if self.is_running else None

    @property
    def resting_sample(self) -> Optional[TrajectorySample]:
        """Where an idle projectile is drawn: the end of its last path."""
        if self.is_running or self.trajectory is None or self.trajectory.is_empty:
            return None
        return self.trajectory.samples[-1]

    def launch(self, trajectory: Trajectory) -> bool:
        """Start playing `trajectory`; ignored while running or if empty."""
        if self.is_running:
            logger.debug("Launch ignored: playback already running")
            return False
        if trajectory is None or trajectory.is_empty:
            logger.debug("Launch ignored: no samples to play")
            return False

        self._cancel_tick()
        self.trajectory = trajectory
        self.index = 0
        self._shown = None
        self.particles.clear()
        self.state = PlaybackState.RUNNING
        logger.debug("Playback started: %d samples", len(trajectory))
        self._schedule_tick()
        return True

    def stop(self):
        """Cancel playback and discard cursor and particles."""
        self._cancel_tick()
        self.state = PlaybackState.IDLE
        self.index = 0
        self._shown = None
        self.particles.clear()

    def clear(self):
        """stop() and forget the trajectory."""
        self.stop()
        self.trajectory = None

    def tick(self) -> PlaybackFrame:
        """Advance one frame."""
        self.particles.step()
        if not self.is_running:
            return self.frame()

        samples = self.trajectory.samples
        if self.index < len(samples):
            sample = samples[self.index]
            self._shown = sample
            if self.index % self.config.particle_every == 0:
                self._emit(sample)
            self.index += 1

        frame = PlaybackFrame(
            index=self.index,
            sample=self._shown,
            particles=tuple(self.particles.snapshot()),
            running=True,
        )
        if self.index >= len(samples):
            self._finish()
        return frame

    def frame(self) -> PlaybackFrame:
        sample = self.current_sample if self.is_running else self.resting_sample
        return PlaybackFrame(
            index=self.index,
            sample=sample,
            particles=tuple(self.particles.snapshot()),
            running=self.is_running,
        )

    def _emit(self, sample: TrajectorySample):
        lo, hi = self.config.particle_burst
        count = int(self.rng.integers(lo, hi + 1))
        px, py = self.transform.to_screen(sample.x, sample.y)
        self.particles.spawn(px, py, count)

    def _finish(self):
        self.state = PlaybackState.IDLE
        self._shown = None
        logger.debug("Playback finished after %d samples", self.index)
        if self.on_complete is not None:
            self.on_complete(self.trajectory)

    # ── Clock integration ──

    def _on_frame(self):
        self._handle = None
        self.tick()
        if self.is_running or len(self.particles):
            self._schedule_tick()

    def _schedule_tick(self):
        if self.clock is not None and self._handle is None:
            self._handle = self.clock.schedule(self._on_frame)

    def _cancel_tick(self):
        if self.clock is not None:
            self.clock.cancel(self._handle)
        self._handle = None
