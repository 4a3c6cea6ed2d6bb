"""
Closed-Form Trajectory Solver
=============================
Turns launch parameters into a time-sampled path plus scalar
measurements for a drag-free point mass under constant gravity:

    x(t) = vx · t
    y(t) = h0 + vy · t − ½ g t²

The sampled path only drives playback and hit testing. Every reported
measurement (range, apex, time of flight, impact state) is computed
analytically, so sampling resolution never changes the reported physics.

Output: Trajectory dataclass; EMPTY_TRAJECTORY is the cleared value.
"""

import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from .environment import LaunchParameters


logger = logging.getLogger(__name__)

SAMPLE_INTERVALS = 100   # samples per flight
MIN_TIME_STEP    = 0.01  # s, floor for near-instant flights


@dataclass(frozen=True)
class TrajectorySample:
    """One point along the path."""
    x: float   # downrange (m)
    y: float   # height (m)
    t: float   # elapsed time (s)


@dataclass(frozen=True)
class Trajectory:
    """Sampled path and derived measurements for one launch."""
    samples: Tuple[TrajectorySample, ...]
    max_height: float           # m
    max_range: float            # m, equals samples[-1].x
    time_of_flight: float       # s, equals samples[-1].t
    impact_velocity: float      # m/s
    impact_angle_deg: float     # signed, negative while descending

    # Launch state, kept for speed history
    velocity_x: float = 0.0
    velocity_y: float = 0.0
    gravity: float = 0.0

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def is_degenerate(self) -> bool:
        """True when the flight has zero duration."""
        return self.time_of_flight <= 0.0

    @property
    def x(self) -> np.ndarray:
        return np.array([s.x for s in self.samples], dtype=float)

    @property
    def y(self) -> np.ndarray:
        return np.array([s.y for s in self.samples], dtype=float)

    @property
    def t(self) -> np.ndarray:
        return np.array([s.t for s in self.samples], dtype=float)

    @property
    def speed(self) -> np.ndarray:
        """Speed magnitude at each sample (m/s)."""
        vy = self.velocity_y - self.gravity * self.t
        return np.hypot(self.velocity_x, vy)

    @property
    def impact_point(self) -> Optional[TrajectorySample]:
        return self.samples[-1] if self.samples else None

    def summary(self) -> str:
        """Human-readable summary string."""
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY{'':<34s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Samples      : {len(self.samples):<36d} ║",
            f"║  Range        : {format_measurement(self.max_range):>10s} m{'':<24s} ║",
            f"║  Max height   : {format_measurement(self.max_height):>10s} m{'':<24s} ║",
            f"║  Flight time  : {format_measurement(self.time_of_flight):>10s} s{'':<24s} ║",
            f"║  Impact vel   : {format_measurement(self.impact_velocity):>10s} m/s{'':<22s} ║",
            f"║  Impact angle : {format_measurement(self.impact_angle_deg):>10s} °{'':<24s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


EMPTY_TRAJECTORY = Trajectory(
    samples=(),
    max_height=0.0,
    max_range=0.0,
    time_of_flight=0.0,
    impact_velocity=0.0,
    impact_angle_deg=0.0,
)


def format_measurement(value: float) -> str:
    """Two-decimal display value; non-finite numbers show as 0.00."""
    return f"{value:.2f}" if math.isfinite(value) else "0.00"


def time_of_flight(vy: float, h0: float, g: float) -> float:
    """
    Positive root of h0 + vy·t − ½g·t² = 0.

    Returns 0 when the discriminant is negative (no real ground crossing).
    """
    a = -g / 2.0
    b = vy
    c = h0
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0:
        return 0.0
    return (-b - math.sqrt(discriminant)) / (2.0 * a)


def solve(v0: float, angle_deg: float, h0: float, g: float,
          intervals: int = SAMPLE_INTERVALS,
          min_dt: float = MIN_TIME_STEP) -> Trajectory:
    """
    Sample the ballistic arc and compute its measurements.

    Parameters
    ----------
    v0 : launch speed (m/s), > 0
    angle_deg : elevation in degrees, [0, 90]
    h0 : launch height (m), >= 0
    g : gravitational acceleration (m/s²), > 0
    intervals : number of sampling intervals across the flight
    min_dt : lower bound on the sampling step (s)

    Inputs are expected pre-clamped; nothing is validated here.
    """
    theta = math.radians(angle_deg)
    vx = v0 * math.cos(theta)
    vy = v0 * math.sin(theta)

    tof = time_of_flight(vy, h0, g)
    if tof == 0.0:
        logger.debug("Degenerate flight: zero time of flight (h0=%.3f, vy=%.3f)",
                     h0, vy)

    dt = max(tof / intervals, min_dt)
    samples = []
    step = 0
    while True:
        t = step * dt
        # The exact impact sample below closes a real flight
        if t > tof or (t == tof and tof > 0):
            break
        y = h0 + vy * t - 0.5 * g * t * t
        if y >= 0:
            samples.append(TrajectorySample(x=vx * t, y=y, t=t))
        step += 1

    # Exact impact point, independent of the sampling grid
    final_x = vx * tof
    samples.append(TrajectorySample(x=final_x, y=0.0, t=tof))

    vy_impact = vy - g * tof
    return Trajectory(
        samples=tuple(samples),
        max_height=max(0.0, h0 + (vy * vy) / (2.0 * g)),
        max_range=final_x,
        time_of_flight=tof,
        impact_velocity=math.hypot(vx, vy_impact),
        impact_angle_deg=math.degrees(math.atan2(vy_impact, vx)),
        velocity_x=vx,
        velocity_y=vy,
        gravity=g,
    )


def solve_parameters(params: LaunchParameters,
                     intervals: int = SAMPLE_INTERVALS,
                     min_dt: float = MIN_TIME_STEP) -> Trajectory:
    """Solve for a LaunchParameters snapshot."""
    return solve(params.initial_velocity, params.angle_deg,
                 params.initial_height, params.gravity,
                 intervals=intervals, min_dt=min_dt)
