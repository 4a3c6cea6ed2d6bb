"""
Hit Detection
=============
Swept-path proximity test between a trajectory and a target.

Every sample from launch to impact is checked, not just the impact
point: an arc can pass through an elevated target mid-flight while
landing far beyond it.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from .solver import Trajectory
from .targets import Target


DEFAULT_HIT_MARGIN = 3.75  # m, forgiveness added to the target radius


@dataclass(frozen=True)
class HitResult:
    is_hit: bool
    sample_index: Optional[int]   # first sample inside the hit radius
    closest_distance: float       # m, closest approach over all samples


def distances_to(trajectory: Trajectory, target: Target) -> np.ndarray:
    """Euclidean distance from each sample to the target centre (m)."""
    return np.hypot(trajectory.x - target.x, trajectory.y - target.y)


def evaluate(trajectory: Trajectory, target: Target,
             margin: float = DEFAULT_HIT_MARGIN) -> HitResult:
    """
    Hit iff some sample lies strictly within target.radius + margin.

    Samples are scanned in launch-to-impact order; the earliest hit is
    reported as `sample_index`.
    """
    if trajectory.is_empty:
        return HitResult(is_hit=False, sample_index=None,
                         closest_distance=float('inf'))

    d = distances_to(trajectory, target)
    inside = np.flatnonzero(d < target.radius + margin)
    first = int(inside[0]) if inside.size else None
    return HitResult(
        is_hit=first is not None,
        sample_index=first,
        closest_distance=float(np.min(d)),
    )
