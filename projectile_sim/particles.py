"""
Particle Pool
=============
Fixed-capacity arena for the trail effect drawn behind the projectile.

State lives in parallel numpy arrays with a liveness mask; spawning
claims free slots and dying just clears the flag, so the per-frame
update allocates nothing. Positions and velocities are in drawing space
(pixels, y down), advanced once per tick:

    x += vx;  y += vy;  vy += gravity;  life -= decay
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Particle:
    """Read-only snapshot of one live particle."""
    x: float
    y: float
    vx: float
    vy: float
    life: float     # (0, 1]
    decay: float    # life lost per tick
    hue: float      # degrees

    @property
    def alpha(self) -> float:
        return self.life * 0.8

    @property
    def color(self) -> str:
        return particle_color(self.hue, self.life)


def particle_color(hue: float, life: float) -> str:
    """CSS-style hsla() string with the alpha faded by remaining life."""
    return f"hsla({hue:.0f}, 100%, 50%, {life * 0.8:.2f})"


class ParticlePool:

    def __init__(self, capacity: int = 256, gravity: float = 0.1,
                 spread: float = 4.0,
                 rng: Optional[np.random.Generator] = None):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self.gravity = gravity
        self.spread = spread
        self.rng = rng if rng is not None else np.random.default_rng()

        self.x = np.zeros(capacity)
        self.y = np.zeros(capacity)
        self.vx = np.zeros(capacity)
        self.vy = np.zeros(capacity)
        self.life = np.zeros(capacity)
        self.decay = np.zeros(capacity)
        self.hue = np.zeros(capacity)
        self.alive = np.zeros(capacity, dtype=bool)

    def __len__(self) -> int:
        return int(np.count_nonzero(self.alive))

    def spawn(self, x: float, y: float, count: int) -> int:
        """
        Emit up to `count` particles around (x, y). Returns how many were
        placed; a full pool drops the rest.
        """
        free = np.flatnonzero(~self.alive)[:max(count, 0)]
        n = free.size
        if n == 0:
            return 0

        r = self.rng.random((6, n))
        self.x[free] = x + (r[0] - 0.5) * self.spread
        self.y[free] = y + (r[1] - 0.5) * self.spread
        self.vx[free] = (r[2] - 0.5) * 4.0
        self.vy[free] = (r[3] - 0.5) * 2.0 - 1.0
        self.life[free] = 1.0
        self.decay[free] = r[4] * 0.02 + 0.01
        self.hue[free] = (r[5] * 60.0 + 340.0) % 360.0
        self.alive[free] = True
        return n

    def step(self):
        """Advance every live particle one tick and retire the spent ones."""
        a = self.alive
        if not a.any():
            return
        self.x[a] += self.vx[a]
        self.y[a] += self.vy[a]
        self.vy[a] += self.gravity
        self.life[a] -= self.decay[a]
        self.alive &= self.life > 0

    def clear(self):
        self.alive[:] = False

    def snapshot(self) -> List[Particle]:
        return [
            Particle(
                x=float(self.x[i]), y=float(self.y[i]),
                vx=float(self.vx[i]), vy=float(self.vy[i]),
                life=float(self.life[i]), decay=float(self.decay[i]),
                hue=float(self.hue[i]),
            )
            for i in np.flatnonzero(self.alive)
        ]
