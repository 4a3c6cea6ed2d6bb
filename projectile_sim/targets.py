"""
Target Catalog
==============
One fixed target per game level, in physics units (metres), each
farther and higher than the last.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Target:
    x: float               # downrange (m)
    y: float               # height (m)
    radius: float          # m
    description: str = ''


TARGETS = (
    Target(x=62.5, y=17.5, radius=5.0, description='Easy - Close shot'),
    Target(x=100.0, y=37.5, radius=4.5, description='Medium - Elevated hoop'),
    Target(x=137.5, y=50.0, radius=4.0, description='Hard - Far & high'),
)

MAX_LEVEL = len(TARGETS)


def target_for_level(level: int) -> Target:
    """Target for a 1-based level; out-of-range levels clamp to the catalog."""
    index = min(max(int(level), 1), MAX_LEVEL) - 1
    return TARGETS[index]
