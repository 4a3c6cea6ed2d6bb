"""
Physics ↔ drawing-space projection.

A fixed affine map: linear scale (pixels per metre) and an origin at the
launch point on the ground line. Drawing y grows downward. The same
transform must be used for the trajectory, the projectile and the
targets so that what is drawn matches what hit detection measures.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScreenTransform:
    scale: float = 4.0        # px per metre
    origin_x: float = 50.0    # px
    origin_y: float = 550.0   # px, ground line

    @classmethod
    def for_canvas(cls, width: float, height: float, scale: float = 4.0,
                   margin: float = 50.0) -> 'ScreenTransform':
        """Origin `margin` px in from the left edge and up from the bottom."""
        return cls(scale=scale, origin_x=margin, origin_y=height - margin)

    def to_screen(self, x, y):
        """Metres -> pixels. Works on scalars and numpy arrays."""
        return self.origin_x + x * self.scale, self.origin_y - y * self.scale

    def to_world(self, px, py):
        return (px - self.origin_x) / self.scale, (self.origin_y - py) / self.scale

    def length(self, metres):
        return metres * self.scale
