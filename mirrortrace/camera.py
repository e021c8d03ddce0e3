"""
Pinhole camera.

The camera basis is derived from a position and a look-at target. The
right and up vectors are pre-scaled by ``fov_scale``, which fixes the
field of view (1.5 unless a caller asks otherwise).
"""

from __future__ import annotations
from .vec3 import Vec3, Point3

DEFAULT_FOV_SCALE = 1.5

# Reference "down" vector used to derive the right axis.
_DOWN = Vec3(0.0, -1.0, 0.0)


class Camera:
    """A pinhole camera with a look-at basis."""

    def __init__(self, position: Point3, look_at: Point3, fov_scale: float = DEFAULT_FOV_SCALE):
        """Create a camera.

        Args:
            position: Camera position in world space
            look_at: Point the camera is looking at
            fov_scale: Length of the right/up basis vectors
        """
        self.position = position
        self.look_at = look_at
        self.fov_scale = fov_scale
        self.forward = (look_at - position).normalize()
        self.right = self.forward.cross(_DOWN).normalize() * fov_scale
        self.up = self.forward.cross(self.right).normalize() * fov_scale

    def __repr__(self) -> str:
        return f"Camera(position={self.position}, look_at={self.look_at})"
