"""
Affine transforms for placing canonical primitives in the world.

A Transform carries three matrices, all precomputed at construction:
- ``m``: the forward 4x4 object-to-world matrix
- ``inv``: its 4x4 inverse (world-to-object)
- ``inv_t``: the 3x3 inverse-transpose used to map surface normals

Transforms are immutable; composition builds a new one.
"""

from __future__ import annotations
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3, Point3


class Transform:
    """A 4x4 affine transform with precomputed inverse and inverse-transpose."""

    __slots__ = ('m', 'inv', 'inv_t')

    def __init__(self, m: Optional[np.ndarray] = None, inv: Optional[np.ndarray] = None):
        """Create a transform. With no arguments this is the identity.

        Args:
            m: Forward 4x4 matrix
            inv: Inverse of ``m``; computed with numpy when omitted
        """
        if m is None:
            m = np.identity(4)
        m = np.array(m, dtype=np.float64)
        if inv is None:
            inv = np.linalg.inv(m)
        inv = np.array(inv, dtype=np.float64)

        self.m = m
        self.inv = inv
        # Normals use the inverse-transpose of the linear part
        self.inv_t = inv[:3, :3].T.copy()
        for arr in (self.m, self.inv, self.inv_t):
            arr.flags.writeable = False

    @classmethod
    def identity(cls) -> Transform:
        return cls()

    @classmethod
    def translate(cls, x: float, y: float, z: float) -> Transform:
        m = np.identity(4)
        m[:3, 3] = (x, y, z)
        inv = np.identity(4)
        inv[:3, 3] = (-x, -y, -z)
        return cls(m, inv)

    @classmethod
    def scale(cls, sx: float, sy: float, sz: float) -> Transform:
        """Non-uniform scale. Every factor must be non-zero."""
        if sx == 0 or sy == 0 or sz == 0:
            raise ValueError(f"Scale factors must be non-zero, got ({sx}, {sy}, {sz})")
        m = np.diag([sx, sy, sz, 1.0])
        inv = np.diag([1.0 / sx, 1.0 / sy, 1.0 / sz, 1.0])
        return cls(m, inv)

    @classmethod
    def rotate_x(cls, radians: float) -> Transform:
        c = math.cos(radians)
        s = math.sin(radians)
        m = np.identity(4)
        m[1, 1] = c
        m[1, 2] = -s
        m[2, 1] = s
        m[2, 2] = c
        # Rotations are orthonormal: the inverse is the transpose
        inv = m.T.copy()
        return cls(m, inv)

    @classmethod
    def rotate_y(cls, radians: float) -> Transform:
        c = math.cos(radians)
        s = math.sin(radians)
        m = np.identity(4)
        m[0, 0] = c
        m[0, 2] = s
        m[2, 0] = -s
        m[2, 2] = c
        inv = m.T.copy()
        return cls(m, inv)

    @classmethod
    def rotate_z(cls, radians: float) -> Transform:
        c = math.cos(radians)
        s = math.sin(radians)
        m = np.identity(4)
        m[0, 0] = c
        m[0, 1] = -s
        m[1, 0] = s
        m[1, 1] = c
        inv = m.T.copy()
        return cls(m, inv)

    def then(self, other: Transform) -> Transform:
        """Return the transform applying ``self`` first, then ``other``."""
        return compose(self, other)

    def point(self, p: Point3) -> Point3:
        """Map a point (w=1) from object to world space."""
        return Vec3.from_array(self.m[:3, :3] @ p._data + self.m[:3, 3])

    def vector(self, v: Vec3) -> Vec3:
        """Map a direction (w=0) from object to world space."""
        return Vec3.from_array(self.m[:3, :3] @ v._data)

    def inv_point(self, p: Point3) -> Point3:
        """Map a point (w=1) from world to object space."""
        return Vec3.from_array(self.inv[:3, :3] @ p._data + self.inv[:3, 3])

    def inv_vector(self, v: Vec3) -> Vec3:
        """Map a direction (w=0) from world to object space."""
        return Vec3.from_array(self.inv[:3, :3] @ v._data)

    def normal(self, n: Vec3) -> Vec3:
        """Map an object-space normal to a unit world-space normal."""
        return Vec3.from_array(self.inv_t @ n._data).normalize()

    def __repr__(self) -> str:
        return f"Transform(m={self.m.tolist()})"


def compose(first: Transform, second: Transform) -> Transform:
    """Compose two transforms: the result applies ``first``, then ``second``.

    Forward matrices multiply as ``second @ first``; inverses in the
    opposite order. The inverse-transpose is re-derived from the composed
    inverse by the Transform constructor.
    """
    return Transform(second.m @ first.m, first.inv @ second.inv)
