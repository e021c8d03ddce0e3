"""
Geometric primitives for the ray tracer.

The set of primitives is closed: spheres and planes, each in one of two
construction modes fixed by the class.

- Direct mode (Sphere, Plane): the shape is given in world space.
- Transformed mode (TransformedSphere, TransformedPlane): the canonical
  shape (unit sphere at the origin, XZ plane at y=0) is placed in the
  world by a Transform. Rays are mapped into object space for the test.

Every primitive implements ``intersect``, ``normal_at`` and ``surface``.
A miss is reported as None, never as an exception.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .surfaces import Surface
from .transform import Transform

# Smallest object-space distance accepted as a hit
HIT_EPSILON = 1e-6
# Below this a ray is treated as parallel to a plane
PARALLEL_EPSILON = 1e-9

_CANONICAL_PLANE_NORMAL = Vec3(0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Intersection:
    """A ray hitting a primitive.

    Attributes:
        thing: The primitive that was hit
        ray: The (world-space) ray that hit it
        dist: Distance along the ray to the hit point
    """
    thing: Thing
    ray: Ray
    dist: float


class Thing(ABC):
    """Abstract base class for all primitives that can be hit by rays."""

    __slots__ = ('surface',)

    def __init__(self, surface: Surface):
        self.surface = surface

    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[Intersection]:
        """Test if the ray hits this primitive.

        Args:
            ray: World-space ray with a unit direction

        Returns:
            Intersection for the nearest valid hit, None otherwise
        """

    @abstractmethod
    def normal_at(self, pos: Point3) -> Vec3:
        """Unit world-space surface normal at a point on the surface."""


def _to_object_space(xform: Transform, ray: Ray) -> Tuple[Point3, Vec3, float]:
    """Map a world ray into object space.

    Returns the object-space origin, the re-normalized object-space
    direction, and the length of the mapped direction before
    normalization (the factor relating object to world distances).
    """
    origin = xform.inv_point(ray.origin)
    direction = xform.inv_vector(ray.direction)
    scale_factor = direction.length()
    return origin, direction / scale_factor, scale_factor


class Sphere(Thing):
    """A sphere given by center and radius in world space."""

    __slots__ = ('center', 'radius')

    def __init__(self, center: Point3, radius: float, surface: Surface):
        super().__init__(surface)
        self.center = center
        self.radius = radius

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        """Geometric ray-sphere test.

        Only the entry point in front of the ray origin is reported; a ray
        starting inside the sphere, or whose origin is past the center,
        misses.
        """
        eo = self.center - ray.origin
        v = eo.dot(ray.direction)
        if v < 0:
            return None

        disc = self.radius * self.radius - (eo.dot(eo) - v * v)
        if disc < 0:
            return None

        dist = v - math.sqrt(disc)
        if dist < 0:
            return None
        return Intersection(self, ray, dist)

    def normal_at(self, pos: Point3) -> Vec3:
        return (pos - self.center).normalize()

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class TransformedSphere(Thing):
    """The unit sphere at the object-space origin, placed by a transform."""

    __slots__ = ('transform',)

    def __init__(self, surface: Surface, transform: Transform):
        super().__init__(surface)
        self.transform = transform

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        """Solve the unit-sphere quadratic in object space."""
        o, d, scale_factor = _to_object_space(self.transform, ray)

        a = d.dot(d)
        b = 2.0 * o.dot(d)
        c = o.dot(o) - 1.0
        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return None

        sqrt_d = math.sqrt(discriminant)
        t1 = (-b - sqrt_d) / (2 * a)
        t2 = (-b + sqrt_d) / (2 * a)

        if t1 > HIT_EPSILON:
            t = t1
        elif t2 > HIT_EPSILON:
            t = t2
        else:
            return None

        return Intersection(self, ray, t / scale_factor)

    def normal_at(self, pos: Point3) -> Vec3:
        obj_normal = self.transform.inv_point(pos).normalize()
        return self.transform.normal(obj_normal)

    def __repr__(self) -> str:
        return f"TransformedSphere(transform={self.transform})"


class Plane(Thing):
    """An infinite plane ``dot(normal, p) + offset = 0`` in world space.

    Only the side the normal faces is visible: rays travelling along the
    normal miss.
    """

    __slots__ = ('normal', 'offset')

    def __init__(self, normal: Vec3, offset: float, surface: Surface):
        super().__init__(surface)
        self.normal = normal
        self.offset = offset

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        denom = self.normal.dot(ray.direction)
        # Moving away from the facing side, or parallel to the plane
        if denom > -PARALLEL_EPSILON:
            return None

        dist = (self.normal.dot(ray.origin) + self.offset) / -denom
        if dist <= HIT_EPSILON:
            return None
        return Intersection(self, ray, dist)

    def normal_at(self, pos: Point3) -> Vec3:
        return self.normal

    def __repr__(self) -> str:
        return f"Plane(normal={self.normal}, offset={self.offset})"


class TransformedPlane(Thing):
    """The object-space XZ plane (y=0), placed by a transform."""

    __slots__ = ('transform',)

    def __init__(self, surface: Surface, transform: Transform):
        super().__init__(surface)
        self.transform = transform

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        o, d, scale_factor = _to_object_space(self.transform, ray)

        if abs(d.y) < PARALLEL_EPSILON:
            return None

        t = -o.y / d.y
        if t <= HIT_EPSILON:
            return None
        return Intersection(self, ray, t / scale_factor)

    def normal_at(self, pos: Point3) -> Vec3:
        return self.transform.normal(_CANONICAL_PLANE_NORMAL)

    def __repr__(self) -> str:
        return f"TransformedPlane(transform={self.transform})"


def make_sphere(center: Point3, radius: float, surface: Surface) -> Sphere:
    return Sphere(center, radius, surface)


def make_transformed_sphere(surface: Surface, transform: Transform) -> TransformedSphere:
    return TransformedSphere(surface, transform)


def make_plane(normal: Vec3, offset: float, surface: Surface) -> Plane:
    return Plane(normal, offset, surface)


def make_transformed_plane(surface: Surface, transform: Transform) -> TransformedPlane:
    return TransformedPlane(surface, transform)
