"""
Scene model: geometry, lights and a camera.

A scene is assembled once and is read-only while rendering.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Tuple
import math

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .lights import Light
from .shapes import Thing, Sphere, Plane, TransformedSphere, TransformedPlane
from .surfaces import SHINY, CHECKERBOARD
from .transform import Transform


@dataclass(frozen=True)
class Scene:
    """An ordered collection of things and lights seen through one camera."""
    things: Tuple[Thing, ...]
    lights: Tuple[Light, ...]
    camera: Camera

    def __init__(self, things: Iterable[Thing], lights: Iterable[Light], camera: Camera):
        object.__setattr__(self, 'things', tuple(things))
        object.__setattr__(self, 'lights', tuple(lights))
        object.__setattr__(self, 'camera', camera)

    def __len__(self) -> int:
        return len(self.things)


def _demo_lights() -> List[Light]:
    return [
        Light(Point3(-2.0, 2.5, 0.0), Color(0.49, 0.07, 0.07)),
        Light(Point3(1.5, 2.5, 1.5), Color(0.07, 0.07, 0.49)),
        Light(Point3(1.5, 2.5, -1.5), Color(0.07, 0.49, 0.071)),
        Light(Point3(0.0, 3.5, 0.0), Color(0.21, 0.21, 0.35)),
    ]


def create_demo_scene() -> Scene:
    """Checkerboard floor, two shiny spheres and four coloured lights."""
    things = [
        Plane(Vec3(0.0, 1.0, 0.0), 0.0, CHECKERBOARD),
        Sphere(Point3(0.0, 1.0, -0.25), 1.0, SHINY),
        Sphere(Point3(-1.0, 0.5, 1.5), 0.5, SHINY),
    ]
    lights = _demo_lights()
    camera = Camera(Point3(3.0, 2.0, 4.0), Point3(-1.0, 0.5, 0.0))
    return Scene(things, lights, camera)


def create_transformed_scene() -> Scene:
    """The demo layout built from transformed primitives.

    Adds a squashed, rotated ellipsoid to show non-uniform scaling.
    """
    ellipsoid = (
        Transform.scale(0.8, 0.4, 0.4)
        .then(Transform.rotate_y(math.radians(30)))
        .then(Transform.translate(1.2, 0.4, 1.2))
    )
    things = [
        TransformedPlane(CHECKERBOARD, Transform.identity()),
        TransformedSphere(SHINY, Transform.translate(0.0, 1.0, -0.25)),
        TransformedSphere(
            SHINY,
            Transform.scale(0.5, 0.5, 0.5).then(Transform.translate(-1.0, 0.5, 1.5))
        ),
        TransformedSphere(SHINY, ellipsoid),
    ]
    lights = _demo_lights()
    camera = Camera(Point3(3.0, 2.0, 4.0), Point3(-1.0, 0.5, 0.0))
    return Scene(things, lights, camera)
