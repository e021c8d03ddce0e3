"""
Surface definitions (materials) for Whitted shading.

A surface is data: three pure functions of a world-space point giving the
diffuse color, specular color and reflectivity there, plus an integer
roughness exponent for the specular highlight.

Provided surfaces:
- SHINY: uniform glossy white
- CHECKERBOARD: infinite black/white checker on the XZ plane
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict
import math

from .vec3 import Color, Point3

ColorFunc = Callable[[Point3], Color]
ReflectFunc = Callable[[Point3], float]


@dataclass(frozen=True)
class Surface:
    """Per-point material description."""
    diffuse: ColorFunc
    specular: ColorFunc
    reflect: ReflectFunc
    roughness: int = 0

    def __post_init__(self):
        if self.roughness < 0:
            raise ValueError(f"Roughness must be >= 0, got {self.roughness}")


def shiny_diffuse(pos: Point3) -> Color:
    return Color.white()


def shiny_specular(pos: Point3) -> Color:
    return Color.grey()


def shiny_reflect(pos: Point3) -> float:
    return 0.7


def _is_odd_cell(pos: Point3) -> bool:
    """True when floor(x) + floor(z) is odd."""
    return (math.floor(pos.z) + math.floor(pos.x)) % 2 != 0


def checkerboard_diffuse(pos: Point3) -> Color:
    if _is_odd_cell(pos):
        return Color.white()
    return Color.black()


def checkerboard_specular(pos: Point3) -> Color:
    return Color.white()


def checkerboard_reflect(pos: Point3) -> float:
    if _is_odd_cell(pos):
        return 0.1
    return 0.7


SHINY = Surface(shiny_diffuse, shiny_specular, shiny_reflect, 100)

CHECKERBOARD = Surface(checkerboard_diffuse, checkerboard_specular, checkerboard_reflect, 1)


def uniform_surface(
    diffuse: Color,
    specular: Color,
    reflect: float = 0.0,
    roughness: int = 0
) -> Surface:
    """Build a surface whose properties are the same at every point.

    Args:
        diffuse: Diffuse color
        specular: Specular color
        reflect: Reflectivity in [0, 1]
        roughness: Specular exponent (>= 0)
    """
    if not 0.0 <= reflect <= 1.0:
        raise ValueError(f"Reflectivity must be in [0, 1], got {reflect}")
    return Surface(
        diffuse=lambda pos: diffuse,
        specular=lambda pos: specular,
        reflect=lambda pos: reflect,
        roughness=int(roughness)
    )


SURFACES: Dict[str, Surface] = {
    'shiny': SHINY,
    'checkerboard': CHECKERBOARD,
}
