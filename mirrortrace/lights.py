"""
Point light sources.

Lights have no attenuation model: the intensity is encoded in the color
and falls off only with the angle to the surface at shading time.
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Point3, Color


@dataclass(frozen=True)
class Light:
    """A point light at ``position`` emitting ``color``."""
    position: Point3
    color: Color
