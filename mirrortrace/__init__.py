"""
MirrorTrace - A Python Whitted-style Ray Tracer

Renders scenes of spheres, planes and point lights with:
- Diffuse and specular lighting
- Hard shadows
- Recursive mirror reflection
- Affine transforms (translate, scale, rotate) for placing primitives
- Multi-threaded row rendering
"""

__version__ = "0.1.0"
__author__ = "MirrorTrace Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .camera import Camera
from .transform import Transform, compose
from .surfaces import (
    Surface, SHINY, CHECKERBOARD, SURFACES, uniform_surface,
    checkerboard_diffuse, checkerboard_specular, checkerboard_reflect
)
from .shapes import (
    Thing, Intersection, Sphere, TransformedSphere, Plane, TransformedPlane,
    make_sphere, make_transformed_sphere, make_plane, make_transformed_plane
)
from .lights import Light
from .scene import Scene, create_demo_scene, create_transformed_scene
from .canvas import PixelSink, ImageCanvas
from .renderer import RayTracer, RenderSettings, RenderCancelled, render
from .scene_parser import (
    SceneParser, SceneParseError, SceneDescription, load_scene, parse_scene
)
