"""
Renderer module - the heart of the ray tracer.

Implements Whitted-style recursive ray tracing:
- Closest-hit search over the scene (linear scan)
- Hard shadows from point lights
- Diffuse and specular (Phong-like) lighting
- Mirror reflection bounded by a maximum depth
- Optional multi-threaded row rendering
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Callable

from .vec3 import Vec3, Color, Point3
from .ray import Ray
from .camera import Camera
from .lights import Light
from .scene import Scene
from .shapes import Thing, Intersection
from .canvas import PixelSink

logger = logging.getLogger(__name__)


class RenderCancelled(Exception):
    """Raised when a render is cancelled between rows."""
    pass


@dataclass
class RenderSettings:
    """Configuration for the ray tracer."""
    max_depth: int = 5
    background_color: Color = field(default_factory=Color.background)
    # Stands in for the reflection once max_depth bounces have been traced
    depth_limit_color: Color = field(default_factory=Color.grey)
    num_threads: int = 1  # 0 = auto-detect

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class RayTracer:
    """Recursive ray tracer.

    The tracer holds no per-pixel state; the scene is only read.
    """

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a ray tracer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None
        self._cancel_flag = threading.Event()

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def cancel(self) -> None:
        """Ask the running (or next) render to stop before its next row."""
        self._cancel_flag.set()

    def closest_intersection(self, ray: Ray, scene: Scene) -> Optional[Intersection]:
        """Find the nearest hit among all things in the scene.

        On exactly equal distances the first thing in scene order wins.
        """
        closest: Optional[Intersection] = None
        closest_dist = float('inf')

        for thing in scene.things:
            isect = thing.intersect(ray)
            if isect is not None and isect.dist < closest_dist:
                closest = isect
                closest_dist = isect.dist

        return closest

    def shadow_test(self, ray: Ray, scene: Scene) -> Optional[float]:
        """Distance to the nearest hit along a ray, used for shadows."""
        isect = self.closest_intersection(ray, scene)
        if isect is None:
            return None
        return isect.dist

    def trace_ray(self, ray: Ray, scene: Scene, depth: int) -> Color:
        """Compute the color seen along a ray."""
        isect = self.closest_intersection(ray, scene)
        if isect is None:
            return self.settings.background_color
        return self.shade(isect, scene, depth)

    def shade(self, isect: Intersection, scene: Scene, depth: int) -> Color:
        """Color at an intersection: local lighting plus reflection."""
        d = isect.ray.direction
        pos = isect.ray.at(isect.dist)
        normal = isect.thing.normal_at(pos)
        reflect_dir = d.reflect(normal)

        natural = self.settings.background_color + self.natural_color(
            isect.thing, pos, normal, reflect_dir, scene
        )
        if depth >= self.settings.max_depth:
            reflected = self.settings.depth_limit_color
        else:
            reflected = self.reflection_color(isect.thing, pos, reflect_dir, scene, depth)
        return natural + reflected

    def reflection_color(self, thing: Thing, pos: Point3, reflect_dir: Vec3,
                         scene: Scene, depth: int) -> Color:
        """Trace the mirror ray one level deeper, weighted by reflectivity."""
        reflectivity = thing.surface.reflect(pos)
        return self.trace_ray(Ray(pos, reflect_dir), scene, depth + 1) * reflectivity

    def add_light(self, thing: Thing, pos: Point3, normal: Vec3, reflect_dir: Vec3,
                  scene: Scene, color: Color, light: Light) -> Color:
        """Add one light's diffuse and specular contribution to ``color``.

        A light blocked by any geometry closer than the light itself
        contributes nothing.
        """
        ldis = light.position - pos
        livec = ldis.normalize()
        near = self.shadow_test(Ray(pos, livec), scene)
        if near is not None and near < ldis.length():
            return color

        surface = thing.surface
        illum = livec.dot(normal)
        lcolor = light.color * illum if illum > 0 else Color.black()
        specular = livec.dot(reflect_dir.normalize())
        scolor = (
            light.color * (specular ** surface.roughness)
            if specular > 0 else Color.black()
        )
        return color + surface.diffuse(pos) * lcolor + surface.specular(pos) * scolor

    def natural_color(self, thing: Thing, pos: Point3, normal: Vec3,
                      reflect_dir: Vec3, scene: Scene) -> Color:
        """Sum of direct lighting from every light, in scene order."""
        color = Color.black()
        for light in scene.lights:
            color = self.add_light(thing, pos, normal, reflect_dir, scene, color, light)
        return color

    def get_point(self, width: int, height: int, x: int, y: int, camera: Camera) -> Vec3:
        """Unit direction of the camera ray through pixel (x, y).

        Screen y grows downward, so the vertical offset is negated.
        """
        recenter_x = (x - (width / 2.0)) / 2.0 / width
        recenter_y = -(y - (height / 2.0)) / 2.0 / height
        return (camera.forward + (camera.right * recenter_x + camera.up * recenter_y)).normalize()

    def render(self, scene: Scene, canvas: PixelSink, width: int, height: int) -> None:
        """Render the scene into the canvas.

        Every pixel in the width x height grid is written exactly once.
        Rows are independent, so with ``num_threads > 1`` they are traced
        on a thread pool; the output is identical to a sequential render.
        A ``cancel()`` issued before or during the call stops it before the
        next row with RenderCancelled; the request is consumed when the
        call returns.

        Args:
            scene: The scene to render
            canvas: Pixel sink receiving the colors
            width: Image width in pixels
            height: Image height in pixels
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Render size must be positive, got {width}x{height}")

        camera = scene.camera
        completed_rows = [0]
        progress_lock = threading.Lock()

        def render_row(y: int) -> None:
            if self._cancel_flag.is_set():
                raise RenderCancelled(f"Render cancelled before row {y}")

            for x in range(width):
                direction = self.get_point(width, height, x, y, camera)
                color = self.trace_ray(Ray(camera.position, direction), scene, 0)
                canvas.set_pixel(x, y, color)

            # Fractions are reported in increasing order
            with progress_lock:
                completed_rows[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_rows[0] / height)

        logger.debug(
            "Rendering %dx%d, %d things, %d lights, %d thread(s)",
            width, height, len(scene.things), len(scene.lights), self.settings.num_threads
        )
        start_time = time.time()

        try:
            if self.settings.num_threads > 1:
                with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                    for _ in executor.map(render_row, range(height)):
                        pass
            else:
                for y in range(height):
                    render_row(y)
        finally:
            self._cancel_flag.clear()

        logger.debug("Render finished in %.3fs", time.time() - start_time)


def render(scene: Scene, canvas: PixelSink, width: int, height: int,
           settings: Optional[RenderSettings] = None) -> None:
    """Render ``scene`` into ``canvas`` with a fresh RayTracer."""
    RayTracer(settings).render(scene, canvas, width, height)
