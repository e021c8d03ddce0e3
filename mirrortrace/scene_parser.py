"""
Scene description language parser.

Supports a YAML or JSON scene description with:
- Camera configuration
- Render settings
- Named surfaces
- Objects (direct or transformed spheres and planes)
- Point lights

Example scene file:
```yaml
camera:
  position: [3, 2, 4]
  look_at: [-1, 0.5, 0]

render:
  width: 320
  height: 240
  max_depth: 5

surfaces:
  matte_red:
    diffuse: [0.8, 0.1, 0.1]
    specular: [0.2, 0.2, 0.2]
    reflect: 0.0
    roughness: 10

objects:
  - type: plane
    normal: [0, 1, 0]
    offset: 0
    surface: checkerboard

  - type: sphere
    surface: matte_red
    transform:
      - scale: [1, 0.5, 1]
      - rotate_y: 0.5
      - translate: [0, 1, 0]

lights:
  - position: [0, 3.5, 0]
    color: [0.21, 0.21, 0.35]
```

Transform steps are applied in the order listed.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional
import json
import logging

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera, DEFAULT_FOV_SCALE
from .lights import Light
from .scene import Scene
from .shapes import Thing, Sphere, Plane, TransformedSphere, TransformedPlane
from .surfaces import Surface, SURFACES, uniform_surface
from .transform import Transform
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


@dataclass
class SceneDescription:
    """Everything a scene file describes."""
    scene: Scene
    settings: RenderSettings
    width: int = 800
    height: int = 600


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.surfaces: Dict[str, Surface] = dict(SURFACES)
        self.things: List[Thing] = []
        self.lights: List[Light] = []
        self.camera: Optional[Camera] = None

    def parse_file(self, filepath: str) -> SceneDescription:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            The parsed SceneDescription
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file {filepath} must contain a mapping")

        logger.info("Loading scene from %s", filepath)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> SceneDescription:
        """Parse a scene from a dictionary.

        Sections may be missing or left empty; anything else of the wrong
        shape raises SceneParseError.

        Args:
            data: Scene description dictionary

        Returns:
            The parsed SceneDescription
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got: {data!r}")

        # Surfaces first (objects reference them)
        self._parse_surfaces(_section(data, 'surfaces', dict))
        self._parse_objects(_section(data, 'objects', list))
        self._parse_lights(_section(data, 'lights', list))

        if data.get('camera') is not None:
            self._parse_camera(_section(data, 'camera', dict))
        else:
            self.camera = Camera(Point3(3.0, 2.0, 4.0), Point3(-1.0, 0.5, 0.0))

        render_data = _section(data, 'render', dict)
        settings = self._parse_settings(render_data)
        width = _to_int(render_data.get('width', 800), 'render width')
        height = _to_int(render_data.get('height', 600), 'render height')
        if width <= 0 or height <= 0:
            raise SceneParseError(f"Render size must be positive, got {width}x{height}")

        scene = Scene(self.things, self.lights, self.camera)
        logger.debug("Parsed scene: %d things, %d lights", len(scene.things), len(scene.lights))
        return SceneDescription(scene, settings, width, height)

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(_to_float(c, 'vector component') for c in data))
        elif isinstance(data, dict):
            return Vec3(
                _to_float(data.get('x', 0), 'vector x'),
                _to_float(data.get('y', 0), 'vector y'),
                _to_float(data.get('z', 0), 'vector z')
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(_to_float(c, 'color component') for c in data))
        elif isinstance(data, dict):
            return Color(
                _to_float(data.get('r', 0), 'color r'),
                _to_float(data.get('g', 0), 'color g'),
                _to_float(data.get('b', 0), 'color b')
            )
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                try:
                    r = int(data[1:3], 16) / 255.0
                    g = int(data[3:5], 16) / 255.0
                    b = int(data[5:7], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Invalid hex color: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_surfaces(self, surfaces_data: Dict[str, Any]) -> None:
        """Parse the named surfaces section."""
        for name, surf_data in surfaces_data.items():
            self.surfaces[name] = self._parse_uniform_surface(surf_data)

    def _parse_uniform_surface(self, surf_data: Any) -> Surface:
        if not isinstance(surf_data, dict):
            raise SceneParseError(f"Surface must be a mapping, got: {surf_data!r}")
        diffuse = self._parse_color(surf_data.get('diffuse', [1, 1, 1]))
        specular = self._parse_color(surf_data.get('specular', [0.5, 0.5, 0.5]))
        reflect = _to_float(surf_data.get('reflect', 0.0), 'surface reflect')
        roughness = _to_int(surf_data.get('roughness', 0), 'surface roughness')
        try:
            return uniform_surface(diffuse, specular, reflect, roughness)
        except ValueError as e:
            raise SceneParseError(str(e)) from e

    def _get_surface(self, surf_ref: Any) -> Surface:
        """Get a surface by name or inline definition."""
        if surf_ref is None:
            return SURFACES['shiny']
        if isinstance(surf_ref, str):
            if surf_ref not in self.surfaces:
                raise SceneParseError(f"Unknown surface: {surf_ref}")
            return self.surfaces[surf_ref]
        elif isinstance(surf_ref, dict):
            return self._parse_uniform_surface(surf_ref)
        else:
            raise SceneParseError(f"Invalid surface reference: {surf_ref}")

    def _parse_transform(self, steps: Any) -> Transform:
        """Fold a list of single-key transform steps into one Transform."""
        if not isinstance(steps, list):
            raise SceneParseError(f"Transform must be a list of steps, got: {steps}")

        result = Transform.identity()
        for step in steps:
            if not isinstance(step, dict) or len(step) != 1:
                raise SceneParseError(f"Invalid transform step: {step}")
            op, value = next(iter(step.items()))

            if op == 'translate':
                v = self._parse_vec3(value)
                xform = Transform.translate(v.x, v.y, v.z)
            elif op == 'scale':
                if isinstance(value, (int, float)):
                    value = [value, value, value]
                v = self._parse_vec3(value)
                try:
                    xform = Transform.scale(v.x, v.y, v.z)
                except ValueError as e:
                    raise SceneParseError(str(e)) from e
            elif op == 'rotate_x':
                xform = Transform.rotate_x(_to_float(value, 'rotate_x angle'))
            elif op == 'rotate_y':
                xform = Transform.rotate_y(_to_float(value, 'rotate_y angle'))
            elif op == 'rotate_z':
                xform = Transform.rotate_z(_to_float(value, 'rotate_z angle'))
            else:
                raise SceneParseError(f"Unknown transform step: {op}")

            result = result.then(xform)

        return result

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got: {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            surface = self._get_surface(obj_data.get('surface'))
            transform = None
            if 'transform' in obj_data:
                transform = self._parse_transform(obj_data['transform'])

            if obj_type == 'sphere':
                if transform is not None:
                    self.things.append(TransformedSphere(surface, transform))
                else:
                    center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                    radius = _to_float(obj_data.get('radius', 1.0), 'sphere radius')
                    if radius <= 0:
                        raise SceneParseError(f"Sphere radius must be positive, got {radius}")
                    self.things.append(Sphere(center, radius, surface))

            elif obj_type == 'plane':
                if transform is not None:
                    self.things.append(TransformedPlane(surface, transform))
                else:
                    normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
                    if normal.length_squared() == 0:
                        raise SceneParseError("Plane normal must be non-zero")
                    offset = _to_float(obj_data.get('offset', 0.0), 'plane offset')
                    self.things.append(Plane(normal.normalize(), offset, surface))

            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_lights(self, lights_data: list) -> None:
        """Parse lights section."""
        for light_data in lights_data:
            if not isinstance(light_data, dict):
                raise SceneParseError(f"Light must be a mapping, got: {light_data!r}")
            position = self._parse_vec3(light_data.get('position', [0, 5, 0]))
            color = self._parse_color(light_data.get('color', [1, 1, 1]))
            self.lights.append(Light(position, color))

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        position = self._parse_vec3(camera_data.get('position', [3, 2, 4]))
        look_at = self._parse_vec3(camera_data.get('look_at', [-1, 0.5, 0]))
        if position == look_at:
            raise SceneParseError("Camera position and look_at must differ")
        fov_scale = _to_float(camera_data.get('fov_scale', DEFAULT_FOV_SCALE), 'camera fov_scale')
        self.camera = Camera(position, look_at, fov_scale)

    def _parse_settings(self, settings_data: Dict[str, Any]) -> RenderSettings:
        """Parse render settings section."""
        max_depth = _to_int(settings_data.get('max_depth', 5), 'render max_depth')
        threads = _to_int(settings_data.get('threads', 1), 'render threads')
        try:
            return RenderSettings(max_depth=max_depth, num_threads=threads)
        except ValueError as e:
            raise SceneParseError(str(e)) from e


def _section(data: Dict[str, Any], key: str, kind: type) -> Any:
    """Return ``data[key]``, an empty ``kind`` if missing or null."""
    value = data.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise SceneParseError(f"Section '{key}' must be a {kind.__name__}, got: {value!r}")
    return value


def _to_float(value: Any, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Invalid {what}: {value!r}") from e


def _to_int(value: Any, what: str) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise SceneParseError(f"Invalid {what}: {value!r} is not a whole number")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Invalid {what}: {value!r}") from e


def load_scene(filepath: str) -> SceneDescription:
    """Convenience function to load a scene file."""
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> SceneDescription:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)
