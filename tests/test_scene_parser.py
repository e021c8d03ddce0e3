"""Tests for the scene description parser."""

import pytest
import json

from mirrortrace.vec3 import Vec3, Point3, Color
from mirrortrace.ray import Ray
from mirrortrace.shapes import Sphere, Plane, TransformedSphere, TransformedPlane
from mirrortrace.surfaces import SHINY, CHECKERBOARD
from mirrortrace.scene_parser import (
    SceneParser, SceneParseError, SceneDescription, load_scene, parse_scene
)


MINIMAL = {
    'camera': {'position': [0, 1, 5], 'look_at': [0, 0, 0]},
    'objects': [{'type': 'sphere', 'center': [0, 0, 0], 'radius': 1}],
    'lights': [{'position': [0, 5, 0], 'color': [1, 1, 1]}],
}


class TestParseDict:
    """Parsing scene dictionaries."""

    def test_minimal(self):
        desc = parse_scene(MINIMAL)
        assert isinstance(desc, SceneDescription)
        assert len(desc.scene.things) == 1
        assert isinstance(desc.scene.things[0], Sphere)
        assert desc.scene.things[0].surface is SHINY
        assert desc.scene.lights[0].position == Point3(0, 5, 0)
        assert desc.scene.camera.position == Point3(0, 1, 5)

    def test_defaults(self):
        desc = parse_scene({})
        assert desc.width == 800
        assert desc.height == 600
        assert desc.settings.max_depth == 5
        assert desc.scene.things == ()

    def test_render_section(self):
        desc = parse_scene({'render': {'width': 64, 'height': 32, 'max_depth': 2, 'threads': 3}})
        assert (desc.width, desc.height) == (64, 32)
        assert desc.settings.max_depth == 2
        assert desc.settings.num_threads == 3

    def test_camera_fov_scale(self):
        desc = parse_scene({'camera': {'position': [0, 0, 0], 'look_at': [0, 0, -1], 'fov_scale': 2}})
        assert abs(desc.scene.camera.right.length() - 2.0) < 1e-12

    def test_plane_direct(self):
        desc = parse_scene({'objects': [
            {'type': 'plane', 'normal': [0, 2, 0], 'offset': 1, 'surface': 'checkerboard'}
        ]})
        plane = desc.scene.things[0]
        assert isinstance(plane, Plane)
        assert plane.normal == Vec3(0, 1, 0)
        assert plane.offset == 1.0
        assert plane.surface is CHECKERBOARD

    def test_transformed_objects(self):
        desc = parse_scene({'objects': [
            {'type': 'sphere', 'transform': [{'scale': 2}, {'translate': [1, 0, 0]}]},
            {'type': 'plane', 'transform': [{'rotate_z': 0.5}]},
        ]})
        sphere, plane = desc.scene.things
        assert isinstance(sphere, TransformedSphere)
        assert isinstance(plane, TransformedPlane)
        # Steps apply in order: scale, then translate
        assert sphere.transform.point(Point3(1, 0, 0)) == Point3(3, 0, 0)

    def test_transformed_sphere_intersects(self):
        desc = parse_scene({'objects': [
            {'type': 'sphere', 'transform': [{'translate': [0, 0, -5]}]}
        ]})
        hit = desc.scene.things[0].intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))
        assert hit.dist == pytest.approx(4.0)

    def test_named_surface(self):
        desc = parse_scene({
            'surfaces': {'red': {'diffuse': [1, 0, 0], 'specular': '#000000', 'reflect': 0.2, 'roughness': 4}},
            'objects': [{'type': 'sphere', 'surface': 'red'}],
        })
        surf = desc.scene.things[0].surface
        assert surf.diffuse(Point3(0, 0, 0)) == Color(1, 0, 0)
        assert surf.specular(Point3(0, 0, 0)) == Color(0, 0, 0)
        assert surf.reflect(Point3(0, 0, 0)) == 0.2
        assert surf.roughness == 4

    def test_inline_surface(self):
        desc = parse_scene({'objects': [
            {'type': 'sphere', 'surface': {'diffuse': {'r': 0, 'g': 1, 'b': 0}}}
        ]})
        assert desc.scene.things[0].surface.diffuse(Point3(0, 0, 0)) == Color(0, 1, 0)

    def test_hex_color(self):
        desc = parse_scene({'lights': [{'position': [0, 1, 0], 'color': '#ff0000'}]})
        assert desc.scene.lights[0].color == Color(1, 0, 0)


class TestParseErrors:
    """Invalid scene input."""

    @pytest.mark.parametrize('data', [
        {'objects': [{'type': 'cube'}]},
        {'objects': [{'type': 'sphere', 'surface': 'missing'}]},
        {'objects': [{'type': 'sphere', 'center': [0, 0]}]},
        {'objects': [{'type': 'sphere', 'radius': 0}]},
        {'objects': [{'type': 'plane', 'normal': [0, 0, 0]}]},
        {'objects': [{'type': 'sphere', 'transform': [{'scale': [1, 0, 1]}]}]},
        {'objects': [{'type': 'sphere', 'transform': [{'shear': 1}]}]},
        {'objects': [{'type': 'sphere', 'transform': {'translate': [1, 0, 0]}}]},
        {'surfaces': {'bad': {'reflect': 2.0}}},
        {'lights': [{'color': 'red'}]},
        {'camera': {'position': [1, 1, 1], 'look_at': [1, 1, 1]}},
        {'render': {'width': 0}},
        {'render': {'max_depth': -1}},
        {'objects': [{'type': 'sphere', 'center': ['a', 0, 0]}]},
        {'objects': [{'type': 'sphere', 'radius': 'big'}]},
        {'objects': ['sphere']},
        {'objects': {'type': 'sphere'}},
        {'objects': [{'type': 'sphere', 'transform': [{'rotate_y': 'quarter'}]}]},
        {'objects': [{'type': 'sphere', 'transform': [{'translate': [1, None, 0]}]}]},
        {'lights': [{'position': {'x': 'left'}}]},
        {'lights': ['bright']},
        {'lights': [{'color': '#zz0000'}]},
        {'surfaces': {'bad': 'red'}},
        {'surfaces': {'bad': {'roughness': 'smooth'}}},
        {'camera': 'overhead'},
        {'camera': {'fov_scale': 'wide'}},
        {'render': {'width': 'wide'}},
        {'render': {'height': 2.5}},
        {'render': {'threads': [2]}},
        {'render': [800, 600]},
        ['not', 'a', 'mapping'],
    ])
    def test_rejected(self, data):
        with pytest.raises(SceneParseError):
            parse_scene(data)

    @pytest.mark.parametrize('key', ['surfaces', 'objects', 'lights', 'camera', 'render'])
    def test_empty_section_uses_defaults(self, key):
        desc = parse_scene({key: None})
        assert (desc.width, desc.height) == (800, 600)
        assert desc.scene.camera is not None

    def test_empty_yaml_sections(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("render:\nlights:\nsurfaces:\nobjects:\n")
        desc = load_scene(str(path))
        assert len(desc.scene) == 0
        assert desc.settings.max_depth == 5


class TestLoadScene:
    """Loading from files."""

    def test_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(MINIMAL))
        desc = load_scene(str(path))
        assert len(desc.scene.things) == 1

    def test_yaml(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(
            "camera:\n"
            "  position: [3, 2, 4]\n"
            "  look_at: [-1, 0.5, 0]\n"
            "render:\n"
            "  width: 16\n"
            "  height: 12\n"
            "objects:\n"
            "  - type: plane\n"
            "    normal: [0, 1, 0]\n"
            "    offset: 0\n"
            "    surface: checkerboard\n"
            "  - type: sphere\n"
            "    transform:\n"
            "      - scale: [1, 0.5, 1]\n"
            "      - translate: [0, 1, 0]\n"
            "lights:\n"
            "  - position: [0, 3.5, 0]\n"
            "    color: [0.21, 0.21, 0.35]\n"
        )
        desc = load_scene(str(path))
        assert (desc.width, desc.height) == (16, 12)
        assert isinstance(desc.scene.things[0], Plane)
        assert isinstance(desc.scene.things[1], TransformedSphere)
        assert desc.scene.lights[0].color == Color(0.21, 0.21, 0.35)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(str(tmp_path / "nope.yaml"))

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_parser_instance(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(MINIMAL))
        parser = SceneParser()
        desc = parser.parse_file(str(path))
        assert parser.camera is desc.scene.camera
