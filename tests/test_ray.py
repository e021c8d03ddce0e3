"""Tests for Ray and Camera classes."""

import pytest
from mirrortrace.vec3 import Vec3, Point3
from mirrortrace.ray import Ray
from mirrortrace.camera import Camera, DEFAULT_FOV_SCALE


class TestRay:
    """Test Ray construction and evaluation."""

    def test_stores_origin_and_direction(self):
        ray = Ray(Point3(1, 2, 3), Vec3(0, 1, 0))
        assert ray.origin == Point3(1, 2, 3)
        assert ray.direction == Vec3(0, 1, 0)

    def test_at_zero(self):
        ray = Ray(Point3(1, 2, 3), Vec3(1, 0, 0))
        assert ray.at(0) == Point3(1, 2, 3)

    def test_at_positive(self):
        ray = Ray(Point3(0, 0, 0), Vec3(1, 0, 0))
        assert ray.at(5) == Point3(5, 0, 0)

    def test_repr(self):
        s = repr(Ray(Point3(1, 2, 3), Vec3(0, 1, 0)))
        assert "origin" in s
        assert "direction" in s


class TestCamera:
    """Test the look-at camera basis."""

    def test_forward_is_unit_toward_target(self):
        cam = Camera(Point3(0, 0, 0), Point3(0, 0, -10))
        assert cam.forward == Vec3(0, 0, -1)

    def test_basis_scaled_by_default_fov(self):
        cam = Camera(Point3(0, 0, 0), Point3(0, 0, -1))
        assert DEFAULT_FOV_SCALE == 1.5
        assert abs(cam.right.length() - 1.5) < 1e-12
        assert abs(cam.up.length() - 1.5) < 1e-12

    def test_basis_directions(self):
        cam = Camera(Point3(0, 0, 0), Point3(0, 0, -1))
        # right = forward x (0, -1, 0)
        assert cam.right == Vec3(-1.5, 0, 0)
        assert cam.up == Vec3(0, 1.5, 0)

    def test_basis_is_orthogonal(self):
        cam = Camera(Point3(3, 2, 4), Point3(-1, 0.5, 0))
        assert abs(cam.forward.dot(cam.right)) < 1e-12
        assert abs(cam.forward.dot(cam.up)) < 1e-12
        assert abs(cam.right.dot(cam.up)) < 1e-12

    def test_custom_fov_scale(self):
        cam = Camera(Point3(0, 0, 0), Point3(0, 0, -1), fov_scale=2.0)
        assert abs(cam.right.length() - 2.0) < 1e-12
