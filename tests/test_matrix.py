"""Tests for Matrix4 transforms."""

import pytest
import math

from prismforge.vec3 import Vec3, Point3
from prismforge.matrix import Matrix4


class TestMatrix4:
    """Test Matrix4 construction and application."""

    def test_identity_leaves_points(self):
        p = Point3(1, 2, 3)
        assert Matrix4.identity().transform_point(p) == p

    def test_translate_moves_points_not_vectors(self):
        m = Matrix4.translate(Vec3(1, 2, 3))
        assert m.transform_point(Point3(0, 0, 0)) == Point3(1, 2, 3)
        assert m.transform_vector(Vec3(1, 0, 0)) == Vec3(1, 0, 0)

    def test_scale(self):
        m = Matrix4.scale(Vec3(2, 3, 4))
        assert m.transform_point(Point3(1, 1, 1)) == Point3(2, 3, 4)

    def test_rotations(self):
        quarter = math.pi / 2
        assert Matrix4.rotate_z(quarter).transform_vector(Vec3(1, 0, 0)) == Vec3(0, 1, 0)
        assert Matrix4.rotate_x(quarter).transform_vector(Vec3(0, 1, 0)) == Vec3(0, 0, 1)
        assert Matrix4.rotate_y(quarter).transform_vector(Vec3(0, 0, 1)) == Vec3(1, 0, 0)

    def test_composition_order(self):
        m = Matrix4.translate(Vec3(5, 0, 0)) @ Matrix4.scale(Vec3(2, 2, 2))
        assert m.transform_point(Point3(1, 0, 0)) == Point3(7, 0, 0)

    def test_inverse_round_trip(self):
        m = Matrix4.translate(Vec3(1, -2, 3)) @ Matrix4.rotate_y(0.7)
        assert m @ m.inverse() == Matrix4.identity()

    def test_singular_inverse_raises(self):
        with pytest.raises(ValueError):
            Matrix4.scale(Vec3(0, 1, 1)).inverse()

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            Matrix4([[1, 0], [0, 1]])
