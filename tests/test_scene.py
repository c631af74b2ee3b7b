"""Tests for the Scene container."""

import logging
import pytest
import math

from prismforge.vec3 import Vec3, Point3
from prismforge.color import Color
from prismforge.ray import Ray, EPSILON
from prismforge.scene import Scene
from prismforge.shapes import Sphere, Plane
from prismforge.lights import PointLight, PulsatingPointLight, BioluminescentLight


class TestSceneQueries:
    """Test nearest_hit and is_occluded."""

    def test_nearest_hit(self):
        scene = Scene([Sphere(Point3(0, 0, -10), 1.0), Sphere(Point3(0, 0, -5), 1.0)])
        hit = scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))
        assert hit.t == pytest.approx(4.0)

    def test_nearest_hit_none(self):
        scene = Scene()
        assert scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1))) is None

    def test_nearest_hit_ignores_origin_surface(self):
        scene = Scene([Plane(Point3(0, 0, 0), Vec3(0, 1, 0))])
        assert scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(1, 1, 0))) is None

    def test_occluded_within_distance(self):
        scene = Scene([Sphere(Point3(0, 5, 0), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 1, 0))
        assert scene.is_occluded(ray, 10.0)
        assert not scene.is_occluded(ray, 3.0)

    def test_occluded_infinite(self):
        scene = Scene([Sphere(Point3(0, 100, 0), 1.0)])
        assert scene.is_occluded(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), math.inf)

    def test_tiny_max_distance_is_never_occluded(self):
        scene = Scene([Sphere(Point3(0, 0, 0), 1.0)])
        assert not scene.is_occluded(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), EPSILON / 2)

    def test_lights_see_occluders(self):
        scene = Scene([Sphere(Point3(0, 5, 0), 1.0)])
        light = PointLight(Point3(0, 10, 0), Color.white())
        assert not light.is_visible_from(Point3(0, 0, 0), scene)
        assert light.is_visible_from(Point3(5, 0, 0), scene)


class TestSceneMutation:
    """Test adding content and advancing time."""

    def test_add(self):
        scene = Scene()
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        light = PointLight(Point3(0, 5, 0), Color.white())
        scene.add(sphere)
        scene.add_light(light)
        assert scene.objects == [sphere]
        assert scene.lights == [light]

    def test_update_advances_clock_and_lights(self, caplog):
        pulsing = PulsatingPointLight(Point3(0, 5, 0), Color.white())
        glowing = BioluminescentLight([Point3(0, 1, 0)])
        scene = Scene(lights=[pulsing, glowing, PointLight(Point3(0, 5, 0), Color.white())])
        with caplog.at_level(logging.DEBUG, logger="prismforge.scene"):
            scene.update(0.5)
        scene.update(0.25)
        assert scene.time == pytest.approx(0.75)
        assert pulsing.time == pytest.approx(0.75)
        assert glowing.time == pytest.approx(0.75)
        assert "t=0.5000" in caplog.text

    def test_initial_time(self):
        assert Scene(time=2.0).time == 2.0

    def test_repr(self):
        assert "objects=0" in repr(Scene())
