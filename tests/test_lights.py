"""Tests for lighting system."""

import pytest
import math

from prismforge.vec3 import Vec3, Point3
from prismforge.color import Color
from prismforge.ray import Ray, EPSILON
from prismforge.lights import (
    LightKind, PointLight, DirectionalLight, AmbientLight, SpotLight,
    PulsatingPointLight, BioluminescentLight, BlackHoleLight, FractalLight,
    attenuation_factor, shadow_test,
)


class RecordingOccluder:
    """Occluder double that records every query and returns a fixed answer."""

    def __init__(self, blocked: bool = False):
        self.blocked = blocked
        self.queries = []

    def is_occluded(self, ray: Ray, max_distance: float) -> bool:
        self.queries.append((ray, max_distance))
        return self.blocked


class TestAttenuation:
    """Test the attenuation polynomial."""

    def test_polynomial(self):
        assert attenuation_factor(2.0, 1.0, 0.5, 0.25) == pytest.approx(1.0 / 3.0)

    def test_denominator_floor(self):
        assert attenuation_factor(0.0, 0.0, 0.0, 0.0) == pytest.approx(1.0 / EPSILON)


class TestPointLight:
    """Test PointLight class."""

    def test_direction_points_toward_light(self):
        light = PointLight(Point3(0, 10, 0), Color.white(), 1.0)
        assert light.direction_at(Point3(0, 0, 0)) == Vec3(0, 1, 0)
        assert light.direction_to(Point3(0, 0, 0)) == Vec3(0, -1, 0)

    def test_intensity_at_light_position_is_floored(self):
        light = PointLight(Point3(1, 1, 1), Color.white(), 2.0, 0.0, 0.0, 0.0)
        value = light.attenuated_intensity(Point3(1, 1, 1))
        assert math.isfinite(value)
        assert value == pytest.approx(2.0 / EPSILON)

    def test_monotonic_falloff(self):
        light = PointLight(Point3(0, 0, 0), Color.white(), 10.0)
        values = [light.attenuated_intensity(Point3(d, 0, 0)) for d in (0.5, 1, 2, 4, 8, 16)]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_constant_only_attenuation(self):
        light = PointLight(Point3(0, 5, 0), Color.white(), 10.0, 1.0, 0.0, 0.0)
        assert light.attenuated_intensity(Point3(0, 0, 0)) == pytest.approx(10.0)
        assert light.intensity_at(Point3(0, 0, 0)) == pytest.approx(10.0)

    def test_negative_values_clamp(self):
        light = PointLight(Point3(0, 0, 0), Color.white(), -3.0, -1.0, -1.0, -1.0)
        assert light.intensity == 0.0
        assert light.attenuation == (0.0, 0.0, 0.0)

    def test_requires_color_and_position(self):
        with pytest.raises(ValueError):
            PointLight(Point3(0, 0, 0), None)
        with pytest.raises(ValueError):
            PointLight(None, Color.white())

    def test_with_round_trips(self):
        light = PointLight(Point3(1, 2, 3), Color(0.5, 0.5, 0.5), 4.0)
        moved = light.with_position(Point3(0, 0, 0))
        assert moved.position == Point3(0, 0, 0)
        assert moved.intensity == 4.0
        assert moved.with_position(Point3(1, 2, 3)).position == light.position
        brighter = light.with_intensity(8.0)
        assert brighter.intensity == 8.0
        assert brighter.color == light.color
        assert light.with_color(Color(1, 0, 0)).color == Color(1, 0, 0)
        assert light.with_attenuation(1, 0, 0).attenuation == (1, 0, 0)
        assert light.intensity == 4.0  # original untouched

    def test_shadow_ray_setup(self):
        light = PointLight(Point3(0, 10, 0), Color.white())
        occluder = RecordingOccluder()
        assert light.is_visible_from(Point3(0, 0, 0), occluder)
        ray, max_distance = occluder.queries[0]
        assert ray.direction == Vec3(0, 1, 0)
        assert ray.origin.y == pytest.approx(10 * EPSILON)
        assert max_distance == pytest.approx(10.0 - EPSILON)

    def test_blocked(self):
        light = PointLight(Point3(0, 10, 0), Color.white())
        assert not light.is_visible_from(Point3(0, 0, 0), RecordingOccluder(blocked=True))

    def test_kind(self):
        assert PointLight(Point3(0, 0, 0), Color.white()).kind is LightKind.POINT


class TestShadowTest:
    """Test the shared shadow-ray helper."""

    def test_coincident_point_is_visible(self):
        occluder = RecordingOccluder(blocked=True)
        assert shadow_test(Point3(1, 1, 1), Point3(1, 1, 1), occluder)
        assert occluder.queries == []


class TestDirectionalLight:
    """Test DirectionalLight class."""

    def test_direction_is_inverted(self):
        light = DirectionalLight(Vec3(0, -1, 0), Color.white(), 1.0)
        assert light.direction_at(Point3(0, 0, 0)) == Vec3(0, 1, 0)
        assert light.direction_to(Point3(0, 0, 0)) == Vec3(0, -1, 0)

    def test_constant_intensity(self):
        light = DirectionalLight(Vec3(1, -1, 0), Color.white(), 0.7)
        for p in (Point3(0, 0, 0), Point3(100, -50, 3), Point3(-1e4, 1e4, 1e4)):
            assert light.attenuated_intensity(p) == pytest.approx(0.7)

    def test_infinite_shadow_ray(self):
        light = DirectionalLight(Vec3(0, -1, 0))
        occluder = RecordingOccluder()
        light.is_visible_from(Point3(0, 0, 0), occluder)
        assert occluder.queries[0][1] == math.inf

    def test_default_color_is_white(self):
        assert DirectionalLight(Vec3(0, -1, 0)).color == Color.white()

    def test_default_preset(self):
        light = DirectionalLight.default()
        assert light.intensity == pytest.approx(0.8)
        assert light.color == Color.from_rgb255(255, 255, 230)

    def test_rejects_zero_direction(self):
        with pytest.raises(ValueError):
            DirectionalLight(Vec3(0, 0, 0))

    def test_with_direction(self):
        light = DirectionalLight(Vec3(0, -1, 0)).with_direction(Vec3(1, 0, 0))
        assert light.direction == Vec3(1, 0, 0)


class TestAmbientLight:
    """Test AmbientLight class."""

    def test_always_visible(self):
        light = AmbientLight()
        assert light.is_visible_from(Point3(0, 0, 0), RecordingOccluder(blocked=True))

    def test_zero_direction(self):
        assert AmbientLight().direction_at(Point3(3, 2, 1)) == Vec3.zero()

    def test_intensity_clamped(self):
        assert AmbientLight(intensity=5.0).intensity == 1.0
        assert AmbientLight(intensity=-1.0).intensity == 0.0

    def test_defaults(self):
        light = AmbientLight.default()
        assert light.color == AmbientLight.DEFAULT_COLOR
        assert light.intensity == pytest.approx(0.15)


class TestSpotLight:
    """Test SpotLight cone behaviour."""

    def _light(self):
        return SpotLight(Point3(0, 10, 0), Vec3(0, -1, 0), Color.white(), 1.0,
                         inner_angle=30.0, outer_angle=60.0)

    def test_inside_inner_cone(self):
        assert self._light().cone_factor(Point3(0, 0, 0)) == 1.0

    def test_outside_outer_cone(self):
        assert self._light().cone_factor(Point3(100, 9, 0)) == 0.0
        assert self._light().attenuated_intensity(Point3(100, 9, 0)) == 0.0

    def test_linear_between_cones(self):
        light = self._light()
        # 22.5 degrees off-axis sits between the 15 and 30 degree half angles
        angle = math.radians(22.5)
        point = Point3(10 * math.tan(angle), 0, 0)
        cos_angle = math.cos(angle)
        expected = (cos_angle - light.cos_outer) / (light.cos_inner - light.cos_outer)
        assert light.cone_factor(point) == pytest.approx(expected)
        assert 0.0 < light.cone_factor(point) < 1.0

    def test_continuous_at_cone_edges(self):
        light = self._light()

        def factor_at(degrees):
            return light.cone_factor(Point3(10 * math.tan(math.radians(degrees)), 0, 0))

        delta = 1e-6
        assert factor_at(15.0 - delta) == 1.0
        assert factor_at(15.0 + delta) == pytest.approx(1.0, abs=1e-5)
        assert factor_at(30.0 - delta) == pytest.approx(0.0, abs=1e-5)
        assert factor_at(30.0 + delta) == 0.0

    def test_invalid_angles(self):
        with pytest.raises(ValueError):
            SpotLight(Point3(0, 0, 0), Vec3(0, -1, 0), Color.white(), inner_angle=50, outer_angle=40)
        with pytest.raises(ValueError):
            SpotLight(Point3(0, 0, 0), Vec3(0, -1, 0), Color.white(), inner_angle=-1, outer_angle=40)

    def test_with_cone_angles(self):
        light = self._light().with_cone_angles(10.0, 20.0)
        assert light.inner_cone_angle == 10.0
        assert light.outer_cone_angle == 20.0
        assert light.position == Point3(0, 10, 0)


class TestPulsatingPointLight:
    """Test animated point light."""

    def test_update_advances_time(self):
        light = PulsatingPointLight(Point3(0, 0, 0), Color.white())
        light.update(0.5)
        light.update(0.25)
        assert light.time == pytest.approx(0.75)

    def test_at_time_is_a_copy(self):
        light = PulsatingPointLight(Point3(0, 0, 0), Color.white())
        later = light.at_time(2.0)
        assert later.time == 2.0
        assert light.time == 0.0

    def test_position_moves(self):
        light = PulsatingPointLight(Point3(0, 0, 0), Color.white(), movement_amplitude=1.0)
        assert light.at_time(0.0).position != light.at_time(3.0).position

    def test_position_at_time_zero(self):
        light = PulsatingPointLight(Point3(1, 1, 1), Color.white(), movement_amplitude=0.4)
        assert light.position == Point3(1, 1.2, 1)

    def test_intensity_is_non_negative(self):
        light = PulsatingPointLight(Point3(0, 5, 0), Color.white(), intensity=2.0)
        for t in (0.0, 0.3, 1.1, 2.7, 9.4):
            assert light.at_time(t).attenuated_intensity(Point3(0, 0, 0)) >= 0.0

    def test_with_position_sets_base(self):
        light = PulsatingPointLight(Point3(0, 0, 0), Color.white()).with_position(Point3(5, 5, 5))
        assert light.initial_position == Point3(5, 5, 5)


class TestBioluminescentLight:
    """Test emitter cluster light."""

    def test_requires_emitters(self):
        with pytest.raises(ValueError):
            BioluminescentLight([])

    def test_nearest_emitter(self):
        light = BioluminescentLight([Point3(0, 0, 0), Point3(10, 0, 0)])
        assert light.nearest_emitter(Point3(9, 0, 0)) == Point3(10, 0, 0)
        assert light.direction_at(Point3(9, 0, 0)) == Vec3(1, 0, 0)

    def test_attenuation(self):
        light = BioluminescentLight([Point3(0, 0, 0)], intensity=1.0, attenuation=0.5)
        near = light.attenuated_intensity(Point3(1, 0, 0))
        far = light.attenuated_intensity(Point3(4, 0, 0))
        assert near == pytest.approx(light.intensity / 1.5)
        assert far < near

    def test_shadow_targets_nearest_emitter(self):
        light = BioluminescentLight([Point3(0, 0, 0), Point3(0, 3, 0)])
        occluder = RecordingOccluder()
        light.is_visible_from(Point3(0, 2, 0), occluder)
        assert occluder.queries[0][0].direction == Vec3(0, 1, 0)
        assert occluder.queries[0][1] == pytest.approx(1.0 - EPSILON)


class TestBlackHoleLight:
    """Test singularity light."""

    def test_zero_inside_horizon(self):
        light = BlackHoleLight(Point3(0, 0, 0), radius=2.0)
        assert light.attenuated_intensity(Point3(1, 0, 0)) == 0.0
        assert light.is_point_inside_horizon(Point3(1, 0, 0))

    def test_positive_and_increasing_outside(self):
        light = BlackHoleLight(Point3(0, 0, 0), radius=1.0, intensity=1.5)
        values = [light.attenuated_intensity(Point3(d, 0, 0)) for d in (1.5, 2, 4, 8, 100)]
        assert all(v > 0 for v in values)
        assert all(a < b for a, b in zip(values, values[1:]))
        assert values[-1] < 1.5

    def test_not_visible_inside_horizon(self):
        light = BlackHoleLight(Point3(0, 0, 0), radius=2.0)
        occluder = RecordingOccluder()
        assert not light.is_visible_from(Point3(0.5, 0, 0), occluder)
        assert occluder.queries == []

    def test_visible_outside_horizon(self):
        light = BlackHoleLight(Point3(0, 0, 0), radius=1.0)
        occluder = RecordingOccluder()
        assert light.is_visible_from(Point3(5, 0, 0), occluder)
        assert occluder.queries[0][1] == math.inf

    def test_direction_at_singularity_is_zero(self):
        light = BlackHoleLight(Point3(0, 0, 0))
        assert light.direction_at(Point3(0, 0, 0)) == Vec3.zero()

    def test_warped_direction_points_inward(self):
        light = BlackHoleLight(Point3(0, 0, 0), radius=1.0)
        d = light.direction_at(Point3(3, 0, 0))
        assert d.x < 0
        assert d.length() > 1.0

    def test_radius_floor(self):
        assert BlackHoleLight(Point3(0, 0, 0), radius=0.0).radius == pytest.approx(0.1)

    def test_requires_singularity(self):
        with pytest.raises(ValueError):
            BlackHoleLight(None)

    def test_with_radius(self):
        light = BlackHoleLight(Point3(1, 2, 3), radius=1.0).with_radius(3.0)
        assert light.radius == 3.0
        assert light.singularity == Point3(1, 2, 3)


class TestFractalLight:
    """Test noise-modulated light."""

    def test_intensity_bounds(self):
        light = FractalLight(Point3(0, 10, 0), Color.white(), intensity=2.0)
        for i in range(50):
            value = light.attenuated_intensity(Point3(i * 0.73, -i * 0.31, i * 1.7))
            assert 0.6 - 1e-9 <= value <= 2.0 + 1e-9

    def test_deterministic_for_seed(self):
        a = FractalLight(Point3(0, 10, 0), Color.white(), seed=5)
        b = FractalLight(Point3(0, 10, 0), Color.white(), seed=5)
        p = Point3(3.3, 1.2, -7.7)
        assert a.attenuated_intensity(p) == b.attenuated_intensity(p)

    def test_octaves_floor(self):
        assert FractalLight(Point3(0, 0, 0), Color.white(), octaves=0).octaves == 1

    def test_with_octaves(self):
        light = FractalLight(Point3(0, 0, 0), Color.white(), octaves=4).with_octaves(2)
        assert light.octaves == 2
        assert light.seed == FractalLight.DEFAULT_SEED
