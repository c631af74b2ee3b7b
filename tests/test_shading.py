"""Tests for BRDF helper functions."""

import pytest
import math

from prismforge.vec3 import Vec3
from prismforge.shading import (
    MAX_SPECULAR, clamp, f0_from_ior, fresnel_schlick, half_vector,
    ggx_distribution, smith_geometry, cook_torrance_specular,
    blinn_phong, phong, jitter_reflection,
)


class TestFresnel:
    """Test Fresnel helpers."""

    def test_f0_glass(self):
        assert f0_from_ior(1.5) == pytest.approx(0.04)

    def test_f0_vacuum(self):
        assert f0_from_ior(1.0) == 0.0

    def test_normal_incidence_is_f0(self):
        assert fresnel_schlick(1.0, 0.04) == pytest.approx(0.04)

    def test_grazing_incidence_is_one(self):
        assert fresnel_schlick(0.0, 0.04) == pytest.approx(1.0)

    def test_cosine_is_clamped(self):
        assert fresnel_schlick(-0.5, 0.04) == pytest.approx(1.0)
        assert fresnel_schlick(2.0, 0.04) == pytest.approx(0.04)


class TestDistribution:
    """Test GGX and Smith terms."""

    def test_ggx_peaks_at_normal(self):
        assert ggx_distribution(1.0, 0.5) > ggx_distribution(0.8, 0.5)

    def test_ggx_finite_for_zero_roughness(self):
        value = ggx_distribution(1.0, 0.0)
        assert math.isfinite(value)

    def test_smith_in_unit_range(self):
        for n_dot_l in (0.0, 0.1, 0.5, 1.0):
            g = smith_geometry(n_dot_l, 0.7, 0.5)
            assert 0.0 <= g <= 1.0

    def test_clamp(self):
        assert clamp(2.0) == 1.0
        assert clamp(-1.0) == 0.0
        assert clamp(5.0, 0.0, 10.0) == 5.0


class TestSpecular:
    """Test specular lobes."""

    def test_cook_torrance_zero_below_surface(self):
        n = Vec3(0, 1, 0)
        assert cook_torrance_specular(n, Vec3(0, -1, 0), Vec3(0, 1, 0), 0.5, 0.04) == 0.0
        assert cook_torrance_specular(n, Vec3(0, 1, 0), Vec3(1, -1, 0).normalize(), 0.5, 0.04) == 0.0

    def test_cook_torrance_positive_and_capped(self):
        n = Vec3(0, 1, 0)
        for roughness in (0.05, 0.3, 1.0):
            value = cook_torrance_specular(n, Vec3(0, 1, 0), Vec3(0, 1, 0), roughness, 0.9)
            assert 0.0 < value <= MAX_SPECULAR

    def test_half_vector(self):
        assert half_vector(Vec3(1, 0, 0), Vec3(0, 1, 0)) == Vec3(1, 1, 0).normalize()

    def test_blinn_phong_mirror_configuration(self):
        n = Vec3(0, 1, 0)
        light = Vec3(1, 1, 0).normalize()
        view = Vec3(-1, 1, 0).normalize()
        assert blinn_phong(n, light, view, 64.0) == pytest.approx(1.0)
        assert phong(n, light, view, 64.0) == pytest.approx(1.0)

    def test_phong_off_axis_falls_off(self):
        n = Vec3(0, 1, 0)
        light = Vec3(1, 1, 0).normalize()
        assert phong(n, light, Vec3(0, 1, 0), 32.0) < 0.01


class TestJitter:
    """Test reflection blurring."""

    def test_zero_roughness_is_identity(self):
        r = Vec3(0, 1, 0)
        assert jitter_reflection(r, 0.0, 12.3) == r

    def test_deterministic_and_close(self):
        r = Vec3(0, 1, 0)
        a = jitter_reflection(r, 0.3, 4.2)
        b = jitter_reflection(r, 0.3, 4.2)
        assert a == b
        assert a.length() == pytest.approx(1.0)
        # fuzz radius is roughness^2
        assert a.dot(r) > 0.9
