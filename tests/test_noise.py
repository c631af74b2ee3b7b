"""Tests for Perlin noise and hash helpers."""

import pytest
import random

from prismforge.vec3 import Vec3, Point3
from prismforge.noise import PerlinNoise, DEFAULT_NOISE, hash01, point_seed, random_in_unit_sphere


def _sample_points(count: int, seed: int = 7):
    rng = random.Random(seed)
    return [
        Point3(rng.uniform(-50, 50), rng.uniform(-50, 50), rng.uniform(-50, 50))
        for _ in range(count)
    ]


class TestPerlinNoise:
    """Test the base noise function."""

    def test_zero_on_lattice_points(self):
        noise = PerlinNoise()
        assert noise.noise(1.0, 2.0, 3.0) == 0.0
        assert noise.noise(-4.0, 0.0, 17.0) == 0.0

    def test_range(self):
        noise = PerlinNoise()
        for p in _sample_points(1000):
            assert -1.0 <= noise.noise(p.x, p.y, p.z) <= 1.0
            assert 0.0 <= noise.noise01(p.x, p.y, p.z) <= 1.0

    def test_deterministic(self):
        a = PerlinNoise()
        b = PerlinNoise()
        assert a.noise(0.3, 1.7, -2.2) == b.noise(0.3, 1.7, -2.2)

    def test_seeded_tables_are_reproducible(self):
        a = PerlinNoise(seed=42)
        b = PerlinNoise(seed=42)
        for p in _sample_points(20):
            assert a.noise(p.x, p.y, p.z) == b.noise(p.x, p.y, p.z)

    def test_seed_changes_the_field(self):
        a = PerlinNoise(seed=1)
        b = PerlinNoise(seed=2)
        assert any(
            a.noise(p.x, p.y, p.z) != b.noise(p.x, p.y, p.z)
            for p in _sample_points(20)
        )

    def test_not_constant(self):
        values = {round(DEFAULT_NOISE.noise(p.x, p.y, p.z), 6) for p in _sample_points(50)}
        assert len(values) > 10


class TestTurbulence:
    """Test fractal sums over octaves."""

    def test_single_octave_equals_noise(self):
        noise = PerlinNoise()
        for p in _sample_points(100):
            assert noise.turbulence(p, octaves=1) == pytest.approx(noise.noise(p.x, p.y, p.z))

    def test_range_over_many_points(self):
        noise = PerlinNoise()
        for p in _sample_points(1000, seed=11):
            assert -1.0 <= noise.turbulence(p, octaves=4) <= 1.0
            assert 0.0 <= noise.turbulence01(p, octaves=4) <= 1.0
            assert 0.0 <= noise.abs_turbulence(p, octaves=3) <= 1.0

    def test_rejects_zero_octaves(self):
        with pytest.raises(ValueError):
            DEFAULT_NOISE.turbulence(Point3(0.5, 0.5, 0.5), octaves=0)
        with pytest.raises(ValueError):
            DEFAULT_NOISE.abs_turbulence(Point3(0.5, 0.5, 0.5), octaves=0)

    def test_frequency_scales_input(self):
        p = Point3(0.37, 1.21, -0.8)
        assert DEFAULT_NOISE.turbulence(p, octaves=1, frequency=2.0) == pytest.approx(
            DEFAULT_NOISE.noise(p.x * 2, p.y * 2, p.z * 2)
        )


class TestHashHelpers:
    """Test deterministic hash randomness."""

    def test_hash01_range_and_determinism(self):
        for i in range(200):
            value = hash01(i * 0.37)
            assert 0.0 <= value < 1.0
            assert hash01(i * 0.37) == value

    def test_point_seed(self):
        assert point_seed(Point3(1, 0, 0)) == pytest.approx(127.1)
        assert point_seed(Point3(0, 0, 0), salt=1.0) == pytest.approx(19.19)

    def test_random_in_unit_sphere(self):
        for i in range(200):
            v = random_in_unit_sphere(float(i))
            assert v.length() <= 1.0 + 1e-9
        assert random_in_unit_sphere(3.5) == random_in_unit_sphere(3.5)
