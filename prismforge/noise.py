"""
Procedural noise for materials and lights.

Implements:
- Improved Perlin gradient noise with a 512-entry permutation table
- Fractal sum (turbulence) over octaves with amplitude normalization
- Deterministic hash randomness (pure functions of the input value)

Nothing here reads global random state per call: the permutation table is
fixed when a ``PerlinNoise`` is constructed, and the hash helpers are pure.
"""

from __future__ import annotations
import math
import random
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3

# Ken Perlin's reference permutation
_REFERENCE_PERMUTATION = (
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
)


class PerlinNoise:
    """Improved Perlin noise in three dimensions."""

    def __init__(self, seed: Optional[int] = None):
        """Create a noise generator.

        Args:
            seed: Seed for the Fisher-Yates shuffle of the permutation table.
                  None keeps Ken Perlin's reference permutation.
        """
        self.seed = seed
        self._perm = self._generate_permutation(seed)

    @staticmethod
    def _generate_permutation(seed: Optional[int]) -> np.ndarray:
        """Build the 256-entry table and duplicate it to 512 entries."""
        if seed is None:
            p = list(_REFERENCE_PERMUTATION)
        else:
            rng = random.Random(seed)
            p = list(range(256))
            for i in range(255, 0, -1):
                j = rng.randint(0, i)
                p[i], p[j] = p[j], p[i]
        table = np.array(p, dtype=np.int32)
        return np.concatenate([table, table])

    @staticmethod
    def _fade(t: float) -> float:
        """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
        return t * t * t * (t * (t * 6 - 15) + 10)

    @staticmethod
    def _lerp(t: float, a: float, b: float) -> float:
        return a + t * (b - a)

    @staticmethod
    def _grad(hash_val: int, x: float, y: float, z: float) -> float:
        """Dot product with one of 12 gradient directions."""
        h = hash_val & 15
        u = x if h < 8 else y
        v = y if h < 4 else (x if h == 12 or h == 14 else z)
        return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)

    def noise(self, x: float, y: float, z: float) -> float:
        """Gradient noise at a point, in [-1, 1]."""
        fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)

        # Lattice cell, wrapped to the table size
        X = int(fx) & 255
        Y = int(fy) & 255
        Z = int(fz) & 255

        x -= fx
        y -= fy
        z -= fz

        u = self._fade(x)
        v = self._fade(y)
        w = self._fade(z)

        p = self._perm
        A = int(p[X]) + Y
        AA = int(p[A]) + Z
        AB = int(p[A + 1]) + Z
        B = int(p[X + 1]) + Y
        BA = int(p[B]) + Z
        BB = int(p[B + 1]) + Z

        grad = self._grad
        lerp = self._lerp
        value = lerp(w,
            lerp(v,
                lerp(u, grad(int(p[AA]), x, y, z), grad(int(p[BA]), x - 1, y, z)),
                lerp(u, grad(int(p[AB]), x, y - 1, z), grad(int(p[BB]), x - 1, y - 1, z))
            ),
            lerp(v,
                lerp(u, grad(int(p[AA + 1]), x, y, z - 1), grad(int(p[BA + 1]), x - 1, y, z - 1)),
                lerp(u, grad(int(p[AB + 1]), x, y - 1, z - 1), grad(int(p[BB + 1]), x - 1, y - 1, z - 1))
            )
        )
        return max(-1.0, min(1.0, value))

    def noise01(self, x: float, y: float, z: float) -> float:
        """Gradient noise remapped to [0, 1]."""
        return (self.noise(x, y, z) + 1.0) * 0.5

    def turbulence(
        self,
        point: Point3,
        octaves: int = 4,
        persistence: float = 0.5,
        frequency: float = 1.0
    ) -> float:
        """Fractal sum of noise octaves, in [-1, 1].

        Each octave doubles the frequency and multiplies the amplitude by
        ``persistence``; the sum is divided by the total amplitude used.

        Args:
            point: Sample position
            octaves: Number of noise layers (>= 1)
            persistence: Amplitude decay per octave, in [0, 1]
            frequency: Base frequency applied to the point

        Raises:
            ValueError: If octaves < 1
        """
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        persistence = max(0.0, min(1.0, persistence))

        total = 0.0
        amplitude = 1.0
        max_amplitude = 0.0
        freq = frequency

        for _ in range(octaves):
            total += amplitude * self.noise(point.x * freq, point.y * freq, point.z * freq)
            max_amplitude += amplitude
            amplitude *= persistence
            freq *= 2.0

        return total / max_amplitude

    def turbulence01(self, point: Point3, octaves: int = 4,
                     persistence: float = 0.5, frequency: float = 1.0) -> float:
        """Fractal sum remapped to [0, 1]."""
        return (self.turbulence(point, octaves, persistence, frequency) + 1.0) * 0.5

    def abs_turbulence(self, point: Point3, octaves: int = 4) -> float:
        """Sum of absolute octave values in [0, 1] (billowy look used for veins)."""
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        total = 0.0
        amplitude = 1.0
        max_amplitude = 0.0
        freq = 1.0
        for _ in range(octaves):
            total += amplitude * abs(self.noise(point.x * freq, point.y * freq, point.z * freq))
            max_amplitude += amplitude
            amplitude *= 0.5
            freq *= 2.0
        return total / max_amplitude


# Shared generator using the reference permutation
DEFAULT_NOISE = PerlinNoise()


def hash01(seed: float) -> float:
    """Deterministic pseudo-random value in [0, 1) from a float seed."""
    x = math.sin(seed * 12.9898 + 78.233) * 43758.5453
    return x - math.floor(x)


def point_seed(point: Point3, salt: float = 0.0) -> float:
    """Fold a position (and optional salt such as time) into one seed value."""
    return point.x * 127.1 + point.y * 311.7 + point.z * 74.7 + salt * 19.19


def random_in_unit_sphere(seed: float) -> Vec3:
    """A point inside the unit sphere, as a pure function of ``seed``."""
    phi = 2.0 * math.pi * hash01(seed + 2.0)
    cos_theta = 2.0 * hash01(seed + 3.0) - 1.0
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    r = hash01(seed + 5.0) ** (1.0 / 3.0)
    return Vec3(
        r * sin_theta * math.cos(phi),
        r * sin_theta * math.sin(phi),
        r * cos_theta
    )
