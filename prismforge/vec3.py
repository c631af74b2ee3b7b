"""
Vector3 class for 3D math operations.

Used by the shading core for:
- Points in 3D space
- Direction vectors (light directions, normals, reflected/refracted rays)
"""

from __future__ import annotations
import math
from typing import Optional, Union
import numpy as np


class Vec3:
    """A 3D vector backed by a small numpy array.

    Instances are treated as immutable by the renderer: every operation
    returns a new vector.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @classmethod
    def zero(cls) -> Vec3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def up(cls) -> Vec3:
        return cls(0.0, 1.0, 0.0)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: float) -> Vec3:
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return float(np.linalg.norm(self._data))

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def distance(self, other: Vec3) -> float:
        """Euclidean distance between two points."""
        return float(np.linalg.norm(self._data - other._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        A zero-length vector normalizes to the zero vector instead of
        producing NaNs.
        """
        length = self.length()
        if length == 0:
            return Vec3(0, 0, 0)
        return Vec3.from_array(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Reflect this vector around the given normal: R = I - 2(I.N)N."""
        return self - normal * (2.0 * self.dot(normal))

    def refract(self, normal: Vec3, n1: float, n2: float) -> Optional[Vec3]:
        """Refract this (unit) direction through a surface using Snell's law.

        Args:
            normal: Unit surface normal facing against this direction
            n1: Index of refraction of the medium the ray travels in
            n2: Index of refraction of the medium being entered

        Returns:
            The refracted unit direction, or None on total internal reflection
        """
        eta = n1 / n2
        cos_i = min(1.0, max(-1.0, -self.dot(normal)))
        sin_t2 = eta * eta * (1.0 - cos_i * cos_i)

        if sin_t2 > 1.0:
            return None

        cos_t = math.sqrt(1.0 - sin_t2)
        return (self * eta + normal * (eta * cos_i - cos_t)).normalize()

    def lerp(self, other: Vec3, t: float) -> Vec3:
        """Linear interpolation toward another vector."""
        return Vec3.from_array(self._data + (other._data - self._data) * t)

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()


# Points share the vector representation
Point3 = Vec3
