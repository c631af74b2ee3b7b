"""
4x4 affine transforms.

Primitives hand their object-to-world transform to their material once, so
that procedural patterns defined in object space stay attached to the object
wherever it is placed.
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3


class Matrix4:
    """A 4x4 row-major transformation matrix."""

    __slots__ = ('_m',)

    def __init__(self, data: Optional[np.ndarray] = None):
        if data is None:
            self._m = np.identity(4, dtype=np.float64)
        else:
            m = np.asarray(data, dtype=np.float64)
            if m.shape != (4, 4):
                raise ValueError(f"Matrix4 needs a 4x4 array, got shape {m.shape}")
            self._m = m

    @classmethod
    def identity(cls) -> Matrix4:
        return cls()

    @classmethod
    def translate(cls, offset: Vec3) -> Matrix4:
        m = np.identity(4, dtype=np.float64)
        m[0:3, 3] = offset.to_array()
        return cls(m)

    @classmethod
    def scale(cls, factors: Vec3) -> Matrix4:
        return cls(np.diag([factors.x, factors.y, factors.z, 1.0]))

    @classmethod
    def rotate_x(cls, angle: float) -> Matrix4:
        """Rotation about the x axis by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return cls(np.array([
            [1, 0, 0, 0],
            [0, c, -s, 0],
            [0, s, c, 0],
            [0, 0, 0, 1]
        ], dtype=np.float64))

    @classmethod
    def rotate_y(cls, angle: float) -> Matrix4:
        c, s = math.cos(angle), math.sin(angle)
        return cls(np.array([
            [c, 0, s, 0],
            [0, 1, 0, 0],
            [-s, 0, c, 0],
            [0, 0, 0, 1]
        ], dtype=np.float64))

    @classmethod
    def rotate_z(cls, angle: float) -> Matrix4:
        c, s = math.cos(angle), math.sin(angle)
        return cls(np.array([
            [c, -s, 0, 0],
            [s, c, 0, 0],
            [0, 0, 1, 0],
            [0, 0, 0, 1]
        ], dtype=np.float64))

    def __matmul__(self, other: Matrix4) -> Matrix4:
        return Matrix4(self._m @ other._m)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return np.allclose(self._m, other._m)

    def inverse(self) -> Matrix4:
        """Return the inverse transform.

        Raises:
            ValueError: If the matrix is singular
        """
        try:
            return Matrix4(np.linalg.inv(self._m))
        except np.linalg.LinAlgError as exc:
            raise ValueError("Matrix4 is singular and cannot be inverted") from exc

    def transform_point(self, point: Point3) -> Point3:
        p = self._m @ np.array([point.x, point.y, point.z, 1.0])
        w = p[3] if p[3] != 0 else 1.0
        return Vec3.from_array(p[0:3] / w)

    def transform_vector(self, vector: Vec3) -> Vec3:
        """Apply the linear part only (no translation)."""
        return Vec3.from_array(self._m[0:3, 0:3] @ vector.to_array())

    def to_array(self) -> np.ndarray:
        return self._m.copy()

    def __repr__(self) -> str:
        return f"Matrix4({self._m.tolist()})"
