"""
Camera module for generating primary rays.

A look-at pinhole camera with a configurable vertical field of view.
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera with perspective projection."""

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 60.0,
        aspect_ratio: float = 4.0 / 3.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio

        Raises:
            ValueError: If look_from equals look_at, vup is parallel to the
                view direction, or the field of view is outside (0, 180)
        """
        if not 0.0 < vfov < 180.0:
            raise ValueError(f"vfov must be between 0 and 180 degrees, got {vfov}")
        if (look_from - look_at).near_zero():
            raise ValueError("Camera look_from and look_at must differ")

        theta = math.radians(vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        # Compute orthonormal camera basis
        self.w = (look_from - look_at).normalize()  # Points backward from camera
        self.u = vup.cross(self.w).normalize()       # Points right
        if self.u.near_zero():
            raise ValueError("Camera vup must not be parallel to the view direction")
        self.v = self.w.cross(self.u)                # Points up

        self.origin = look_from
        self.look_at = look_at
        self.vfov = vfov
        self.aspect_ratio = aspect_ratio
        self.horizontal = self.u * viewport_width
        self.vertical = self.v * viewport_height
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - self.w
        )

    @property
    def position(self) -> Point3:
        return self.origin

    def get_ray(self, s: float, t: float) -> Ray:
        """Generate a ray for the given UV coordinates on the image plane.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)

        Returns:
            A ray from the camera through the specified point
        """
        direction = (
            self.lower_left_corner
            + self.horizontal * s
            + self.vertical * t
            - self.origin
        )
        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, look_at={self.look_at}, vfov={self.vfov})"
