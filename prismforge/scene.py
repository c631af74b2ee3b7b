"""
Scene container: geometry, lights and the scene clock.

The scene answers the two queries the tracer and the lights need
(`nearest_hit` and `is_occluded`) and owns the only mutable state touched
between frames: `update` advances the clock and every animated light, and
must finish before a render starts reading the scene.
"""

from __future__ import annotations
import logging
import math
from typing import Iterable, Optional

from .ray import Ray, EPSILON
from .shapes import Hittable, HitRecord, HittableList
from .lights import Light

logger = logging.getLogger(__name__)


class Scene:
    """Objects and lights to be rendered."""

    def __init__(
        self,
        objects: Optional[Iterable[Hittable]] = None,
        lights: Optional[Iterable[Light]] = None,
        time: float = 0.0
    ):
        self.world = HittableList(list(objects) if objects is not None else [])
        self.lights: list[Light] = list(lights) if lights is not None else []
        self.time = time

    def add(self, obj: Hittable) -> None:
        """Add a shape to the scene."""
        self.world.add(obj)

    def add_light(self, light: Light) -> None:
        """Add a light to the scene."""
        self.lights.append(light)

    @property
    def objects(self) -> list[Hittable]:
        return self.world.objects

    def nearest_hit(self, ray: Ray) -> Optional[HitRecord]:
        """Closest intersection along the ray beyond EPSILON, or None."""
        return self.world.hit(ray, EPSILON, math.inf)

    def is_occluded(self, ray: Ray, max_distance: float) -> bool:
        """True iff some object intersects the ray within (EPSILON, max_distance)."""
        if max_distance <= EPSILON:
            return False
        return self.world.any_hit(ray, EPSILON, max_distance)

    def update(self, delta_time: float) -> None:
        """Advance the scene clock and all animated lights by ``delta_time``."""
        self.time += delta_time
        for light in self.lights:
            light.update(delta_time)
        logger.debug("Scene advanced to t=%.4f", self.time)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self.world)}, lights={len(self.lights)}, time={self.time})"
