"""
Uniform (direction, colour, intensity) view of any light.

Simple materials call ``get_light_sample`` instead of special-casing every
light kind. Resolution never raises: a missing light or a failure inside a
light collapses to the neutral sample, and ``resolve_light`` reports which of
the two happened.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .vec3 import Vec3, Point3
from .color import Color
from .lights import Light, LightKind

logger = logging.getLogger(__name__)

# Kinds resolved as normalize(position - point)
POSITIONAL_KINDS = frozenset({
    LightKind.POINT,
    LightKind.PULSATING_POINT,
    LightKind.SPOT,
    LightKind.FRACTAL,
    LightKind.BLACK_HOLE,
})


@dataclass(frozen=True)
class LightSample:
    """Light arriving at a surface point."""
    direction: Vec3     # Unit vector toward the light; zero for ambient
    color: Color
    intensity: float

    @classmethod
    def neutral(cls) -> LightSample:
        return cls(direction=Vec3.up(), color=Color.black(), intensity=0.0)

    @property
    def is_directional(self) -> bool:
        return not self.direction.near_zero()


@dataclass(frozen=True)
class LightResolution:
    """Outcome of resolving a light: the sample plus whether it is genuine."""
    sample: LightSample
    resolved: bool
    reason: Optional[str] = None


def _resolve(light: Light, point: Point3) -> LightSample:
    kind = getattr(light, "kind", None)

    if kind is LightKind.AMBIENT:
        return LightSample(Vec3.zero(), light.color, light.intensity)

    if kind in POSITIONAL_KINDS:
        direction = (light.position - point).normalize()
        return LightSample(direction, light.color, light.attenuated_intensity(point))

    if kind is LightKind.BIOLUMINESCENT:
        direction = (light.nearest_emitter(point) - point).normalize()
        return LightSample(direction, light.color, light.attenuated_intensity(point))

    if kind is LightKind.DIRECTIONAL:
        return LightSample(-light.direction, light.color, light.intensity)

    # Unknown kinds still shade plausibly from above
    return LightSample(Vec3.up(), light.color, min(light.intensity, 1.0))


def resolve_light(light: Optional[Light], point: Point3) -> LightResolution:
    """Resolve a light into a ``LightSample`` at ``point``.

    Args:
        light: Any light, or None
        point: The surface point being shaded

    Returns:
        LightResolution whose ``resolved`` flag is False when the neutral
        sample was substituted
    """
    if light is None:
        return LightResolution(LightSample.neutral(), False, "no light")
    try:
        return LightResolution(_resolve(light, point), True)
    except Exception as exc:
        logger.debug("Falling back to neutral light sample for %r: %s", light, exc)
        return LightResolution(LightSample.neutral(), False, str(exc))


def get_light_sample(light: Optional[Light], point: Point3) -> LightSample:
    """Shortcut for ``resolve_light(light, point).sample``."""
    return resolve_light(light, point).sample


def light_response(light: Light, point: Point3) -> Optional[Tuple[Vec3, float]]:
    """Direction toward the light and attenuated intensity, or None for ambient lights.

    Used by materials that treat ambient light separately from directional
    light; it follows the same rules as ``resolve_light``.
    """
    resolution = resolve_light(light, point)
    if not resolution.resolved or light.kind is LightKind.AMBIENT:
        return None
    return resolution.sample.direction, resolution.sample.intensity
