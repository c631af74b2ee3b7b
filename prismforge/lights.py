"""
Light sources for the ray tracer.

Implements the light kinds:
- Point lights with constant/linear/quadratic attenuation
- Directional lights (sun)
- Ambient lights
- Spot lights with an inner/outer cone
- Pulsating point lights and bioluminescent emitter clusters (animated)
- Black hole lights with an event horizon
- Fractal lights modulated by coherent noise

Every light answers the same questions for a surface point: which way is the
light, how bright is it there, and is it blocked.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple
import math

from .vec3 import Vec3, Point3
from .color import Color
from .ray import Ray, EPSILON, offset_point
from .noise import PerlinNoise

# Shadow rays start this many epsilons away from the surface
SHADOW_OFFSET_SCALE = 10.0

DEFAULT_ATTENUATION = (1.0, 0.1, 0.01)


class Occluder(Protocol):
    """Anything that can answer shadow-ray queries (normally the Scene)."""

    def is_occluded(self, ray: Ray, max_distance: float) -> bool:
        ...


class LightKind(Enum):
    """Closed set of light variants."""
    POINT = "point"
    DIRECTIONAL = "directional"
    AMBIENT = "ambient"
    SPOT = "spot"
    PULSATING_POINT = "pulsating_point"
    BIOLUMINESCENT = "bioluminescent"
    BLACK_HOLE = "black_hole"
    FRACTAL = "fractal"


def _require_color(color: Optional[Color], light_name: str) -> Color:
    if color is None:
        raise ValueError(f"{light_name} requires a color")
    return color


def _require_position(position: Optional[Point3], light_name: str) -> Point3:
    if position is None:
        raise ValueError(f"{light_name} requires a position")
    return position


def attenuation_factor(distance: float, constant: float, linear: float, quadratic: float) -> float:
    """Inverse of the attenuation polynomial, with the denominator floored at EPSILON."""
    denominator = constant + linear * distance + quadratic * distance * distance
    return 1.0 / max(denominator, EPSILON)


def shadow_test(point: Point3, light_position: Point3, occluder: Occluder) -> bool:
    """Return True if nothing blocks the segment from ``point`` to a finite light."""
    to_light = light_position - point
    distance = to_light.length()
    if distance < EPSILON:
        return True
    direction = to_light / distance
    shadow_ray = Ray(offset_point(point, direction, SHADOW_OFFSET_SCALE), direction)
    return not occluder.is_occluded(shadow_ray, distance - EPSILON)


class Light(ABC):
    """Abstract base class for light sources."""

    kind: LightKind

    @property
    def position(self) -> Optional[Point3]:
        """World position, or None for lights at infinity."""
        return None

    @property
    @abstractmethod
    def color(self) -> Color:
        pass

    @property
    @abstractmethod
    def intensity(self) -> float:
        pass

    @abstractmethod
    def direction_at(self, point: Point3) -> Vec3:
        """Unit direction from ``point`` toward the light."""
        pass

    def direction_to(self, point: Point3) -> Vec3:
        """Direction the light projects onto ``point``."""
        return -self.direction_at(point)

    @abstractmethod
    def attenuated_intensity(self, point: Point3) -> float:
        """Scalar intensity arriving at ``point``."""
        pass

    def intensity_at(self, point: Point3) -> float:
        return self.attenuated_intensity(point)

    def is_visible_from(self, point: Point3, occluder: Occluder) -> bool:
        """Cast a shadow ray from ``point`` toward the light."""
        return shadow_test(point, self.position, occluder)

    def update(self, delta_time: float) -> None:
        """Advance internal animation state. Static lights ignore this."""

    def _params(self) -> Dict[str, Any]:
        """Constructor arguments reproducing this light."""
        raise NotImplementedError

    def _replace(self, **changes: Any) -> Light:
        params = self._params()
        params.update(changes)
        return type(self)(**params)

    def with_color(self, color: Color) -> Light:
        return self._replace(color=color)

    def with_intensity(self, intensity: float) -> Light:
        return self._replace(intensity=intensity)

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self._params().items())
        return f"{type(self).__name__}({args})"


class PointLight(Light):
    """A point light source.

    Point lights emit light equally in all directions from a single point
    and produce hard shadows.
    """

    kind = LightKind.POINT

    def __init__(
        self,
        position: Point3,
        color: Color,
        intensity: float = 1.0,
        constant: float = DEFAULT_ATTENUATION[0],
        linear: float = DEFAULT_ATTENUATION[1],
        quadratic: float = DEFAULT_ATTENUATION[2]
    ):
        """Create a point light.

        Args:
            position: Position of the light
            color: Color of the light
            intensity: Brightness multiplier (negative values clamp to 0)
            constant: Constant attenuation coefficient
            linear: Linear attenuation coefficient
            quadratic: Quadratic attenuation coefficient
        """
        self._position = _require_position(position, "PointLight")
        self._color = _require_color(color, "PointLight")
        self._intensity = max(0.0, intensity)
        self.constant = max(0.0, constant)
        self.linear = max(0.0, linear)
        self.quadratic = max(0.0, quadratic)

    @property
    def position(self) -> Point3:
        return self._position

    @property
    def color(self) -> Color:
        return self._color

    @property
    def intensity(self) -> float:
        return self._intensity

    @property
    def attenuation(self) -> Tuple[float, float, float]:
        return (self.constant, self.linear, self.quadratic)

    def direction_at(self, point: Point3) -> Vec3:
        return (self._position - point).normalize()

    def attenuated_intensity(self, point: Point3) -> float:
        distance = self._position.distance(point)
        return self._intensity * attenuation_factor(distance, self.constant, self.linear, self.quadratic)

    def with_position(self, position: Point3) -> PointLight:
        return self._replace(position=position)

    def with_attenuation(self, constant: float, linear: float, quadratic: float) -> PointLight:
        return self._replace(constant=constant, linear=linear, quadratic=quadratic)

    def _params(self) -> Dict[str, Any]:
        return {
            "position": self._position,
            "color": self._color,
            "intensity": self._intensity,
            "constant": self.constant,
            "linear": self.linear,
            "quadratic": self.quadratic,
        }


class DirectionalLight(Light):
    """A directional light (like the sun).

    Directional lights have parallel rays and no falloff.
    """

    kind = LightKind.DIRECTIONAL

    def __init__(self, direction: Vec3, color: Optional[Color] = None, intensity: float = 1.0):
        """Create a directional light.

        Args:
            direction: Direction the light travels (from the light into the scene)
            color: Color of the light, white if omitted
            intensity: Brightness multiplier

        Raises:
            ValueError: If the direction is missing or has zero length
        """
        if direction is None or direction.length() < 1e-6:
            raise ValueError("DirectionalLight direction must be a non-zero vector")
        self.direction = direction.normalize()
        self._color = color if color is not None else Color.white()
        self._intensity = max(0.0, intensity)

    @classmethod
    def default(cls) -> DirectionalLight:
        """Warm, slightly dimmed sun coming down from the upper right."""
        return cls(Vec3(-1, -1, -1), Color.from_rgb255(255, 255, 230), 0.8)

    @property
    def color(self) -> Color:
        return self._color

    @property
    def intensity(self) -> float:
        return self._intensity

    def direction_at(self, point: Point3) -> Vec3:
        return -self.direction

    def direction_to(self, point: Point3) -> Vec3:
        return self.direction

    def attenuated_intensity(self, point: Point3) -> float:
        return self._intensity

    def is_visible_from(self, point: Point3, occluder: Occluder) -> bool:
        to_light = -self.direction
        shadow_ray = Ray(offset_point(point, to_light, SHADOW_OFFSET_SCALE), to_light)
        return not occluder.is_occluded(shadow_ray, math.inf)

    def with_direction(self, direction: Vec3) -> DirectionalLight:
        return self._replace(direction=direction)

    def _params(self) -> Dict[str, Any]:
        return {"direction": self.direction, "color": self._color, "intensity": self._intensity}


class AmbientLight(Light):
    """Flat, directionless fill light. Never shadowed."""

    kind = LightKind.AMBIENT

    DEFAULT_COLOR = Color.from_rgb255(200, 220, 255)

    def __init__(self, color: Optional[Color] = None, intensity: float = 0.15):
        self._color = color if color is not None else self.DEFAULT_COLOR
        self._intensity = max(0.0, min(1.0, intensity))

    @classmethod
    def default(cls) -> AmbientLight:
        return cls(cls.DEFAULT_COLOR, 0.15)

    @property
    def color(self) -> Color:
        return self._color

    @property
    def intensity(self) -> float:
        return self._intensity

    def direction_at(self, point: Point3) -> Vec3:
        return Vec3.zero()

    def direction_to(self, point: Point3) -> Vec3:
        return Vec3.zero()

    def attenuated_intensity(self, point: Point3) -> float:
        return self._intensity

    def is_visible_from(self, point: Point3, occluder: Occluder) -> bool:
        return True

    def _params(self) -> Dict[str, Any]:
        return {"color": self._color, "intensity": self._intensity}


class SpotLight(Light):
    """A cone of light with a soft edge between the inner and outer angles."""

    kind = LightKind.SPOT

    def __init__(
        self,
        position: Point3,
        direction: Vec3,
        color: Color,
        intensity: float = 1.0,
        inner_angle: float = 30.0,
        outer_angle: float = 45.0,
        constant: float = DEFAULT_ATTENUATION[0],
        linear: float = DEFAULT_ATTENUATION[1],
        quadratic: float = DEFAULT_ATTENUATION[2]
    ):
        """Create a spot light.

        Args:
            position: Position of the light
            direction: Axis of the cone (from the light outward)
            color: Color of the light
            intensity: Brightness multiplier
            inner_angle: Full opening angle of the fully lit cone, in degrees
            outer_angle: Full opening angle beyond which nothing is lit, in degrees
            constant: Constant attenuation coefficient
            linear: Linear attenuation coefficient
            quadratic: Quadratic attenuation coefficient
        """
        self._position = _require_position(position, "SpotLight")
        if direction is None or direction.length() < 1e-6:
            raise ValueError("SpotLight direction must be a non-zero vector")
        if not 0.0 <= inner_angle <= outer_angle <= 360.0:
            raise ValueError(
                f"SpotLight needs 0 <= inner_angle <= outer_angle <= 360, got {inner_angle}, {outer_angle}"
            )
        self.direction = direction.normalize()
        self._color = _require_color(color, "SpotLight")
        self._intensity = max(0.0, intensity)
        self._inner_angle = inner_angle
        self._outer_angle = outer_angle
        self.cos_inner = math.cos(math.radians(inner_angle / 2.0))
        self.cos_outer = math.cos(math.radians(outer_angle / 2.0))
        self.constant = max(0.0, constant)
        self.linear = max(0.0, linear)
        self.quadratic = max(0.0, quadratic)

    @property
    def position(self) -> Point3:
        return self._position

    @property
    def color(self) -> Color:
        return self._color

    @property
    def intensity(self) -> float:
        return self._intensity

    @property
    def inner_cone_angle(self) -> float:
        return self._inner_angle

    @property
    def outer_cone_angle(self) -> float:
        return self._outer_angle

    def direction_at(self, point: Point3) -> Vec3:
        return (self._position - point).normalize()

    def cone_factor(self, point: Point3) -> float:
        """1 inside the inner cone, 0 outside the outer cone, linear in the cosine between."""
        light_to_point = (point - self._position).normalize()
        cos_angle = light_to_point.dot(self.direction)
        if cos_angle >= self.cos_inner:
            return 1.0
        if cos_angle <= self.cos_outer:
            return 0.0
        return (cos_angle - self.cos_outer) / (self.cos_inner - self.cos_outer)

    def attenuated_intensity(self, point: Point3) -> float:
        distance = self._position.distance(point)
        falloff = attenuation_factor(distance, self.constant, self.linear, self.quadratic)
        return self._intensity * self.cone_factor(point) * falloff

    def with_position(self, position: Point3) -> SpotLight:
        return self._replace(position=position)

    def with_direction(self, direction: Vec3) -> SpotLight:
        return self._replace(direction=direction)

    def with_cone_angles(self, inner_angle: float, outer_angle: float) -> SpotLight:
        return self._replace(inner_angle=inner_angle, outer_angle=outer_angle)

    def _params(self) -> Dict[str, Any]:
        return {
            "position": self._position,
            "direction": self.direction,
            "color": self._color,
            "intensity": self._intensity,
            "inner_angle": self._inner_angle,
            "outer_angle": self._outer_angle,
            "constant": self.constant,
            "linear": self.linear,
            "quadratic": self.quadratic,
        }


class PulsatingPointLight(Light):
    """A point light whose colour, brightness and position oscillate over time.

    The elapsed time is advanced by ``update``; ``at_time`` gives a copy
    frozen at an explicit time instead.
    """

    kind = LightKind.PULSATING_POINT

    def __init__(
        self,
        position: Point3,
        color: Color,
        intensity: float = 1.0,
        pulse_speed: float = 2.0,
        movement_speed: float = 0.5,
        movement_amplitude: float = 0.3,
        constant: float = DEFAULT_ATTENUATION[0],
        linear: float = DEFAULT_ATTENUATION[1],
        quadratic: float = DEFAULT_ATTENUATION[2],
        time: float = 0.0
    ):
        self.initial_position = _require_position(position, "PulsatingPointLight")
        self.base_color = _require_color(color, "PulsatingPointLight")
        self.base_intensity = max(0.0, intensity)
        self.pulse_speed = max(0.0, pulse_speed)
        self.movement_speed = max(0.0, movement_speed)
        self.movement_amplitude = max(0.0, movement_amplitude)
        self.constant = max(0.0, constant)
        self.linear = max(0.0, linear)
        self.quadratic = max(0.0, quadratic)
        self.time = time

    def update(self, delta_time: float) -> None:
        self.time += delta_time

    def at_time(self, time: float) -> PulsatingPointLight:
        return self._replace(time=time)

    @property
    def position(self) -> Point3:
        t = self.time * self.movement_speed
        a = self.movement_amplitude
        return self.initial_position + Vec3(
            math.sin(t) * a,
            math.cos(t * 0.7) * a * 0.5,
            math.sin(t * 0.3) * a * 0.3
        )

    @property
    def color(self) -> Color:
        return self.base_color * (0.7 + 0.3 * math.sin(self.time * self.pulse_speed))

    @property
    def intensity(self) -> float:
        return self.base_intensity * (0.8 + 0.2 * math.sin(self.time * self.pulse_speed * 1.3))

    def direction_at(self, point: Point3) -> Vec3:
        return (self.position - point).normalize()

    def attenuated_intensity(self, point: Point3) -> float:
        distance = self.position.distance(point)
        flicker = 0.5 + 0.5 * math.sin(self.time * self.pulse_speed * 1.7)
        return self.intensity * flicker * attenuation_factor(
            distance, self.constant, self.linear, self.quadratic
        )

    def with_position(self, position: Point3) -> PulsatingPointLight:
        return self._replace(position=position)

    def with_pulse_speed(self, pulse_speed: float) -> PulsatingPointLight:
        return self._replace(pulse_speed=pulse_speed)

    def _params(self) -> Dict[str, Any]:
        return {
            "position": self.initial_position,
            "color": self.base_color,
            "intensity": self.base_intensity,
            "pulse_speed": self.pulse_speed,
            "movement_speed": self.movement_speed,
            "movement_amplitude": self.movement_amplitude,
            "constant": self.constant,
            "linear": self.linear,
            "quadratic": self.quadratic,
            "time": self.time,
        }


class BioluminescentLight(Light):
    """A cluster of glowing emitters that pulse together.

    Direction, distance and visibility are always taken against the emitter
    nearest to the shaded point.
    """

    kind = LightKind.BIOLUMINESCENT

    DEFAULT_COLOR = Color.from_rgb255(100, 255, 150)
    MIN_PULSE = 0.7
    PULSE_AMPLITUDE = 0.3

    def __init__(
        self,
        positions: Sequence[Point3],
        color: Optional[Color] = None,
        pulse_speed: float = 1.5,
        intensity: float = 0.8,
        attenuation: float = 0.2,
        time: float = 0.0
    ):
        if not positions:
            raise ValueError("BioluminescentLight requires at least one emitter position")
        self.positions = tuple(positions)
        self.base_color = color if color is not None else self.DEFAULT_COLOR
        self.pulse_speed = max(0.0, pulse_speed)
        self.base_intensity = max(0.0, intensity)
        self.attenuation = max(0.0, attenuation)
        self.time = time

    @classmethod
    def default(cls) -> BioluminescentLight:
        return cls([Vec3(0, 0, 0)], cls.DEFAULT_COLOR, 1.5)

    def update(self, delta_time: float) -> None:
        self.time += delta_time

    def at_time(self, time: float) -> BioluminescentLight:
        return self._replace(time=time)

    @property
    def position(self) -> Point3:
        """Reference position (the first emitter)."""
        return self.positions[0]

    def nearest_emitter(self, point: Point3) -> Point3:
        return min(self.positions, key=lambda p: p.distance(point))

    @property
    def color(self) -> Color:
        return self.base_color * (self.MIN_PULSE + self.PULSE_AMPLITUDE * math.sin(self.time * self.pulse_speed))

    @property
    def intensity(self) -> float:
        pulse = self.MIN_PULSE + self.PULSE_AMPLITUDE * math.sin(self.time * self.pulse_speed * 1.2)
        return self.base_intensity * pulse

    def direction_at(self, point: Point3) -> Vec3:
        return (self.nearest_emitter(point) - point).normalize()

    def attenuated_intensity(self, point: Point3) -> float:
        distance = self.nearest_emitter(point).distance(point)
        return self.intensity / (1.0 + self.attenuation * distance)

    def is_visible_from(self, point: Point3, occluder: Occluder) -> bool:
        return shadow_test(point, self.nearest_emitter(point), occluder)

    def with_positions(self, positions: Sequence[Point3]) -> BioluminescentLight:
        return self._replace(positions=positions)

    def with_pulse_speed(self, pulse_speed: float) -> BioluminescentLight:
        return self._replace(pulse_speed=pulse_speed)

    def _params(self) -> Dict[str, Any]:
        return {
            "positions": self.positions,
            "color": self.base_color,
            "pulse_speed": self.pulse_speed,
            "intensity": self.base_intensity,
            "attenuation": self.attenuation,
            "time": self.time,
        }


class BlackHoleLight(Light):
    """A stylized singularity: dark inside its event horizon, glowing outside.

    ``direction_at`` is scaled by a warp factor that grows near the horizon
    and is therefore not unit length.
    """

    kind = LightKind.BLACK_HOLE

    DEFAULT_COLOR = Color.from_rgb255(200, 150, 255)
    WARP_FACTOR = 2.0
    MIN_RADIUS = 0.1

    def __init__(
        self,
        singularity: Point3,
        radius: float = 1.0,
        color: Optional[Color] = None,
        intensity: float = 1.5
    ):
        if singularity is None:
            raise ValueError("BlackHoleLight requires a singularity point")
        self.singularity = singularity
        self.radius = max(self.MIN_RADIUS, radius)
        self._color = color if color is not None else self.DEFAULT_COLOR
        self._intensity = max(0.0, intensity)

    @property
    def position(self) -> Point3:
        return self.singularity

    @property
    def color(self) -> Color:
        return self._color

    @property
    def intensity(self) -> float:
        return self._intensity

    def is_point_inside_horizon(self, point: Point3) -> bool:
        return self.singularity.distance(point) < self.radius

    def direction_at(self, point: Point3) -> Vec3:
        to_light = self.singularity - point
        distance = to_light.length()
        if distance < EPSILON:
            return Vec3.zero()
        warp = self.WARP_FACTOR / (1.0 - math.exp(-distance / self.radius))
        return to_light.normalize() * warp

    def direction_to(self, point: Point3) -> Vec3:
        from_light = point - self.singularity
        if from_light.length() < EPSILON:
            return Vec3.zero()
        return from_light.normalize()

    def attenuated_intensity(self, point: Point3) -> float:
        distance = self.singularity.distance(point)
        if distance < self.radius:
            return 0.0
        return self._intensity * (1.0 - self.radius / distance)

    def is_visible_from(self, point: Point3, occluder: Occluder) -> bool:
        if self.is_point_inside_horizon(point):
            return False
        to_light = (self.singularity - point).normalize()
        shadow_ray = Ray(offset_point(point, to_light, SHADOW_OFFSET_SCALE), to_light)
        return not occluder.is_occluded(shadow_ray, math.inf)

    def with_singularity(self, singularity: Point3) -> BlackHoleLight:
        return self._replace(singularity=singularity)

    def with_radius(self, radius: float) -> BlackHoleLight:
        return self._replace(radius=radius)

    def _params(self) -> Dict[str, Any]:
        return {
            "singularity": self.singularity,
            "radius": self.radius,
            "color": self._color,
            "intensity": self._intensity,
        }


class FractalLight(Light):
    """A point light whose brightness is modulated by fractal noise at the shaded point."""

    kind = LightKind.FRACTAL

    DEFAULT_SEED = 1337

    def __init__(
        self,
        position: Point3,
        color: Color,
        intensity: float = 1.0,
        octaves: int = 4,
        persistence: float = 0.5,
        frequency: float = 0.1,
        seed: Optional[int] = DEFAULT_SEED
    ):
        self._position = _require_position(position, "FractalLight")
        self._color = _require_color(color, "FractalLight")
        self._intensity = max(0.0, intensity)
        self.octaves = max(1, int(octaves))
        self.persistence = max(0.0, min(1.0, persistence))
        self.frequency = max(0.001, frequency)
        self.seed = seed
        self._noise = PerlinNoise(seed)

    @property
    def position(self) -> Point3:
        return self._position

    @property
    def color(self) -> Color:
        return self._color

    @property
    def intensity(self) -> float:
        return self._intensity

    def direction_at(self, point: Point3) -> Vec3:
        return (self._position - point).normalize()

    def fractal_noise(self, point: Point3) -> float:
        """Fractal noise in [0, 1] at ``point``."""
        return self._noise.turbulence01(point, self.octaves, self.persistence, self.frequency)

    def attenuated_intensity(self, point: Point3) -> float:
        return self._intensity * (0.3 + 0.7 * self.fractal_noise(point))

    def with_position(self, position: Point3) -> FractalLight:
        return self._replace(position=position)

    def with_octaves(self, octaves: int) -> FractalLight:
        return self._replace(octaves=octaves)

    def _params(self) -> Dict[str, Any]:
        return {
            "position": self._position,
            "color": self._color,
            "intensity": self._intensity,
            "octaves": self.octaves,
            "persistence": self.persistence,
            "frequency": self.frequency,
            "seed": self.seed,
        }
