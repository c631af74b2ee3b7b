"""
Material definitions for the ray tracer.

Implements:
- The ``Material`` base class shared by every surface shader
- Classical materials: Lambert, Phong, checkerboard, dielectric/glass,
  emissive and mirror

Physically based materials live in ``prismforge.pbr``.

A material turns (point, normal, light, viewer) into the colour that one light
contributes at that point. Materials are immutable; the ``with_*`` methods
return modified copies.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
import math
from typing import Any, Dict, Optional

from .vec3 import Vec3, Point3
from .color import Color
from .matrix import Matrix4
from .lights import Light, LightKind
from .light_properties import get_light_sample
from .noise import point_seed
from .shading import clamp, f0_from_ior, fresnel_schlick, jitter_reflection, phong


class MaterialType(Enum):
    """Broad family a material belongs to."""
    METAL = "metal"
    DIELECTRIC = "dielectric"
    PLASTIC = "plastic"
    EMISSIVE = "emissive"
    TRANSPARENT = "transparent"
    ANISOTROPIC = "anisotropic"


class Material(ABC):
    """Abstract base class for materials.

    Common parameters are clamped on construction: roughness, metalness,
    reflectivity and transparency to [0, 1], ior to >= 1.
    """

    material_type = MaterialType.PLASTIC

    # Rough surfaces blur their reflection ray when True
    blur_reflections = False

    def __init__(
        self,
        albedo: Optional[Color] = None,
        roughness: float = 0.5,
        metalness: float = 0.0,
        reflectivity: float = 0.0,
        ior: float = 1.0,
        transparency: float = 0.0
    ):
        self.albedo = albedo if albedo is not None else Color(0.8, 0.8, 0.8)
        self.roughness = clamp(roughness)
        self.metalness = clamp(metalness)
        self.reflectivity = clamp(reflectivity)
        self.ior = max(1.0, ior)
        self.transparency = clamp(transparency)
        self._object_to_world = Matrix4.identity()
        self._world_to_object = Matrix4.identity()

    @abstractmethod
    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        """Colour contributed by one light at a surface point.

        Args:
            point: World-space hit point
            normal: Unit surface normal facing the viewer
            light: The light being evaluated
            viewer: Position of the eye (or the origin of the incoming ray)
            time: Scene time for animated materials

        Returns:
            The clamped colour contribution
        """
        pass

    def emitted(self) -> Optional[Color]:
        """Self-emitted colour, or None for surfaces that only reflect light."""
        return None

    @property
    def is_reflective(self) -> bool:
        return self.reflectivity > 0.0

    @property
    def is_transparent(self) -> bool:
        return self.transparency > 0.0

    @property
    def refraction_tint(self) -> Color:
        """Filter applied to light passing through the material."""
        return Color.white()

    def fresnel(self, cos_theta: float) -> float:
        """Schlick reflectance for a ray hitting the surface at ``cos_theta``."""
        return fresnel_schlick(cos_theta, f0_from_ior(self.ior))

    def reflection_direction(self, incident: Vec3, normal: Vec3, point: Point3) -> Vec3:
        """Direction of the secondary reflection ray.

        Mirror reflection, blurred by roughness for materials that opt in.
        """
        reflected = incident.reflect(normal).normalize()
        if not self.blur_reflections or self.roughness <= 0.0:
            return reflected
        jittered = jitter_reflection(reflected, self.roughness, point_seed(point))
        # Keep the blurred ray above the surface
        if jittered.dot(normal) <= 0.0:
            return reflected
        return jittered

    def set_object_transform(self, object_to_world: Matrix4) -> None:
        """Receive the owning primitive's placement once, at attachment time."""
        if object_to_world is None:
            object_to_world = Matrix4.identity()
        self._object_to_world = object_to_world
        self._world_to_object = object_to_world.inverse()

    @property
    def object_transform(self) -> Matrix4:
        return self._object_to_world

    def to_object_space(self, point: Point3) -> Point3:
        return self._world_to_object.transform_point(point)

    def normal_to_object_space(self, normal: Vec3) -> Vec3:
        return self._world_to_object.transform_vector(normal).normalize()

    def _params(self) -> Dict[str, Any]:
        """Constructor arguments reproducing this material."""
        return {
            "albedo": self.albedo,
            "roughness": self.roughness,
            "metalness": self.metalness,
            "reflectivity": self.reflectivity,
            "ior": self.ior,
            "transparency": self.transparency,
        }

    def derive(self, **changes: Any) -> Material:
        """Copy of this material with some constructor parameters replaced.

        Raises:
            ValueError: If a change names a parameter the material does not have
        """
        params = self._params()
        unknown = set(changes) - set(params)
        if unknown:
            raise ValueError(f"{type(self).__name__} has no parameter(s): {', '.join(sorted(unknown))}")
        params.update(changes)
        derived = type(self)(**params)
        derived.set_object_transform(self._object_to_world)
        return derived

    def with_albedo(self, albedo: Color) -> Material:
        return self.derive(albedo=albedo)

    def with_roughness(self, roughness: float) -> Material:
        return self.derive(roughness=roughness)

    def with_metalness(self, metalness: float) -> Material:
        return self.derive(metalness=metalness)

    def with_reflectivity(self, reflectivity: float) -> Material:
        return self.derive(reflectivity=reflectivity)

    def with_ior(self, ior: float) -> Material:
        return self.derive(ior=ior)

    def with_transparency(self, transparency: float) -> Material:
        return self.derive(transparency=transparency)

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self._params().items())
        return f"{type(self).__name__}({args})"


class LambertMaterial(Material):
    """Pure diffuse surface: albedo * light colour * intensity * max(N.L, 0)."""

    def __init__(self, albedo: Optional[Color] = None, **kwargs: Any):
        kwargs.setdefault("roughness", 1.0)
        super().__init__(albedo, **kwargs)

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        sample = get_light_sample(light, point)
        if not sample.is_directional:
            return self.albedo * sample.color * sample.intensity
        n_dot_l = max(normal.dot(sample.direction), 0.0)
        return self.albedo * sample.color * (sample.intensity * n_dot_l)


class PhongMaterial(Material):
    """Phong reflection model with ambient, diffuse and specular terms."""

    def __init__(
        self,
        albedo: Optional[Color] = None,
        specular_color: Optional[Color] = None,
        shininess: float = 32.0,
        ambient_coefficient: float = 0.1,
        diffuse_coefficient: float = 0.7,
        specular_coefficient: float = 0.7,
        **kwargs: Any
    ):
        super().__init__(albedo, **kwargs)
        self.specular_color = specular_color if specular_color is not None else Color.white()
        self.shininess = max(1.0, shininess)
        self.ambient_coefficient = max(0.0, ambient_coefficient)
        self.diffuse_coefficient = max(0.0, diffuse_coefficient)
        self.specular_coefficient = max(0.0, specular_coefficient)

    def _base_color(self, point: Point3, normal: Vec3) -> Color:
        return self.albedo

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        base = self._base_color(point, normal)
        sample = get_light_sample(light, point)

        if light is not None and light.kind is LightKind.AMBIENT:
            return base * sample.color * self.ambient_coefficient
        if not sample.is_directional:
            return Color.black()

        n_dot_l = max(normal.dot(sample.direction), 0.0)
        diffuse = base * sample.color * (self.diffuse_coefficient * n_dot_l * sample.intensity)

        view_dir = (viewer - point).normalize()
        spec = phong(normal, sample.direction, view_dir, self.shininess)
        specular = self.specular_color * sample.color * (self.specular_coefficient * spec * sample.intensity)

        return diffuse + specular

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(
            specular_color=self.specular_color,
            shininess=self.shininess,
            ambient_coefficient=self.ambient_coefficient,
            diffuse_coefficient=self.diffuse_coefficient,
            specular_coefficient=self.specular_coefficient,
        )
        return params


class CheckerboardMaterial(PhongMaterial):
    """Two-colour checker pattern in object space, Phong lit.

    The pattern is laid out on the object-space plane most aligned with the
    surface, so it works on floors, walls and spheres alike.
    """

    def __init__(
        self,
        albedo: Optional[Color] = None,
        secondary: Optional[Color] = None,
        scale: float = 1.0,
        **kwargs: Any
    ):
        kwargs.setdefault("shininess", 50.0)
        kwargs.setdefault("specular_coefficient", 0.8)
        super().__init__(albedo if albedo is not None else Color.white(), **kwargs)
        self.secondary = secondary if secondary is not None else Color.black()
        self.scale = scale

    def pattern_color(self, point: Point3, normal: Vec3) -> Color:
        local = self.to_object_space(point)
        local_normal = self.normal_to_object_space(normal)
        ax, ay, az = abs(local_normal.x), abs(local_normal.y), abs(local_normal.z)
        if ax > ay and ax > az:
            u, v = local.y, local.z
        elif ay > ax and ay > az:
            u, v = local.x, local.z
        else:
            u, v = local.x, local.y
        # Nudge off the exact cell boundaries
        u = u * self.scale + 1e-4
        v = v * self.scale + 1e-4
        return self.albedo if (math.floor(u) + math.floor(v)) % 2 == 0 else self.secondary

    def _base_color(self, point: Point3, normal: Vec3) -> Color:
        return self.pattern_color(point, normal)

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(secondary=self.secondary, scale=self.scale)
        return params


class DielectricMaterial(Material):
    """Transparent, refracting material such as glass or water.

    The tracer blends reflection and refraction with the Fresnel term; the
    direct term here is a faint diffuse plus a sharp highlight.
    """

    material_type = MaterialType.DIELECTRIC

    def __init__(
        self,
        albedo: Optional[Color] = None,
        tint: Optional[Color] = None,
        **kwargs: Any
    ):
        kwargs.setdefault("roughness", 0.0)
        kwargs.setdefault("reflectivity", 0.1)
        kwargs.setdefault("ior", 1.5)
        kwargs.setdefault("transparency", 0.8)
        super().__init__(albedo if albedo is not None else Color(0.9, 0.9, 0.9), **kwargs)
        self.tint = tint if tint is not None else Color.white()

    @property
    def refraction_tint(self) -> Color:
        return self.tint

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        sample = get_light_sample(light, point)
        opacity = 1.0 - self.transparency
        if not sample.is_directional:
            return self.albedo * sample.color * (sample.intensity * opacity)

        n_dot_l = max(normal.dot(sample.direction), 0.0)
        diffuse = self.albedo * sample.color * (n_dot_l * sample.intensity * opacity)

        view_dir = (viewer - point).normalize()
        highlight = phong(normal, sample.direction, view_dir, 32.0)
        specular = sample.color * (highlight * 0.5 * sample.intensity)
        return diffuse + specular

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params["tint"] = self.tint
        return params


class GlassMaterial(DielectricMaterial):
    """Clear glass: ior 1.5, nearly fully transparent."""

    def __init__(self, tint: Optional[Color] = None, **kwargs: Any):
        kwargs.setdefault("transparency", 0.95)
        kwargs.setdefault("reflectivity", 0.05)
        kwargs.setdefault("ior", 1.5)
        super().__init__(tint=tint, **kwargs)


class EmissiveMaterial(Material):
    """A surface that glows with its own colour and ignores lights."""

    material_type = MaterialType.EMISSIVE

    def __init__(self, albedo: Optional[Color] = None, strength: float = 1.0, **kwargs: Any):
        super().__init__(albedo if albedo is not None else Color.white(), **kwargs)
        self.strength = max(0.0, strength)

    def emitted(self) -> Color:
        return self.albedo * self.strength

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        return self.emitted()

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params["strength"] = self.strength
        return params


class MirrorMaterial(Material):
    """Almost perfect mirror; nearly all colour comes from the reflection ray."""

    material_type = MaterialType.METAL

    def __init__(self, albedo: Optional[Color] = None, **kwargs: Any):
        kwargs.setdefault("roughness", 0.0)
        kwargs.setdefault("metalness", 1.0)
        kwargs.setdefault("reflectivity", 0.95)
        super().__init__(albedo if albedo is not None else Color.white(), **kwargs)

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        sample = get_light_sample(light, point)
        weight = 1.0 - self.reflectivity
        if not sample.is_directional:
            return self.albedo * sample.color * (sample.intensity * weight)
        n_dot_l = max(normal.dot(sample.direction), 0.0)
        return self.albedo * sample.color * (sample.intensity * n_dot_l * weight)
