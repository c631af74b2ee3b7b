"""
Physically based materials.

Implements:
- PBRMaterial: metallic-roughness Cook-Torrance (GGX + Smith + Fresnel-Schlick)
- MetalPBRMaterial: high-F0 metals with gold, silver, copper and chrome presets
- PlasticPBRMaterial: dielectric plastic with a Blinn-Phong lobe
- CeramicTilePBRMaterial: glossy tiles separated by matte grout
- WaterPBRMaterial: animated waves, foam and murky depth
- HolographicPBRMaterial: hue cycling, scan lines, glitches, anisotropic sheen
- MarblePBRMaterial: turbulence veins
- WoodPBRMaterial: two-tone planks with grain

The brightness and contrast multipliers below are artistic tuning values for
this look, not physical constants.
"""

from __future__ import annotations
import math
from typing import Any, Dict, Optional, Tuple

from .vec3 import Vec3, Point3
from .color import Color
from .lights import Light, LightKind
from .light_properties import light_response
from .materials import Material, MaterialType
from .noise import DEFAULT_NOISE, hash01
from .shading import (
    blinn_phong,
    clamp,
    cook_torrance_specular,
    f0_from_ior,
    fresnel_schlick,
    ggx_distribution,
    half_vector,
)

# Metal tuning
METAL_F0_MIN = 0.8
METAL_F0_MAX = 0.98
METAL_SPECULAR_BOOST = 3.0
METAL_DIFFUSE_BOOST = 1.2
METAL_AMBIENT = 0.15
METAL_INTENSITY_BOOST = 1.1
METAL_CONTRAST = 1.2

# Plastic tuning
PLASTIC_AMBIENT_RESPONSE = 0.05
PLASTIC_SHININESS_SCALE = 128.0
PLASTIC_SPECULAR_BOOST = 1.5

# Ceramic tuning
CERAMIC_SATURATION = 1.2
CERAMIC_TILE_AMBIENT = 0.2
CERAMIC_GROUT_AMBIENT = 0.3
CERAMIC_CONTRAST = 1.1
CERAMIC_GAMMA = 0.8

# Water tuning
WATER_IOR = 1.33
WATER_REFLECTION_BOOST = 2.0
WATER_FOAM_BRIGHTNESS = 0.8

# Marble tuning
MARBLE_MIN_DIFFUSE = 0.4
MARBLE_DIFFUSE_BOOST = 1.3
MARBLE_SPECULAR_BOOST = 1.5

# Wood tuning
WOOD_MIN_DIFFUSE = 0.5
WOOD_SHININESS = 50.0
WOOD_SPECULAR_WEIGHT = 0.8


def _is_ambient(light: Optional[Light]) -> bool:
    return light is not None and light.kind is LightKind.AMBIENT


def _direct(light: Optional[Light], point: Point3) -> Optional[Tuple[Vec3, float]]:
    """Direction toward and intensity of a non-ambient light, or None."""
    if light is None:
        return None
    return light_response(light, point)


class PBRMaterial(Material):
    """Physically Based Rendering material using the Cook-Torrance BRDF.

    Metallic-roughness parameterization with GGX/Trowbridge-Reitz
    distribution, Smith geometry and Fresnel-Schlick. Rough surfaces also
    blur their reflection rays.
    """

    blur_reflections = True

    def __init__(self, albedo: Optional[Color] = None, **kwargs: Any):
        kwargs.setdefault("ior", 1.5)
        super().__init__(albedo, **kwargs)
        if self.metalness >= 0.5:
            self.material_type = MaterialType.METAL

    @property
    def f0(self) -> float:
        """Normal-incidence reflectance, from ior for dielectrics and albedo for metals."""
        dielectric = f0_from_ior(self.ior)
        metal = max(self.albedo.r, self.albedo.g, self.albedo.b)
        return dielectric + (metal - dielectric) * self.metalness

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        if _is_ambient(light):
            return self.albedo * light.color * light.intensity

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        n_dot_l = max(normal.dot(direction), 0.0)
        if n_dot_l <= 0.0 or intensity <= 0.0:
            return Color.black()

        view_dir = (viewer - point).normalize()
        diffuse = self.albedo * light.color * ((1.0 - self.metalness) * n_dot_l * intensity)

        spec = cook_torrance_specular(normal, direction, view_dir, self.roughness, self.f0)
        spec_tint = Color.white().lerp(self.albedo, self.metalness)
        specular = spec_tint * light.color * (spec * n_dot_l * intensity)

        return diffuse + specular


class MetalPBRMaterial(PBRMaterial):
    """Polished or brushed metal with a strong, albedo-tinted highlight."""

    material_type = MaterialType.METAL

    GOLD = Color.from_rgb255(255, 215, 0)
    SILVER = Color.from_rgb255(192, 192, 192)
    COPPER = Color.from_rgb255(184, 115, 51)
    CHROME = Color.from_rgb255(220, 230, 240)

    def __init__(self, albedo: Optional[Color] = None, **kwargs: Any):
        kwargs.setdefault("roughness", 0.2)
        kwargs.setdefault("metalness", 1.0)
        kwargs.setdefault("reflectivity", 0.9 * clamp(kwargs["metalness"]))
        kwargs.setdefault("ior", 1.0)
        super().__init__(albedo if albedo is not None else self.GOLD, **kwargs)
        self.material_type = MaterialType.METAL

    @classmethod
    def gold(cls, roughness: float = 0.2) -> MetalPBRMaterial:
        return cls(cls.GOLD, roughness=roughness)

    @classmethod
    def silver(cls, roughness: float = 0.15) -> MetalPBRMaterial:
        return cls(cls.SILVER, roughness=roughness)

    @classmethod
    def copper(cls, roughness: float = 0.25) -> MetalPBRMaterial:
        return cls(cls.COPPER, roughness=roughness)

    @classmethod
    def chrome(cls, roughness: float = 0.02) -> MetalPBRMaterial:
        return cls(cls.CHROME, roughness=roughness, reflectivity=0.95)

    @property
    def f0(self) -> float:
        return METAL_F0_MIN + (METAL_F0_MAX - METAL_F0_MIN) * self.metalness

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        if _is_ambient(light):
            ambient = self.albedo.lerp(Color.white(), 0.2)
            return ambient * light.color * (METAL_AMBIENT * (1.0 + self.metalness) * light.intensity)

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        view_dir = (viewer - point).normalize()
        cos_theta = max(0.001, normal.dot(view_dir))
        fresnel = fresnel_schlick(cos_theta, self.f0)

        exponent = 16.0 + 64.0 * (1.0 - self.roughness)
        highlight = blinn_phong(normal, direction, view_dir, exponent) * (1.0 + 2.0 * self.metalness)
        metallic = self.albedo * (highlight * fresnel * METAL_SPECULAR_BOOST)

        diffuse_factor = max(0.1, normal.dot(direction)) * (1.0 - 0.8 * self.metalness)
        diffuse = self.albedo.gamma_correct(0.8) * (diffuse_factor * METAL_DIFFUSE_BOOST)

        lit = (diffuse + metallic) * light.color * (intensity * METAL_INTENSITY_BOOST)
        return lit.adjust_contrast(METAL_CONTRAST)


class PlasticPBRMaterial(PBRMaterial):
    """Non-metallic plastic: Lambert diffuse plus a Fresnel-weighted Blinn-Phong lobe.

    Ambient lights get only a fixed 5% albedo response.
    """

    material_type = MaterialType.PLASTIC

    def __init__(self, albedo: Optional[Color] = None, **kwargs: Any):
        kwargs.setdefault("roughness", 0.3)
        kwargs.setdefault("reflectivity", 0.04)
        kwargs.setdefault("ior", 1.5)
        kwargs["metalness"] = 0.0
        super().__init__(albedo if albedo is not None else Color(0.1, 0.2, 0.8), **kwargs)

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        if _is_ambient(light):
            return self.albedo * PLASTIC_AMBIENT_RESPONSE

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response
        if intensity <= 0.0:
            return Color.black()

        view_dir = (viewer - point).normalize()
        n_dot_l = max(0.0, normal.dot(direction))
        diffuse = self.albedo * light.color * (n_dot_l * intensity)

        shininess = PLASTIC_SHININESS_SCALE / max(0.001, self.roughness * self.roughness)
        highlight = blinn_phong(normal, direction, view_dir, shininess)
        fresnel = fresnel_schlick(max(0.0, view_dir.dot(normal)), f0_from_ior(self.ior))
        specular = light.color * (highlight * fresnel * intensity * PLASTIC_SPECULAR_BOOST)

        return diffuse + specular


class CeramicTilePBRMaterial(PBRMaterial):
    """Glossy ceramic tiles laid on the object-space x/z plane with matte grout lines."""

    material_type = MaterialType.DIELECTRIC
    blur_reflections = False

    TILE_COLOR = Color.from_rgb255(245, 245, 255)
    GROUT_COLOR = Color.from_rgb255(70, 70, 80)

    def __init__(
        self,
        albedo: Optional[Color] = None,
        grout_color: Optional[Color] = None,
        tile_size: float = 0.6,
        grout_width: float = 0.03,
        tile_roughness: float = 0.1,
        grout_roughness: float = 0.6,
        tile_specular: float = 0.5,
        grout_specular: float = 0.3,
        fresnel_intensity: float = 0.9,
        micro_facet: float = 0.02,
        reflection_sharpness: float = 0.95,
        **kwargs: Any
    ):
        self.grout_color = grout_color if grout_color is not None else self.GROUT_COLOR
        self.tile_size = max(0.1, tile_size)
        self.grout_width = clamp(grout_width, 0.01, 0.1)
        self.tile_roughness = clamp(tile_roughness, 0.01, 1.0)
        self.grout_roughness = clamp(grout_roughness, 0.01, 1.0)
        self.tile_specular = clamp(tile_specular)
        self.grout_specular = clamp(grout_specular)
        self.fresnel_intensity = clamp(fresnel_intensity)
        self.micro_facet = clamp(micro_facet, 0.0, 0.1)
        self.reflection_sharpness = clamp(reflection_sharpness, 0.5, 1.0)

        kwargs.setdefault("roughness", (self.tile_roughness + self.grout_roughness) / 2.0)
        kwargs.setdefault("reflectivity", 0.4 * self.fresnel_intensity)
        kwargs.setdefault("ior", 1.52)
        kwargs["metalness"] = 0.0
        super().__init__(albedo if albedo is not None else self.TILE_COLOR, **kwargs)
        self.material_type = MaterialType.DIELECTRIC

    def is_grout(self, point: Point3) -> bool:
        """True if the world point falls on a grout line."""
        local = self.to_object_space(point)
        u = (local.x % self.tile_size) / self.tile_size
        v = (local.z % self.tile_size) / self.tile_size
        edge = self.grout_width / self.tile_size
        return u < edge or u > 1.0 - edge or v < edge or v > 1.0 - edge

    def _perturb_normal(self, normal: Vec3, point: Point3) -> Vec3:
        if self.micro_facet <= 0.0:
            return normal
        ripple = math.sin(point.x * 10.0) * math.cos(point.z * 10.0) * 0.01
        perturbation = Vec3(
            ripple * self.micro_facet,
            (1.0 - abs(ripple)) * self.micro_facet,
            ripple * self.micro_facet * 0.5
        )
        return (normal + perturbation).normalize()

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        grout = self.is_grout(point)
        if grout:
            base, roughness, spec_strength = self.grout_color, self.grout_roughness, self.grout_specular
        else:
            base = self.albedo.adjust_saturation(CERAMIC_SATURATION)
            roughness, spec_strength = self.tile_roughness, self.tile_specular

        if _is_ambient(light):
            ambient = CERAMIC_GROUT_AMBIENT if grout else CERAMIC_TILE_AMBIENT
            return base * light.color * (ambient * light.intensity)

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        view_dir = (viewer - point).normalize()
        cos_theta = max(0.001, normal.dot(view_dir))
        fresnel = self.fresnel_intensity * fresnel_schlick(cos_theta, 0.04)

        perturbed = self._perturb_normal(normal, point)
        n_dot_l = max(0.0, perturbed.dot(direction))
        diffuse = base * light.color * (n_dot_l * intensity)

        reflected = (-direction).reflect(perturbed)
        r_dot_v = max(0.0, reflected.dot(view_dir))
        power = (1.0 - roughness * self.reflection_sharpness) * 256.0 + 1.0
        specular = spec_strength * fresnel * r_dot_v ** power * intensity

        lit = diffuse + light.color * specular
        return lit.adjust_contrast(CERAMIC_CONTRAST).gamma_correct(CERAMIC_GAMMA)

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(
            grout_color=self.grout_color,
            tile_size=self.tile_size,
            grout_width=self.grout_width,
            tile_roughness=self.tile_roughness,
            grout_roughness=self.grout_roughness,
            tile_specular=self.tile_specular,
            grout_specular=self.grout_specular,
            fresnel_intensity=self.fresnel_intensity,
            micro_facet=self.micro_facet,
            reflection_sharpness=self.reflection_sharpness,
        )
        return params


class WaterPBRMaterial(PBRMaterial):
    """Animated water surface.

    Waves perturb the normal as a function of position and the scene time
    passed to ``shade``; crests above ``foam_threshold`` turn white.
    """

    material_type = MaterialType.TRANSPARENT

    OCEAN_BLUE = Color.from_rgb255(10, 90, 130)
    TROPICAL_TEAL = Color.from_rgb255(0, 180, 200)
    MURKY_RIVER = Color.from_rgb255(70, 100, 80)

    def __init__(
        self,
        albedo: Optional[Color] = None,
        wave_intensity: float = 0.3,
        murkiness: float = 0.1,
        foam_threshold: float = 0.7,
        **kwargs: Any
    ):
        self.wave_intensity = clamp(wave_intensity)
        self.murkiness = clamp(murkiness)
        self.foam_threshold = clamp(foam_threshold, 0.5, 1.0)
        kwargs["roughness"] = clamp(kwargs.get("roughness", 0.05), 0.001, 0.5)
        kwargs.setdefault("reflectivity", 0.9)
        kwargs.setdefault("ior", WATER_IOR)
        kwargs.setdefault("transparency", 0.8 - 0.3 * self.murkiness)
        kwargs["metalness"] = 0.0
        super().__init__(albedo if albedo is not None else self.OCEAN_BLUE, **kwargs)
        self.material_type = MaterialType.TRANSPARENT

    @classmethod
    def tropical(cls) -> WaterPBRMaterial:
        return cls(cls.TROPICAL_TEAL)

    @classmethod
    def stormy(cls) -> WaterPBRMaterial:
        return cls(cls.OCEAN_BLUE, wave_intensity=0.8, roughness=0.2)

    def wave_normal(self, point: Point3, normal: Vec3, time: float) -> Vec3:
        dx = 0.5 * math.cos(point.x * 0.5 + point.z * 0.3 + time * 1.5) * self.wave_intensity
        dz = 0.3 * math.sin(point.x * 0.3 - point.z * 0.4 + time * 2.0) * self.wave_intensity
        return Vec3(normal.x - dx, normal.y, normal.z - dz).normalize()

    def foam(self, point: Point3, time: float) -> float:
        """Foam amount in [0, 1] at a wave crest."""
        crest = math.sin(point.x * 2.0 + time * 3.0) * math.cos(point.z * 1.5 + time * 2.5) * self.wave_intensity
        if crest <= self.foam_threshold:
            return 0.0
        return (crest - self.foam_threshold) / (1.0 - self.foam_threshold)

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        body = self.albedo * (1.0 - self.murkiness * 0.7)
        if _is_ambient(light):
            return body * light.color * light.intensity

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        wave = self.wave_normal(point, normal, time)
        view_dir = (viewer - point).normalize()
        n_dot_v = max(0.001, wave.dot(view_dir))
        f0 = f0_from_ior(WATER_IOR)
        fresnel = fresnel_schlick(n_dot_v, f0)

        n_dot_l = max(0.0, wave.dot(direction))
        h = half_vector(direction, view_dir)
        n_dot_h = wave.dot(h)
        highlight = ggx_distribution(n_dot_h, self.roughness) * fresnel_schlick(n_dot_h, f0)

        lit = body * light.color * (n_dot_l * intensity)
        lit = lit + light.color * (highlight * n_dot_l * intensity)
        lit = lit + Color.white() * (fresnel * WATER_REFLECTION_BOOST)
        lit = lit + Color.white() * (self.foam(point, time) * WATER_FOAM_BRIGHTNESS)

        depth = clamp(-point.y * 0.5)
        return lit + self.albedo * (depth * self.murkiness)

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(
            wave_intensity=self.wave_intensity,
            murkiness=self.murkiness,
            foam_threshold=self.foam_threshold,
        )
        return params


class HolographicPBRMaterial(PBRMaterial):
    """Animated hologram.

    Colour is a hue cycle over position and time, masked by scan lines,
    sprinkled with hash noise and data packets, occasionally glitched and
    topped with an anisotropic sheen. Every random choice is a hash of
    position and time, so one frame always renders the same.
    """

    material_type = MaterialType.ANISOTROPIC
    blur_reflections = False

    BASE_COLOR = Color.from_rgb255(80, 255, 255)

    def __init__(
        self,
        albedo: Optional[Color] = None,
        rainbow_speed: float = 2.5,
        scanline_density: float = 25.0,
        glitch_intensity: float = 0.3,
        time_offset: float = 0.0,
        distortion: float = 0.5,
        data_density: float = 10.0,
        **kwargs: Any
    ):
        self.rainbow_speed = rainbow_speed
        self.scanline_density = scanline_density
        self.glitch_intensity = clamp(glitch_intensity)
        self.time_offset = time_offset
        self.distortion = distortion
        self.data_density = clamp(data_density, 0.0, 100.0)
        kwargs.setdefault("roughness", 0.15)
        kwargs.setdefault("metalness", 0.7)
        kwargs.setdefault("reflectivity", 0.85)
        kwargs.setdefault("ior", 1.15)
        kwargs.setdefault("transparency", 0.4)
        super().__init__(albedo if albedo is not None else self.BASE_COLOR, **kwargs)
        self.material_type = MaterialType.ANISOTROPIC

    @classmethod
    def cyberpunk(cls) -> HolographicPBRMaterial:
        return cls(rainbow_speed=3.5, scanline_density=30.0, glitch_intensity=0.7)

    @classmethod
    def matrix(cls) -> HolographicPBRMaterial:
        return cls(Color.from_rgb255(0, 255, 0), data_density=20.0)

    def _distort(self, p: Point3, t: float) -> Point3:
        return Vec3(
            p.x + math.sin(p.y * 0.5 + t) * self.distortion * 0.1,
            p.y + math.cos(p.x * 0.3 + t * 1.3) * self.distortion * 0.1,
            p.z
        )

    def spectral_color(self, p: Point3, t: float) -> Color:
        hue = (p.x * self.rainbow_speed + t) % 1.0
        saturation = 0.7 + math.sin(p.y * 3.0 + t) * 0.2
        brightness = 0.8 + math.cos(p.z * 4.0 - t * 2.0) * 0.1
        return Color.from_hsb(hue, saturation, brightness).lerp(self.albedo, 0.3)

    def scan_lines(self, p: Point3, t: float) -> float:
        vertical = math.sin(p.y * self.scanline_density + t) * 0.4 + 0.6
        horizontal = math.sin(p.x * self.scanline_density * 0.3 + t * 0.7) ** 2
        return vertical * horizontal

    def _quantum_noise(self, p: Point3, t: float) -> float:
        return hash01(p.x * 1000.0 + p.y * 100.0 + p.z * 10.0 + t) * 0.2

    def _data_packet(self, p: Point3, t: float) -> Color:
        if hash01(p.z * 1000.0 + t) > 1.0 - self.data_density * 0.01:
            return Color(0.0, 0.3 + hash01(p.x * 100.0) * 0.7, 0.0)
        return Color.black()

    def glitch(self, base: Color, p: Point3, t: float) -> Color:
        """Occasionally invert or rotate the channels of ``base``."""
        if hash01(p.x * 500.0 + p.y * 300.0 + t) < self.glitch_intensity * 0.1:
            return base.invert()
        if hash01(p.y * 400.0 + p.z * 200.0 + t * 2.0) < self.glitch_intensity * 0.05:
            return base.rotate_channels()
        return base

    def _anisotropic_specular(self, p: Point3, light_dir: Vec3, view_dir: Vec3, t: float) -> float:
        h = half_vector(light_dir, view_dir)
        tangent = Vec3(math.sin(p.y * 10.0 + t), 0.0, math.cos(p.y * 10.0 + t)).normalize()
        t_dot_h = tangent.dot(h)
        return (1.0 - t_dot_h * t_dot_h) ** 10 * 2.0

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        t = time + self.time_offset
        distorted = self._distort(point, t)
        body = self.glitch(self.spectral_color(distorted, t), point, t)
        mask = self.scan_lines(distorted, t) + self._quantum_noise(distorted, t)

        if _is_ambient(light):
            return body * (mask * light.intensity)

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        view_dir = (viewer - point).normalize()
        sheen = self._anisotropic_specular(point, direction, view_dir, t) * min(1.0, intensity)
        return body * mask + self._data_packet(distorted, t) + Color.white() * sheen

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(
            rainbow_speed=self.rainbow_speed,
            scanline_density=self.scanline_density,
            glitch_intensity=self.glitch_intensity,
            time_offset=self.time_offset,
            distortion=self.distortion,
            data_density=self.data_density,
        )
        return params


class MarblePBRMaterial(PBRMaterial):
    """Polished marble with turbulent veins and a GGX highlight."""

    material_type = MaterialType.DIELECTRIC

    BASE_COLOR = Color.from_rgb255(230, 226, 220)
    VEIN_COLOR = Color.from_rgb255(100, 100, 100)

    def __init__(
        self,
        albedo: Optional[Color] = None,
        vein_color: Optional[Color] = None,
        vein_scale: float = 15.0,
        vein_contrast: float = 0.7,
        vein_intensity: float = 1.0,
        **kwargs: Any
    ):
        self.vein_color = vein_color if vein_color is not None else self.VEIN_COLOR
        self.vein_scale = max(1.0, vein_scale)
        self.vein_contrast = clamp(vein_contrast, 0.1, 1.0)
        self.vein_intensity = clamp(vein_intensity, 0.5, 2.0)
        kwargs["roughness"] = clamp(kwargs.get("roughness", 0.3), 0.01, 1.0)
        kwargs.setdefault("reflectivity", 0.1)
        kwargs.setdefault("ior", 1.5)
        kwargs["metalness"] = 0.0
        super().__init__(albedo if albedo is not None else self.BASE_COLOR, **kwargs)
        self.material_type = MaterialType.DIELECTRIC

    def with_vein_intensity(self, vein_intensity: float) -> MarblePBRMaterial:
        return self.derive(vein_intensity=vein_intensity)

    def veins(self, point: Point3) -> float:
        """Vein weight at a world point, before the 0.9 blend cap."""
        local = self.to_object_space(point)
        scaled = Vec3(local.x * self.vein_scale, local.y * self.vein_scale, local.z * self.vein_scale * 0.5)
        n = DEFAULT_NOISE.turbulence(scaled, 4)
        wave = math.sin(n * math.pi * 3.0) * 0.5 + 0.5
        return wave ** (self.vein_contrast * 10.0) * self.vein_intensity

    def marble_color(self, point: Point3) -> Color:
        return self.albedo.gamma_correct(0.9).lerp(self.vein_color.gamma_correct(0.8), min(0.9, self.veins(point)))

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        color = self.marble_color(point)
        if _is_ambient(light):
            return color * light.color * light.intensity

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        n_dot_l = max(MARBLE_MIN_DIFFUSE, normal.dot(direction))
        diffuse = color * light.color * (n_dot_l * MARBLE_DIFFUSE_BOOST * intensity)

        view_dir = (viewer - point).normalize()
        n_dot_h = max(0.0, normal.dot(half_vector(direction, view_dir)))
        spec = ggx_distribution(n_dot_h, self.roughness) * self.reflectivity * MARBLE_SPECULAR_BOOST
        return diffuse + light.color * (spec * intensity)

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(
            vein_color=self.vein_color,
            vein_scale=self.vein_scale,
            vein_contrast=self.vein_contrast,
            vein_intensity=self.vein_intensity,
        )
        return params


class WoodPBRMaterial(PBRMaterial):
    """Alternating two-tone wooden planks with a sinusoidal grain."""

    material_type = MaterialType.DIELECTRIC
    blur_reflections = False

    LIGHT_WOOD = Color.from_rgb255(160, 110, 60)
    DARK_WOOD = Color.from_rgb255(130, 90, 50)

    def __init__(
        self,
        albedo: Optional[Color] = None,
        secondary: Optional[Color] = None,
        tile_size: float = 0.5,
        specular_scale: float = 1.5,
        **kwargs: Any
    ):
        self.secondary = secondary if secondary is not None else self.DARK_WOOD
        self.tile_size = max(0.01, tile_size)
        self.specular_scale = max(0.0, specular_scale)
        kwargs.setdefault("roughness", 0.3)
        kwargs.setdefault("reflectivity", 0.3)
        kwargs.setdefault("ior", 1.53)
        kwargs["metalness"] = 0.0
        super().__init__(albedo if albedo is not None else self.LIGHT_WOOD, **kwargs)
        self.material_type = MaterialType.DIELECTRIC

    def plank_color(self, point: Point3) -> Color:
        local = self.to_object_space(point)
        tile_x = math.floor(local.x / self.tile_size)
        tile_z = math.floor(local.z / self.tile_size)
        base = self.albedo if (tile_x + tile_z) % 2 == 0 else self.secondary
        grain = 1.0 + math.sin(local.x * 30.0) * 0.2
        return base * grain

    def shade(self, point: Point3, normal: Vec3, light: Light, viewer: Point3, time: float = 0.0) -> Color:
        wood = self.plank_color(point)
        if _is_ambient(light):
            return wood * light.color * light.intensity

        response = _direct(light, point)
        if response is None:
            return Color.black()
        direction, intensity = response

        diffuse = max(WOOD_MIN_DIFFUSE, normal.dot(direction))
        view_dir = (viewer - point).normalize()
        spec = blinn_phong(normal, direction, view_dir, WOOD_SHININESS) * self.specular_scale
        return wood * light.color * (diffuse * intensity) + light.color * (spec * WOOD_SPECULAR_WEIGHT * intensity)

    def _params(self) -> Dict[str, Any]:
        params = super()._params()
        params.update(
            secondary=self.secondary,
            tile_size=self.tile_size,
            specular_scale=self.specular_scale,
        )
        return params
