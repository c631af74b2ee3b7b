"""
PrismForge - A Python Recursive Ray Tracer

An offline CPU ray tracer with support for:
- Recursive reflection and refraction with Fresnel blending
- Polymorphic lights (point, directional, ambient, spot, and animated or
  exotic kinds)
- Classical and PBR materials (GGX/Cook-Torrance) with procedural patterns
- Perlin noise and turbulence
- Multi-threaded tile rendering
- YAML/JSON scene files
"""

__version__ = "0.1.0"
__author__ = "PrismForge Team"

from .vec3 import Vec3, Point3
from .color import Color
from .matrix import Matrix4
from .ray import Ray, EPSILON, offset_point
from .noise import PerlinNoise, DEFAULT_NOISE
from .shapes import HitRecord, Hittable, Sphere, Plane, HittableList
from .lights import (
    Light, LightKind, PointLight, DirectionalLight, AmbientLight, SpotLight,
    PulsatingPointLight, BioluminescentLight, BlackHoleLight, FractalLight,
    attenuation_factor
)
from .light_properties import LightSample, LightResolution, resolve_light, get_light_sample, light_response
from .materials import (
    MaterialType, Material, LambertMaterial, PhongMaterial, CheckerboardMaterial,
    DielectricMaterial, GlassMaterial, EmissiveMaterial, MirrorMaterial
)
from .pbr import (
    PBRMaterial, MetalPBRMaterial, PlasticPBRMaterial, CeramicTilePBRMaterial,
    WaterPBRMaterial, HolographicPBRMaterial, MarblePBRMaterial, WoodPBRMaterial
)
from .scene import Scene
from .camera import Camera
from .tracer import RayTracer, RenderSettings, TraceState, refraction_direction
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene

__all__ = [
    # Core
    'Vec3', 'Point3', 'Color', 'Matrix4', 'Ray', 'EPSILON', 'offset_point',
    # Noise
    'PerlinNoise', 'DEFAULT_NOISE',
    # Shapes
    'HitRecord', 'Hittable', 'Sphere', 'Plane', 'HittableList',
    # Lights
    'Light', 'LightKind', 'PointLight', 'DirectionalLight', 'AmbientLight', 'SpotLight',
    'PulsatingPointLight', 'BioluminescentLight', 'BlackHoleLight', 'FractalLight',
    'attenuation_factor',
    'LightSample', 'LightResolution', 'resolve_light', 'get_light_sample', 'light_response',
    # Materials
    'MaterialType', 'Material', 'LambertMaterial', 'PhongMaterial', 'CheckerboardMaterial',
    'DielectricMaterial', 'GlassMaterial', 'EmissiveMaterial', 'MirrorMaterial',
    'PBRMaterial', 'MetalPBRMaterial', 'PlasticPBRMaterial', 'CeramicTilePBRMaterial',
    'WaterPBRMaterial', 'HolographicPBRMaterial', 'MarblePBRMaterial', 'WoodPBRMaterial',
    # Rendering
    'Scene', 'Camera', 'RayTracer', 'RenderSettings', 'TraceState', 'refraction_direction',
    # Scene files
    'SceneParser', 'SceneParseError', 'load_scene', 'parse_scene',
]
