"""
BRDF building blocks shared by the materials.

Implements:
- Fresnel-Schlick approximation and F0 from index of refraction
- GGX/Trowbridge-Reitz normal distribution
- Smith geometric shadowing (Schlick-GGX form)
- Cook-Torrance specular and Blinn-Phong highlight
- Roughness jitter of mirror reflections

All cosines are clamped before being divided by or raised to a power, so
these helpers never produce NaN or infinite values.
"""

from __future__ import annotations
import math

from .vec3 import Vec3
from .noise import random_in_unit_sphere

# Floor for denominators and cosines used as divisors
SHADING_EPSILON = 1e-4

# Cap on the Cook-Torrance term at grazing angles
MAX_SPECULAR = 10.0


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def f0_from_ior(ior: float) -> float:
    """Reflectance at normal incidence for a dielectric: ((1 - ior) / (1 + ior))^2."""
    r = (1.0 - ior) / (1.0 + ior)
    return r * r


def fresnel_schlick(cos_theta: float, f0: float) -> float:
    """Schlick's approximation F = F0 + (1 - F0)(1 - cos)^5."""
    cos_theta = clamp(cos_theta)
    return f0 + (1.0 - f0) * (1.0 - cos_theta) ** 5


def half_vector(light_dir: Vec3, view_dir: Vec3) -> Vec3:
    return (light_dir + view_dir).normalize()


def ggx_distribution(n_dot_h: float, roughness: float) -> float:
    """GGX normal distribution D with alpha = roughness^2."""
    n_dot_h = clamp(n_dot_h)
    alpha = roughness * roughness
    alpha2 = alpha * alpha
    d = n_dot_h * n_dot_h * (alpha2 - 1.0) + 1.0
    return alpha2 / max(math.pi * d * d, SHADING_EPSILON)


def smith_g1(n_dot_x: float, k: float) -> float:
    """Schlick-GGX masking for one direction."""
    n_dot_x = max(n_dot_x, 0.0)
    return n_dot_x / max(n_dot_x * (1.0 - k) + k, SHADING_EPSILON)


def smith_geometry(n_dot_l: float, n_dot_v: float, roughness: float) -> float:
    """Smith shadowing-masking G = G1(N.L) * G1(N.V), k = (roughness + 1)^2 / 8."""
    k = (roughness + 1.0) ** 2 / 8.0
    return smith_g1(n_dot_l, k) * smith_g1(n_dot_v, k)


def cook_torrance_specular(
    normal: Vec3,
    light_dir: Vec3,
    view_dir: Vec3,
    roughness: float,
    f0: float
) -> float:
    """Scalar Cook-Torrance specular D*G*F / (4 N.L N.V).

    Args:
        normal: Unit surface normal
        light_dir: Unit direction toward the light
        view_dir: Unit direction toward the viewer
        roughness: Perceptual roughness in [0, 1]
        f0: Reflectance at normal incidence

    Returns:
        Specular reflectance, 0 when the light or viewer is below the surface,
        capped at MAX_SPECULAR otherwise
    """
    n_dot_l = normal.dot(light_dir)
    n_dot_v = normal.dot(view_dir)
    if n_dot_l <= 0.0 or n_dot_v <= 0.0:
        return 0.0

    h = half_vector(light_dir, view_dir)
    d = ggx_distribution(normal.dot(h), roughness)
    g = smith_geometry(n_dot_l, n_dot_v, roughness)
    f = fresnel_schlick(view_dir.dot(h), f0)

    denominator = max(4.0 * n_dot_l * n_dot_v, SHADING_EPSILON)
    return min(d * g * f / denominator, MAX_SPECULAR)


def blinn_phong(normal: Vec3, light_dir: Vec3, view_dir: Vec3, exponent: float) -> float:
    """Blinn-Phong highlight max(N.H, 0)^exponent."""
    n_dot_h = max(normal.dot(half_vector(light_dir, view_dir)), 0.0)
    return n_dot_h ** exponent


def phong(normal: Vec3, light_dir: Vec3, view_dir: Vec3, shininess: float) -> float:
    """Classic Phong highlight max(R.V, 0)^shininess with R the mirrored light."""
    reflected = (-light_dir).reflect(normal)
    return max(reflected.dot(view_dir), 0.0) ** shininess


def jitter_reflection(reflected: Vec3, roughness: float, seed: float) -> Vec3:
    """Blur a mirror direction by a roughness^2-scaled point in the unit sphere.

    The offset is a pure function of ``seed`` so a given surface point always
    reflects the same way.
    """
    if roughness <= 0.0:
        return reflected
    fuzz = roughness * roughness
    jittered = (reflected + random_in_unit_sphere(seed) * fuzz).normalize()
    if jittered.near_zero():
        return reflected
    return jittered
