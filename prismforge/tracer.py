"""
Tracer module - the heart of the ray tracer.

Implements:
- Recursive Whitted-style tracing: direct lighting with shadow rays, then
  reflection and refraction rays up to a depth limit
- Fresnel-weighted blending for transparent materials, with total internal
  reflection falling back to a mirror bounce
- Multi-threaded tile-based rendering
- 8-bit conversion and image saving through Pillow
"""

from __future__ import annotations
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple
import numpy as np

from .vec3 import Vec3
from .color import Color
from .ray import Ray, EPSILON, offset_point
from .camera import Camera
from .scene import Scene
from .shapes import HitRecord
from .lights import LightKind
from .materials import Material

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 800
    height: int = 600
    max_depth: int = 5
    background_color: Color = None
    shadows: bool = True
    reflections: bool = True
    refractions: bool = True
    min_importance: float = 1e-3
    tile_size: int = 32
    num_threads: int = 0  # 0 = auto-detect
    gamma: float = 1.0

    def __post_init__(self):
        if self.background_color is None:
            self.background_color = Color(0.2, 0.2, 0.2)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.gamma <= 0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class TraceState(Enum):
    """Stages a traced ray passes through."""
    TRACE = "trace"
    NO_HIT = "no_hit"
    SHADE = "shade"
    RECURSE = "recurse"
    COMBINE = "combine"
    RETURN = "return"


def refraction_direction(incident: Vec3, normal: Vec3, n1: float, n2: float) -> Tuple[Vec3, bool]:
    """Snell refraction of a unit direction.

    Args:
        incident: Unit direction of the incoming ray
        normal: Unit normal facing against ``incident``
        n1: Index of refraction on the incoming side
        n2: Index of refraction on the far side

    Returns:
        (direction, total_internal_reflection). Under total internal
        reflection the direction is the mirror reflection.
    """
    refracted = incident.refract(normal, n1, n2)
    if refracted is None:
        return incident.reflect(normal).normalize(), True
    return refracted, False


class RayTracer:
    """Recursive ray tracer with multi-threaded tile rendering."""

    def __init__(self, scene: Scene, settings: RenderSettings = None):
        """Create a tracer for a scene.

        Args:
            scene: The scene to trace against
            settings: Render configuration (uses defaults if None)
        """
        self.scene = scene
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def _transition(self, state: TraceState, depth: int) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("trace state %s (depth remaining %d)", state.name, depth)

    def trace(self, ray: Ray, depth_remaining: int, importance: float = 1.0) -> Color:
        """Compute the colour seen along a ray.

        Args:
            ray: The ray to trace
            depth_remaining: Reflection/refraction bounces still allowed;
                at 0 only direct lighting is returned
            importance: Product of the blend weights leading to this ray

        Returns:
            The clamped colour for this ray
        """
        self._transition(TraceState.TRACE, depth_remaining)
        hit = self.scene.nearest_hit(ray)

        if hit is None:
            self._transition(TraceState.NO_HIT, depth_remaining)
            return self.settings.background_color

        material = hit.material
        if material is None:
            # No material - return normal as color (for debugging)
            return Color((hit.normal.x + 1) * 0.5, (hit.normal.y + 1) * 0.5, (hit.normal.z + 1) * 0.5)

        emitted = material.emitted()
        if emitted is not None:
            self._transition(TraceState.RETURN, depth_remaining)
            return emitted

        self._transition(TraceState.SHADE, depth_remaining)
        direct = self._direct_lighting(hit, ray.origin, material)

        if depth_remaining <= 0 or importance < self.settings.min_importance:
            self._transition(TraceState.RETURN, depth_remaining)
            return direct

        self._transition(TraceState.RECURSE, depth_remaining)
        kr, kt = self._blend_weights(ray, hit, material)

        reflected = Color.black()
        if self.settings.reflections and kr > EPSILON and importance * kr >= self.settings.min_importance:
            reflected = self._trace_reflection(ray, hit, material, depth_remaining - 1, importance * kr)

        refracted = Color.black()
        if self.settings.refractions and kt > EPSILON and importance * kt >= self.settings.min_importance:
            refracted = self._trace_refraction(ray, hit, material, depth_remaining - 1, importance * kt)

        self._transition(TraceState.COMBINE, depth_remaining)
        result = direct + reflected * kr + refracted * kt

        self._transition(TraceState.RETURN, depth_remaining)
        return result

    def _direct_lighting(self, hit: HitRecord, viewer: Vec3, material: Material) -> Color:
        """Sum every light's contribution at the hit point, skipping shadowed lights."""
        color = Color.black()
        for light in self.scene.lights:
            if (light.kind is not LightKind.AMBIENT and self.settings.shadows
                    and not light.is_visible_from(hit.point, self.scene)):
                continue
            color = color + material.shade(hit.point, hit.normal, light, viewer, self.scene.time)
        return color

    def _blend_weights(self, ray: Ray, hit: HitRecord, material: Material) -> Tuple[float, float]:
        """Reflection and refraction weights (kr, kt) for this hit."""
        if not material.is_transparent:
            return material.reflectivity, 0.0
        cos_i = max(0.0, -ray.direction.dot(hit.normal))
        fresnel = material.fresnel(cos_i)
        return max(material.reflectivity, fresnel), material.transparency * (1.0 - fresnel)

    def _trace_reflection(
        self, ray: Ray, hit: HitRecord, material: Material, depth: int, importance: float
    ) -> Color:
        direction = material.reflection_direction(ray.direction, hit.normal, hit.point)
        origin = offset_point(hit.point, hit.normal)
        return self.trace(Ray(origin, direction), depth, importance)

    def _trace_refraction(
        self, ray: Ray, hit: HitRecord, material: Material, depth: int, importance: float
    ) -> Color:
        n1, n2 = (1.0, material.ior) if hit.front_face else (material.ior, 1.0)
        direction, total_internal = refraction_direction(ray.direction, hit.normal, n1, n2)

        if total_internal:
            origin = offset_point(hit.point, hit.normal)
            return self.trace(Ray(origin, direction), depth, importance)

        origin = offset_point(hit.point, -hit.normal)
        return self.trace(Ray(origin, direction), depth, importance) * material.refraction_tint

    def render(self, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            camera: The camera to render from

        Returns:
            Image as float64 numpy array of shape (height, width, 3) in [0, 1]
        """
        width = self.settings.width
        height = self.settings.height
        max_depth = self.settings.max_depth

        image = np.zeros((height, width, 3), dtype=np.float64)

        # Generate tiles for parallel processing
        tiles = self._generate_tiles(width, height)
        total_tiles = len(tiles)
        completed_tiles = [0]  # Use list for mutable in closure

        logger.info(
            "Rendering %dx%d, max depth %d, %d lights, %d tiles on %d thread(s)",
            width, height, max_depth, len(self.scene.lights), total_tiles, self.settings.num_threads
        )
        start = time.perf_counter()

        def render_tile(tile: Tuple[int, int, int, int]) -> Tuple[Tuple, np.ndarray]:
            """Render a single tile."""
            x0, y0, x1, y1 = tile
            tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

            for j in range(y1 - y0):
                for i in range(x1 - x0):
                    # Sample through the pixel centre; row 0 is the top of the image
                    u = (x0 + i + 0.5) / width
                    v = (height - (y0 + j) - 0.5) / height
                    ray = camera.get_ray(u, v)
                    tile_image[j, i] = self.trace(ray, max_depth).to_array()

            completed_tiles[0] += 1
            if self._progress_callback:
                self._progress_callback(completed_tiles[0] / total_tiles)

            return tile, tile_image

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles))
        else:
            results = [render_tile(tile) for tile in tiles]

        # Combine tiles into final image
        for tile, tile_image in results:
            x0, y0, x1, y1 = tile
            image[y0:y1, x0:x1] = tile_image

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return image

    def _generate_tiles(self, width: int, height: int) -> list[Tuple[int, int, int, int]]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    def to_ldr(self, image: np.ndarray) -> np.ndarray:
        """Convert a float image to 8-bit with gamma correction.

        Args:
            image: Float image array

        Returns:
            Image as uint8 array
        """
        gamma = self.settings.gamma
        corrected = np.power(np.clip(image, 0, 1), 1.0 / gamma)
        return np.clip(np.round(corrected * 255), 0, 255).astype(np.uint8)

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file.

        Args:
            image: Image array (float or uint8)
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        if image.dtype == np.float64 or image.dtype == np.float32:
            image = self.to_ldr(image)

        PILImage.fromarray(image, 'RGB').save(filename)
        logger.info("Saved %s", filename)
