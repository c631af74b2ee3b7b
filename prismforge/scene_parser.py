"""
Scene description language parser.

Supports a YAML or JSON scene description format with:
- Render settings
- Camera configuration
- Materials library (classical and PBR materials, with presets)
- Objects (spheres and planes with materials)
- Lights (every light kind)

Colours may be written as ``[r, g, b]`` floats, ``{"rgb255": [r, g, b]}``
or ``"#rrggbb"``.

Example scene file:
```yaml
time: 0.0

render:
  width: 400
  height: 300
  max_depth: 4

camera:
  look_from: [0, 1.5, 6]
  look_at: [0, 0.5, 0]
  vfov: 45

materials:
  floor:
    type: checkerboard
    secondary: {rgb255: [40, 40, 40]}
    reflectivity: 0.2
  gold:
    type: metal
    preset: gold

objects:
  - type: plane
    point: [0, 0, 0]
    normal: [0, 1, 0]
    material: floor
  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: gold

lights:
  - type: ambient
  - type: point
    position: [4, 6, 4]
    color: "#fff4e0"
    intensity: 12
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from .vec3 import Vec3
from .color import Color
from .camera import Camera
from .scene import Scene
from .shapes import Sphere, Plane
from .tracer import RenderSettings
from .lights import (
    Light, PointLight, DirectionalLight, AmbientLight, SpotLight,
    PulsatingPointLight, BioluminescentLight, BlackHoleLight, FractalLight,
)
from .materials import (
    Material, LambertMaterial, PhongMaterial, CheckerboardMaterial,
    DielectricMaterial, GlassMaterial, EmissiveMaterial, MirrorMaterial,
)
from .pbr import (
    PBRMaterial, MetalPBRMaterial, PlasticPBRMaterial, CeramicTilePBRMaterial,
    WaterPBRMaterial, HolographicPBRMaterial, MarblePBRMaterial, WoodPBRMaterial,
)

logger = logging.getLogger(__name__)


MATERIAL_TYPES: Dict[str, type] = {
    'lambert': LambertMaterial,
    'lambertian': LambertMaterial,
    'phong': PhongMaterial,
    'checkerboard': CheckerboardMaterial,
    'dielectric': DielectricMaterial,
    'glass': GlassMaterial,
    'emissive': EmissiveMaterial,
    'mirror': MirrorMaterial,
    'pbr': PBRMaterial,
    'metal': MetalPBRMaterial,
    'plastic': PlasticPBRMaterial,
    'ceramic': CeramicTilePBRMaterial,
    'water': WaterPBRMaterial,
    'holographic': HolographicPBRMaterial,
    'marble': MarblePBRMaterial,
    'wood': WoodPBRMaterial,
}

MATERIAL_PRESETS: Dict[Tuple[str, str], Callable[[], Material]] = {
    ('metal', 'gold'): MetalPBRMaterial.gold,
    ('metal', 'silver'): MetalPBRMaterial.silver,
    ('metal', 'copper'): MetalPBRMaterial.copper,
    ('metal', 'chrome'): MetalPBRMaterial.chrome,
    ('water', 'tropical'): WaterPBRMaterial.tropical,
    ('water', 'stormy'): WaterPBRMaterial.stormy,
    ('holographic', 'cyberpunk'): HolographicPBRMaterial.cyberpunk,
    ('holographic', 'matrix'): HolographicPBRMaterial.matrix,
}

LIGHT_TYPES: Dict[str, type] = {
    'point': PointLight,
    'directional': DirectionalLight,
    'ambient': AmbientLight,
    'spot': SpotLight,
    'pulsating': PulsatingPointLight,
    'bioluminescent': BioluminescentLight,
    'black_hole': BlackHoleLight,
    'fractal': FractalLight,
}

# Light constructors that take a colour argument without a default
_LIGHTS_REQUIRING_COLOR = (PointLight, SpotLight, PulsatingPointLight, FractalLight)

COLOR_KEYS = frozenset({'albedo', 'color', 'specular_color', 'secondary', 'tint', 'grout_color', 'vein_color'})
VECTOR_KEYS = frozenset({'position', 'direction', 'singularity'})


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.scene: Scene = Scene()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        if path.suffix in ('.yaml', '.yml'):
            data = self._load_yaml(content)
        elif path.suffix == '.json':
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"Invalid JSON in {filepath}: {e}") from e
        else:
            # YAML is a superset of JSON
            data = self._load_yaml(content)

        logger.info("Loading scene %s", path)
        return self.parse_dict(data)

    @staticmethod
    def _load_yaml(content: str) -> Any:
        try:
            import yaml
        except ImportError as e:
            raise SceneParseError("PyYAML not installed. Install with: pip install pyyaml") from e
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise SceneParseError(f"Invalid YAML: {e}") from e

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

        # Settings first (the default camera aspect ratio follows the image size)
        self._parse_settings(data.get('render', {}))
        start_time = self._parse_float(data.get('time', 0.0), 'time')

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'lights' in data:
            self._parse_lights(data['lights'])

        self._parse_camera(data.get('camera', {}))

        # Advance the clock through the scene so animated lights share it;
        # a light entry's own time acts as a phase offset
        self.scene.update(start_time)

        logger.debug(
            "Parsed scene: %d materials, %d objects, %d lights",
            len(self.materials), len(self.scene.world), len(self.scene.lights)
        )
        return self.scene, self.camera, self.settings

    @staticmethod
    def _parse_float(value: Any, what: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse {what} from: {value!r}") from e

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            try:
                return Vec3(float(data[0]), float(data[1]), float(data[2]))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        elif isinstance(data, dict):
            return Vec3(
                self._parse_float(data.get('x', 0), 'Vec3 x'),
                self._parse_float(data.get('y', 0), 'Vec3 y'),
                self._parse_float(data.get('z', 0), 'Vec3 z')
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            r, g, b = (self._parse_float(c, 'color component') for c in data)
            return Color(r, g, b)
        elif isinstance(data, dict):
            if 'rgb255' in data:
                values = data['rgb255']
                if not isinstance(values, (list, tuple)) or len(values) != 3:
                    raise SceneParseError(f"rgb255 colour must have 3 components, got: {values}")
                r, g, b = (self._parse_float(c, 'rgb255 component') for c in values)
                return Color.from_rgb255(r, g, b)
            return Color(
                self._parse_float(data.get('r', 0), 'color r'),
                self._parse_float(data.get('g', 0), 'color g'),
                self._parse_float(data.get('b', 0), 'color b')
            )
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#'):
                try:
                    return Color.from_hex(data)
                except ValueError as e:
                    raise SceneParseError(str(e)) from e
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _convert_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Turn colour and vector entries of a parameter mapping into objects."""
        converted = {}
        for key, value in params.items():
            if key in COLOR_KEYS:
                converted[key] = self._parse_color(value)
            elif key in VECTOR_KEYS:
                converted[key] = self._parse_vec3(value)
            elif key == 'positions':
                if not isinstance(value, (list, tuple)):
                    raise SceneParseError(f"positions must be a list of vectors, got: {value}")
                converted[key] = [self._parse_vec3(p) for p in value]
            else:
                converted[key] = value
        return converted

    def _build_material(self, mat_data: Dict[str, Any]) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material definition must be a mapping, got: {mat_data}")

        params = dict(mat_data)
        mat_type = str(params.pop('type', 'lambert')).lower()
        preset = params.pop('preset', None)

        if mat_type not in MATERIAL_TYPES:
            raise SceneParseError(f"Unknown material type: {mat_type}")

        params = self._convert_params(params)
        try:
            if preset is not None:
                factory = MATERIAL_PRESETS.get((mat_type, str(preset).lower()))
                if factory is None:
                    raise SceneParseError(f"Unknown {mat_type} preset: {preset}")
                material = factory()
                return material.derive(**params) if params else material
            return MATERIAL_TYPES[mat_type](**params)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid {mat_type} material: {e}") from e

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("materials section must be a mapping of name to definition")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._build_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._build_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("objects section must be a list of object definitions")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object definition must be a mapping, got: {obj_data}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            material = self._get_material(obj_data.get('material'))

            try:
                if obj_type == 'sphere':
                    center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                    radius = float(obj_data.get('radius', 1.0))
                    self.scene.add(Sphere(center, radius, material))

                elif obj_type == 'plane':
                    point = self._parse_vec3(obj_data.get('point', [0, 0, 0]))
                    normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
                    self.scene.add(Plane(point, normal, material))

                else:
                    raise SceneParseError(f"Unknown object type: {obj_type}")
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Invalid {obj_type}: {e}") from e

    def _build_light(self, light_data: Dict[str, Any]) -> Light:
        params = dict(light_data)
        light_type = str(params.pop('type', 'point')).lower()
        light_class = LIGHT_TYPES.get(light_type)
        if light_class is None:
            raise SceneParseError(f"Unknown light type: {light_type}")

        params = self._convert_params(params)
        if light_class in _LIGHTS_REQUIRING_COLOR:
            params.setdefault('color', Color.white())

        try:
            return light_class(**params)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid {light_type} light: {e}") from e

    def _parse_lights(self, lights_data: list) -> None:
        """Parse lights section."""
        if not isinstance(lights_data, list):
            raise SceneParseError("lights section must be a list of light definitions")
        for light_data in lights_data:
            if not isinstance(light_data, dict):
                raise SceneParseError(f"Light definition must be a mapping, got: {light_data}")
            self.scene.add_light(self._build_light(light_data))

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError("camera section must be a mapping")
        look_from = self._parse_vec3(camera_data.get('look_from', [0, 0, 5]))
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, 0]))
        vup = self._parse_vec3(camera_data.get('vup', [0, 1, 0]))
        vfov = self._parse_float(camera_data.get('vfov', 60), 'camera vfov')
        aspect_ratio = self._parse_float(camera_data.get('aspect_ratio', self.settings.aspect_ratio), 'camera aspect_ratio')

        try:
            self.camera = Camera(
                look_from=look_from,
                look_at=look_at,
                vup=vup,
                vfov=vfov,
                aspect_ratio=aspect_ratio
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        if not isinstance(settings_data, dict):
            raise SceneParseError("render section must be a mapping")
        background = settings_data.get('background')
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', 800)),
                height=int(settings_data.get('height', 600)),
                max_depth=int(settings_data.get('max_depth', 5)),
                background_color=self._parse_color(background) if background is not None else None,
                shadows=bool(settings_data.get('shadows', True)),
                reflections=bool(settings_data.get('reflections', True)),
                refractions=bool(settings_data.get('refractions', True)),
                min_importance=float(settings_data.get('min_importance', 1e-3)),
                tile_size=int(settings_data.get('tile_size', 32)),
                num_threads=int(settings_data.get('threads', 0)),
                gamma=float(settings_data.get('gamma', 1.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
