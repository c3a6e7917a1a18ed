"""
Scene description parser.

Supports JSON and YAML scene files with:
- Render settings
- Camera position
- Material table (identifiers are small non-negative integers)
- Objects (spheres, planes, boxes referencing material identifiers)

Example scene file:
```yaml
render:
  width: 480
  height: 270
  samples: 64
  max_depth: 128

camera:
  origin: [0, 1.5, -3]

materials:
  0: {type: lambertian, albedo: 0.5}
  1: {type: specular, albedo: 0.8}
  2: {type: fresnel, eta: 0.6667, albedo: 0.9}
  3: {type: emissive, color: [1, 1, 1], intensity: 1}

objects:
  - {type: sphere, center: [0, 1, 3], radius: 1, material: 2}
  - {type: plane, normal: [0, 1, 0], offset: 0, material: 0}
  - {type: box, center: [2, 1.1, 3], size: [2, 2, 0.5], material: 2}
```

Without a `materials` section the reference material table is used.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, Union
import json

from .vec3 import Vec3, Color
from .camera import Camera
from .materials import (
    Material, MaterialTable, Lambertian, SpecularReflection, SpecularFresnel,
    Emissive, Absorbing, default_materials
)
from .scene import Scene, SceneError
from .renderer import RenderSettings


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.scene: Optional[Scene] = None
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: Union[str, Path]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (.json, .yaml or .yml)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        if path.suffix in ('.yaml', '.yml'):
            try:
                import yaml
            except ImportError:
                raise SceneParseError("PyYAML not installed. Install with: pip install pyyaml")
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as exc:
                raise SceneParseError(f"Invalid YAML in {filepath}: {exc}") from exc
        elif path.suffix == '.json':
            try:
                data = json.loads(content)
            except json.JSONDecodeError as exc:
                raise SceneParseError(f"Invalid JSON in {filepath}: {exc}") from exc
        else:
            raise SceneParseError(f"Unsupported scene file type: {path.suffix or '(none)'}")

        if not isinstance(data, dict):
            raise SceneParseError("Scene description must be a mapping")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        # Materials first (objects reference them)
        if 'materials' in data:
            materials = self._parse_materials(data['materials'])
        else:
            materials = default_materials()
        self.scene = Scene(materials)

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'camera' in data:
            self._parse_camera(data['camera'])
        else:
            self.camera = Camera()

        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        return self.scene, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an {x, y, z} mapping."""
        try:
            return self._vec3_from(data)
        except (TypeError, ValueError) as exc:
            raise SceneParseError(f"Cannot parse Vec3 from: {data!r}") from exc

    def _vec3_from(self, data: Any) -> Vec3:
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a scalar (grey), a list or a hex string."""
        try:
            return self._color_from(data)
        except (TypeError, ValueError) as exc:
            raise SceneParseError(f"Cannot parse Color from: {data!r}") from exc

    def _color_from(self, data: Any) -> Color:
        if isinstance(data, (int, float)):
            return Color.splat(float(data))
        if isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                r = int(data[1:3], 16) / 255.0
                g = int(data[3:5], 16) / 255.0
                b = int(data[5:7], 16) / 255.0
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type in ('lambertian', 'diffuse'):
            return Lambertian(self._parse_color(mat_data.get('albedo', 0.5)))

        elif mat_type in ('specular', 'mirror'):
            return SpecularReflection(self._parse_color(mat_data.get('albedo', 1.0)))

        elif mat_type in ('fresnel', 'dielectric'):
            if 'ior' in mat_data:
                ior = float(mat_data['ior'])
                if ior <= 0.0:
                    raise SceneParseError(f"Index of refraction must be positive, got {ior}")
                eta = 1.0 / ior
            else:
                eta = float(mat_data.get('eta', 1.0 / 1.5))
            if eta <= 0.0:
                raise SceneParseError(f"Relative index of refraction must be positive, got {eta}")
            return SpecularFresnel(eta, self._parse_color(mat_data.get('albedo', 1.0)))

        elif mat_type in ('emissive', 'light'):
            color = self._parse_color(mat_data.get('color', 1.0))
            intensity = float(mat_data.get('intensity', 1.0))
            return Emissive(color, intensity)

        elif mat_type in ('absorbing', 'black'):
            return Absorbing()

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[Any, Any]) -> MaterialTable:
        """Parse materials section into a table keyed by integer identifier."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("materials must be a mapping of identifier to material")

        table = MaterialTable()
        for key, mat_data in materials_data.items():
            try:
                identifier = int(key)
            except (TypeError, ValueError):
                raise SceneParseError(f"Material identifier must be an integer, got {key!r}")
            if identifier < 0:
                raise SceneParseError(f"Material identifier must be non-negative, got {identifier}")
            if not isinstance(mat_data, dict):
                raise SceneParseError(f"Material {identifier} must be a mapping")
            try:
                material = self._parse_material(mat_data)
            except (TypeError, ValueError) as exc:
                raise SceneParseError(f"Invalid material {identifier}: {exc}") from exc
            table.register(identifier, material)
        return table

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        for obj_data in objects_data:
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            try:
                material = int(obj_data.get('material', 0))

                if obj_type == 'sphere':
                    center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                    radius = float(obj_data.get('radius', 1.0))
                    self.scene.insert_sphere(center, radius, material)

                elif obj_type == 'plane':
                    normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
                    offset = float(obj_data.get('offset', 0.0))
                    self.scene.insert_plane(normal, offset, material)

                elif obj_type == 'box':
                    center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                    size = self._parse_vec3(obj_data.get('size', [1, 1, 1]))
                    self.scene.insert_box(center, size, material)

                else:
                    raise SceneParseError(f"Unknown object type: {obj_type}")
            except SceneError as exc:
                raise SceneParseError(str(exc)) from exc
            except (TypeError, ValueError) as exc:
                raise SceneParseError(f"Invalid {obj_type}: {exc}") from exc

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        origin = self._parse_vec3(camera_data.get('origin', [0, 1.5, -3]))
        self.camera = Camera(origin=origin)

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        defaults = RenderSettings(num_threads=1)
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', defaults.width)),
                height=int(settings_data.get('height', defaults.height)),
                samples_per_pixel=int(settings_data.get('samples', defaults.samples_per_pixel)),
                max_depth=int(settings_data.get('max_depth', defaults.max_depth)),
                num_threads=int(settings_data.get('threads', 0)),
                luminance_cutoff=float(settings_data.get('luminance_cutoff', defaults.luminance_cutoff))
            )
        except ValueError as exc:
            raise SceneParseError(f"Invalid render settings: {exc}") from exc


def load_scene(filepath: Union[str, Path]) -> Tuple[Scene, Camera, RenderSettings]:
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
