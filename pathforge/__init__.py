"""
PathForge - A Python Path Tracer

A small unidirectional Monte-Carlo path tracer with support for:
- Sphere, plane and axis-aligned box primitives
- Lambertian, mirror, Fresnel dielectric and emissive materials
- Throughput-based path termination with an explicit depth bound
- Multi-threaded rendering with per-worker seeded random streams
- PNG output
"""

__version__ = "0.1.0"
__author__ = "PathForge Team"

from .vec3 import Vec3, Point3, Color, almost_zero, safe_sqrt, luminance, is_invalid
from .ray import Ray, bounce
from .sampling import RandomStream
from .shapes import HitRecord, Primitive, Sphere, Plane, Box
from .materials import (
    Material, ScatterResult, Lambertian, SpecularReflection, SpecularFresnel,
    Emissive, Absorbing, MaterialTable, default_materials
)
from .scene import Scene, SceneError
from .integrator import Integrator, escape
from .camera import Camera
from .parallel import parallel_for, RowCounter
from .renderer import Renderer, RenderSettings, get_platform_info
from .image import to_ldr, write_image, ImageWriteError
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
