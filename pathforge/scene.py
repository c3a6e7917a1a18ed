"""
Scene aggregate.

A Scene is populated once through the insert_* builder calls and is then
shared read-only by every render worker. Intersection queries scan every
primitive linearly and keep the closest finite hit.
"""

from __future__ import annotations
from typing import List, Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .shapes import Primitive, Sphere, Plane, Box, HitRecord
from .materials import Material, MaterialTable, default_materials


class SceneError(Exception):
    """Error while building a scene."""
    pass


class Scene:
    """Spheres, planes and boxes plus the material table they index."""

    def __init__(self, materials: Optional[MaterialTable] = None):
        """Create an empty scene.

        Args:
            materials: Material table for the scene's material identifiers
                       (the reference table if None)
        """
        self.materials = materials if materials is not None else default_materials()
        self.spheres: List[Sphere] = []
        self.planes: List[Plane] = []
        self.boxes: List[Box] = []

    def _check_material(self, material: int) -> None:
        if material not in self.materials:
            raise SceneError(
                f"Unknown material identifier {material!r}; "
                f"known identifiers are {sorted(self.materials)}"
            )

    def insert_sphere(self, center: Point3, radius: float, material: int = 0) -> Sphere:
        """Add a sphere."""
        self._check_material(material)
        if radius < 0.0:
            raise SceneError(f"Sphere radius must be non-negative, got {radius}")
        sphere = Sphere(center, radius, material)
        self.spheres.append(sphere)
        return sphere

    def insert_plane(self, normal: Vec3, offset: float, material: int = 0) -> Plane:
        """Add a plane with dot(p, normal) + offset = 0.

        The normal is stored normalized and the offset rescaled by the same
        factor, so the plane keeps its position.
        """
        self._check_material(material)
        unit = normal.normalize()
        if unit.length_squared() == 0.0:
            raise SceneError("Plane normal must be non-zero")
        plane = Plane(unit, offset / normal.length(), material)
        self.planes.append(plane)
        return plane

    def insert_box(self, center: Point3, size: Vec3, material: int = 0) -> Box:
        """Add an axis-aligned box centered on `center` with edge lengths `size`."""
        self._check_material(material)
        if min(size) < 0.0:
            raise SceneError(f"Box size must be non-negative, got {size}")
        box = Box.from_center(center, size, material)
        self.boxes.append(box)
        return box

    def primitives(self) -> List[Primitive]:
        """All primitives in intersection order (spheres, planes, boxes)."""
        return [*self.spheres, *self.planes, *self.boxes]

    def material(self, identifier: int) -> Material:
        """Look up the material bound to `identifier`."""
        return self.materials[identifier]

    def intersect(self, ray: Ray) -> Optional[HitRecord]:
        """Find the closest intersection among all primitives.

        A candidate replaces the current best only when it is strictly
        closer, so ties go to the primitive tested first.

        Returns:
            HitRecord for the closest hit, None if the ray escapes
        """
        closest: Optional[HitRecord] = None
        distance = math.inf

        for primitive in self.primitives():
            hit_record = primitive.hit(ray)
            if hit_record is not None and hit_record.distance < distance:
                closest = hit_record
                distance = hit_record.distance

        return closest

    def distance(self, ray: Ray) -> float:
        """Distance to the closest hit, positive infinity on a miss."""
        hit_record = self.intersect(ray)
        return math.inf if hit_record is None else hit_record.distance

    def __len__(self) -> int:
        return len(self.spheres) + len(self.planes) + len(self.boxes)

    def __iter__(self):
        return iter(self.primitives())

    def __repr__(self) -> str:
        return (
            f"Scene(spheres={len(self.spheres)}, planes={len(self.planes)}, "
            f"boxes={len(self.boxes)}, materials={len(self.materials)})"
        )
