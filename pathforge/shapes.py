"""
Geometric primitives for the path tracer.

Each primitive implements the Primitive protocol with a `hit` method that
returns a HitRecord for the nearest non-negative intersection, or None.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import math

from .vec3 import Vec3, Point3, almost_zero, safe_sqrt
from .ray import Ray


@dataclass
class HitRecord:
    """Stores information about a ray-primitive intersection.

    Attributes:
        distance: The ray parameter at the intersection (finite)
        normal: The unit surface normal at the intersection
        material: Identifier of the primitive's material
    """
    distance: float
    normal: Vec3
    material: int = 0


class Primitive(ABC):
    """Abstract base class for all primitives that can be hit by rays."""

    material: int

    @abstractmethod
    def hit(self, ray: Ray) -> Optional[HitRecord]:
        """Test if ray intersects this primitive.

        Args:
            ray: The ray to test (non-zero, normalized direction)

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass


class Sphere(Primitive):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: int = 0):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere
            material: Material identifier
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the offset-from-center form.

        With offset = O - C and a unit direction d, the roots are
        t = m -/+ sqrt(m^2 + r^2 - |offset|^2) where m = -(offset . d).
        """
        offset = ray.origin - self.center
        mapped = -offset.dot(ray.direction)

        extend2 = mapped * mapped + self.radius * self.radius - offset.length_squared()
        # Tangent rays can land slightly below zero from rounding
        if extend2 < 0.0 and not almost_zero(extend2):
            return None

        extend = safe_sqrt(extend2)
        distance = mapped - extend
        if distance < 0.0:
            # Origin inside the sphere: use the far root
            distance = mapped + extend
        if distance < 0.0:
            return None

        normal = (ray.direction * distance + offset).normalize()
        return HitRecord(distance=distance, normal=normal, material=self.material)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius}, material={self.material})"


class Plane(Primitive):
    """An infinite plane of points p with dot(p, normal) + offset = 0."""

    def __init__(self, normal: Vec3, offset: float, material: int = 0):
        """Create a plane.

        Args:
            normal: Unit normal of the plane
            offset: Signed offset along the normal
            material: Material identifier
        """
        self.normal = normal
        self.offset = offset
        self.material = material

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        """Test ray-plane intersection."""
        mapped = ray.direction.dot(self.normal)

        # Ray is parallel to plane
        if almost_zero(mapped):
            return None

        distance = (ray.origin.dot(self.normal) + self.offset) / -mapped
        if distance < 0.0:
            return None

        return HitRecord(distance=distance, normal=self.normal, material=self.material)

    def __repr__(self) -> str:
        return f"Plane(normal={self.normal}, offset={self.offset}, material={self.material})"


class Box(Primitive):
    """An axis-aligned box defined by its minimum and maximum corners."""

    def __init__(self, minimum: Point3, maximum: Point3, material: int = 0):
        """Create a box from two opposite corners.

        Args:
            minimum: Corner with smallest x, y, z values
            maximum: Corner with largest x, y, z values
            material: Material identifier
        """
        self.minimum = minimum
        self.maximum = maximum
        self.material = material

    @classmethod
    def from_center(cls, center: Point3, size: Vec3, material: int = 0) -> Box:
        """Create a box centered on `center` with edge lengths `size`."""
        extend = size / 2.0
        return cls(center - extend, center + extend, material)

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        """Test ray-box intersection using the slab method.

        Tracks which axis produced the entry (near) and exit (far) bounds so
        the outward normal of the reported face can be recovered.
        """
        near, far = -math.inf, math.inf
        near_axis = far_axis = 0

        for axis in range(3):
            direction = ray.direction[axis]
            origin = ray.origin[axis]
            low = self.minimum[axis]
            high = self.maximum[axis]

            if direction == 0.0:
                # Parallel to this slab: either always inside it or never
                if origin < low or origin > high:
                    return None
                continue

            inv_d = 1.0 / direction
            t0 = (low - origin) * inv_d
            t1 = (high - origin) * inv_d
            entry, exit_ = min(t0, t1), max(t0, t1)

            if entry > near:
                near = entry
                near_axis = axis
            if exit_ < far:
                far = exit_
                far_axis = axis

        if far < near or far < 0.0:
            return None

        if near >= 0.0:
            sign = -math.copysign(1.0, ray.direction[near_axis])
            return HitRecord(distance=near, normal=_axis_normal(near_axis, sign), material=self.material)

        # Origin inside the box: report the exit face
        sign = math.copysign(1.0, ray.direction[far_axis])
        return HitRecord(distance=far, normal=_axis_normal(far_axis, sign), material=self.material)

    def __repr__(self) -> str:
        return f"Box(min={self.minimum}, max={self.maximum}, material={self.material})"


def _axis_normal(axis: int, sign: float) -> Vec3:
    components = [0.0, 0.0, 0.0]
    components[axis] = sign
    return Vec3(*components)
