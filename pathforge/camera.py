"""
Camera module for generating primary rays.

A pinhole camera at a fixed origin looking down +z. Screen coordinates
(u, v) map to the direction normalize(u, v, 1), so the horizontal field of
view is fixed at 2 * atan(0.5) for u in [-0.5, 0.5).
"""

from __future__ import annotations
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera looking along +z."""

    def __init__(self, origin: Point3 = Point3(0.0, 1.5, -3.0)):
        """Create a camera.

        Args:
            origin: Camera position in world space
        """
        self.origin = origin

    def get_ray(self, u: float, v: float) -> Ray:
        """Generate a ray through normalized screen coordinates.

        Args:
            u: Horizontal coordinate, 0 at the image center
            v: Vertical coordinate, 0 at the image center, positive is up

        Returns:
            A ray from the camera origin with a unit direction
        """
        return Ray(self.origin, Vec3(u, v, 1.0).normalize())

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin})"
