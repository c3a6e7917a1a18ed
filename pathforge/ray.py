"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


# Offset along the new direction that keeps a bounced ray off the surface it left
BOUNCE_EPSILON = 1e-4


class Ray:
    """A ray with origin and direction.

    The parametric form is: P(t) = origin + t * direction
    where t >= 0 represents points along the ray. The direction must be
    non-zero; intersection routines assume it is normalized.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector (should be normalized)
        """
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"


def bounce(ray: Ray, distance: float, direction: Vec3) -> Ray:
    """Continue a path from the point `distance` along `ray`.

    Args:
        ray: The ray that hit the surface
        distance: Distance along the ray to the hit point
        direction: Direction of the continuation ray

    Returns:
        A new ray starting slightly off the surface along `direction`
    """
    point = ray.at(distance) + direction * BOUNCE_EPSILON
    return Ray(point, direction)
