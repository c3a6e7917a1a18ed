"""
Path integrator.

Estimates the radiance arriving along a ray by following a single random
light path through the scene. The path is extended one bounce per loop
iteration and ends when it escapes the scene, when its throughput becomes
negligible, or when the depth bound is reached.
"""

from __future__ import annotations
from typing import Callable, Optional

from .vec3 import Vec3, Color, luminance
from .ray import Ray, bounce
from .scene import Scene
from .sampling import RandomStream


BackgroundFunction = Callable[[Vec3], Color]


def escape(direction: Vec3) -> Color:
    """Placeholder sky: the component-wise square of the escaping direction."""
    return direction * direction


class Integrator:
    """Unidirectional path tracer over a read-only scene."""

    def __init__(
        self,
        scene: Scene,
        max_depth: int = 128,
        luminance_cutoff: float = 0.01,
        background: Optional[BackgroundFunction] = None
    ):
        """Create an integrator.

        Args:
            scene: The scene to trace against
            max_depth: Maximum number of surface interactions per path
            luminance_cutoff: Paths whose throughput luminance drops below
                this value are terminated
            background: Radiance for rays that leave the scene (escape if None)
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.scene = scene
        self.max_depth = max_depth
        self.luminance_cutoff = luminance_cutoff
        self.background = background if background is not None else escape

    def evaluate(self, ray: Ray, stream: RandomStream, throughput: Optional[Color] = None) -> Color:
        """Estimate the radiance carried back along `ray`.

        Args:
            ray: Primary (or continuation) ray
            stream: Random stream of the calling worker
            throughput: Attenuation accumulated before this ray (1 if None)

        Returns:
            The radiance estimate, already scaled by `throughput`
        """
        if throughput is None:
            throughput = Color(1, 1, 1)
        radiance = Color(0, 0, 0)

        for _ in range(self.max_depth):
            hit_record = self.scene.intersect(ray)
            if hit_record is None:
                return radiance + throughput * self.background(ray.direction)

            material = self.scene.material(hit_record.material)
            outgoing = -ray.direction
            scatter = material.sample(outgoing, hit_record.normal, stream)
            radiance = radiance + throughput * material.emitted()

            throughput = throughput * scatter.weight * hit_record.normal.abs_dot(scatter.incident)
            if luminance(throughput) < self.luminance_cutoff:
                return radiance

            ray = bounce(ray, hit_record.distance, scatter.incident)

        return radiance + throughput * self.background(ray.direction)
