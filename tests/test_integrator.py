"""Tests for the path integrator."""

import pytest
import math
from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.scene import Scene
from pathforge.sampling import RandomStream
from pathforge.materials import (
    MaterialTable, Lambertian, SpecularReflection, Emissive, Absorbing, Material
)
from pathforge.integrator import Integrator, escape


def uniform_background(direction):
    return Color(1, 1, 1)


class CountingMaterial(Material):
    """Mirror that records how many times it was sampled."""

    def __init__(self):
        super().__init__(1.0)
        self.calls = 0

    def _sample(self, outgoing, normal, stream):
        self.calls += 1
        return outgoing.reflect(normal), 1.0 / max(outgoing.abs_dot(normal), 1e-3)


class TestEscape:
    """Test the placeholder sky."""

    def test_component_square(self):
        assert escape(Vec3(0.6, -0.8, 0)) == Color(0.36, 0.64, 0)

    def test_unit_direction_sums_to_one(self):
        c = escape(Vec3(1, 2, 3).normalize())
        assert abs(c.x + c.y + c.z - 1.0) < 1e-12


class TestIntegratorBasic:
    """Test escape, emission and termination behavior."""

    def test_empty_scene_returns_background(self):
        integrator = Integrator(Scene())
        direction = Vec3(0.6, 0.8, 0)
        result = integrator.evaluate(Ray(Point3(0, 0, 0), direction), RandomStream(0))
        assert result == escape(direction)

    def test_throughput_scales_background(self):
        integrator = Integrator(Scene())
        direction = Vec3(0, 1, 0)
        result = integrator.evaluate(Ray(Point3(0, 0, 0), direction), RandomStream(0), Color(0.5, 0.25, 1))
        assert result == Color(0, 0.25, 0)

    def test_zero_depth_returns_background(self):
        scene = Scene()
        scene.insert_sphere(Point3(0, 0, 5), 1.0, 3)
        integrator = Integrator(scene, max_depth=0, background=uniform_background)
        result = integrator.evaluate(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), RandomStream(0))
        assert result == Color(1, 1, 1)

    def test_light_seen_directly(self):
        scene = Scene(MaterialTable({0: Emissive(Color(2, 3, 4))}))
        scene.insert_sphere(Point3(0, 0, 5), 1.0, 0)
        integrator = Integrator(scene, background=uniform_background)
        result = integrator.evaluate(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), RandomStream(0))
        # Lights absorb, so the path ends with the emission only
        assert result == Color(2, 3, 4)

    def test_absorbing_surface_is_black(self):
        scene = Scene(MaterialTable({0: Absorbing()}))
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        integrator = Integrator(scene, background=uniform_background)
        result = integrator.evaluate(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), RandomStream(0))
        assert result == Color(0, 0, 0)

    def test_low_throughput_terminates(self):
        scene = Scene(MaterialTable({0: Lambertian(0.005)}))
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        integrator = Integrator(scene, background=uniform_background)
        result = integrator.evaluate(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), RandomStream(0))
        assert result == Color(0, 0, 0)

    def test_mirror_reflects_background(self):
        scene = Scene(MaterialTable({0: SpecularReflection(0.8)}))
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        integrator = Integrator(scene, background=uniform_background)
        direction = Vec3(1, -1, 0).normalize()
        result = integrator.evaluate(Ray(Point3(0, 1, 0), direction), RandomStream(0))
        assert result == Color(0.8, 0.8, 0.8)

    def test_negative_depth_rejected(self):
        with pytest.raises(ValueError):
            Integrator(Scene(), max_depth=-1)


class TestIntegratorDepthBound:
    """Test that paths never exceed max_depth interactions."""

    def test_trapped_path_stops_at_max_depth(self):
        material = CountingMaterial()
        scene = Scene(MaterialTable({0: material}))
        # Two facing mirrors keep the path bouncing forever
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        scene.insert_plane(Vec3(0, -1, 0), 2.0, 0)

        integrator = Integrator(scene, max_depth=17, background=uniform_background)
        result = integrator.evaluate(Ray(Point3(0, 1, 0), Vec3(0, 1, 0)), RandomStream(0))

        assert material.calls == 17
        assert result == Color(1, 1, 1)

    def test_depth_one(self):
        material = CountingMaterial()
        scene = Scene(MaterialTable({0: material}))
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        scene.insert_plane(Vec3(0, -1, 0), 2.0, 0)

        Integrator(scene, max_depth=1).evaluate(Ray(Point3(0, 1, 0), Vec3(0, 1, 0)), RandomStream(0))
        assert material.calls == 1


class TestIntegratorEnergy:
    """Test estimator convergence on simple scenes."""

    def test_lambertian_ground_converges_to_albedo(self):
        albedo = 0.5
        scene = Scene(MaterialTable({0: Lambertian(albedo)}))
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        integrator = Integrator(scene, background=uniform_background)
        stream = RandomStream(0)

        samples = 400
        total = Color(0, 0, 0)
        for _ in range(samples):
            total = total + integrator.evaluate(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), stream)
        mean = total / samples

        for channel in mean:
            assert abs(channel - albedo) < 0.05 * albedo

    def test_emission_weighted_by_throughput(self):
        materials = MaterialTable({0: SpecularReflection(0.5), 1: Emissive(1.0)})
        scene = Scene(materials)
        scene.insert_plane(Vec3(0, 1, 0), 0.0, 0)
        scene.insert_sphere(Point3(0, 5, 0), 1.0, 1)
        integrator = Integrator(scene, background=uniform_background)

        # Straight down onto the mirror, straight back up into the light
        result = integrator.evaluate(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), RandomStream(0))
        assert result == Color(0.5, 0.5, 0.5)
