"""
Materials system.

Implements the closed set of surface models used by the integrator:
- Lambertian diffuse reflection (cosine-weighted importance sampling)
- Specular (mirror) reflection
- Specular dielectric interface with Fresnel-weighted reflection/refraction
- Emissive light sources
- Absorbing (black) surfaces

Every `sample` call returns an incident direction and a throughput weight
such that weight * |cos(incident, normal)| is an estimate of the reflected
radiance transfer. The integrator applies the cosine term.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Union
import math

from .vec3 import Vec3, Color, almost_zero, safe_sqrt
from .sampling import RandomStream


@dataclass
class ScatterResult:
    """Result of a material sample operation."""
    incident: Vec3
    weight: Color


def make_same_side(outgoing: Vec3, normal: Vec3, incident: Vec3) -> Vec3:
    """Flip incident onto the same side of the surface as outgoing."""
    if outgoing.dot(normal) * incident.dot(normal) < 0.0:
        return (-incident).reflect(normal)
    return incident


def fresnel_cos_i(eta: float, cos_o: float) -> float:
    """Signed cosine of the refracted direction (Snell's law in cosine form).

    Returns 0 on total internal reflection.
    """
    sin_o2 = 1.0 - cos_o * cos_o
    sin_i2 = eta * eta * sin_o2
    if sin_i2 >= 1.0:
        return 0.0

    cos_i = safe_sqrt(1.0 - sin_i2)
    return -cos_i if cos_o > 0.0 else cos_i


def fresnel_value(eta: float, cos_o: float, cos_i: float) -> float:
    """Unpolarized dielectric Fresnel reflectance (mean of s and p terms)."""
    if almost_zero(cos_i):
        return 1.0

    cos_o = abs(cos_o)
    cos_i = abs(cos_i)

    para0 = cos_o * eta
    para1 = cos_i
    perp0 = cos_o
    perp1 = cos_i * eta

    para = (para0 - para1) / (para0 + para1)
    perp = (perp0 - perp1) / (perp0 + perp1)
    return (para * para + perp * perp) / 2.0


def _as_color(value: Union[Color, float]) -> Color:
    if isinstance(value, Vec3):
        return value
    return Color.splat(float(value))


class Material(ABC):
    """Abstract base class for materials.

    `albedo` is multiplied into every sampled weight after the BSDF call.
    """

    def __init__(self, albedo: Union[Color, float] = 1.0):
        self.albedo = _as_color(albedo)

    def sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> ScatterResult:
        """Sample an incident direction for the given outgoing direction.

        Args:
            outgoing: Unit direction pointing away from the surface
            normal: Unit surface normal
            stream: The calling worker's random stream

        Returns:
            ScatterResult with the incident direction and throughput weight
        """
        incident, weight = self._sample(outgoing, normal, stream)
        return ScatterResult(incident=incident, weight=Color.splat(weight) * self.albedo)

    @abstractmethod
    def _sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> tuple[Vec3, float]:
        pass

    def emitted(self) -> Color:
        """Return emitted radiance. Default is no emission."""
        return Color(0, 0, 0)


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) reflection."""

    def _sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> tuple[Vec3, float]:
        incident = (normal + stream.on_unit_sphere()).normalize()
        incident = make_same_side(outgoing, normal, incident)

        evaluated = 1.0 / math.pi
        pdf = incident.abs_dot(normal) / math.pi
        if almost_zero(pdf):
            return incident, 0.0
        return incident, evaluated / pdf

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class SpecularReflection(Material):
    """Perfect mirror."""

    def _sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> tuple[Vec3, float]:
        incident = outgoing.reflect(normal)
        correction = incident.abs_dot(normal)
        if almost_zero(correction):
            return incident, 0.0
        return incident, 1.0 / correction

    def __repr__(self) -> str:
        return f"SpecularReflection(albedo={self.albedo})"


class SpecularFresnel(Material):
    """Smooth dielectric interface (glass, water)."""

    def __init__(self, eta: float = 1.0 / 1.5, albedo: Union[Color, float] = 1.0):
        """Create a dielectric interface.

        Args:
            eta: Relative index of refraction, outside over inside
                 (1/1.5 for air to glass)
            albedo: Throughput multiplier
        """
        super().__init__(albedo)
        self.eta = eta

    def _sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> tuple[Vec3, float]:
        eta = self.eta
        cos_o = outgoing.dot(normal)
        if cos_o < 0.0:
            eta = 1.0 / eta

        cos_i = fresnel_cos_i(eta, cos_o)
        reflectance = fresnel_value(eta, cos_o, cos_i)

        # Choosing reflection with probability equal to the reflectance cancels
        # the Fresnel term from the weight
        if stream.random_float() < reflectance:
            incident = outgoing.reflect(normal).normalize()
        else:
            incident = outgoing.refract(normal, eta, cos_i)

        correction = incident.abs_dot(normal)
        if almost_zero(correction):
            return incident, 0.0
        return incident, 1.0 / correction

    def __repr__(self) -> str:
        return f"SpecularFresnel(eta={self.eta:.4f}, albedo={self.albedo})"


class Emissive(Material):
    """Light-emitting material. Does not scatter."""

    def __init__(self, color: Union[Color, float] = 1.0, intensity: float = 1.0):
        """Create an emissive material.

        Args:
            color: The emission color
            intensity: Emission intensity multiplier
        """
        super().__init__(0.0)
        self.color = _as_color(color)
        self.intensity = intensity

    def _sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> tuple[Vec3, float]:
        return normal, 0.0

    def emitted(self) -> Color:
        return self.color * self.intensity

    def __repr__(self) -> str:
        return f"Emissive(color={self.color}, intensity={self.intensity})"


class Absorbing(Material):
    """Fully absorbing black surface."""

    def __init__(self):
        super().__init__(0.0)

    def _sample(self, outgoing: Vec3, normal: Vec3, stream: RandomStream) -> tuple[Vec3, float]:
        return normal, 0.0

    def __repr__(self) -> str:
        return "Absorbing()"


class MaterialTable(Mapping[int, Material]):
    """Maps material identifiers to materials."""

    def __init__(self, materials: Optional[Mapping[int, Material]] = None):
        self._materials: Dict[int, Material] = {}
        for identifier, material in (materials or {}).items():
            self.register(identifier, material)

    def register(self, identifier: int, material: Material) -> None:
        """Bind `material` to `identifier`, replacing any previous binding."""
        if not isinstance(identifier, int) or identifier < 0:
            raise ValueError(f"Material identifier must be a non-negative integer, got {identifier!r}")
        if not isinstance(material, Material):
            raise TypeError(f"Expected a Material, got {type(material).__name__}")
        self._materials[identifier] = material

    def __getitem__(self, identifier: int) -> Material:
        return self._materials[identifier]

    def __iter__(self) -> Iterator[int]:
        return iter(self._materials)

    def __len__(self) -> int:
        return len(self._materials)

    def __repr__(self) -> str:
        return f"MaterialTable({self._materials!r})"


def default_materials() -> MaterialTable:
    """The reference material set: diffuse, mirror, glass and a white light."""
    return MaterialTable({
        0: Lambertian(0.5),
        1: SpecularReflection(0.8),
        2: SpecularFresnel(1.0 / 1.5, 0.9),
        3: Emissive(1.0),
    })
