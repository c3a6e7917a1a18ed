"""
Vector3 class for 3D math operations.

This is the fundamental building block of the path tracer, used for:
- Points in 3D space
- Direction vectors
- Linear RGB color values (throughput and radiance)
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np


ZERO_EPSILON = 8e-7
LUMINANCE_WEIGHTS = (0.212671, 0.715160, 0.072169)


def almost_zero(value: float, epsilon: float = ZERO_EPSILON) -> bool:
    """Return True if value lies strictly inside (-epsilon, epsilon)."""
    return -epsilon < value < epsilon


def safe_sqrt(value: float) -> float:
    """Square root that returns 0 for non-positive input (rounding noise)."""
    if value <= 0.0:
        return 0.0
    return math.sqrt(value)


class Vec3:
    """A 3D vector class supporting common vector operations.

    Uses numpy internally while providing a clean, Pythonic API.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @classmethod
    def splat(cls, value: float) -> Vec3:
        """Create a vector with all three components set to value."""
        return cls(value, value, value)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return Vec3.from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data / other._data)
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        Vectors whose squared length is within ZERO_EPSILON of zero come back
        as the zero vector instead of being divided by a near-zero length.
        """
        squared = self.length_squared()
        if almost_zero(squared):
            return Vec3(0, 0, 0)
        return Vec3.from_array(self._data * (1.0 / math.sqrt(squared)))

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def abs_dot(self, other: Vec3) -> float:
        """Absolute value of the dot product."""
        return abs(self.dot(other))

    def reflect(self, normal: Vec3) -> Vec3:
        """Mirror this vector about the given unit normal.

        Both this vector and the result point away from the surface:
        reflect(v, n) = n * 2(v.n) - v.
        """
        return normal * (2.0 * self.dot(normal)) - self

    def refract(self, normal: Vec3, eta: float, cos_i: float) -> Vec3:
        """Refract this outgoing direction through a surface.

        Args:
            normal: Surface normal
            eta: Relative index of refraction on the outgoing side
            cos_i: Signed cosine of the refracted direction with the normal

        Returns:
            The normalized incident direction on the far side of the surface
        """
        cos_o = self.dot(normal)
        return (normal * (eta * cos_o + cos_i) - self * eta).normalize()

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()


def luminance(color: Vec3) -> float:
    """Perceived brightness of a linear RGB color."""
    return color.dot(Vec3(*LUMINANCE_WEIGHTS))


def is_invalid(color: Vec3) -> bool:
    """Return True if any channel of the color is NaN or infinite."""
    return not math.isfinite(color.x + color.y + color.z)


# Convenience type aliases
Point3 = Vec3
Color = Vec3
