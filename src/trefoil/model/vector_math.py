"""
Vector, spherical coordinate and colour primitives.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

EPSILON = 1e-9


@dataclass
class Vector:
    """
    A vector in 3D space representing direction and magnitude.
    Also used for positions and Euler rotations (radians) of scene objects.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    def __truediv__(self, scalar: float) -> Vector:
        if scalar == 0.0:
            raise ZeroDivisionError
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalize(self) -> Vector:
        mag = self.magnitude
        if mag == 0.0:
            return Vector(0.0, 0.0, 0.0)
        return self / mag

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def distance_to(self, other: Vector) -> float:
        return (self - other).magnitude

    def copy(self) -> Vector:
        return Vector(self.x, self.y, self.z)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: npt.ArrayLike) -> Vector:
        x, y, z = np.asarray(arr, dtype=np.float64).reshape(3)
        return cls(float(x), float(y), float(z))

    @classmethod
    def from_spherical(cls, spherical: Spherical) -> Vector:
        """Y-up convention: phi is measured from +Y, theta around Y starting at +Z."""
        sin_phi_radius = math.sin(spherical.phi) * spherical.radius
        return cls(
            sin_phi_radius * math.sin(spherical.theta),
            math.cos(spherical.phi) * spherical.radius,
            sin_phi_radius * math.cos(spherical.theta)
        )


@dataclass
class Spherical:
    """Spherical coordinates (radius, polar angle phi, azimuth theta)."""
    radius: float = 1.0
    phi: float = 0.0
    theta: float = 0.0

    @classmethod
    def from_vector(cls, v: Vector) -> Spherical:
        radius = v.magnitude
        if radius == 0.0:
            return cls(0.0, 0.0, 0.0)
        theta = math.atan2(v.x, v.z)
        phi = math.acos(min(1.0, max(-1.0, v.y / radius)))
        return cls(radius, phi, theta)

    def make_safe(self) -> Spherical:
        """Keep phi away from the poles so a Y-up camera never flips."""
        eps = 1e-6
        self.phi = max(eps, min(math.pi - eps, self.phi))
        return self


@dataclass
class Color:
    """An RGB colour with components in [0, 1]."""
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float) -> Color:
        return cls().set_hsl(h, s, l)

    @classmethod
    def from_hex(cls, value: str) -> Color:
        value = value.lstrip("#")
        if len(value) != 6:
            raise ValueError(f"Expected a #rrggbb colour, got '#{value}'.")
        return cls(*(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4)))

    def set_hsl(self, h: float, s: float, l: float) -> Color:
        h = ((h % 1.0) + 1.0) % 1.0

        c = (1.0 - abs(2.0 * l - 1.0)) * s
        x = c * (1.0 - abs((h * 6.0) % 2.0 - 1.0))
        m = l - c / 2.0

        match int(h * 6.0):
            case 0:
                r, g, b = c, x, 0.0
            case 1:
                r, g, b = x, c, 0.0
            case 2:
                r, g, b = 0.0, c, x
            case 3:
                r, g, b = 0.0, x, c
            case 4:
                r, g, b = x, 0.0, c
            case _:
                r, g, b = c, 0.0, x

        self.r, self.g, self.b = r + m, g + m, b + m
        return self

    def to_hex(self) -> str:
        return "#" + "".join(f"{round(min(1.0, max(0.0, v)) * 255):02x}" for v in (self.r, self.g, self.b))

    def to_tuple(self) -> tuple[float, float, float]:
        return self.r, self.g, self.b


def normalize_rows(vectors: npt.NDArray[np.float64]) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Normalize each row of an (N, 3) array.

    Returns:
        (unit_vectors, norms). Rows with a norm below EPSILON are left as zeros
        so the caller can decide on a fallback.
    """
    norms = np.linalg.norm(vectors, axis=1)
    safe = np.where(norms < EPSILON, 1.0, norms)
    unit = vectors / safe[:, None]
    unit[norms < EPSILON] = 0.0
    return unit, norms
