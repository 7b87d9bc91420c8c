"""Basic geometric value types: vectors, rays, colours and hit records."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass(frozen=True)
class Vec3:
    """An immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: Vec3) -> float:
        """Return the dot product with ``other``."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Return the cross product ``self x other``."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vec3:
        """Return a unit vector in the same direction.

        Raises ValueError for the zero vector.
        """
        n = self.length()
        if n == 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / n


@dataclass(frozen=True)
class Ray:
    """A half-line given by an origin and a direction."""

    origin: Vec3 = field(default_factory=Vec3)
    direction: Vec3 = field(default_factory=Vec3)

    def point_at(self, t: float) -> Vec3:
        """Return ``origin + t * direction``."""
        return self.origin + t * self.direction


@dataclass(frozen=True)
class Color:
    """An RGB colour; black by default."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0


@dataclass
class HitRecord:
    """Details of a ray/surface intersection."""

    t: float = 0.0
    p: Vec3 = field(default_factory=Vec3)
    normal: Vec3 = field(default_factory=Vec3)
    u: float = 0.0
    v: float = 0.0
    material: Any = None