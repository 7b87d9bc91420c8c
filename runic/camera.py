"""Pinhole camera that generates primary rays."""

from __future__ import annotations

import math

from .geometry import Ray, Vec3
from .rng import HashRandom

PI = 3.14159265358979323846


class Camera:
    """A camera positioned at ``look_from`` looking at ``look_at``."""

    def __init__(
        self,
        look_from: Vec3,
        look_at: Vec3,
        up: Vec3,
        vfov: float,
        aspect: float,
        aperture: float,
        focus_distance: float,
    ) -> None:
        self.origin = look_from
        self.look_at = look_at
        self.up = up
        self.aspect_ratio = aspect
        self.aperture = aperture
        self.focus_distance = focus_distance
        self._rng = HashRandom(2048)
        self.set_vfov(vfov)
        self._update()

    def _update(self) -> None:
        self.w = (self.origin - self.look_at).normalized()
        self.u = self.up.cross(self.w).normalized()
        self.v = self.w.cross(self.u)

        half_height = math.tan(self.field_of_view / 2)
        half_width = self.aspect_ratio * half_height
        fd = self.focus_distance

        self.lower_left_corner = (
            self.origin
            - half_width * fd * self.u
            - half_height * fd * self.v
            - fd * self.w
        )
        self.horizontal = 2 * half_width * fd * self.u
        self.vertical = 2 * half_height * fd * self.v

    def set_vfov(self, fov: float) -> None:
        """Set the vertical field of view in degrees.

        The view frame is rebuilt on the next move, turn or aspect change.
        """
        self.field_of_view = fov * PI / 180

    def move_to(self, x: float, y: float, z: float) -> None:
        """Move the camera and rebuild the view frame."""
        self.origin = Vec3(x, y, z)
        self._update()

    def look_towards(self, x: float, y: float, z: float) -> None:
        """Change the point looked at and rebuild the view frame."""
        self.look_at = Vec3(x, y, z)
        self._update()

    def set_aspect_ratio(self, aspect: float) -> None:
        """Change the aspect ratio and rebuild the view frame."""
        self.aspect_ratio = aspect
        self._update()

    def get_ray(self, s: float, t: float) -> Ray:
        """Return the ray through screen coordinates ``(s, t)`` in [0, 1]."""
        offset = Vec3()
        direction = (
            self.lower_left_corner
            + s * self.horizontal
            + t * self.vertical
            - self.origin
            - offset
        )
        return Ray(self.origin + offset, direction)

    def random_in_unit_disk(self) -> Vec3:
        """Sample a point in the unit disk from the camera's own generator."""
        return self._rng.random_in_unit_disk()