"""
Perspective camera shared by both viewports.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging

from trefoil.model.vector_math import Vector, Spherical

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE = 8.0


@dataclass
class Camera:
    fov: float = 75.0          # vertical field of view, degrees
    aspect: float = 1.0
    near: float = 0.1
    far: float = 1000.0
    position: Vector = field(default_factory=lambda: Vector(0.0, 0.0, DEFAULT_DISTANCE))
    target: Vector = field(default_factory=Vector)

    min_distance: float = 3.0
    max_distance: float = 30.0
    reference_distance: float = DEFAULT_DISTANCE

    def look_at(self, target: Vector) -> None:
        self.target = target.copy()

    def set_viewport(self, width: int, height: int) -> None:
        """Update the aspect ratio after a resize. Zero-size viewports are ignored."""
        if width <= 0 or height <= 0:
            logger.debug(f"Ignoring degenerate viewport {width}x{height}.")
            return
        self.aspect = width / height

    @property
    def distance(self) -> float:
        return self.position.distance_to(self.target)

    @property
    def zoom_factor(self) -> float:
        """> 1 when the camera is closer than its reference distance."""
        d = self.distance
        if d == 0.0:
            return 1.0
        return self.reference_distance / d

    def orbit(self, d_theta: float, d_phi: float) -> None:
        """Rotate the camera around its target (radians)."""
        spherical = Spherical.from_vector(self.position - self.target)
        spherical.theta += d_theta
        spherical.phi += d_phi
        spherical.make_safe()
        self.position = self.target + Vector.from_spherical(spherical)

    def zoom(self, factor: float) -> None:
        """Scale the distance to the target (factor < 1 moves closer)."""
        if factor <= 0.0:
            return
        offset = self.position - self.target
        d = offset.magnitude
        if d == 0.0:
            return
        new_d = min(self.max_distance, max(self.min_distance, d * factor))
        self.position = self.target + offset * (new_d / d)

    def reset(self) -> None:
        self.position = Vector(0.0, 0.0, self.reference_distance)
        self.target = Vector()
