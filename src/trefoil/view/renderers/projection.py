"""
Projection Renderer (Fallback)
==============================
Draws the knot's centerline with QPainter when no OpenGL viewport is
available.

Pipeline per frame
------------------
1. Re-sample the centerline at a fixed resolution from the live parameters
   of the first scene object that has a mesh.
2. Rotate about Y, then about X (this order is part of the visual output).
3. Perspective divide: s = 1 / (1 + z k); screen = center + xy * view * s.
4. Stroke the polyline three times: gradient core, faint wireframe, glow.

The pure steps (`rotate_points`, `project_points`, `view_scale`,
`stroke_passes`) are module functions so they can be used without a surface.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import TYPE_CHECKING, Optional

import numpy as np
from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import (
    QBrush, QColor, QLinearGradient, QPaintDevice, QPainter, QPainterPath, QPen
)

from trefoil.config import BACKGROUND_COLOR, FALLBACK_RESOLUTION, PERSPECTIVE_K
from trefoil.model import TWO_PI
from trefoil.model.camera import Camera
from trefoil.model.curve import CurveEvaluator
from trefoil.model.parameters import ShapeParameters
from trefoil.model.scene import SceneGraph

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

MIN_DEPTH_DENOMINATOR = 0.05

GRADIENT_STOPS: tuple[tuple[float, str], ...] = (
    (0.0, "#4a9eff"),
    (0.5, "#2ecc71"),
    (1.0, "#ff6b35"),
)


@dataclass(frozen=True)
class StrokePass:
    name: str
    width: float
    color: Optional[QColor]  # None -> gradient brush
    glow_color: Optional[QColor] = None
    glow_blur: float = 0.0


def stroke_passes() -> list[StrokePass]:
    """Core -> wireframe -> glow. Order, widths and opacities are fixed."""
    return [
        StrokePass("core", 12.0, None, QColor("#4a9eff"), 20.0),
        StrokePass("wireframe", 2.0, QColor(255, 255, 255, round(0.1 * 255))),
        StrokePass("glow", 20.0, QColor(74, 158, 255, round(0.3 * 255)), QColor("#4a9eff"), 30.0),
    ]


def centerline(
    params: ShapeParameters,
    resolution: int = FALLBACK_RESOLUTION,
    evaluator: Optional[CurveEvaluator] = None
) -> npt.NDArray[np.float64]:
    """(resolution + 1, 3) points over [0, 2pi], endpoint included."""
    evaluator = evaluator or CurveEvaluator()
    ts = TWO_PI * np.arange(resolution + 1, dtype=np.float64) / resolution
    return evaluator.positions(params.sanitized(), ts)


def rotation_matrix(rot_x: float, rot_y: float) -> npt.NDArray[np.float64]:
    """
    3x3 matrix of the Y-then-X rotation:

        x' = x cosY - z sinY,  z' = x sinY + z cosY
        y'' = y cosX - z' sinX,  z'' = y sinX + z' cosX

    Used by both viewports.
    """
    cos_y, sin_y = math.cos(rot_y), math.sin(rot_y)
    cos_x, sin_x = math.cos(rot_x), math.sin(rot_x)
    about_y = np.array([
        [cos_y, 0.0, -sin_y],
        [0.0, 1.0, 0.0],
        [sin_y, 0.0, cos_y],
    ])
    about_x = np.array([
        [1.0, 0.0, 0.0],
        [0.0, cos_x, -sin_x],
        [0.0, sin_x, cos_x],
    ])
    return about_x @ about_y


def rotate_points(points: npt.ArrayLike, rot_x: float, rot_y: float) -> npt.NDArray[np.float64]:
    """Rotate (N, 3) points about Y by rot_y, then about X by rot_x."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return pts @ rotation_matrix(rot_x, rot_y).T


def view_scale(width: int, height: int, camera: Optional[Camera] = None) -> float:
    scale = min(width, height) / 8.0
    if camera is not None:
        scale *= camera.zoom_factor
    return scale


def project_points(
    points: npt.ArrayLike,
    width: int,
    height: int,
    scale: float,
    k: float = PERSPECTIVE_K
) -> npt.NDArray[np.float64]:
    """Perspective divide to (N, 2) screen coordinates."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    denom = np.maximum(1.0 + pts[:, 2] * k, MIN_DEPTH_DENOMINATOR)
    perspective = 1.0 / denom
    cx, cy = width / 2.0, height / 2.0
    return np.column_stack([
        cx + pts[:, 0] * scale * perspective,
        cy + pts[:, 1] * scale * perspective,
    ])


class ProjectionRenderer:
    def __init__(
        self,
        resolution: int = FALLBACK_RESOLUTION,
        k: float = PERSPECTIVE_K,
        background: str = BACKGROUND_COLOR,
        evaluator: Optional[CurveEvaluator] = None
    ) -> None:
        self.resolution = resolution
        self.k = k
        self.background = QColor(background)
        self.evaluator = evaluator or CurveEvaluator()
        self._surface_warned = False

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def render_frame(self, surface: Optional[QPaintDevice], scene: SceneGraph, camera: Optional[Camera] = None) -> bool:
        """
        Paint one frame on `surface`.

        Returns:
            True if the knot was drawn. A missing or zero-size surface makes
            this a no-op (logged once).
        """
        if surface is None or surface.width() <= 0 or surface.height() <= 0:
            self._warn_surface("Drawing surface unavailable or empty, fallback render skipped.")
            return False

        painter = QPainter()
        if not painter.begin(surface):
            self._warn_surface("Could not open a painter on the drawing surface, fallback render skipped.")
            return False

        try:
            width, height = surface.width(), surface.height()
            painter.fillRect(0, 0, width, height, self.background)
            with scene.traversal():
                obj = scene.first_with_mesh()
                if obj is None:
                    return False
                screen = self.project(obj.parameters, obj.rotation.x, obj.rotation.y, width, height, camera)
            self._paint_strokes(painter, screen, width, height, view_scale(width, height, camera))
            return True
        finally:
            painter.end()

    def project(
        self,
        params: ShapeParameters,
        rot_x: float,
        rot_y: float,
        width: int,
        height: int,
        camera: Optional[Camera] = None
    ) -> npt.NDArray[np.float64]:
        """Screen-space polyline for the given parameters and rotation."""
        pts = centerline(params, self.resolution, self.evaluator)
        pts = rotate_points(pts, rot_x, rot_y)
        return project_points(pts, width, height, view_scale(width, height, camera), self.k)

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _warn_surface(self, message: str) -> None:
        if not self._surface_warned:
            logger.warning(message)
            self._surface_warned = True

    @staticmethod
    def _path(screen: npt.NDArray[np.float64]) -> QPainterPath:
        path = QPainterPath()
        path.moveTo(QPointF(float(screen[0, 0]), float(screen[0, 1])))
        for x, y in screen[1:]:
            path.lineTo(QPointF(float(x), float(y)))
        return path

    @staticmethod
    def _gradient(width: int, height: int, scale: float) -> QLinearGradient:
        cx, cy = width / 2.0, height / 2.0
        gradient = QLinearGradient(cx - scale * 3, cy - scale * 3, cx + scale * 3, cy + scale * 3)
        for stop, color in GRADIENT_STOPS:
            gradient.setColorAt(stop, QColor(color))
        return gradient

    def _paint_strokes(
        self,
        painter: QPainter,
        screen: npt.NDArray[np.float64],
        width: int,
        height: int,
        scale: float
    ) -> None:
        painter.setRenderHint(QPainter.Antialiasing, True)
        path = self._path(screen)
        gradient = self._gradient(width, height, scale)

        for stroke in stroke_passes():
            if stroke.glow_color is not None and stroke.glow_blur > 0.0:
                self._paint_glow(painter, path, stroke)
            brush = QBrush(gradient) if stroke.color is None else QBrush(stroke.color)
            painter.strokePath(path, self._pen(brush, stroke.width))

    def _paint_glow(self, painter: QPainter, path: QPainterPath, stroke: StrokePass) -> None:
        """Approximate a canvas shadow blur with widening translucent strokes."""
        rings = 4
        for i in range(rings, 0, -1):
            color = QColor(stroke.glow_color)
            color.setAlphaF(0.12 * (rings - i + 1) / rings)
            painter.strokePath(path, self._pen(QBrush(color), stroke.width + stroke.glow_blur * i / rings))

    @staticmethod
    def _pen(brush: QBrush, width: float) -> QPen:
        pen = QPen(brush, width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        return pen
