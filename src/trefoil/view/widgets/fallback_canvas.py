"""
Fallback Canvas
Plain QWidget viewport painted by the ProjectionRenderer.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtGui import QMouseEvent, QPaintEvent, QResizeEvent, QWheelEvent
from PySide6.QtWidgets import QWidget

from trefoil.controller.knot import KnotController
from trefoil.model.mesh import Mesh
from trefoil.view.renderers.projection import ProjectionRenderer

logger = logging.getLogger(__name__)

ORBIT_SENSITIVITY = 0.005  # radians per pixel
ZOOM_STEP = 0.9


class FallbackCanvas(QWidget):
    BACKEND = "fallback"

    def __init__(self, controller: KnotController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.renderer = ProjectionRenderer()
        self._last_mouse_pos = None
        self.setMinimumSize(200, 200)

    def render_scene(self) -> None:
        """Called by the frame loop; paints on the next paint event."""
        self.update()

    def set_mesh(self, mesh: Mesh) -> None:
        # The centerline is re-sampled from the scene every frame.
        self.update()

    def reset_camera(self) -> None:
        self.controller.camera.reset()
        self.update()

    # ---- Qt events ----

    def paintEvent(self, event: QPaintEvent) -> None:
        self.renderer.render_frame(self, self.controller.scene, self.controller.camera)

    def resizeEvent(self, event: QResizeEvent) -> None:
        self.controller.set_viewport(event.size().width(), event.size().height())
        super().resizeEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        steps = event.angleDelta().y() / 120.0
        if steps:
            self.controller.camera.zoom(ZOOM_STEP ** steps)
            self.update()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        self._last_mouse_pos = event.position()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._last_mouse_pos is None:
            return
        pos = event.position()
        delta = pos - self._last_mouse_pos
        self._last_mouse_pos = pos
        knot = self.controller.knot
        knot.rotation.y += delta.x() * ORBIT_SENSITIVITY
        knot.rotation.x += delta.y() * ORBIT_SENSITIVITY
        self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        self._last_mouse_pos = None
        super().mouseReleaseEvent(event)
