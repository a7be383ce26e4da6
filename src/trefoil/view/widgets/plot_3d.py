"""
3D Visualization Widget (PyVista Wrapper)
"""

from __future__ import annotations

import logging
from typing import Optional

import pyvista as pv
from pyvistaqt import QtInteractor
from PySide6.QtGui import QCloseEvent, QResizeEvent
from PySide6.QtWidgets import QWidget, QVBoxLayout

from trefoil.config import BACKGROUND_COLOR
from trefoil.controller.knot import KnotController
from trefoil.model.camera import Camera
from trefoil.model.mesh import Mesh
from trefoil.view.widgets.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)


class PyVistaWidget(QWidget):
    BACKEND = "vtk"

    def __init__(self, controller: KnotController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        # --- Actors state ---
        self._knot_actor: Optional[pv.Actor] = None

        if controller.mesh is not None:
            self.set_mesh(controller.mesh)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_mesh(self, mesh: Mesh) -> None:
        """Replace the knot actor with one built from `mesh`."""
        logger.debug(f"Updating 3D knot actor ({mesh.n_triangles} triangles).")
        polydata = VtkUtils.mesh_to_polydata(mesh)
        material = self.controller.knot.material

        new_actor = self.plotter.add_mesh(
            polydata,
            name="trefoil",  # replaces the previous actor with the same name
            show_scalar_bar=False,
            pickable=False,
            render=False,
            **VtkUtils.material_kwargs(material)
        )
        self._knot_actor = new_actor
        self._apply_transform()

    def render_scene(self) -> None:
        """Called by the frame loop."""
        if self._knot_actor is None:
            return
        self._apply_transform()
        self.plotter.render()

    def reset_camera(self) -> None:
        """Back to the controller's camera; mouse orbiting is handled by VTK in between."""
        self.controller.camera.reset()
        self._sync_camera(self.controller.camera)
        self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background(BACKGROUND_COLOR)
        self.plotter.enable_anti_aliasing()
        self.plotter.remove_all_lights()

        key = pv.Light(position=(5.0, 5.0, 5.0), light_type="scene light", intensity=0.9)
        fill = pv.Light(position=(-5.0, -3.0, 4.0), color="#4a9eff", light_type="scene light", intensity=0.4)
        ambient = pv.Light(light_type="headlight", intensity=0.3)
        for light in (key, fill, ambient):
            self.plotter.add_light(light)

        self._sync_camera(self.controller.camera)

    def _apply_transform(self) -> None:
        knot = self.controller.knot
        if self._knot_actor is None:
            return
        self._knot_actor.user_matrix = VtkUtils.transform_matrix(knot.position, knot.rotation)

    def _sync_camera(self, camera: Camera) -> None:
        cam = self.plotter.camera
        cam.position = (camera.position.x, camera.position.y, camera.position.z)
        cam.focal_point = (camera.target.x, camera.target.y, camera.target.z)
        cam.up = (0.0, 1.0, 0.0)
        cam.view_angle = camera.fov
        cam.clipping_range = (camera.near, camera.far)

    # ---- Qt events ----

    def resizeEvent(self, event: QResizeEvent) -> None:
        self.controller.set_viewport(event.size().width(), event.size().height())
        super().resizeEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.plotter.close()
        super().closeEvent(event)
