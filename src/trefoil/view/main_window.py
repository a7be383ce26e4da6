"""
Main Application Window
=======================
The primary GUI container: control panel on the left, viewport on the right,
and the frame loop that drives both.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Backend choice: It picks the PyVista viewport when OpenGL is usable and
   the QPainter fallback otherwise.
3. Frame loop: A QTimer steps the controller (tween + spin) and asks the
   viewport to render.
"""
import importlib.util
import logging
import time
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QSplitter, QWidget

from trefoil.config import FRAME_INTERVAL_MS, resolve_backend
from trefoil.controller.knot import KnotController
from trefoil.model.mesh import Mesh
from trefoil.view.widgets.controls import ControlPanel
from trefoil.view.widgets.fallback_canvas import FallbackCanvas

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Trefoil Knot"


def create_viewport(controller: KnotController, backend: Optional[str] = None, parent: Optional[QWidget] = None) -> QWidget:
    """
    Build the viewport for `backend` ("auto", "vtk" or "fallback"; None reads
    the TREFOIL_BACKEND environment variable).
    "auto" and "vtk" fall back to the QPainter canvas when pyvistaqt is not
    installed or the OpenGL interactor cannot be created.
    """
    backend = resolve_backend(backend)
    if backend == "fallback":
        logger.info("Using the 2D projection fallback viewport.")
        return FallbackCanvas(controller, parent)

    if importlib.util.find_spec("pyvistaqt") is None:
        logger.warning("pyvistaqt is not installed, using the 2D projection fallback viewport.")
        return FallbackCanvas(controller, parent)

    from trefoil.view.widgets.plot_3d import PyVistaWidget

    try:
        widget = PyVistaWidget(controller, parent)
    except RuntimeError as e:
        logger.warning(f"3D viewport unavailable ({e}), using the 2D projection fallback viewport.")
        return FallbackCanvas(controller, parent)
    logger.info("Using the PyVista 3D viewport.")
    return widget


class MainWindow(QMainWindow):
    def __init__(self, controller: KnotController, backend: Optional[str] = None) -> None:
        super().__init__()
        self.controller = controller

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1280, 800)

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Control Panel ---
        self.controls = ControlPanel(self.controller)
        splitter.addWidget(self.controls)

        # --- RIGHT SIDE: Viewport ---
        self.viewport = create_viewport(self.controller, backend)
        splitter.addWidget(self.viewport)
        splitter.setSizes([320, 960])

        self._create_actions()
        self._create_menus()

        # --- SIGNAL CONNECTIONS ---
        self.controller.mesh_changed.connect(self.on_mesh_changed)

        # --- FRAME LOOP ---
        self._last_frame = time.perf_counter()
        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(FRAME_INTERVAL_MS)
        self.frame_timer.timeout.connect(self.on_frame)
        self.frame_timer.start()

    @property
    def backend(self) -> str:
        return getattr(self.viewport, "BACKEND", "unknown")

    def _create_actions(self) -> None:
        self.act_reset = QAction("Reset Parameters", self)
        self.act_reset.setShortcut("Ctrl+R")
        self.act_reset.triggered.connect(self.controller.reset)

        self.act_reset_view = QAction("Reset View", self)
        self.act_reset_view.setShortcut("Ctrl+0")
        self.act_reset_view.triggered.connect(self.viewport.reset_camera)

        self.act_toggle_controls = QAction("Toggle Controls", self)
        self.act_toggle_controls.setShortcut("H")
        self.act_toggle_controls.triggered.connect(self.controls.toggle)

        self.act_pause = QAction("Spin", self)
        self.act_pause.setCheckable(True)
        self.act_pause.setChecked(self.controller.state.auto_rotate)
        self.act_pause.setShortcut("Space")
        self.act_pause.toggled.connect(self.on_spin_toggled)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_exit)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_reset)
        view_menu.addAction(self.act_reset_view)
        view_menu.addSeparator()
        view_menu.addAction(self.act_toggle_controls)
        view_menu.addAction(self.act_pause)

    # --- SLOTS ---

    def on_frame(self) -> None:
        now = time.perf_counter()
        dt, self._last_frame = now - self._last_frame, now
        self.controller.step(dt)
        self.viewport.render_scene()

    def on_mesh_changed(self, mesh: Mesh) -> None:
        self.viewport.set_mesh(mesh)
        self.statusBar().showMessage(
            f"{mesh.segment_count} segments, {mesh.n_vertices} vertices, {mesh.n_triangles} triangles"
        )

    def on_spin_toggled(self, checked: bool) -> None:
        self.controller.state.auto_rotate = checked

    def closeEvent(self, event) -> None:
        self.frame_timer.stop()
        self.controller.rebuilder.cancel()
        super().closeEvent(event)
