"""
Knot Controller
===============
Wires the parameter store, the debounced rebuilder, the tween driver and the
scene together. Views talk to this object only.

Why is this file needed?
------------------------
It is the one place that knows the update rules:
1. A user edit cancels a running tween, updates the store and requests a
   debounced rebuild.
2. A tween step updates the store without cancelling itself and rebuilds
   the mesh in the same frame.
3. A finished rebuild is swapped into the scene object in one assignment,
   together with the parameters it was built from.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from trefoil.controller.animation import AnimationDriver
from trefoil.controller.rebuild import MeshRebuilder
from trefoil.controller.store import ParameterStore
from trefoil.model.camera import Camera
from trefoil.model.mesh import Mesh
from trefoil.model.parameters import ShapeParameters, load_parameter_presets, DEFAULT_PRESET_NAME
from trefoil.model.scene import SceneGraph, SceneObject
from trefoil.model.state import KnotState, ParamsLike

logger = logging.getLogger(__name__)

# radians per second at rotation_speed == 1
SPIN_RATE_Y = 0.3
SPIN_RATE_X = 0.18


class KnotController(QObject):
    # Signal: (Mesh)
    mesh_changed = Signal(object)

    def __init__(
        self,
        state: Optional[KnotState] = None,
        presets: Optional[dict[str, ShapeParameters]] = None,
        rebuilder: Optional[MeshRebuilder] = None
    ) -> None:
        super().__init__()
        self.store = ParameterStore(state)
        self.rebuilder = rebuilder or MeshRebuilder(parent=self)
        self.animation = AnimationDriver()
        self.presets = presets if presets is not None else load_parameter_presets()

        self.scene = SceneGraph()
        self.camera = Camera()
        self.knot = SceneObject(name="trefoil", parameters=self.store.get_params())
        self.scene.add(self.knot)

        self.store.on_change(self._on_params_changed)
        self.rebuilder.mesh_rebuilt.connect(self._on_mesh_rebuilt)

        # first mesh is built synchronously so the first frame has something to draw
        self.rebuilder.rebuild_now(self.store.get_params())

    @property
    def state(self) -> KnotState:
        return self.store.state

    @property
    def mesh(self) -> Optional[Mesh]:
        return self.knot.mesh

    # ------------------------------------------------------------------------------
    # Parameter updates
    # ------------------------------------------------------------------------------

    def get_params(self) -> ShapeParameters:
        return self.store.get_params()

    def set_params(self, params: ParamsLike) -> None:
        """User edit: supersedes any running tween."""
        self.animation.cancel()
        self.store.set_params(params)

    def reset(self) -> None:
        logger.info("Resetting parameters to defaults.")
        self.set_params(self.presets.get(DEFAULT_PRESET_NAME, ShapeParameters()))

    def apply_preset(self, name: str, animate: bool = True) -> None:
        if name not in self.presets:
            raise KeyError(f"Unknown preset '{name}'")
        target = self.presets[name]
        logger.info(f"Applying preset '{name}'.")
        if animate:
            self.animation.start(self.store.get_params(), target)
        else:
            self.set_params(target)

    def rebuild_mesh(self, params: Optional[ShapeParameters] = None) -> Mesh:
        """Synchronous rebuild, bypassing the debounce."""
        self.rebuilder.cancel()
        return self.rebuilder.rebuild_now(params or self.store.get_params())

    # ------------------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Advance tween and spin by `dt` seconds. Called once per frame by the host."""
        params = self.animation.step(dt)
        if params is not None:
            self.store.set_params(params)
            # tween frames are built immediately, only user edits are debounced
            self.rebuilder.flush()

        if self.state.auto_rotate:
            speed = self.state.rotation_speed
            self.knot.rotation.y += SPIN_RATE_Y * speed * dt
            self.knot.rotation.x += SPIN_RATE_X * speed * dt

    def set_rotation_speed(self, speed: float) -> None:
        self.state.rotation_speed = max(0.0, float(speed))

    def set_viewport(self, width: int, height: int) -> None:
        self.camera.set_viewport(width, height)

    # ------------------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------------------

    def _on_params_changed(self, params: ShapeParameters) -> None:
        self.rebuilder.request(params)

    def _on_mesh_rebuilt(self, mesh: Mesh, params: ShapeParameters) -> None:
        self.knot.mesh, self.knot.parameters = mesh, params
        self.mesh_changed.emit(mesh)
