"""
Debounced Mesh Rebuilds
=======================
Coalesces bursts of parameter changes (slider dragging) into a single tube
rebuild.

Why is this file needed?
------------------------
1. Responsiveness: Sliders emit dozens of values per second; rebuilding on
   each of them would stall the frame loop. Only the last value inside the
   debounce window is built.
2. Consistency: A new mesh is built completely before it replaces the
   published one, so a render never sees a half-built mesh.

Classes:
    MeshRebuilder: Single-shot QTimer debounce around TubeMeshBuilder.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from trefoil.config import DEBOUNCE_MS
from trefoil.model.mesh import Mesh
from trefoil.model.parameters import ShapeParameters
from trefoil.model.tube import TubeMeshBuilder

logger = logging.getLogger(__name__)


class MeshRebuilder(QObject):
    # Signal: (Mesh, ShapeParameters)
    mesh_rebuilt = Signal(object, object)

    def __init__(
        self,
        builder: Optional[TubeMeshBuilder] = None,
        delay_ms: int = DEBOUNCE_MS,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self.builder = builder or TubeMeshBuilder()
        self._mesh: Optional[Mesh] = None
        self._mesh_params: Optional[ShapeParameters] = None
        self._pending: Optional[ShapeParameters] = None
        self.rebuild_count = 0

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self.flush)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def mesh(self) -> Optional[Mesh]:
        """The last fully built mesh."""
        return self._mesh

    @property
    def mesh_params(self) -> Optional[ShapeParameters]:
        return self._mesh_params

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def request(self, params: ShapeParameters) -> None:
        """Schedule a rebuild; a newer request replaces an older pending one."""
        self._pending = params
        self._timer.start()

    def flush(self) -> Optional[Mesh]:
        """Build the pending request now (no-op if nothing is pending)."""
        self._timer.stop()
        if self._pending is None:
            return None
        params, self._pending = self._pending, None
        return self.rebuild_now(params)

    def cancel(self) -> None:
        self._timer.stop()
        self._pending = None

    def rebuild_now(self, params: ShapeParameters) -> Mesh:
        started = time.perf_counter()
        mesh = self.builder.build(params)
        # publish only the finished mesh
        self._mesh, self._mesh_params = mesh, params.sanitized()
        self.rebuild_count += 1
        logger.debug(
            f"Mesh rebuilt in {1000.0 * (time.perf_counter() - started):.1f} ms "
            f"({mesh.n_triangles} triangles)."
        )
        self.mesh_rebuilt.emit(mesh, self._mesh_params)
        return mesh
