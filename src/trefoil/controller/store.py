"""
Parameter Store
===============
The Qt-side implementation of the `ParameterSource` capability.

Why is this file needed?
------------------------
1. Single source of truth: the control panel, presets, the tween and scripts
   all write through `set_params`; everything downstream listens to one
   `params_changed` signal.
2. Safety: values are sanitized before they are published, so listeners
   never see an out-of-range record.
"""
from __future__ import annotations

import logging
from typing import Callable, Mapping

from PySide6.QtCore import QObject, Signal

from trefoil.model.parameters import ShapeParameters
from trefoil.model.state import KnotState, ParamsLike

logger = logging.getLogger(__name__)


class ParameterStore(QObject):
    # Signal: (ShapeParameters)
    params_changed = Signal(object)

    def __init__(self, state: KnotState | None = None) -> None:
        super().__init__()
        self.state = state or KnotState()
        self.state.params = self.state.params.sanitized()

    def get_params(self) -> ShapeParameters:
        return self.state.params

    def set_params(self, params: ParamsLike) -> None:
        """
        Replace the current parameters. A mapping is merged over the current
        values, so partial updates (`{"magnitude": 3.0}`) are allowed.
        """
        if isinstance(params, ShapeParameters):
            new = params.sanitized()
        elif isinstance(params, Mapping):
            new = ShapeParameters.from_dict(params, base=self.state.params).sanitized()
        else:
            raise TypeError(f"Expected ShapeParameters or a mapping, got {type(params).__name__}.")

        if new == self.state.params:
            return
        self.state.params = new
        self.params_changed.emit(new)

    def on_change(self, callback: Callable[[ShapeParameters], None]) -> None:
        self.params_changed.connect(callback)
