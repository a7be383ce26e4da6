"""
Viewer State (Data Model)
=========================
This module defines the central data structure for the running application
and the capability every parameter provider implements.

Why is this file needed?
------------------------
1. State Management: It holds the current shape parameters and the spin
   settings in one place.
2. Decoupling: The rendering core depends on the `ParameterSource` protocol,
   never on a concrete control panel, so any UI (or a script) can drive it.

Classes:
    ParameterSource: get/set/on_change capability.
    KnotState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Mapping, Protocol, Union, runtime_checkable

from trefoil.model.parameters import ShapeParameters

logger = logging.getLogger(__name__)

ParamsLike = Union[ShapeParameters, Mapping[str, Any]]


@runtime_checkable
class ParameterSource(Protocol):
    def get_params(self) -> ShapeParameters: ...
    def set_params(self, params: ParamsLike) -> None: ...
    def on_change(self, callback: Callable[[ShapeParameters], None]) -> None: ...


@dataclass
class KnotState:
    """
    Holds everything the frame loop needs besides the mesh itself.
    Pass this instance to your Controllers and Views.
    """
    params: ShapeParameters = field(default_factory=ShapeParameters)
    rotation_speed: float = 1.0
    auto_rotate: bool = True

    def reset(self) -> None:
        self.params = ShapeParameters()
        self.rotation_speed = 1.0
        self.auto_rotate = True
        logger.info("Viewer state has been reset.")
