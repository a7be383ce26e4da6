"""
Minimal Scene Graph
===================
A flat, ordered list of renderable objects. Each object carries its own
position/rotation; children are stored but no transform hierarchy is
composed by the renderers.

Structural changes (add/remove) are refused while a traversal is running,
which is how the single-threaded "no mutation during a render pass" rule is
enforced.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from typing import Callable, Iterator, Optional

from trefoil.model.mesh import Mesh
from trefoil.model.parameters import ShapeParameters
from trefoil.model.vector_math import Vector, Color

logger = logging.getLogger(__name__)


@dataclass
class Material:
    """Phong-like surface description (used by the 3D viewport only)."""
    color: Color = field(default_factory=lambda: Color.from_hex("#4a9eff"))
    specular: float = 0.6
    shininess: float = 60.0
    opacity: float = 1.0
    wireframe: bool = False


@dataclass(eq=False)
class SceneObject:
    name: str
    mesh: Optional[Mesh] = None
    material: Material = field(default_factory=Material)
    position: Vector = field(default_factory=Vector)
    rotation: Vector = field(default_factory=Vector)  # Euler angles, radians
    parameters: ShapeParameters = field(default_factory=ShapeParameters)
    children: list[SceneObject] = field(default_factory=list)

    def add(self, child: SceneObject) -> None:
        self.children.append(child)


class SceneGraph:
    def __init__(self) -> None:
        self._objects: list[SceneObject] = []
        self._traversals = 0

    def add(self, obj: SceneObject) -> None:
        self._check_not_traversing("add")
        self._objects.append(obj)
        logger.debug(f"Scene object '{obj.name}' added.")

    def remove(self, obj: SceneObject) -> None:
        """Remove `obj`; unknown objects are ignored."""
        self._check_not_traversing("remove")
        try:
            self._objects.remove(obj)
        except ValueError:
            return
        logger.debug(f"Scene object '{obj.name}' removed.")

    def for_each(self, fn: Callable[[SceneObject], None]) -> None:
        with self.traversal():
            for obj in self._objects:
                fn(obj)

    @contextmanager
    def traversal(self) -> Iterator[list[SceneObject]]:
        """Lock the structure for the duration of a render pass."""
        self._traversals += 1
        try:
            yield list(self._objects)
        finally:
            self._traversals -= 1

    def first_with_mesh(self) -> Optional[SceneObject]:
        for obj in self._objects:
            if obj.mesh is not None:
                return obj
        return None

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(list(self._objects))

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, obj: SceneObject) -> bool:
        return obj in self._objects

    def _check_not_traversing(self, action: str) -> None:
        if self._traversals:
            raise RuntimeError(f"Cannot {action} scene objects during a render pass.")
