"""
Triangle mesh buffers shared by the builder and the renderers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Mesh:
    """
    Positions, per-vertex normals and triangle indices.

    The arrays are made read-only on construction: a published mesh is
    replaced, never edited.
    """
    positions: npt.NDArray[np.float64]  # (V, 3)
    normals: npt.NDArray[np.float64]    # (V, 3)
    indices: npt.NDArray[np.int64]      # (T, 3)
    segment_count: int = 0
    cross_section_points: int = 0

    def __post_init__(self) -> None:
        for arr in (self.positions, self.normals, self.indices):
            arr.setflags(write=False)

    @property
    def n_vertices(self) -> int:
        return int(self.positions.shape[0])

    @property
    def n_triangles(self) -> int:
        return int(self.indices.shape[0])

    def is_consistent(self) -> bool:
        """Every index refers to an existing vertex and the buffers line up."""
        if self.positions.shape != self.normals.shape:
            return False
        if self.indices.ndim != 2 or self.indices.shape[1] != 3:
            return False
        if self.n_triangles == 0:
            return True
        return bool(self.indices.min() >= 0 and self.indices.max() < self.n_vertices)

    def edge_use_counts(self) -> npt.NDArray[np.int64]:
        """How many triangles use each undirected edge (2 everywhere on a closed manifold)."""
        tri = self.indices
        edges = np.vstack([tri[:, [0, 1]], tri[:, [1, 2]], tri[:, [2, 0]]])
        edges.sort(axis=1)
        _, counts = np.unique(edges, axis=0, return_counts=True)
        return counts

    def is_closed_manifold(self) -> bool:
        return self.n_triangles > 0 and bool(np.all(self.edge_use_counts() == 2))

    def bounds(self) -> tuple[float, float, float, float, float, float]:
        """(x_min, x_max, y_min, y_max, z_min, z_max)"""
        lo = self.positions.min(axis=0)
        hi = self.positions.max(axis=0)
        return float(lo[0]), float(hi[0]), float(lo[1]), float(hi[1]), float(lo[2]), float(hi[2])
