"""
Tube Mesh Builder
=================
Sweeps a circular cross-section of varying radius along the trefoil curve.

Topology
--------
Ring i holds vertices i*R .. i*R + R - 1 (R = cross-section points). Each
quad between ring i and ring i+1 is split into two triangles wound so that
the face normal points away from the centerline. Ring N-1 connects back to
ring 0 and every ring closes on itself, so the surface is a closed torus-like
manifold with exactly N*R*2 triangles.
"""
from __future__ import annotations

import logging

import numpy as np

from trefoil.config import CROSS_SECTION_POINTS
from trefoil.model import TWO_PI
from trefoil.model.curve import CurveEvaluator
from trefoil.model.mesh import Mesh
from trefoil.model.parameters import ShapeParameters

logger = logging.getLogger(__name__)

MIN_CROSS_SECTION_POINTS = 8
MAX_CROSS_SECTION_POINTS = 16


class TubeMeshBuilder:
    def __init__(
        self,
        cross_section_points: int = CROSS_SECTION_POINTS,
        evaluator: CurveEvaluator | None = None
    ) -> None:
        clamped = min(MAX_CROSS_SECTION_POINTS, max(MIN_CROSS_SECTION_POINTS, int(cross_section_points)))
        if clamped != cross_section_points:
            logger.warning(f"Cross-section points {cross_section_points} clamped to {clamped}.")
        self.cross_section_points = clamped
        self.evaluator = evaluator or CurveEvaluator()

    def build(self, params: ShapeParameters) -> Mesh:
        params = params.sanitized()
        n = params.segment_count
        r = self.cross_section_points

        ts = TWO_PI * np.arange(n, dtype=np.float64) / n
        frames = self.evaluator.sample(params, ts)

        # radial directions, shape (N, R, 3)
        theta = TWO_PI * np.arange(r, dtype=np.float64) / r
        radial = (
            np.cos(theta)[None, :, None] * frames.normals[:, None, :]
            + np.sin(theta)[None, :, None] * frames.binormals[:, None, :]
        )
        positions = frames.positions[:, None, :] + frames.radii[:, None, None] * radial

        mesh = Mesh(
            positions=positions.reshape(-1, 3),
            normals=radial.reshape(-1, 3),
            indices=self._tube_indices(n, r),
            segment_count=n,
            cross_section_points=r,
        )
        logger.debug(f"Built tube mesh: {mesh.n_vertices} vertices, {mesh.n_triangles} triangles.")
        return mesh

    @staticmethod
    def _tube_indices(n_rings: int, ring_size: int) -> np.ndarray:
        i = np.arange(n_rings, dtype=np.int64)[:, None]
        j = np.arange(ring_size, dtype=np.int64)[None, :]
        i_next = (i + 1) % n_rings
        j_next = (j + 1) % ring_size

        a = i * ring_size + j
        b = i_next * ring_size + j
        c = i_next * ring_size + j_next
        d = i * ring_size + j_next

        first = np.stack(np.broadcast_arrays(a, d, b), axis=-1).reshape(-1, 3)
        second = np.stack(np.broadcast_arrays(b, d, c), axis=-1).reshape(-1, 3)
        # interleave so each quad's two triangles are adjacent
        return np.stack([first, second], axis=1).reshape(-1, 3)


def rebuild_mesh(params: ShapeParameters, builder: TubeMeshBuilder | None = None) -> Mesh:
    """Build a fresh tube mesh for `params`."""
    return (builder or TubeMeshBuilder()).build(params)
