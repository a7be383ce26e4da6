"""
Trefoil Curve Evaluator
=======================
Maps the curve parameter t to a point, a unit tangent, a twist-free local
frame and the modulated tube radius.

    x = m * (sin(f t) + a sin(3 f t))
    y = m * (cos(f t) - a cos(3 f t))
    z = m * b * sin(2 f t)

The frame is built from a fixed reference axis instead of the Frenet
normal, which flips at inflection points.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

import numpy as np

from trefoil.model.parameters import ShapeParameters, MIN_RADIUS
from trefoil.model.vector_math import normalize_rows

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveSample:
    """One evaluated point of the curve."""
    t: float
    position: npt.NDArray[np.float64]
    tangent: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]
    binormal: npt.NDArray[np.float64]
    radius: float


@dataclass(frozen=True)
class CurveFrames:
    """Vectorized samples, one row per parameter value."""
    t: npt.NDArray[np.float64]          # (N,)
    positions: npt.NDArray[np.float64]  # (N, 3)
    tangents: npt.NDArray[np.float64]   # (N, 3)
    normals: npt.NDArray[np.float64]    # (N, 3)
    binormals: npt.NDArray[np.float64]  # (N, 3)
    radii: npt.NDArray[np.float64]      # (N,)

    def __len__(self) -> int:
        return len(self.t)

    def __getitem__(self, i: int) -> CurveSample:
        return CurveSample(
            t=float(self.t[i]),
            position=self.positions[i],
            tangent=self.tangents[i],
            normal=self.normals[i],
            binormal=self.binormals[i],
            radius=float(self.radii[i]),
        )


class CurveEvaluator:
    def __init__(
        self,
        epsilon: float = 1e-9,
        delta: float = 1e-4,
        up: tuple[float, float, float] = (0.0, 0.0, 1.0),
        secondary_up: tuple[float, float, float] = (0.0, 1.0, 0.0),
        min_radius: float = MIN_RADIUS
    ) -> None:
        self.epsilon = epsilon
        self.delta = delta
        self.up = np.asarray(up, dtype=np.float64)
        self.secondary_up = np.asarray(secondary_up, dtype=np.float64)
        self.min_radius = min_radius

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def evaluate(self, params: ShapeParameters, t: float) -> CurveSample:
        return self.sample(params, np.array([t], dtype=np.float64))[0]

    def sample(self, params: ShapeParameters, ts: npt.ArrayLike) -> CurveFrames:
        ts = np.asarray(ts, dtype=np.float64).reshape(-1)
        positions = self.positions(params, ts)
        tangents = self.tangents(params, ts)
        normals, binormals = self._frames(tangents)
        return CurveFrames(
            t=ts,
            positions=positions,
            tangents=tangents,
            normals=normals,
            binormals=binormals,
            radii=self.radii(params, ts),
        )

    @staticmethod
    def positions(params: ShapeParameters, ts: npt.ArrayLike) -> npt.NDArray[np.float64]:
        ts = np.asarray(ts, dtype=np.float64).reshape(-1)
        m, a, b = params.magnitude, params.param_a, params.param_b
        ft = params.frequency * ts
        return np.column_stack([
            m * (np.sin(ft) + a * np.sin(3.0 * ft)),
            m * (np.cos(ft) - a * np.cos(3.0 * ft)),
            m * b * np.sin(2.0 * ft),
        ])

    @staticmethod
    def derivatives(params: ShapeParameters, ts: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Analytic d(position)/dt."""
        ts = np.asarray(ts, dtype=np.float64).reshape(-1)
        m, a, b, f = params.magnitude, params.param_a, params.param_b, params.frequency
        ft = f * ts
        return np.column_stack([
            m * f * (np.cos(ft) + 3.0 * a * np.cos(3.0 * ft)),
            m * f * (-np.sin(ft) + 3.0 * a * np.sin(3.0 * ft)),
            2.0 * m * b * f * np.cos(2.0 * ft),
        ])

    def tangents(self, params: ShapeParameters, ts: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Unit tangents. Degenerate points borrow the tangent at t + delta, then
        t - delta, and finally the X axis.
        """
        ts = np.asarray(ts, dtype=np.float64).reshape(-1)
        unit, norms = normalize_rows(self.derivatives(params, ts))
        bad = norms < self.epsilon
        for offset in (self.delta, -self.delta):
            if not bad.any():
                break
            retry, retry_norms = normalize_rows(self.derivatives(params, ts[bad] + offset))
            ok = retry_norms >= self.epsilon
            idx = np.flatnonzero(bad)[ok]
            unit[idx] = retry[ok]
            bad[idx] = False
        if bad.any():
            logger.debug(f"{int(bad.sum())} curve samples have no usable tangent, using X axis.")
            unit[bad] = (1.0, 0.0, 0.0)
        return unit

    def radii(self, params: ShapeParameters, ts: npt.ArrayLike) -> npt.NDArray[np.float64]:
        ts = np.asarray(ts, dtype=np.float64).reshape(-1)
        base = params.base_radius
        r = base + params.radius_variation * base * np.sin(params.variation_frequency * ts)
        return np.maximum(r, self.min_radius)

    def radius(self, params: ShapeParameters, t: float) -> float:
        return float(self.radii(params, [t])[0])

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _frames(
        self,
        tangents: npt.NDArray[np.float64]
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """normal = up x tangent, binormal = tangent x normal."""
        normals, norms = normalize_rows(np.cross(self.up, tangents))
        parallel = norms < self.epsilon
        if parallel.any():
            fallback, _ = normalize_rows(np.cross(self.secondary_up, tangents[parallel]))
            normals[parallel] = fallback
        binormals = np.cross(tangents, normals)
        return normals, binormals
