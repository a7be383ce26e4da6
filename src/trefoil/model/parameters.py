"""
Shape Parameters (Data Model)
=============================
The flat parameter record that drives the curve, the tube and the fallback
renderer.

Why is this file needed?
------------------------
1. Validation: every consumer works on a sanitized copy, so values coming from
   scripts or presets can never produce a degenerate mesh.
2. Decoupling: the UI only knows field names and ranges, the geometry only
   knows the record.

Classes:
    ParameterRange: Declared numeric range of one field.
    ShapeParameters: The immutable parameter record.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, fields, replace
import logging
import math
from typing import Any, Mapping

from trefoil.config import PRESETS_PATH, load_presets

logger = logging.getLogger(__name__)

MIN_SEGMENTS = 3
MAX_SEGMENTS = 1000
MIN_RADIUS = 1e-3


@dataclass(frozen=True)
class ParameterRange:
    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return min(self.maximum, max(self.minimum, value))


PARAMETER_RANGES: dict[str, ParameterRange] = {
    "magnitude": ParameterRange(0.5, 5.0),
    "frequency": ParameterRange(0.5, 3.0),
    "param_a": ParameterRange(0.0, 2.5),
    "param_b": ParameterRange(0.0, 2.5),
    "base_radius": ParameterRange(0.05, 0.5),
    "radius_variation": ParameterRange(0.0, 10.0),
    "variation_frequency": ParameterRange(1.0, 10.0),
    "segment_count": ParameterRange(MIN_SEGMENTS, MAX_SEGMENTS),
}


@dataclass(frozen=True)
class ShapeParameters:
    magnitude: float = 2.0            # overall amplitude
    frequency: float = 1.0            # angular speed multiplier
    param_a: float = 0.5              # lobe shape (xy)
    param_b: float = 0.5              # lobe shape (z)
    base_radius: float = 0.15         # tube radius
    radius_variation: float = 1.0     # relative radius modulation
    variation_frequency: float = 3.0  # radius oscillations per revolution
    segment_count: int = 200          # samples along the curve

    def sanitized(self) -> ShapeParameters:
        """
        Return a copy with every field clamped into its declared range.
        Non-finite values fall back to the field default and the segment count
        is rounded to the nearest integer.
        """
        defaults = ShapeParameters.__dataclass_fields__
        values: dict[str, Any] = {}
        for f in fields(self):
            raw = getattr(self, f.name)
            try:
                value = float(raw)
            except (TypeError, ValueError):
                value = float(defaults[f.name].default)
            if not math.isfinite(value):
                value = float(defaults[f.name].default)
            value = PARAMETER_RANGES[f.name].clamp(value)
            if f.name == "segment_count":
                value = int(round(value))
            values[f.name] = value
        return ShapeParameters(**values)

    def replace(self, **changes: Any) -> ShapeParameters:
        return replace(self, **changes)

    def lerp(self, other: ShapeParameters, alpha: float) -> ShapeParameters:
        """Linear interpolation towards `other` (alpha 0 -> self, 1 -> other)."""
        alpha = min(1.0, max(0.0, alpha))
        values = {
            f.name: getattr(self, f.name) + (getattr(other, f.name) - getattr(self, f.name)) * alpha
            for f in fields(self)
        }
        values["segment_count"] = int(round(values["segment_count"]))
        return ShapeParameters(**values)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: ShapeParameters | None = None) -> ShapeParameters:
        """
        Build parameters from a mapping. Missing keys come from `base` (or the
        defaults), unknown keys are ignored.
        """
        base = base or cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug(f"Ignoring unknown parameter keys: {sorted(unknown)}")
        return replace(base, **{k: v for k, v in data.items() if k in known})


DEFAULT_PARAMETERS = ShapeParameters()
DEFAULT_PRESET_NAME = "Default"


def load_parameter_presets(path: str | None = None) -> dict[str, ShapeParameters]:
    """
    Named presets from the preset table, sanitized. "Default" is always present
    and comes first.
    """
    presets: dict[str, ShapeParameters] = {DEFAULT_PRESET_NAME: DEFAULT_PARAMETERS}
    for name, values in load_presets(path or PRESETS_PATH).items():
        presets[name] = ShapeParameters.from_dict(values).sanitized()
    logger.info(f"Loaded {len(presets)} parameter presets.")
    return presets
