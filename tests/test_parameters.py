import json
import math

import pytest

from trefoil.config import load_presets, resolve_backend
from trefoil.model.parameters import (
    DEFAULT_PRESET_NAME,
    MAX_SEGMENTS,
    MIN_SEGMENTS,
    ShapeParameters,
    load_parameter_presets,
)


def test_defaults():
    p = ShapeParameters()
    assert (p.magnitude, p.frequency, p.param_a, p.param_b) == (2.0, 1.0, 0.5, 0.5)
    assert (p.base_radius, p.radius_variation, p.variation_frequency) == (0.15, 1.0, 3.0)
    assert p.segment_count == 200


def test_sanitized_clamps_segment_count():
    assert ShapeParameters(segment_count=0).sanitized().segment_count == MIN_SEGMENTS
    assert ShapeParameters(segment_count=-5).sanitized().segment_count == MIN_SEGMENTS
    assert ShapeParameters(segment_count=10**6).sanitized().segment_count == MAX_SEGMENTS
    assert ShapeParameters(segment_count=120.6).sanitized().segment_count == 121


def test_sanitized_replaces_non_finite_values_with_defaults():
    p = ShapeParameters(magnitude=math.nan, base_radius=math.inf, param_a="oops").sanitized()
    assert p.magnitude == 2.0
    assert p.base_radius == 0.15
    assert p.param_a == 0.5


def test_sanitized_clamps_ranges():
    p = ShapeParameters(magnitude=100.0, base_radius=0.0, param_b=-1.0).sanitized()
    assert p.magnitude == 5.0
    assert p.base_radius == 0.05
    assert p.param_b == 0.0


def test_lerp_endpoints_and_midpoint():
    a = ShapeParameters(magnitude=1.0, segment_count=100)
    b = ShapeParameters(magnitude=3.0, segment_count=300)
    assert a.lerp(b, 0.0) == a
    assert a.lerp(b, 1.0) == b
    mid = a.lerp(b, 0.5)
    assert mid.magnitude == pytest.approx(2.0)
    assert mid.segment_count == 200
    assert isinstance(mid.segment_count, int)


def test_from_dict_merges_over_base_and_ignores_unknown_keys():
    base = ShapeParameters(magnitude=3.0)
    p = ShapeParameters.from_dict({"param_a": 1.2, "colour": "red"}, base=base)
    assert p.magnitude == 3.0
    assert p.param_a == 1.2
    assert ShapeParameters.from_dict(p.to_dict()) == p


def test_bundled_presets_load():
    presets = load_parameter_presets()
    assert next(iter(presets)) == DEFAULT_PRESET_NAME
    assert presets[DEFAULT_PRESET_NAME] == ShapeParameters()
    assert "Classic" in presets
    for p in presets.values():
        assert p == p.sanitized()


def test_presets_are_sanitized(tmp_path):
    path = tmp_path / "presets.json"
    path.write_text(json.dumps({"Huge": {"magnitude": 50.0, "segment_count": 5000}, "Broken": 3}))
    presets = load_parameter_presets(str(path))
    assert list(presets) == [DEFAULT_PRESET_NAME, "Huge"]
    assert presets["Huge"].magnitude == 5.0
    assert presets["Huge"].segment_count == MAX_SEGMENTS


def test_missing_or_malformed_preset_table(tmp_path):
    assert load_presets(str(tmp_path / "missing.json")) == {}
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    assert load_presets(str(bad)) == {}
    assert list(load_parameter_presets(str(bad))) == [DEFAULT_PRESET_NAME]


def test_resolve_backend(monkeypatch):
    monkeypatch.delenv("TREFOIL_BACKEND", raising=False)
    assert resolve_backend() == "auto"
    assert resolve_backend("fallback") == "fallback"
    assert resolve_backend("opengl") == "auto"
    monkeypatch.setenv("TREFOIL_BACKEND", "Fallback")
    assert resolve_backend() == "fallback"
    assert resolve_backend("vtk") == "vtk"
