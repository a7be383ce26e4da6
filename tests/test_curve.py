import math

import numpy as np
import pytest

from trefoil.model import TWO_PI
from trefoil.model.curve import CurveEvaluator
from trefoil.model.parameters import MIN_RADIUS, ShapeParameters

evaluator = CurveEvaluator()


def test_known_points_for_default_parameters(params):
    assert evaluator.evaluate(params, 0.0).position == pytest.approx([0.0, 1.0, 0.0], abs=1e-12)
    assert evaluator.evaluate(params, math.pi / 2).position == pytest.approx([1.0, 0.0, 0.0], abs=1e-12)


def test_frame_is_orthonormal(params):
    ts = np.linspace(0.0, TWO_PI, 97)
    frames = evaluator.sample(params, ts)
    for v in (frames.tangents, frames.normals, frames.binormals):
        assert np.linalg.norm(v, axis=1) == pytest.approx(np.ones(len(ts)))
    assert np.abs(np.einsum("ij,ij->i", frames.tangents, frames.normals)).max() < 1e-9
    assert np.abs(np.einsum("ij,ij->i", frames.tangents, frames.binormals)).max() < 1e-9
    assert np.abs(np.einsum("ij,ij->i", frames.normals, frames.binormals)).max() < 1e-9


def test_tangent_follows_the_derivative(params):
    t, h = 0.7, 1e-6
    p0 = evaluator.positions(params, [t - h])[0]
    p1 = evaluator.positions(params, [t + h])[0]
    numeric = (p1 - p0) / np.linalg.norm(p1 - p0)
    assert evaluator.evaluate(params, t).tangent == pytest.approx(numeric, abs=1e-6)


@pytest.mark.parametrize("frequency", [1.0, 2.0, 3.0])
def test_closed_for_integer_frequency(frequency):
    p = ShapeParameters(frequency=frequency)
    start = evaluator.evaluate(p, 0.0)
    end = evaluator.evaluate(p, TWO_PI)
    assert end.position == pytest.approx(start.position, abs=1e-9)
    assert end.tangent == pytest.approx(start.tangent, abs=1e-9)
    assert end.radius == pytest.approx(start.radius, abs=1e-9)


def test_degenerate_curve_uses_fallback_tangent():
    # zero frequency: the derivative vanishes everywhere
    p = ShapeParameters(magnitude=1.0, frequency=0.0, param_a=0.0, param_b=0.0)
    sample = evaluator.evaluate(p, 0.3)
    assert sample.tangent == pytest.approx([1.0, 0.0, 0.0])
    assert np.linalg.norm(sample.normal) == pytest.approx(1.0)
    assert abs(np.dot(sample.tangent, sample.normal)) < 1e-12


def test_tangent_parallel_to_up_uses_secondary_axis():
    ev = CurveEvaluator(up=(1.0, 0.0, 0.0))
    normals, binormals = ev._frames(np.array([[1.0, 0.0, 0.0]]))
    assert np.linalg.norm(normals[0]) == pytest.approx(1.0)
    assert abs(normals[0] @ [1.0, 0.0, 0.0]) < 1e-12
    assert np.linalg.norm(binormals[0]) == pytest.approx(1.0)


def test_radius_is_positive_and_clamped(params):
    ts = np.linspace(0.0, TWO_PI, 1000)
    radii = evaluator.radii(params, ts)
    assert radii.min() >= MIN_RADIUS
    # base 0.15 with variation 1.0 touches zero at sin(3t) == -1
    assert evaluator.radius(params, math.pi / 2) == pytest.approx(MIN_RADIUS)
    assert evaluator.radius(params, math.pi / 6) == pytest.approx(0.3)
