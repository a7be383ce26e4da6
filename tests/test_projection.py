import logging
import math

import numpy as np
import pytest

from trefoil.model.camera import Camera
from trefoil.model.parameters import ShapeParameters
from trefoil.model.scene import SceneGraph, SceneObject
from trefoil.model.tube import rebuild_mesh
from trefoil.view.renderers.projection import (
    ProjectionRenderer,
    centerline,
    project_points,
    rotate_points,
    stroke_passes,
    view_scale,
)


def _scene(params=None):
    params = params or ShapeParameters()
    scene = SceneGraph()
    scene.add(SceneObject("trefoil", mesh=rebuild_mesh(params), parameters=params))
    return scene


def test_rotation_order_is_y_then_x():
    p = np.array([[1.0, 0.0, 0.0]])
    assert rotate_points(p, 0.0, math.pi / 2)[0] == pytest.approx([0.0, 0.0, 1.0], abs=1e-12)
    assert rotate_points(p, math.pi / 2, math.pi / 2)[0] == pytest.approx([0.0, -1.0, 0.0], abs=1e-12)


def test_zero_rotation_is_identity():
    pts = centerline(ShapeParameters(), resolution=16)
    assert rotate_points(pts, 0.0, 0.0) == pytest.approx(pts)


def test_centerline_is_closed():
    pts = centerline(ShapeParameters(), resolution=300)
    assert pts.shape == (301, 3)
    assert pts[-1] == pytest.approx(pts[0], abs=1e-9)


def test_projection_centers_the_origin():
    screen = project_points([[0.0, 0.0, 0.0]], 400, 300, scale=37.5)
    assert screen[0] == pytest.approx([200.0, 150.0])


def test_perspective_shrinks_far_points():
    near, far = project_points([[1.0, 0.0, -2.0], [1.0, 0.0, 2.0]], 400, 400, scale=50.0, k=0.1)
    assert near[0] - 200.0 == pytest.approx(50.0 / 0.8)
    assert far[0] - 200.0 == pytest.approx(50.0 / 1.2)


def test_perspective_denominator_is_clamped():
    screen = project_points([[1.0, 0.0, -1000.0]], 400, 400, scale=50.0, k=0.1)
    assert np.all(np.isfinite(screen))
    assert screen[0, 0] == pytest.approx(200.0 + 50.0 / 0.05)


def test_view_scale_uses_short_side_and_camera_zoom():
    assert view_scale(800, 400) == pytest.approx(50.0)
    cam = Camera()
    cam.zoom(0.5)
    assert view_scale(800, 400, cam) == pytest.approx(100.0)


def test_stroke_pass_order_and_styles():
    passes = stroke_passes()
    assert [s.name for s in passes] == ["core", "wireframe", "glow"]
    assert [s.width for s in passes] == [12.0, 2.0, 20.0]
    assert passes[0].color is None
    assert passes[1].color.alphaF() == pytest.approx(0.1, abs=0.01)
    assert passes[2].color.alphaF() == pytest.approx(0.3, abs=0.01)


def test_render_frame_paints_the_knot(qapp):
    from PySide6.QtGui import QColor, QImage

    image = QImage(320, 240, QImage.Format_ARGB32)
    image.fill(QColor("black"))
    renderer = ProjectionRenderer()
    assert renderer.render_frame(image, _scene(), Camera())

    background = QColor("#0f1420").rgba()
    assert image.pixel(0, 0) == background
    # the knot passes through (0, 1, 0) projected below the center
    assert image.pixel(160, 120 + 30) != background


def test_render_frame_without_mesh_only_clears(qapp):
    from PySide6.QtGui import QImage

    image = QImage(64, 64, QImage.Format_ARGB32)
    scene = SceneGraph()
    scene.add(SceneObject("empty"))
    assert not ProjectionRenderer().render_frame(image, scene)


def test_unavailable_surface_is_a_logged_no_op(qapp, caplog):
    from PySide6.QtGui import QImage

    renderer = ProjectionRenderer()
    scene = _scene()
    with caplog.at_level(logging.WARNING, logger="trefoil.view.renderers.projection"):
        assert not renderer.render_frame(None, scene)
        assert not renderer.render_frame(QImage(), scene)
    assert len(caplog.records) == 1


def test_render_uses_the_objects_live_parameters():
    renderer = ProjectionRenderer(resolution=32)
    small = renderer.project(ShapeParameters(magnitude=1.0), 0.0, 0.0, 400, 400)
    large = renderer.project(ShapeParameters(magnitude=4.0), 0.0, 0.0, 400, 400)
    assert np.ptp(large[:, 0]) > np.ptp(small[:, 0])
