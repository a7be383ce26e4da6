import math

import pytest

from trefoil.model.camera import Camera
from trefoil.model.vector_math import Vector


def test_defaults():
    cam = Camera()
    assert cam.fov == 75.0
    assert cam.near == 0.1
    assert cam.far == 1000.0
    assert cam.distance == pytest.approx(8.0)
    assert cam.zoom_factor == pytest.approx(1.0)


def test_set_viewport_updates_aspect_and_ignores_zero_size():
    cam = Camera()
    cam.set_viewport(800, 400)
    assert cam.aspect == pytest.approx(2.0)
    cam.set_viewport(0, 400)
    assert cam.aspect == pytest.approx(2.0)


def test_zoom_is_clamped():
    cam = Camera()
    cam.zoom(0.5)
    assert cam.distance == pytest.approx(4.0)
    assert cam.zoom_factor == pytest.approx(2.0)
    cam.zoom(0.01)
    assert cam.distance == pytest.approx(cam.min_distance)
    cam.zoom(1000.0)
    assert cam.distance == pytest.approx(cam.max_distance)


def test_orbit_keeps_distance():
    cam = Camera()
    cam.orbit(math.pi / 2, 0.0)
    assert cam.distance == pytest.approx(8.0)
    assert cam.position.x == pytest.approx(8.0)
    assert cam.position.z == pytest.approx(0.0, abs=1e-9)


def test_reset():
    cam = Camera()
    cam.look_at(Vector(1.0, 1.0, 1.0))
    cam.zoom(2.0)
    cam.reset()
    assert cam.position == Vector(0.0, 0.0, 8.0)
    assert cam.target == Vector()
