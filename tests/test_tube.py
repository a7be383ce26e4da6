import numpy as np
import pytest

from trefoil.model.curve import CurveEvaluator
from trefoil.model.parameters import MIN_SEGMENTS, ShapeParameters
from trefoil.model.tube import TubeMeshBuilder, rebuild_mesh


@pytest.fixture(scope="module")
def mesh():
    return rebuild_mesh(ShapeParameters())


def test_buffer_sizes(mesh):
    n, r = 200, 12
    assert mesh.segment_count == n
    assert mesh.cross_section_points == r
    assert mesh.n_vertices == n * r
    assert mesh.n_triangles == n * r * 2
    assert mesh.normals.shape == mesh.positions.shape


def test_indices_in_range(mesh):
    assert mesh.is_consistent()
    assert mesh.indices.min() == 0
    assert mesh.indices.max() == mesh.n_vertices - 1


def test_closed_manifold(mesh):
    assert mesh.is_closed_manifold()


def test_normals_are_unit_and_point_outward(mesh):
    assert np.linalg.norm(mesh.normals, axis=1) == pytest.approx(np.ones(mesh.n_vertices))

    n, r = mesh.segment_count, mesh.cross_section_points
    ts = 2.0 * np.pi * np.arange(n) / n
    centers = CurveEvaluator().positions(ShapeParameters(), ts)
    radial = mesh.positions.reshape(n, r, 3) - centers[:, None, :]
    dots = np.einsum("ijk,ijk->ij", radial, mesh.normals.reshape(n, r, 3))
    assert dots.min() > 0.0


def test_face_winding_is_outward():
    # plain circle, tube radius well below the curvature radius
    ring = ShapeParameters(param_a=0.0, param_b=0.0, base_radius=0.1, radius_variation=0.0, segment_count=64)
    mesh = rebuild_mesh(ring)
    tri = mesh.positions[mesh.indices]
    face_normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    vertex_normals = mesh.normals[mesh.indices].mean(axis=1)
    assert np.einsum("ij,ij->i", face_normals, vertex_normals).min() > 0.0


def test_buffers_are_read_only(mesh):
    with pytest.raises(ValueError):
        mesh.positions[0, 0] = 1.0
    with pytest.raises(ValueError):
        mesh.indices[0, 0] = 0


def test_rebuild_is_deterministic():
    p = ShapeParameters(magnitude=2.5, param_a=0.8, segment_count=64)
    first, second = rebuild_mesh(p), rebuild_mesh(p)
    assert first.positions.tobytes() == second.positions.tobytes()
    assert first.normals.tobytes() == second.normals.tobytes()
    assert first.indices.tobytes() == second.indices.tobytes()


@pytest.mark.parametrize("segments", [0, -3, 1, 2])
def test_tiny_segment_counts_are_clamped(segments):
    m = rebuild_mesh(ShapeParameters(segment_count=segments))
    assert m.segment_count == MIN_SEGMENTS
    assert m.n_triangles == MIN_SEGMENTS * m.cross_section_points * 2
    assert m.is_closed_manifold()


def test_cross_section_points_are_clamped():
    assert TubeMeshBuilder(cross_section_points=4).cross_section_points == 8
    assert TubeMeshBuilder(cross_section_points=40).cross_section_points == 16
    m = TubeMeshBuilder(cross_section_points=8).build(ShapeParameters(segment_count=10))
    assert m.n_triangles == 10 * 8 * 2
    assert m.is_closed_manifold()


def test_bounds_follow_magnitude():
    small = rebuild_mesh(ShapeParameters(magnitude=1.0)).bounds()
    large = rebuild_mesh(ShapeParameters(magnitude=4.0)).bounds()
    assert large[1] - large[0] > small[1] - small[0]
