"""
VTK and Geometry Utilities
Helper functions for converting tube meshes into PyVista data.
"""
import logging

import numpy as np
import numpy.typing as npt
import pyvista as pv

from trefoil.model.mesh import Mesh
from trefoil.model.scene import Material
from trefoil.model.vector_math import Vector
from trefoil.view.renderers.projection import rotation_matrix

logger = logging.getLogger(__name__)


class VtkUtils:
    @staticmethod
    def faces_from_triangles(indices: npt.NDArray[np.int64]) -> npt.NDArray[np.int64]:
        """
        Convert (T, 3) triangle indices into the flat VTK cell array
        [3, i0, i1, i2, 3, ...].
        """
        tri = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
        return np.hstack([np.full((tri.shape[0], 1), 3, dtype=np.int64), tri]).ravel()

    @staticmethod
    def mesh_to_polydata(mesh: Mesh) -> pv.PolyData:
        """Build PolyData with the mesh's radial normals attached as point normals."""
        pd = pv.PolyData(np.array(mesh.positions, dtype=np.float64), VtkUtils.faces_from_triangles(mesh.indices))
        pd.point_data["Normals"] = np.array(mesh.normals, dtype=np.float64)
        pd.GetPointData().SetActiveNormals("Normals")
        return pd

    @staticmethod
    def transform_matrix(position: Vector, rotation: Vector) -> npt.NDArray[np.float64]:
        """
        4x4 actor matrix: the Y-then-X rotation of the fallback projection
        (rotation.z is not used), then the translation.
        """
        matrix = np.eye(4)
        matrix[:3, :3] = rotation_matrix(rotation.x, rotation.y)
        matrix[:3, 3] = position.to_array()
        return matrix

    @staticmethod
    def material_kwargs(material: Material) -> dict:
        """Translate our Material into `Plotter.add_mesh` keyword arguments."""
        return {
            "color": material.color.to_tuple(),
            "opacity": material.opacity,
            "specular": material.specular,
            "specular_power": material.shininess,
            "smooth_shading": True,
            "style": "wireframe" if material.wireframe else "surface",
        }
