"""Binary STL export using numpy-stl."""

import numpy as np
from stl import Mode
from stl import mesh as stl_mesh

from ..core.models import Solid
from .atomic import atomic_output


def write_stl(solid: Solid, output_path: str) -> dict:
    """Write a validated solid as binary STL.

    The solid's own normals are written; numpy-stl is told not to
    recompute them.
    """
    data = np.zeros(solid.triangle_count, dtype=stl_mesh.Mesh.dtype)
    data["vectors"] = solid.triangles
    data["normals"] = solid.normals
    out = stl_mesh.Mesh(data, calculate_normals=False, name=solid.name)

    with atomic_output(output_path) as fh:
        out.save(output_path, fh=fh, mode=Mode.BINARY, update_normals=False)

    return {"success": True, "filepath": output_path, "triangles": solid.triangle_count}
