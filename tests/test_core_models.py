"""Tests for core return models."""

import numpy as np
import pytest
from pydantic import ValidationError

from heightmesh.core.models import Solid


def _tetra():
    a, b, c, d = [0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]
    return np.array([[a, c, b], [a, b, d], [a, d, c], [b, c, d]], dtype=np.float32)


class TestSolid:
    def test_valid_solid(self):
        s = Solid(triangles=_tetra(), normals=np.zeros((4, 3)))
        assert s.triangle_count == 4
        assert s.triangles.dtype == np.float32

    def test_triangles_must_be_n_by_3_by_3(self):
        with pytest.raises(ValidationError):
            Solid(triangles=np.zeros((4, 3)), normals=np.zeros((4, 3)))

    def test_normals_must_be_n_by_3(self):
        with pytest.raises(ValidationError):
            Solid(triangles=_tetra(), normals=np.zeros((4, 2)))

    def test_one_normal_per_triangle(self):
        with pytest.raises(ValidationError, match="normals"):
            Solid(triangles=_tetra(), normals=np.zeros((3, 3)))

    def test_default_name(self):
        s = Solid(triangles=_tetra(), normals=np.zeros((4, 3)))
        assert s.name == "heightfield"

    def test_bounds(self):
        lo, hi = Solid(triangles=_tetra(), normals=np.zeros((4, 3))).bounds()
        np.testing.assert_array_equal(lo, [0, 0, 0])
        np.testing.assert_array_equal(hi, [1, 1, 1])

    def test_indexed_merges_shared_corners(self):
        tris = _tetra()
        vertices, faces = Solid(triangles=tris, normals=np.zeros((4, 3))).indexed()
        assert vertices.shape == (4, 3)
        assert faces.shape == (4, 3)
        np.testing.assert_array_equal(vertices[faces], tris)
