"""Tests for STL, 3MF and PNG sinks."""

import os
import zipfile

import numpy as np
import pytest
from PIL import Image
from stl import mesh as stl_mesh

from heightmesh.core.grid import SampleGrid
from heightmesh.core.mesh import build_solid
from heightmesh.errors import SinkWriteError
from heightmesh.exporters.atomic import atomic_output
from heightmesh.exporters.png import write_png
from heightmesh.exporters.stl import write_stl
from heightmesh.exporters.threemf import write_3mf


def _solid(name="heightfield"):
    grid = SampleGrid([1, 1, 1, 1, 1, 1.5, 1.2, 1, 1, 1, 1, 1], width=4, height=3)
    return build_solid(grid, name=name)


class TestWriteSTL:
    def test_binary_size(self, tmp_path):
        out = str(tmp_path / "test.stl")
        result = write_stl(_solid(), out)
        assert result["triangles"] == 34
        # 80-byte header + uint32 count + 50 bytes per triangle
        assert os.path.getsize(out) == 84 + 50 * 34

    def test_round_trip_keeps_geometry_and_normals(self, tmp_path):
        solid = _solid()
        out = str(tmp_path / "test.stl")
        write_stl(solid, out)
        loaded = stl_mesh.Mesh.from_file(out, calculate_normals=False)
        np.testing.assert_allclose(loaded.vectors, solid.triangles)
        np.testing.assert_allclose(loaded.normals, solid.normals)

    def test_creates_missing_directories(self, tmp_path):
        out = str(tmp_path / "nested" / "dir" / "test.stl")
        write_stl(_solid(), out)
        assert os.path.exists(out)

    def test_unwritable_destination(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(SinkWriteError):
            write_stl(_solid(), str(blocker / "test.stl"))


class TestWrite3MF:
    def test_output_is_valid_zip(self, tmp_path):
        out = str(tmp_path / "test.3mf")
        write_3mf(_solid(), out)
        assert zipfile.is_zipfile(out)

    def test_zip_contains_required_files(self, tmp_path):
        out = str(tmp_path / "test.3mf")
        write_3mf(_solid(), out)
        with zipfile.ZipFile(out) as zf:
            names = zf.namelist()
        assert "[Content_Types].xml" in names
        assert "_rels/.rels" in names
        assert "3D/3dmodel.model" in names

    def test_vertices_are_shared(self, tmp_path):
        out = str(tmp_path / "test.3mf")
        result = write_3mf(_solid(), out)
        # 12 top vertices + 10 border vertices on the base
        assert result["vertices"] == 22
        assert result["triangles"] == 34
        with zipfile.ZipFile(out) as zf:
            xml = zf.read("3D/3dmodel.model").decode()
        assert xml.count("<vertex ") == 22
        assert xml.count("<triangle ") == 34

    def test_name_is_escaped(self, tmp_path):
        out = str(tmp_path / "escape.3mf")
        write_3mf(_solid(name='Rock & Roll <"> '), out)
        with zipfile.ZipFile(out) as zf:
            xml = zf.read("3D/3dmodel.model").decode()
        assert "&amp;" in xml
        assert "&lt;" in xml
        assert "&gt;" in xml
        assert "&quot;" in xml


class TestWritePNG:
    def test_round_trip_16_bit(self, tmp_path):
        pixels = np.array([[0, 1000, 65535], [32768, 12, 7]], dtype=np.uint16)
        out = str(tmp_path / "test.png")
        result = write_png(pixels, out)
        assert (result["width"], result["height"]) == (3, 2)
        with Image.open(out) as img:
            assert img.size == (3, 2)
            loaded = np.array(img)
        np.testing.assert_array_equal(loaded, pixels)

    def test_rejects_8_bit(self, tmp_path):
        with pytest.raises(ValueError, match="uint16"):
            write_png(np.zeros((2, 2), dtype=np.uint8), str(tmp_path / "x.png"))
        assert not os.path.exists(tmp_path / "x.png")


class TestAtomicOutput:
    def test_failure_leaves_no_file(self, tmp_path):
        out = tmp_path / "partial.stl"
        with pytest.raises(RuntimeError):
            with atomic_output(str(out)) as fh:
                fh.write(b"half")
                raise RuntimeError("boom")
        assert not out.exists()
        assert list(tmp_path.iterdir()) == []

    def test_failure_keeps_previous_file(self, tmp_path):
        out = tmp_path / "keep.stl"
        out.write_bytes(b"previous")
        with pytest.raises(RuntimeError):
            with atomic_output(str(out)) as fh:
                fh.write(b"new")
                raise RuntimeError("boom")
        assert out.read_bytes() == b"previous"

    def test_os_error_becomes_sink_write_error(self, tmp_path):
        with pytest.raises(SinkWriteError):
            with atomic_output(str(tmp_path / "out.bin")):
                raise OSError("disk full")
        assert list(tmp_path.iterdir()) == []

    def test_success_replaces_file(self, tmp_path):
        out = tmp_path / "out.bin"
        out.write_bytes(b"old")
        with atomic_output(str(out)) as fh:
            fh.write(b"new")
        assert out.read_bytes() == b"new"
        assert list(tmp_path.iterdir()) == [out]
