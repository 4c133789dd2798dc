"""Tests for conversion parameter models."""

import pytest
from pydantic import ValidationError

from heightmesh.models import ConversionParams, ConversionResult, Window


class TestWindow:
    def test_defaults_cover_whole_raster(self):
        w = Window()
        assert (w.x, w.y, w.width, w.height) == (0, 0, 0, 0)

    @pytest.mark.parametrize("field", ["x", "y", "width", "height"])
    def test_negative_values_rejected(self, field):
        with pytest.raises(ValidationError):
            Window(**{field: -1})

    def test_validate_assignment(self):
        w = Window()
        with pytest.raises(ValidationError):
            w.width = -5


class TestConversionParams:
    def test_defaults(self):
        p = ConversionParams(input_path="dem.tif")
        assert p.output_path == "out.stl"
        assert p.scale == 1.0
        assert p.zero == 10.0
        assert p.diff_path is None
        assert p.visualize is False

    @pytest.mark.parametrize("scale", [0.0, -1.0])
    def test_scale_must_be_positive(self, scale):
        with pytest.raises(ValidationError):
            ConversionParams(input_path="dem.tif", scale=scale)


class TestConversionResult:
    def test_summary_mentions_triangles_for_meshes(self):
        r = ConversionResult(
            output_path="out.stl", output_format="stl", width=4, height=3,
            min_height=10.0, max_height=10.5, triangles=34,
        )
        text = r.summary()
        assert "STL" in text
        assert "34 triangles" in text
        assert "4x3" in text

    def test_summary_without_triangles_for_images(self):
        r = ConversionResult(
            output_path="out.png", output_format="png", width=4, height=3,
            min_height=10.0, max_height=10.5,
        )
        assert "triangles" not in r.summary()

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError):
            ConversionResult(
                output_path="out.obj", output_format="obj", width=1, height=1,
                min_height=0.0, max_height=0.0,
            )
