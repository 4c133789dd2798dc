"""Conversion pipeline: raster -> grid transforms -> mesh or image sink."""

import logging
import os

from .core import raster
from .core.grid import SampleGrid
from .core.image import render_image
from .core.mesh import build_solid
from .core.transforms import diff, scale, zero
from .errors import UnsupportedFormatError
from .exporters.png import write_png
from .exporters.stl import write_stl
from .exporters.threemf import write_3mf
from .models import ConversionParams, ConversionResult, OutputFormat

logger = logging.getLogger(__name__)

MESH_FORMATS = ("stl", "3mf")
IMAGE_FORMATS = ("png",)


def output_format(output_path: str) -> OutputFormat:
    """Pick the sink from the output file extension."""
    ext = os.path.splitext(output_path)[1].lower().lstrip(".")
    if ext not in MESH_FORMATS + IMAGE_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported output format {ext or '(none)'!r} for {output_path!r}; "
            "use .stl, .3mf or .png"
        )
    return ext


def prepare_grid(params: ConversionParams) -> SampleGrid:
    """Load the input grid and apply diff, zero and scale in that order."""
    grid = raster.read_heightfield(params.input_path, params.window)

    if params.diff_path:
        logger.info("Differencing against %s", params.diff_path)
        other = raster.read_heightfield(params.diff_path, params.window)
        diff(grid, other)

    logger.info("Setting minimum height value to %f", params.zero)
    zero(grid, params.zero)

    if params.scale != 1.0:
        logger.info("Adjusting vertical scale by factor of %f", params.scale)
        scale(grid, params.scale)

    logger.debug("Grid heights now span %f - %f", grid.min(), grid.max())
    return grid


def convert(params: ConversionParams) -> ConversionResult:
    """Run one conversion. The raster environment must be initialized."""
    fmt = output_format(params.output_path)
    grid = prepare_grid(params)

    triangles = 0
    if fmt in MESH_FORMATS:
        logger.info("Converting to %s file '%s'", fmt.upper(), params.output_path)
        solid = build_solid(grid, name=os.path.splitext(os.path.basename(params.input_path))[0])
        if fmt == "stl":
            write_stl(solid, params.output_path)
        else:
            write_3mf(solid, params.output_path)
        triangles = solid.triangle_count
    else:
        logger.info("Converting to PNG file '%s'", params.output_path)
        write_png(render_image(grid), params.output_path)

    return ConversionResult(
        output_path=params.output_path,
        output_format=fmt,
        width=grid.width,
        height=grid.height,
        min_height=grid.min(),
        max_height=grid.max(),
        triangles=triangles,
    )
