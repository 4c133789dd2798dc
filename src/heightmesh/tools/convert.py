"""Conversion tools: convert_heightfield, describe_heightfield."""

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..core.raster import read_heightfield
from ..errors import HeightmeshError
from ..models import ConversionParams, Window
from ..pipeline import convert

logger = logging.getLogger(__name__)


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def register_convert_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def convert_heightfield(
        input_path: str,
        output_path: str,
        x: int = 0,
        y: int = 0,
        width: int = 0,
        height: int = 0,
        scale: float = 1.0,
        zero: float = 10.0,
        diff_path: str | None = None,
    ) -> str:
        """Convert a GeoTIFF heightfield into an STL/3MF solid or a 16-bit PNG.

        The output extension picks the format. The heightfield is optionally
        differenced against diff_path, shifted so its lowest point sits at
        `zero`, then scaled vertically.

        Args:
            input_path: GeoTIFF (or other GDAL raster) to read; band 1 is used.
            output_path: Destination .stl, .3mf or .png (absolute path)
            x, y: Top-left pixel of the window to read (default 0, 0).
            width, height: Window size in pixels; 0 runs to the raster edge.
            scale: Vertical scale factor applied last (default 1).
            zero: Height of the lowest point after shifting (default 10).
            diff_path: Optional second raster subtracted from the first.
        """
        try:
            _validate_output_path(output_path)
            params = ConversionParams(
                input_path=input_path,
                output_path=output_path,
                window=Window(x=x, y=y, width=width, height=height),
                scale=scale,
                zero=zero,
                diff_path=diff_path,
            )
            result = convert(params)
        except (ValueError, HeightmeshError) as e:
            logger.debug("convert_heightfield failed: %s", e)
            return f"Error: {e}"
        return result.summary()

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def describe_heightfield(
        input_path: str,
        x: int = 0,
        y: int = 0,
        width: int = 0,
        height: int = 0,
    ) -> str:
        """Report the size and height range of a raster window without converting it.

        Args:
            input_path: GeoTIFF (or other GDAL raster) to read; band 1 is used.
            x, y: Top-left pixel of the window (default 0, 0).
            width, height: Window size in pixels; 0 runs to the raster edge.
        """
        try:
            grid = read_heightfield(
                input_path, Window(x=x, y=y, width=width, height=height),
            )
        except (ValidationError, HeightmeshError) as e:
            return f"Error: {e}"
        return (
            f"{input_path}: {grid.width}x{grid.height} samples, "
            f"heights {grid.min():.3f} - {grid.max():.3f}"
        )
