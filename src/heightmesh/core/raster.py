"""Heightfield loading from single-band GeoTIFF (or any GDAL raster) via rasterio."""

import logging
from typing import Optional

import numpy as np
import rasterio
from rasterio.errors import RasterioError
from rasterio.windows import Window as RioWindow

from ..errors import SourceUnavailableError, WindowOutOfBoundsError
from ..models import Window
from .grid import SampleGrid

logger = logging.getLogger(__name__)

# Sentinel written by many DEM tools for "no measurement".
NODATA_SENTINEL = -np.finfo(np.float32).max

_env: Optional[rasterio.Env] = None


def initialize(**gdal_options) -> None:
    """Enter the process-wide GDAL environment.

    Call once at process start; later calls are no-ops.
    """
    global _env
    if _env is not None:
        return
    env = rasterio.Env(**gdal_options)
    env.__enter__()
    _env = env
    logger.debug("GDAL environment initialized with %s", gdal_options or "defaults")


def shutdown() -> None:
    """Leave the GDAL environment entered by initialize()."""
    global _env
    if _env is None:
        return
    _env.__exit__(None, None, None)
    _env = None


def is_initialized() -> bool:
    return _env is not None


def resolve_window(window: Window, raster_width: int, raster_height: int) -> Window:
    """Check a window against the raster extent and expand zero sizes to the edge."""
    if window.x + window.width > raster_width:
        raise WindowOutOfBoundsError(
            f"Selected window goes outside image bounds "
            f"(image width={raster_width}, window max x={window.x + window.width})"
        )
    if window.y + window.height > raster_height:
        raise WindowOutOfBoundsError(
            f"Selected window goes outside image bounds "
            f"(image height={raster_height}, window max y={window.y + window.height})"
        )

    width = window.width or raster_width - window.x
    height = window.height or raster_height - window.y
    if width <= 0 or height <= 0:
        raise WindowOutOfBoundsError(
            f"Window at ({window.x}, {window.y}) is empty for a "
            f"{raster_width}x{raster_height} image"
        )
    return Window(x=window.x, y=window.y, width=width, height=height)


def _mask_nodata(samples: np.ndarray, nodata: Optional[float]) -> int:
    """Replace no-data cells with zero in place; return how many were replaced."""
    # NaN and infinities count as no-data whether or not the file declares them.
    mask = (samples == NODATA_SENTINEL) | ~np.isfinite(samples)
    if nodata is not None and np.isfinite(nodata):
        mask |= samples == np.float32(nodata)
    count = int(mask.sum())
    samples[mask] = 0.0
    return count


def read_heightfield(path: str, window: Optional[Window] = None) -> SampleGrid:
    """Read band 1 of ``path`` inside ``window`` into a SampleGrid.

    No-data cells are set to zero. Raises WindowOutOfBoundsError when the
    window does not fit the raster and SourceUnavailableError when the
    file cannot be opened or decoded.
    """
    if not is_initialized():
        raise RuntimeError("raster.initialize() must be called before reading rasters")
    window = window or Window()

    try:
        with rasterio.open(path) as src:
            win = resolve_window(window, src.width, src.height)
            logger.info(
                "Reading band 1 (of %d) of %s window (%dx%d+%dx%d)",
                src.count, path, win.x, win.y, win.width, win.height,
            )
            data = src.read(
                1,
                window=RioWindow(win.x, win.y, win.width, win.height),
                out_dtype="float32",
            )
            nodata = src.nodata
    except RasterioError as e:
        raise SourceUnavailableError(f"Cannot read raster {path!r}: {e}") from e

    samples = np.ascontiguousarray(data, dtype=np.float32).ravel()
    replaced = _mask_nodata(samples, nodata)
    if replaced:
        logger.warning("Set %d no-data cells in %s to zero", replaced, path)

    return SampleGrid(samples, width=win.width, height=win.height)
