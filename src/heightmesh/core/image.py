"""Grayscale rendering of a sample grid."""

import logging

import numpy as np

from .grid import SampleGrid

logger = logging.getLogger(__name__)

GRAY16_MAX = 65535
# Uniform tone for grids without any height range.
GRAY16_MID = 32768


def render_image(grid: SampleGrid) -> np.ndarray:
    """Rescale samples linearly into 16-bit gray.

    Returns a ``(height, width)`` uint16 array in buffer order (row 0 at
    the top, no flip). The lowest sample maps to 0 and the highest to
    65535. A constant grid has no range to stretch and renders as a
    uniform mid-gray.
    """
    lo, hi = grid.min(), grid.max()
    logger.info("Rescaling image with height min %f and max %f", lo, hi)

    if hi == lo:
        return np.full((grid.height, grid.width), GRAY16_MID, dtype=np.uint16)

    heights = grid.to_array().astype(np.float64)
    scaled = GRAY16_MAX * (heights - lo) / (hi - lo)
    return np.clip(scaled, 0, GRAY16_MAX).astype(np.uint16)
