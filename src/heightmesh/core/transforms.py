"""In-place arithmetic on sample grids.

The standard pipeline applies these as diff -> zero -> scale: the zero
shift is measured on the differenced grid and scaling comes last so the
shift itself is not rescaled.
"""

import numpy as np

from ..errors import DimensionMismatchError
from .grid import SampleGrid


def zero(grid: SampleGrid, target_min: float) -> None:
    """Shift all samples so that the grid minimum becomes ``target_min``."""
    if len(grid) == 0:
        return
    delta = np.float32(target_min - grid.min())
    grid.samples += delta
    grid.invalidate_stats()


def scale(grid: SampleGrid, factor: float) -> None:
    """Multiply every sample by ``factor``."""
    grid.samples *= np.float32(factor)
    grid.invalidate_stats()


def diff(grid: SampleGrid, other: SampleGrid) -> None:
    """Subtract ``other`` from ``grid`` sample by sample, in buffer order."""
    if len(grid) != len(other):
        raise DimensionMismatchError(
            f"Cannot difference a {grid.width}x{grid.height} grid "
            f"against a {other.width}x{other.height} grid"
        )
    grid.samples -= other.samples
    grid.invalidate_stats()
