"""In-memory heightfield: a flat row-major buffer of float32 samples."""

from typing import Sequence, Union

import numpy as np

from ..errors import GridError


class SampleGrid:
    """Row-major grid of elevation samples with cached min/max.

    For width 3 and height 2 the samples

        a b c
        d e f

    are stored as ``a b c d e f``, so sample (x, y) lives at
    ``x + y * width``.
    """

    def __init__(
        self,
        samples: Union[Sequence[float], np.ndarray],
        width: int,
        height: int,
    ):
        if width <= 0 or height <= 0:
            raise GridError(f"Grid dimensions must be positive, got {width}x{height}")
        buf = np.array(samples, dtype=np.float32).ravel()
        if buf.size != width * height:
            raise GridError(
                f"Grid of {width}x{height} needs {width * height} samples, got {buf.size}"
            )
        bad = np.flatnonzero(~np.isfinite(buf))
        if bad.size:
            raise GridError(
                f"Grid has {bad.size} non-finite samples "
                f"(first at x={bad[0] % width}, y={bad[0] // width})"
            )
        self.samples = buf
        self.width = int(width)
        self.height = int(height)

        self._stats_dirty = True
        self._min = 0.0
        self._max = 0.0

    @classmethod
    def from_array(cls, array: np.ndarray) -> "SampleGrid":
        """Build a grid from a 2D ``(rows, cols)`` array."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise GridError(f"Expected a 2D array, got {array.ndim} dimensions")
        rows, cols = array.shape
        return cls(array, width=cols, height=rows)

    def __len__(self) -> int:
        return self.samples.size

    def __repr__(self) -> str:
        return f"SampleGrid(width={self.width}, height={self.height})"

    def get(self, x: int, y: int) -> float:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Sample ({x}, {y}) outside {self.width}x{self.height} grid"
            )
        return float(self.samples[x + y * self.width])

    def to_array(self) -> np.ndarray:
        """Return a ``(height, width)`` view of the samples in buffer order."""
        return self.samples.reshape(self.height, self.width)

    def copy(self) -> "SampleGrid":
        return SampleGrid(self.samples.copy(), self.width, self.height)

    def invalidate_stats(self) -> None:
        """Mark min/max stale. Every in-place mutation of samples must call this."""
        self._stats_dirty = True

    def _compute_stats(self) -> None:
        self._min = float(np.min(self.samples))
        self._max = float(np.max(self.samples))
        self._stats_dirty = False

    def min(self) -> float:
        if self._stats_dirty:
            self._compute_stats()
        return self._min

    def max(self) -> float:
        if self._stats_dirty:
            self._compute_stats()
        return self._max
