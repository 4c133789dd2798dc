"""Exception hierarchy for heightmesh.

Input validation and source/sink failures are recoverable and share the
HeightmeshError base so callers can report them uniformly. Contract
breaches (out-of-range sample access, reading rasters before
initialize()) raise builtin IndexError / RuntimeError instead.
"""


class HeightmeshError(Exception):
    """Base class for all recoverable heightmesh errors."""


class GridError(HeightmeshError, ValueError):
    """Sample buffer does not describe a valid non-empty grid."""


class DimensionMismatchError(GridError):
    """Two grids combined elementwise have different sample counts."""


class GridTooSmallError(GridError):
    """Grid is narrower or shorter than two samples and cannot be triangulated."""


class WindowOutOfBoundsError(HeightmeshError, ValueError):
    """Requested raster window lies outside the source extent or is empty."""


class UnsupportedFormatError(HeightmeshError, ValueError):
    """Output path extension does not select a known sink."""


class MeshValidationError(HeightmeshError, ValueError):
    """Triangulated solid is not a well-formed closed mesh."""


class SourceUnavailableError(HeightmeshError, OSError):
    """Raster source could not be opened or decoded."""


class SinkWriteError(HeightmeshError, OSError):
    """Mesh or image could not be written to its destination."""


class ViewerError(HeightmeshError):
    """External viewer could not be launched or exited with an error."""
