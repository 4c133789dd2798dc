"""Triangulation of a sample grid into a closed solid.

Model coordinate system:
- X: grid column
- Y: grid row, flipped so raster row 0 is the back of the model (Y = H-1)
- Z: up (sample value), base plane at Z = 0

All quads are given as (top-left, top-right, bottom-left, bottom-right)
as seen from outside the solid, which makes both emitted triangles
counter-clockwise from outside and their normals point outward.
"""

import logging

import numpy as np

from ..errors import GridTooSmallError, MeshValidationError
from .grid import SampleGrid
from .models import Solid

logger = logging.getLogger(__name__)

# Triangles with less area than this are treated as degenerate.
_MIN_AREA = 1e-9
# Skirt triangles are one unit wide, so this height gives _MIN_AREA.
_MIN_WALL_HEIGHT = 2 * _MIN_AREA
# Relative tolerance for the closed-surface check.
_CLOSURE_RTOL = 1e-4
# Footprint coordinates are whole numbers, so projected areas add up exactly.
_FOOTPRINT_RTOL = 1e-9


def model_vertices(grid: SampleGrid) -> np.ndarray:
    """Map every sample to its model-space position.

    Returns an array of shape (H, W, 3) indexed ``[model_y, x]``, where
    sample (col, row) lands at ``(col, H - 1 - row, sample)``. This is the
    only place the raster row axis is flipped.
    """
    heights = np.flipud(grid.to_array()).astype(np.float32)
    rows, cols = heights.shape
    ys, xs = np.mgrid[0:rows, 0:cols].astype(np.float32)
    return np.stack([xs, ys, heights], axis=-1)


def _quads(tl: np.ndarray, tr: np.ndarray, bl: np.ndarray, br: np.ndarray) -> np.ndarray:
    """Split quads into triangles (tl, bl, tr) and (tr, bl, br).

    Corner arrays have shape (..., 3); returns (M, 3, 3) with the two
    triangles of each quad adjacent.
    """
    first = np.stack([tl, bl, tr], axis=-2)
    second = np.stack([tr, bl, br], axis=-2)
    return np.stack([first, second], axis=-3).reshape(-1, 3, 3)


def _on_base(points: np.ndarray) -> np.ndarray:
    dropped = points.copy()
    dropped[..., 2] = 0.0
    return dropped


def _wall(tl: np.ndarray, tr: np.ndarray) -> np.ndarray:
    """Skirt quads hanging from the top edge (tl, tr) down to the base plane.

    Each triangle spans one unit along the edge, so its area is half the
    height of its top corner. Triangles that would fall under the
    degenerate-area limit are left out.
    """
    tris = _quads(tl, tr, _on_base(tl), _on_base(tr))
    keep = np.empty(len(tris), dtype=bool)
    keep[0::2] = tl[:, 2].astype(np.float64) >= _MIN_WALL_HEIGHT
    keep[1::2] = tr[:, 2].astype(np.float64) >= _MIN_WALL_HEIGHT
    return tris[keep]


def _top_surface(verts: np.ndarray) -> np.ndarray:
    return _quads(
        tl=verts[1:, :-1],
        tr=verts[1:, 1:],
        bl=verts[:-1, :-1],
        br=verts[:-1, 1:],
    )


def _skirts(verts: np.ndarray) -> np.ndarray:
    front = verts[0, :]       # y = 0, faces -Y
    back = verts[-1, ::-1]    # y = H-1, faces +Y
    left = verts[::-1, 0]     # x = 0, faces -X
    right = verts[:, -1]      # x = W-1, faces +X
    return np.concatenate([
        _wall(front[:-1], front[1:]),
        _wall(back[:-1], back[1:]),
        _wall(left[:-1], left[1:]),
        _wall(right[:-1], right[1:]),
    ])


def _base(width: int, height: int) -> np.ndarray:
    x2 = float(width - 1)
    y2 = float(height - 1)
    # Seen from below, +X runs to the left.
    return _quads(
        tl=np.array([x2, y2, 0.0]),
        tr=np.array([0.0, y2, 0.0]),
        bl=np.array([x2, 0.0, 0.0]),
        br=np.array([0.0, 0.0, 0.0]),
    )


def compute_normals(triangles: np.ndarray) -> np.ndarray:
    """Unit normals from winding: normalize((v1 - v0) x (v2 - v0)).

    Degenerate triangles get a zero normal.
    """
    tris = np.asarray(triangles, dtype=np.float64)
    cross = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    length = np.linalg.norm(cross, axis=1, keepdims=True)
    normals = np.divide(cross, length, out=np.zeros_like(cross), where=length > 0)
    return normals.astype(np.float32)


def validate_solid(solid: Solid) -> None:
    """Check that a heightfield solid is closed, outward-facing and above the base plane.

    Orientation is checked per triangle against the heightfield layout
    (top surface, vertical skirts, flat base), so a single flipped face
    is caught even on large grids. Raises MeshValidationError describing
    the first failed check.
    """
    tris = solid.triangles.astype(np.float64)
    if len(tris) == 0:
        raise MeshValidationError("Solid has no triangles")
    if not np.all(np.isfinite(tris)):
        raise MeshValidationError("Solid has non-finite vertex coordinates")

    cross = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    areas = 0.5 * np.linalg.norm(cross, axis=1)
    degenerate = np.flatnonzero(areas < _MIN_AREA)
    if degenerate.size:
        raise MeshValidationError(
            f"{degenerate.size} degenerate triangles (first at index {degenerate[0]})"
        )

    lowest = float(tris[..., 2].min())
    if lowest < 0.0:
        raise MeshValidationError(
            f"Surface dips below the base plane (lowest z = {lowest:g}); "
            "raise the zero level"
        )

    # A closed surface has zero total vector area.
    open_area = np.linalg.norm(0.5 * cross.sum(axis=0))
    if open_area > _CLOSURE_RTOL * areas.sum():
        raise MeshValidationError(f"Solid is not closed (net vector area {open_area:g})")

    # Outward-facing triangles enclose a positive signed volume.
    volume = np.einsum("ij,ij->i", tris[:, 0], np.cross(tris[:, 1], tris[:, 2])).sum() / 6.0
    if volume <= 0.0:
        raise MeshValidationError(
            f"Triangle normals point inward (signed volume {volume:g})"
        )

    # Skirts face away from the footprint centre. Only base faces point down.
    xy = tris[..., :2].reshape(-1, 2)
    lo, hi = xy.min(axis=0), xy.max(axis=0)
    up = cross[:, 2]
    vertical = up == 0.0
    outward = np.einsum("ij,ij->i", cross[:, :2], tris.mean(axis=1)[:, :2] - (lo + hi) / 2)
    on_base = np.all(tris[..., 2] == 0.0, axis=1)
    inward = np.flatnonzero((vertical & (outward <= 0.0)) | (~vertical & (up < 0.0) & ~on_base))
    if inward.size:
        raise MeshValidationError(
            f"{inward.size} triangles point inward (first at index {inward[0]})"
        )

    # Seen from above the top surface covers the footprint exactly once,
    # and so does the base from below.
    footprint = float(np.prod(hi - lo))
    up_area = 0.5 * float(up[up > 0.0].sum())
    down_area = -0.5 * float(up[up < 0.0].sum())
    if not (
        np.isclose(up_area, footprint, rtol=_FOOTPRINT_RTOL, atol=0.0)
        and np.isclose(down_area, footprint, rtol=_FOOTPRINT_RTOL, atol=0.0)
    ):
        raise MeshValidationError(
            f"Top and base do not each cover the footprint once "
            f"(up {up_area:g}, down {down_area:g}, footprint {footprint:g})"
        )


def build_solid(grid: SampleGrid, name: str = "heightfield") -> Solid:
    """Triangulate a grid into a closed solid: top surface, four skirts, flat base.

    Raises GridTooSmallError for grids narrower or shorter than two
    samples and MeshValidationError if the result is not well-formed.
    """
    if grid.width < 2 or grid.height < 2:
        raise GridTooSmallError(
            f"Need at least 2x2 samples to triangulate, got {grid.width}x{grid.height}"
        )

    verts = model_vertices(grid)
    top = _top_surface(verts)
    skirts = _skirts(verts)
    base = _base(grid.width, grid.height)
    triangles = np.concatenate([top, skirts, base]).astype(np.float32)

    logger.debug(
        "Triangulated %dx%d grid: %d top, %d skirt, %d base triangles",
        grid.width, grid.height, len(top), len(skirts), len(base),
    )

    solid = Solid(triangles=triangles, normals=compute_normals(triangles), name=name)
    validate_solid(solid)
    return solid
