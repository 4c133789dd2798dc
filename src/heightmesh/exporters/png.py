"""16-bit grayscale PNG export."""

import numpy as np
from PIL import Image

from .atomic import atomic_output


def write_png(pixels: np.ndarray, output_path: str) -> dict:
    """Write a 2D uint16 array as a 16-bit grayscale PNG."""
    pixels = np.asarray(pixels)
    if pixels.ndim != 2 or pixels.dtype != np.uint16:
        raise ValueError(
            f"Expected a 2D uint16 array, got {pixels.ndim}D {pixels.dtype}"
        )
    img = Image.fromarray(np.ascontiguousarray(pixels))

    with atomic_output(output_path) as fh:
        img.save(fh, format="PNG")

    height, width = pixels.shape
    return {"success": True, "filepath": output_path, "width": width, "height": height}
