"""Shared fixtures: GDAL environment and small on-disk GeoTIFFs."""

import numpy as np
import pytest
import rasterio
from rasterio.transform import from_origin


@pytest.fixture
def raster_env():
    from heightmesh.core import raster
    raster.initialize()
    yield
    raster.shutdown()


@pytest.fixture
def write_geotiff(tmp_path):
    """Return a function that writes a 2D array as a single-band float32 GeoTIFF."""
    def _write(array, name="dem.tif", nodata=None, bands=1):
        array = np.asarray(array, dtype=np.float32)
        rows, cols = array.shape
        path = tmp_path / name
        with rasterio.open(
            path, "w", driver="GTiff",
            height=rows, width=cols, count=bands, dtype="float32",
            nodata=nodata, transform=from_origin(0.0, float(rows), 1.0, 1.0),
        ) as dst:
            for band in range(1, bands + 1):
                dst.write(array * band, band)
        return str(path)
    return _write
