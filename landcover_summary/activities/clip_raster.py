"""Spatial clipper — restrict a raster grid to a boundary polygon.

Two phases, mirroring ``rasterio.mask.mask(crop=True)`` on an in-memory
grid:

1. **Extent crop**: map the boundary envelope into pixel space and keep
   the rows/columns whose cell centres fall inside it.  Pure transform
   arithmetic, no per-cell geometry test.
2. **Exact mask**: rasterize the boundary over the cropped window
   (cell-centre test, holes and multi-part polygons honoured) and set
   every outside cell to the no-data sentinel.

A boundary that does not reach the raster yields a 0×0 grid.  CRS,
no-data and the category colormap are always carried over.  No
reprojection happens here; inputs in different CRSs are rejected.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from rasterio.features import geometry_mask
from rasterio.windows import Window
from rasterio.windows import transform as window_transform
from shapely.geometry import mapping

from landcover_summary.activities.read_vectors import crs_equal
from landcover_summary.core.exceptions import CRSMismatchError, EmptyGeometryError
from landcover_summary.models.feature import Boundary
from landcover_summary.models.raster import RasterGrid

logger = logging.getLogger("landcover_summary.activities.clip_raster")


def clip_raster(grid: RasterGrid, boundary: Boundary, *, all_touched: bool = False) -> RasterGrid:
    """Clip ``grid`` to ``boundary``.

    Args:
        grid: Source raster grid.
        boundary: Clip polygon, already in the grid's CRS.
        all_touched: Keep every cell the polygon touches instead of only
            cells whose centre lies inside it.

    Returns:
        A new ``RasterGrid`` covering the boundary envelope with cells
        outside the polygon set to ``grid.nodata``.

    Raises:
        CRSMismatchError: If the boundary and grid CRSs differ.
        EmptyGeometryError: If the boundary is empty or has zero area.
    """
    if not crs_equal(grid.crs, boundary.crs):
        msg = f"Boundary CRS {boundary.crs!r} does not match raster CRS {grid.crs!r}"
        raise CRSMismatchError(msg)

    if boundary.geometry.is_empty or boundary.area == 0:
        msg = "Boundary geometry is empty or has zero area"
        raise EmptyGeometryError(msg)

    # Phase 1: extent crop
    window = envelope_window(grid, boundary.bounds)
    row_slice, col_slice = window.toslices()
    cropped = grid.data[row_slice, col_slice]
    cropped_transform = window_transform(window, grid.transform)

    if cropped.size == 0:
        logger.warning(
            "Boundary does not overlap raster | boundary_bounds=%s | raster_bounds=%s",
            boundary.bounds,
            grid.bounds,
        )
        empty = np.empty((0, 0), dtype=grid.data.dtype)
        return grid.derive(data=empty, transform=grid.transform)

    # Phase 2: exact mask
    inside = geometry_mask(
        [mapping(boundary.geometry)],
        out_shape=cropped.shape,
        transform=cropped_transform,
        all_touched=all_touched,
        invert=True,
    )
    masked = np.where(inside, cropped, np.asarray(grid.nodata, dtype=grid.data.dtype))

    logger.info(
        "Clip completed | rows=%d | cols=%d | inside_cells=%d | window=(%d, %d)",
        cropped.shape[0],
        cropped.shape[1],
        int(np.count_nonzero(inside)),
        window.row_off,
        window.col_off,
    )
    return grid.derive(data=masked, transform=cropped_transform)


def envelope_window(grid: RasterGrid, bounds: tuple[float, float, float, float]) -> Window:
    """Return the window of cells whose centres lie within ``bounds``.

    The envelope corners are mapped through the inverse transform, so
    north-up and south-up grids are handled alike.  The result is
    clamped to the grid and may have zero width or height.
    """
    min_x, min_y, max_x, max_y = bounds
    inverse = ~grid.transform
    pixel_corners = [
        inverse * (min_x, min_y),
        inverse * (min_x, max_y),
        inverse * (max_x, min_y),
        inverse * (max_x, max_y),
    ]
    cols = [c for c, _ in pixel_corners]
    rows = [r for _, r in pixel_corners]

    # Cell i has its centre at i + 0.5 in pixel space.
    col_start = max(0, math.ceil(min(cols) - 0.5))
    col_stop = min(grid.width, math.floor(max(cols) - 0.5) + 1)
    row_start = max(0, math.ceil(min(rows) - 0.5))
    row_stop = min(grid.height, math.floor(max(rows) - 0.5) + 1)

    width = max(0, col_stop - col_start)
    height = max(0, row_stop - row_start)
    if width == 0 or height == 0:
        return Window(0, 0, 0, 0)
    return Window(col_start, row_start, width, height)
