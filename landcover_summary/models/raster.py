"""Data model for an in-memory, georeferenced single-band raster.

The category colormap (legend colours for land-cover classes) is part
of the grid itself, so every transform that builds a new grid from an
existing one through ``derive()`` carries it over unchanged.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from affine import Affine

Colormap = dict[int, tuple[int, int, int, int]]


@dataclass(frozen=True, slots=True, eq=False)
class RasterGrid:
    """A 2-D array of cell values plus georeferencing metadata.

    Attributes:
        data: 2-D cell array, row-major, stored as a read-only copy.
        transform: Affine transform mapping ``(col, row)`` to ``(x, y)``
            of the cell's upper-left corner.
        crs: Coordinate reference system (e.g. ``"EPSG:5070"``).
        nodata: Sentinel value meaning "no valid measurement".  ``nan``
            is allowed for floating-point grids.
        colormap: Optional category → RGBA legend table.
    """

    data: np.ndarray
    transform: Affine
    crs: str
    nodata: float = 0
    colormap: Colormap | None = field(default=None)

    def __post_init__(self) -> None:
        array = np.array(self.data, copy=True)
        if array.ndim != 2:
            msg = f"RasterGrid data must be 2-D, got {array.ndim}-D"
            raise ValueError(msg)
        if self.nodata_is_nan and not np.issubdtype(array.dtype, np.floating):
            msg = f"NaN nodata requires a floating-point grid, got {array.dtype}"
            raise ValueError(msg)
        array.setflags(write=False)
        object.__setattr__(self, "data", array)
        if self.colormap is not None:
            object.__setattr__(self, "colormap", dict(self.colormap))

    # -- shape ---------------------------------------------------------------

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    @property
    def is_empty(self) -> bool:
        """Whether the grid has no cells at all (0 rows or 0 columns)."""
        return self.data.size == 0

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Extent as ``(min_x, min_y, max_x, max_y)``."""
        corners = [
            self.transform * (0, 0),
            self.transform * (self.width, 0),
            self.transform * (0, self.height),
            self.transform * (self.width, self.height),
        ]
        xs = [c[0] for c in corners]
        ys = [c[1] for c in corners]
        return (min(xs), min(ys), max(xs), max(ys))

    # -- no-data -------------------------------------------------------------

    @property
    def nodata_is_nan(self) -> bool:
        return isinstance(self.nodata, float) and math.isnan(self.nodata)

    def valid_mask(self) -> np.ndarray:
        """Boolean array, True where the cell holds a valid value."""
        if self.nodata_is_nan:
            return ~np.isnan(self.data)
        valid = self.data != self.nodata
        if np.issubdtype(self.data.dtype, np.floating):
            valid &= ~np.isnan(self.data)
        return valid

    @property
    def valid_count(self) -> int:
        return int(np.count_nonzero(self.valid_mask()))

    # -- derivation ----------------------------------------------------------

    def derive(self, *, data: np.ndarray, transform: Affine | None = None) -> RasterGrid:
        """Return a new grid with new cells, keeping CRS, no-data and colormap."""
        changes: dict[str, Any] = {"data": data}
        if transform is not None:
            changes["transform"] = transform
        return dataclasses.replace(self, **changes)

    def equals(self, other: RasterGrid) -> bool:
        """Cell-by-cell and metadata equality (no-data cells compare equal)."""
        return (
            self.shape == other.shape
            and self.transform == other.transform
            and self.crs == other.crs
            and self.colormap == other.colormap
            and (self.nodata == other.nodata or (self.nodata_is_nan and other.nodata_is_nan))
            and bool(np.array_equal(self.data, other.data, equal_nan=self._floating))
        )

    @property
    def _floating(self) -> bool:
        return bool(np.issubdtype(self.data.dtype, np.floating))
