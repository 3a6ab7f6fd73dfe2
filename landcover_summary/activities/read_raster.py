"""Raster data provider — read and write single-band GeoTIFFs with rasterio.

``read_raster`` loads one band into an in-memory ``RasterGrid``
together with its transform, CRS, no-data sentinel and category
colormap.  ``write_raster`` is the inverse and writes the colormap back
so a clipped land-cover grid keeps its legend.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from landcover_summary.core.constants import DEFAULT_NODATA, DEFAULT_RASTER_BAND
from landcover_summary.core.exceptions import PermanentError, SourceReadError
from landcover_summary.models.raster import RasterGrid

if TYPE_CHECKING:
    from pathlib import Path

    from landcover_summary.models.raster import Colormap

logger = logging.getLogger("landcover_summary.activities.read_raster")

STAGE = "read_raster"


class RasterWriteError(PermanentError):
    """Raised when a grid cannot be written to disk."""

    default_stage = "write_raster"
    default_code = "RASTER_WRITE_FAILED"


def read_raster(
    path: Path | str,
    *,
    band: int = DEFAULT_RASTER_BAND,
    default_nodata: float = DEFAULT_NODATA,
) -> RasterGrid:
    """Read one band of a raster into a ``RasterGrid``.

    Args:
        path: Filesystem path (or GDAL URI) of the raster.
        band: 1-based band index.
        default_nodata: Sentinel to use when the source declares none.

    Returns:
        The band as an immutable ``RasterGrid``.

    Raises:
        SourceReadError: If the raster cannot be opened, the band does
            not exist, the raster has no CRS, or a NaN nodata would
            apply to an integer band.
    """
    import rasterio

    source = str(path)
    try:
        with rasterio.open(source) as src:
            if band < 1 or band > src.count:
                msg = f"Band {band} out of range for {source} (has {src.count} band(s))"
                raise SourceReadError(msg, stage=STAGE)
            if src.crs is None:
                msg = f"Raster {source} has no CRS"
                raise SourceReadError(msg, stage=STAGE)

            data = src.read(band)
            nodata = src.nodatavals[band - 1]
            crs = _crs_to_string(src.crs)
            colormap = _read_colormap(src, band)
            transform = src.transform
    except SourceReadError:
        raise
    except Exception as exc:
        msg = f"Cannot read raster {source}: {exc}"
        raise SourceReadError(msg, stage=STAGE) from exc

    if nodata is None:
        logger.warning(
            "Raster declares no nodata value, using default | path=%s | nodata=%s",
            source,
            default_nodata,
        )
        nodata = default_nodata

    if math.isnan(nodata) and not np.issubdtype(data.dtype, np.floating):
        msg = (
            f"NaN nodata cannot mark cells of {data.dtype} raster {source}; "
            "declare a nodata value or set LANDCOVER_DEFAULT_NODATA to an integer"
        )
        raise SourceReadError(msg, stage=STAGE)

    logger.info(
        "Raster read | path=%s | band=%d | shape=%dx%d | crs=%s | nodata=%s | colormap=%s",
        source,
        band,
        data.shape[0],
        data.shape[1],
        crs,
        nodata,
        colormap is not None,
    )
    return RasterGrid(data=data, transform=transform, crs=crs, nodata=nodata, colormap=colormap)


def write_raster(grid: RasterGrid, path: Path | str) -> str:
    """Write a grid as a single-band GeoTIFF, including its colormap.

    Raises:
        RasterWriteError: If the grid is empty or the write fails.
    """
    import rasterio

    output = str(path)
    if grid.is_empty:
        msg = f"Cannot write an empty ({grid.height}x{grid.width}) grid to {output}"
        raise RasterWriteError(msg)

    profile = {
        "driver": "GTiff",
        "height": grid.height,
        "width": grid.width,
        "count": 1,
        "dtype": grid.data.dtype.name,
        "crs": grid.crs,
        "transform": grid.transform,
        "nodata": grid.nodata,
    }
    try:
        with rasterio.open(output, "w", **profile) as dst:
            dst.write(grid.data, 1)
            if grid.colormap:
                dst.write_colormap(1, grid.colormap)
    except Exception as exc:
        msg = f"Failed to write raster {output}: {exc}"
        raise RasterWriteError(msg) from exc

    logger.info("Raster written | path=%s | shape=%dx%d", output, grid.height, grid.width)
    return output


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_colormap(src: object, band: int) -> Colormap | None:
    """Return the band colormap, or ``None`` if the band has none.

    rasterio raises ``ValueError`` for bands without a colour table.
    """
    try:
        colormap = src.colormap(band)  # type: ignore[attr-defined]
    except ValueError:
        return None
    return {int(k): tuple(int(c) for c in v) for k, v in colormap.items()}  # type: ignore[misc]


def _crs_to_string(crs: object) -> str:
    epsg = crs.to_epsg()  # type: ignore[attr-defined]
    if epsg is not None:
        return f"EPSG:{epsg}"
    return str(crs.to_wkt())  # type: ignore[attr-defined]
