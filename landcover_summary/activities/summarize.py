"""Categorical summarizer — tabulate cell values of a clipped grid."""

from __future__ import annotations

import logging

import numpy as np

from landcover_summary.models.raster import RasterGrid
from landcover_summary.models.summary import FrequencyTable

logger = logging.getLogger("landcover_summary.activities.summarize")


def summarize_categories(grid: RasterGrid) -> FrequencyTable:
    """Count every distinct valid cell value in ``grid``.

    No-data cells are excluded from both the counts and the total the
    percentages are computed against.  The returned table holds no
    reference to the cell array.

    Returns:
        A ``FrequencyTable``; empty when the grid has no valid cells.
    """
    values = grid.data[grid.valid_mask()]
    uniques, counts = np.unique(values, return_counts=True)
    table = FrequencyTable(
        counts={_to_python(v): int(c) for v, c in zip(uniques, counts, strict=True)}
    )

    if table.total == 0:
        logger.warning("No valid cells to summarize | shape=%dx%d", grid.height, grid.width)
    else:
        logger.info(
            "Categories summarized | categories=%d | valid_cells=%d | nodata_cells=%d",
            len(table),
            table.total,
            grid.data.size - table.total,
        )
    return table


def _to_python(value: np.generic) -> int | float:
    """Convert a numpy scalar to ``int`` when it holds a whole number."""
    item = value.item()
    if isinstance(item, float) and item.is_integer():
        return int(item)
    return item
