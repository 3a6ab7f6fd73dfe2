"""Shared pytest fixtures for the land-cover summary test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
from shapely.geometry import Polygon, box

from landcover_summary.models.feature import Boundary, Feature, FeatureCollection
from landcover_summary.models.raster import RasterGrid
from landcover_summary.models.summary import CodeLookup
from tests.builders import (
    GRID_CRS,
    NLCD_COLORMAP,
    NLCD_LABELS,
    make_boundary,
    make_category_array,
    make_grid,
    write_geotiff,
    write_lookup,
    write_shapefile,
)

# ---------------------------------------------------------------------------
# In-memory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def grid() -> RasterGrid:
    """Reference 10 x 10 category grid with an NLCD-style colormap."""
    return make_grid(colormap=NLCD_COLORMAP)


@pytest.fixture()
def square_boundary() -> Boundary:
    """Square (2, 2)-(6, 6): cell centres in rows 4-7, columns 2-5."""
    return make_boundary(box(2, 2, 6, 6))


@pytest.fixture()
def holed_boundary() -> Boundary:
    """Square (2, 2)-(6, 6) with a (3, 3)-(5, 5) hole removing 4 cell centres."""
    return make_boundary(Polygon(box(2, 2, 6, 6).exterior.coords, [box(3, 3, 5, 5).exterior.coords]))


@pytest.fixture()
def states() -> FeatureCollection:
    """Three state-like features, one of them with a null name."""
    return FeatureCollection(
        features=(
            Feature(geometry=box(0, 0, 5, 5), attributes={"NAME": "Alpha", "ID": 1}),
            Feature(geometry=box(5, 0, 10, 5), attributes={"NAME": "Beta", "ID": 2}),
            Feature(geometry=box(0, 5, 5, 10), attributes={"NAME": None, "ID": 3}),
        ),
        crs=GRID_CRS,
    )


@pytest.fixture()
def nlcd_lookup() -> CodeLookup:
    return CodeLookup.from_mapping(NLCD_LABELS)


# ---------------------------------------------------------------------------
# On-disk fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sources(tmp_path: Path) -> dict[str, Path]:
    """Shapefile + GeoTIFF + lookup CSV for an end-to-end run."""
    vector = write_shapefile(
        tmp_path / "states.shp",
        [
            (box(2, 2, 6, 6), {"NAME": "Alpha", "ID": 1}),
            (box(20, 20, 25, 25), {"NAME": "Far", "ID": 2}),
        ],
    )
    raster = write_geotiff(tmp_path / "nlcd.tif", make_category_array(), colormap=NLCD_COLORMAP)
    lookup = write_lookup(tmp_path / "nlcd_codes.csv", NLCD_LABELS)
    return {"vector": vector, "raster": raster, "lookup": lookup}
