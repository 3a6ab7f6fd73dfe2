"""Tests for the feature, raster and summary data models."""

from __future__ import annotations

import numpy as np
import pytest
from affine import Affine
from shapely.geometry import LineString, MultiPolygon, Point, box

from landcover_summary.models.feature import Boundary, Feature, FeatureCollection
from landcover_summary.models.raster import RasterGrid
from landcover_summary.models.summary import CodeLookup, FrequencyTable, LabeledCategory
from tests.builders import GRID_CRS, NLCD_COLORMAP, make_grid

# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------


class TestFeature:
    """Feature accepts polygonal geometry only."""

    def test_polygon_and_multipolygon(self) -> None:
        Feature(geometry=box(0, 0, 1, 1))
        Feature(geometry=MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)]))

    @pytest.mark.parametrize("geometry", [Point(0, 0), LineString([(0, 0), (1, 1)])])
    def test_non_polygon_rejected(self, geometry: object) -> None:
        with pytest.raises(TypeError, match="Polygon or MultiPolygon"):
            Feature(geometry=geometry)  # type: ignore[arg-type]

    def test_dict_round_trip(self) -> None:
        feature = Feature(geometry=box(0, 0, 2, 1), attributes={"NAME": "Alpha", "ID": 1})
        data = feature.to_dict()
        assert data["type"] == "Feature"
        assert data["properties"] == {"NAME": "Alpha", "ID": 1}
        back = Feature.from_dict(data)
        assert back.geometry.equals(feature.geometry)
        assert back.attributes == feature.attributes

    def test_from_dict_rejects_missing_geometry(self) -> None:
        with pytest.raises(TypeError, match="geometry"):
            Feature.from_dict({"properties": {}})


class TestFeatureCollection:
    """Immutable, CRS-tagged feature sequence."""

    def test_sequence_protocol(self, states: FeatureCollection) -> None:
        assert len(states) == 3
        assert states[1].attributes["NAME"] == "Beta"
        assert [f.attributes["ID"] for f in states] == [1, 2, 3]

    def test_list_coerced_to_tuple(self) -> None:
        collection = FeatureCollection(features=[Feature(geometry=box(0, 0, 1, 1))], crs=GRID_CRS)  # type: ignore[arg-type]
        assert isinstance(collection.features, tuple)

    def test_from_dict(self, states: FeatureCollection) -> None:
        back = FeatureCollection.from_dict(states.to_dict())
        assert back.crs == GRID_CRS
        assert len(back) == 3


class TestBoundary:
    def test_bounds_and_area(self) -> None:
        boundary = Boundary(geometry=box(2, 2, 6, 5), crs=GRID_CRS)
        assert boundary.bounds == (2.0, 2.0, 6.0, 5.0)
        assert boundary.area == 12.0


# ---------------------------------------------------------------------------
# Raster grid
# ---------------------------------------------------------------------------


class TestRasterGrid:
    """Read-only 2-D grid with georeferencing."""

    def test_shape_and_bounds(self, grid: RasterGrid) -> None:
        assert grid.shape == (10, 10)
        assert grid.bounds == (0.0, 0.0, 10.0, 10.0)
        assert not grid.is_empty

    def test_rejects_non_2d(self) -> None:
        with pytest.raises(ValueError, match="2-D"):
            RasterGrid(data=np.zeros((2, 2, 2)), transform=Affine.identity(), crs=GRID_CRS)

    def test_rejects_nan_nodata_on_integer_grid(self) -> None:
        with pytest.raises(ValueError, match="floating-point"):
            make_grid(np.full((10, 10), 41, dtype=np.uint8), nodata=float("nan"))

    def test_nan_nodata_on_float_grid(self) -> None:
        grid = make_grid(np.array([[41.0, np.nan]], dtype=np.float32), nodata=float("nan"))
        assert grid.valid_count == 1

    def test_data_is_copied_and_read_only(self) -> None:
        source = np.ones((2, 2), dtype=np.uint8)
        grid = make_grid(source)
        source[0, 0] = 9
        assert grid.data[0, 0] == 1
        with pytest.raises(ValueError):
            grid.data[0, 0] = 5

    def test_derive_keeps_metadata(self, grid: RasterGrid) -> None:
        child = grid.derive(data=np.zeros((2, 2), dtype=np.uint8), transform=Affine.translation(1, 1))
        assert child.colormap == NLCD_COLORMAP
        assert child.crs == grid.crs
        assert child.nodata == grid.nodata
        assert child.transform == Affine.translation(1, 1)

    def test_valid_mask_excludes_nodata(self) -> None:
        grid = make_grid(np.array([[0, 1], [2, 0]], dtype=np.uint8), nodata=0)
        np.testing.assert_array_equal(grid.valid_mask(), [[False, True], [True, False]])
        assert grid.valid_count == 2

    def test_equals_considers_metadata(self, grid: RasterGrid) -> None:
        same = make_grid(colormap=NLCD_COLORMAP)
        assert grid.equals(same)
        assert not grid.equals(make_grid())

    def test_equals_with_nan_nodata(self) -> None:
        data = np.array([[1.0, np.nan]], dtype=np.float32)
        left = make_grid(data, nodata=float("nan"))
        right = make_grid(data, nodata=float("nan"))
        assert left.equals(right)


# ---------------------------------------------------------------------------
# Summary models
# ---------------------------------------------------------------------------


class TestFrequencyTable:
    def test_values_sorted(self) -> None:
        assert FrequencyTable(counts={3: 1, 1: 2, 2: 1}).values == [1, 2, 3]

    def test_empty(self) -> None:
        table = FrequencyTable()
        assert table.total == 0
        assert table.percentages == {}
        assert table.to_dict() == {"total": 0, "categories": []}


class TestCodeLookup:
    def test_from_mapping_coerces(self) -> None:
        lookup = CodeLookup.from_mapping({"11": 42})  # type: ignore[dict-item]
        assert 11 in lookup
        assert lookup.get(11) == "42"
        assert lookup.get(12) is None
        assert len(lookup) == 1


class TestLabeledCategory:
    def test_pair_and_dict(self) -> None:
        row = LabeledCategory(code=41, label="Deciduous Forest", count=12, percentage=75.0)
        assert row.as_pair() == ("Deciduous Forest", 75.0)
        assert row.to_dict() == {
            "code": 41,
            "label": "Deciduous Forest",
            "count": 12,
            "percentage": 75.0,
            "resolved": True,
        }
