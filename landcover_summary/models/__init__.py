"""Data models and schemas.

Defines the data structures passed between pipeline stages:
- Feature / FeatureCollection / Boundary: vector inputs
- RasterGrid: georeferenced single-band raster with colormap
- FrequencyTable / CodeLookup / LabeledCategory: summary stages
- SummaryRecord: JSON report schema
"""

from landcover_summary.models.feature import Boundary, Feature, FeatureCollection
from landcover_summary.models.raster import RasterGrid
from landcover_summary.models.summary import CodeLookup, FrequencyTable, LabeledCategory

__all__ = [
    "Boundary",
    "CodeLookup",
    "Feature",
    "FeatureCollection",
    "FrequencyTable",
    "LabeledCategory",
    "RasterGrid",
]
