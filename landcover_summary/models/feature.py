"""Data models for vector features and the selected boundary.

A Feature is a single polygonal geometry with its attribute record, as
read from a vector source.  A FeatureCollection groups features that
share one CRS.  A Boundary is the single polygon the raster gets
clipped to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from shapely.geometry import mapping, shape

if TYPE_CHECKING:
    from collections.abc import Iterator

    from shapely.geometry.base import BaseGeometry

AttributeValue = str | int | float | None

POLYGONAL_TYPES = frozenset({"Polygon", "MultiPolygon"})


@dataclass(frozen=True, slots=True)
class Feature:
    """A single polygon feature.

    Attributes:
        geometry: Shapely ``Polygon`` or ``MultiPolygon`` (holes allowed).
        attributes: Attribute name → value mapping from the source record.
    """

    geometry: BaseGeometry
    attributes: dict[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.geometry.geom_type not in POLYGONAL_TYPES:
            msg = f"Feature geometry must be Polygon or MultiPolygon, got {self.geometry.geom_type}"
            raise TypeError(msg)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a GeoJSON-like feature dict."""
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry),
            "properties": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Feature:
        """Deserialise from a GeoJSON-like feature dict.

        Raises:
            TypeError: If ``geometry`` or ``properties`` have unexpected types.
        """
        geometry_raw = data.get("geometry")
        if not isinstance(geometry_raw, dict):
            msg = f"geometry must be a dict, got {type(geometry_raw).__name__}"
            raise TypeError(msg)

        properties_raw = data.get("properties") or {}
        if not isinstance(properties_raw, dict):
            msg = f"properties must be a dict, got {type(properties_raw).__name__}"
            raise TypeError(msg)

        return cls(
            geometry=shape(geometry_raw),
            attributes={str(k): v for k, v in properties_raw.items()},
        )


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """An ordered, immutable sequence of features sharing a single CRS.

    Attributes:
        features: The features in source order.
        crs: CRS of every feature (e.g. ``"EPSG:4326"`` or a WKT string).
    """

    features: tuple[Feature, ...] = ()
    crs: str = ""

    def __post_init__(self) -> None:
        # Accept any iterable at construction while keeping the stored value immutable.
        object.__setattr__(self, "features", tuple(self.features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, index: int) -> Feature:
        return self.features[index]

    def to_dict(self) -> dict[str, object]:
        """Serialise to a GeoJSON-like FeatureCollection dict."""
        return {
            "type": "FeatureCollection",
            "crs": self.crs,
            "features": [f.to_dict() for f in self.features],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureCollection:
        """Deserialise from a GeoJSON-like FeatureCollection dict."""
        features_raw = data.get("features", [])
        if not isinstance(features_raw, list):
            msg = f"features must be a list, got {type(features_raw).__name__}"
            raise TypeError(msg)
        return cls(
            features=tuple(Feature.from_dict(f) for f in features_raw),
            crs=str(data.get("crs", "")),
        )


@dataclass(frozen=True, slots=True)
class Boundary:
    """The single polygon a raster is clipped to.

    Attributes:
        geometry: Polygonal boundary geometry.
        crs: CRS of ``geometry``.
        attributes: Attribute record of the selected feature.
    """

    geometry: BaseGeometry
    crs: str
    attributes: dict[str, AttributeValue] = field(default_factory=dict)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Bounding envelope ``(min_x, min_y, max_x, max_y)``."""
        return tuple(self.geometry.bounds)  # type: ignore[return-value]

    @property
    def area(self) -> float:
        """Planar area in squared CRS units."""
        return float(self.geometry.area)
