"""Vector data provider — read polygon features with fiona.

Reads any OGR-supported vector source (Shapefile, GeoPackage, GeoJSON)
into an immutable ``FeatureCollection``.  Only Polygon and MultiPolygon
records are kept; other geometry types are logged and skipped so one
stray point layer entry does not abort a run.

Also provides the explicit reprojection stage used before clipping:
the clipper itself never reprojects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from landcover_summary.core.exceptions import CRSMismatchError, SourceReadError
from landcover_summary.models.feature import POLYGONAL_TYPES, Feature, FeatureCollection

if TYPE_CHECKING:
    from pathlib import Path

    from landcover_summary.models.feature import AttributeValue

logger = logging.getLogger("landcover_summary.activities.read_vectors")

STAGE = "read_vectors"
REPROJECT_STAGE = "reproject"


def read_feature_collection(path: Path | str, *, layer: str | int | None = None) -> FeatureCollection:
    """Read polygon features and their attributes from a vector source.

    Args:
        path: Filesystem path (or any fiona-readable URI) of the source.
        layer: Optional layer name or index for multi-layer sources.

    Returns:
        A ``FeatureCollection`` in the source CRS.  Empty if the source
        holds no polygon records.

    Raises:
        SourceReadError: If the source cannot be opened or decoded.
    """
    import fiona
    from shapely.geometry import shape

    source = str(path)
    logger.info("Reading vector source | path=%s | layer=%s", source, layer)

    features: list[Feature] = []
    skipped = 0
    try:
        with fiona.open(source, layer=layer) as collection:
            crs = _extract_crs(collection)
            for idx, record in enumerate(collection):
                geom = record.geometry
                if geom is None:
                    skipped += 1
                    continue
                geometry = shape(geom)
                if geometry.geom_type not in POLYGONAL_TYPES:
                    logger.warning(
                        "Skipping non-polygon record | path=%s | index=%d | type=%s",
                        source,
                        idx,
                        geometry.geom_type,
                    )
                    skipped += 1
                    continue
                features.append(
                    Feature(geometry=geometry, attributes=_normalise_properties(record.properties))
                )
    except Exception as exc:
        msg = f"Cannot read vector source {source}: {exc}"
        raise SourceReadError(msg, stage=STAGE) from exc

    logger.info(
        "Vector source read | path=%s | features=%d | skipped=%d | crs=%s",
        source,
        len(features),
        skipped,
        crs,
    )
    return FeatureCollection(features=tuple(features), crs=crs)


def reproject_collection(collection: FeatureCollection, target_crs: str) -> FeatureCollection:
    """Return a copy of ``collection`` with every geometry in ``target_crs``.

    Uses ``pyproj.Transformer`` with ``always_xy=True`` so axis order is
    always ``(x, y)`` / ``(lon, lat)``.  Returns the collection
    unchanged if it is already in ``target_crs``.

    Raises:
        CRSMismatchError: If either CRS is undefined or cannot be
            interpreted, so the two cannot be aligned.
    """
    from pyproj import CRS, Transformer
    from pyproj.exceptions import CRSError
    from shapely.ops import transform

    if crs_equal(collection.crs, target_crs):
        return collection

    if not collection.crs or not target_crs:
        msg = f"Cannot align boundary CRS {collection.crs!r} with raster CRS {target_crs!r}: CRS undefined"
        raise CRSMismatchError(msg, stage=REPROJECT_STAGE)

    try:
        transformer = Transformer.from_crs(
            CRS.from_user_input(collection.crs),
            CRS.from_user_input(target_crs),
            always_xy=True,
        )
    except CRSError as exc:
        msg = f"Cannot reproject from {collection.crs!r} to {target_crs!r}: {exc}"
        raise CRSMismatchError(msg, stage=REPROJECT_STAGE) from exc

    reprojected = tuple(
        Feature(geometry=transform(transformer.transform, f.geometry), attributes=dict(f.attributes))
        for f in collection
    )
    logger.info(
        "Reprojected features | count=%d | %s → %s",
        len(reprojected),
        _short_crs(collection.crs),
        _short_crs(target_crs),
    )
    return FeatureCollection(features=reprojected, crs=target_crs)


def crs_equal(left: str, right: str) -> bool:
    """Compare two CRS definitions semantically (``EPSG:4326`` == its WKT).

    Unparseable or empty definitions only match when textually identical.
    """
    if left == right:
        return True
    if not left or not right:
        return False

    from pyproj import CRS
    from pyproj.exceptions import CRSError

    try:
        return CRS.from_user_input(left) == CRS.from_user_input(right)
    except CRSError:
        return False


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _extract_crs(collection: Any) -> str:
    """Return ``EPSG:<code>`` when resolvable, otherwise the source WKT."""
    crs = getattr(collection, "crs", None)
    if not crs:
        return ""
    epsg = crs.to_epsg()
    if epsg is not None:
        return f"EPSG:{epsg}"
    return str(crs.to_wkt())


def _normalise_properties(properties: Any) -> dict[str, AttributeValue]:
    """Copy a fiona properties record into plain str/int/float/None values."""
    result: dict[str, AttributeValue] = {}
    for key, value in dict(properties or {}).items():
        if value is None or isinstance(value, str | int | float):
            result[str(key)] = value
        else:
            result[str(key)] = str(value)
    return result


def _short_crs(crs: str) -> str:
    return crs if len(crs) <= 40 else crs[:37] + "..."
