"""Boundary selector — pick the clip polygon out of a feature collection.

Selection is an attribute-equality filter.  Features whose attribute is
null never match.  The filtered collection may be empty; turning it
into a ``Boundary`` is where an empty selection fails, so a clip is
never attempted against nothing.
"""

from __future__ import annotations

import logging

from shapely.ops import unary_union

from landcover_summary.core.exceptions import AttributeNotFoundError, EmptySelectionError
from landcover_summary.models.feature import AttributeValue, Boundary, FeatureCollection

logger = logging.getLogger("landcover_summary.activities.select_boundary")


def select_features(
    collection: FeatureCollection,
    attribute: str,
    value: AttributeValue,
) -> FeatureCollection:
    """Return the features whose ``attribute`` equals ``value``.

    Args:
        collection: Source features.
        attribute: Attribute name; must exist on every feature.
        value: Value to match.  Null attribute values never match.

    Returns:
        A new ``FeatureCollection`` (same CRS, source order), possibly empty.

    Raises:
        AttributeNotFoundError: If any feature lacks ``attribute``.
    """
    missing = [idx for idx, f in enumerate(collection) if attribute not in f.attributes]
    if missing:
        msg = (
            f"Attribute {attribute!r} missing from {len(missing)} of "
            f"{len(collection)} feature(s) (first at index {missing[0]})"
        )
        raise AttributeNotFoundError(msg)

    selected = tuple(
        f
        for f in collection
        if f.attributes[attribute] is not None and f.attributes[attribute] == value
    )
    logger.info(
        "Features selected | attribute=%s | value=%r | matched=%d | total=%d",
        attribute,
        value,
        len(selected),
        len(collection),
    )
    return FeatureCollection(features=selected, crs=collection.crs)


def to_boundary(
    selection: FeatureCollection,
    *,
    attribute: str = "",
    value: AttributeValue = None,
) -> Boundary:
    """Collapse a selection into a single ``Boundary``.

    Several matching features are merged with ``unary_union``; the
    boundary keeps the attribute record of the first match.
    ``attribute`` and ``value`` only describe the predicate in the
    error message.

    Raises:
        EmptySelectionError: If ``selection`` is empty.
    """
    if len(selection) == 0:
        if attribute:
            msg = f"No feature has {attribute} == {value!r}"
        else:
            msg = "No matching boundary: the selection is empty"
        raise EmptySelectionError(msg)

    first = selection[0]
    if len(selection) == 1:
        geometry = first.geometry
    else:
        geometry = unary_union([f.geometry for f in selection])
        logger.info("Merged %d matching features into one boundary", len(selection))

    return Boundary(geometry=geometry, crs=selection.crs, attributes=dict(first.attributes))


def select_boundary(
    collection: FeatureCollection,
    attribute: str,
    value: AttributeValue,
) -> Boundary:
    """Select the features matching ``attribute == value`` as one ``Boundary``.

    Raises:
        AttributeNotFoundError: If any feature lacks ``attribute``.
        EmptySelectionError: If no feature matches.
    """
    selection = select_features(collection, attribute, value)
    return to_boundary(selection, attribute=attribute, value=value)
