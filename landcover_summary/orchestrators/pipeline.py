"""Linear land-cover summary pipeline.

Each stage is a pure function over the previous stage's immutable
result:

1. **Load** — vector features, raster grid, code lookup.
2. **Select** — attribute match → single ``Boundary``.
3. **Align** — reproject the boundary to the raster CRS (optional;
   when disabled a CRS mismatch fails the clip).
4. **Clip** — crop + mask the raster to the boundary.
5. **Summarize** — frequency table; the clipped grid is released here.
6. **Resolve** — attach labels, order by share.

The pipeline halts at the first failing stage.  Any ``PipelineError``
is re-raised with the run's correlation id attached.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from landcover_summary.activities.clip_raster import clip_raster
from landcover_summary.activities.read_codes import read_code_lookup
from landcover_summary.activities.read_raster import read_raster
from landcover_summary.activities.read_vectors import (
    crs_equal,
    read_feature_collection,
    reproject_collection,
)
from landcover_summary.activities.resolve_codes import resolve_codes
from landcover_summary.activities.select_boundary import select_features, to_boundary
from landcover_summary.activities.summarize import summarize_categories
from landcover_summary.core.config import PipelineConfig
from landcover_summary.core.constants import CodePolicy
from landcover_summary.core.exceptions import PipelineError

if TYPE_CHECKING:
    from pathlib import Path

    from landcover_summary.models.feature import AttributeValue, Boundary, FeatureCollection
    from landcover_summary.models.raster import RasterGrid
    from landcover_summary.models.summary import CodeLookup, FrequencyTable, LabeledCategory

logger = logging.getLogger("landcover_summary.orchestrators.pipeline")


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Outcome of one pipeline run.

    Per-cell data is dropped after summarizing unless the caller asks
    to keep the clipped grid (e.g. to export it).

    Attributes:
        correlation_id: Identifier of this run (for logs and reports).
        attribute: Attribute name used to select the boundary.
        value: Attribute value matched.
        boundary: The boundary the raster was clipped to (raster CRS).
        reprojected_boundary: Whether the boundary had to be reprojected.
        clipped_shape: ``(rows, cols)`` of the clipped grid.
        frequencies: Value counts inside the boundary.
        categories: Labeled rows, descending percentage.
        code_policy: Missing-code policy used by the resolver.
        duration_s: Wall-clock duration in seconds.
        vector_path: Vector source, when run from files.
        raster_path: Raster source, when run from files.
        lookup_path: Lookup source, when run from files.
        clipped_grid: The clipped grid, only when ``keep_clipped`` was set.
    """

    correlation_id: str
    attribute: str
    value: AttributeValue
    boundary: Boundary
    reprojected_boundary: bool
    clipped_shape: tuple[int, int]
    frequencies: FrequencyTable
    categories: list[LabeledCategory] = field(default_factory=list)
    code_policy: CodePolicy = CodePolicy.STRICT
    duration_s: float = 0.0
    vector_path: str = ""
    raster_path: str = ""
    lookup_path: str = ""
    clipped_grid: RasterGrid | None = None

    def pairs(self) -> list[tuple[str, float]]:
        """Return the ``(label, percentage)`` rows."""
        return [c.as_pair() for c in self.categories]


def run_pipeline(
    vector_path: Path | str,
    raster_path: Path | str,
    lookup_path: Path | str,
    *,
    attribute: str,
    value: AttributeValue,
    config: PipelineConfig | None = None,
    layer: str | int | None = None,
    correlation_id: str = "",
    keep_clipped: bool = False,
) -> PipelineResult:
    """Load the three sources from disk and run the summary pipeline.

    Raises:
        PipelineError: The first stage failure, tagged with the run's
            correlation id.
    """
    config = config or PipelineConfig()
    correlation_id = correlation_id or uuid.uuid4().hex

    logger.info(
        "Pipeline started | vector=%s | raster=%s | lookup=%s | %s=%r | correlation_id=%s",
        vector_path,
        raster_path,
        lookup_path,
        attribute,
        value,
        correlation_id,
    )

    try:
        collection = read_feature_collection(vector_path, layer=layer)
        grid = read_raster(raster_path, band=config.raster_band, default_nodata=config.default_nodata)
        lookup = read_code_lookup(lookup_path, delimiter=config.lookup_delimiter)
    except PipelineError as exc:
        _tag(exc, correlation_id)
        raise

    result = summarize_boundary(
        collection,
        grid,
        lookup,
        attribute=attribute,
        value=value,
        config=config,
        correlation_id=correlation_id,
        keep_clipped=keep_clipped,
    )
    return _with_sources(result, vector_path, raster_path, lookup_path)


def summarize_boundary(
    collection: FeatureCollection,
    grid: RasterGrid,
    lookup: CodeLookup,
    *,
    attribute: str,
    value: AttributeValue,
    config: PipelineConfig | None = None,
    correlation_id: str = "",
    keep_clipped: bool = False,
) -> PipelineResult:
    """Run select → align → clip → summarize → resolve on loaded inputs.

    Raises:
        PipelineError: The first stage failure, tagged with the run's
            correlation id.
    """
    config = config or PipelineConfig()
    correlation_id = correlation_id or uuid.uuid4().hex
    start_time = time.monotonic()

    try:
        selection = select_features(collection, attribute, value)
        boundary = to_boundary(selection, attribute=attribute, value=value)

        reprojected = False
        if config.auto_reproject and not crs_equal(boundary.crs, grid.crs):
            boundary = to_boundary(reproject_collection(selection, grid.crs))
            reprojected = True

        clipped = clip_raster(grid, boundary, all_touched=config.all_touched)
        clipped_shape = clipped.shape
        frequencies = summarize_categories(clipped)
        # Per-cell data is not needed past this point.
        kept = clipped if keep_clipped else None
        del clipped

        categories = resolve_codes(frequencies, lookup, policy=config.code_policy)
    except PipelineError as exc:
        _tag(exc, correlation_id)
        logger.error(
            "Pipeline failed | stage=%s | code=%s | error=%s | correlation_id=%s",
            exc.stage,
            exc.code,
            exc.message,
            correlation_id,
        )
        raise

    duration = time.monotonic() - start_time
    logger.info(
        "Pipeline completed | categories=%d | valid_cells=%d | reprojected=%s | "
        "duration=%.2fs | correlation_id=%s",
        len(categories),
        frequencies.total,
        reprojected,
        duration,
        correlation_id,
    )

    return PipelineResult(
        correlation_id=correlation_id,
        attribute=attribute,
        value=value,
        boundary=boundary,
        reprojected_boundary=reprojected,
        clipped_shape=clipped_shape,
        frequencies=frequencies,
        categories=categories,
        code_policy=config.code_policy,
        duration_s=duration,
        clipped_grid=kept,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _tag(exc: PipelineError, correlation_id: str) -> None:
    if not exc.correlation_id:
        exc.correlation_id = correlation_id


def _with_sources(
    result: PipelineResult,
    vector_path: Path | str,
    raster_path: Path | str,
    lookup_path: Path | str,
) -> PipelineResult:
    import dataclasses

    return dataclasses.replace(
        result,
        vector_path=str(vector_path),
        raster_path=str(raster_path),
        lookup_path=str(lookup_path),
    )
