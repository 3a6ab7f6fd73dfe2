"""Pydantic schema for the land-cover summary JSON report.

The report is the audit trail of a single run: which boundary was
selected, which sources were read, what the clipped grid looked like,
and the resolved category shares.

The document is split into three nested sections:
- **boundary**: selection predicate, attributes, CRS, area
- **raster**: source paths and clipped grid shape
- **categories**: resolved ``(label, percentage)`` rows
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from landcover_summary.core.constants import SCHEMA_VERSION


class BoundaryReport(BaseModel):
    """Boundary section of the summary report.

    Attributes:
        attribute: Attribute name used to select the boundary.
        value: Attribute value that was matched.
        attributes: Attribute record of the selected feature.
        crs: CRS the boundary was clipped in.
        area: Planar boundary area in squared CRS units.
        bounds: Envelope ``[min_x, min_y, max_x, max_y]``.
    """

    attribute: str = ""
    value: str = ""
    attributes: dict[str, str | int | float | None] = Field(default_factory=dict)
    crs: str = ""
    area: float = 0.0
    bounds: list[float] = Field(default_factory=list)


class RasterReport(BaseModel):
    """Raster section of the summary report."""

    vector_path: str = ""
    raster_path: str = ""
    lookup_path: str = ""
    clipped_height: int = 0
    clipped_width: int = 0
    valid_cells: int = 0
    reprojected_boundary: bool = False


class CategoryReport(BaseModel):
    """One resolved category row."""

    code: int | float
    label: str
    count: int
    percentage: float
    resolved: bool = True


class SummaryRecord(BaseModel):
    """Top-level land-cover summary document.

    Attributes:
        schema_version: Schema identifier for forward compatibility.
        correlation_id: Identifier of the pipeline run.
        timestamp: Report creation time (ISO 8601).
        duration_s: Pipeline wall-clock duration in seconds.
        code_policy: Missing-code policy the resolver ran with.
        boundary: Selected boundary details.
        raster: Source and clipped-grid details.
        categories: Rows ordered by descending percentage.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    correlation_id: str = ""
    timestamp: str = ""
    duration_s: float = 0.0
    code_policy: str = ""
    boundary: BoundaryReport = Field(default_factory=BoundaryReport)
    raster: RasterReport = Field(default_factory=RasterReport)
    categories: list[CategoryReport] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def percentage_sum(self) -> float:
        return round(sum(c.percentage for c in self.categories), 1)

    @classmethod
    def from_result(cls, result: object, *, timestamp: str = "") -> SummaryRecord:
        """Construct a report from a ``PipelineResult``.

        Args:
            result: A ``PipelineResult`` from ``run_pipeline``.
            timestamp: Report timestamp (ISO 8601).  Defaults to now (UTC).
        """
        from landcover_summary.orchestrators.pipeline import PipelineResult

        if not isinstance(result, PipelineResult):
            msg = f"Expected PipelineResult instance, got {type(result).__name__}"
            raise TypeError(msg)

        if not timestamp:
            timestamp = datetime.now(UTC).isoformat()

        boundary = result.boundary
        return cls(
            correlation_id=result.correlation_id,
            timestamp=timestamp,
            duration_s=round(result.duration_s, 3),
            code_policy=result.code_policy.value,
            boundary=BoundaryReport(
                attribute=result.attribute,
                value=str(result.value),
                attributes=dict(boundary.attributes),
                crs=boundary.crs,
                area=boundary.area,
                bounds=list(boundary.bounds),
            ),
            raster=RasterReport(
                vector_path=result.vector_path,
                raster_path=result.raster_path,
                lookup_path=result.lookup_path,
                clipped_height=result.clipped_shape[0],
                clipped_width=result.clipped_shape[1],
                valid_cells=result.frequencies.total,
                reprojected_boundary=result.reprojected_boundary,
            ),
            categories=[CategoryReport(**c.to_dict()) for c in result.categories],
        )

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a JSON string using the ``$schema`` alias."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
