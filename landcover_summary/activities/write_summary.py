"""Write summary activity — persist a run's JSON report.

Builds a ``SummaryRecord`` from a ``PipelineResult`` and writes it to a
local path.  Writes overwrite, so rerunning with the same output path
is idempotent.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from landcover_summary.core.exceptions import PermanentError
from landcover_summary.models.report import SummaryRecord

if TYPE_CHECKING:
    from landcover_summary.orchestrators.pipeline import PipelineResult

logger = logging.getLogger("landcover_summary.activities.write_summary")


class SummaryWriteError(PermanentError):
    """Raised when the summary report cannot be written."""

    default_stage = "write_summary"
    default_code = "SUMMARY_WRITE_FAILED"


def build_summary_record(result: PipelineResult, *, timestamp: str = "") -> SummaryRecord:
    """Build the report document for a finished pipeline run."""
    return SummaryRecord.from_result(result, timestamp=timestamp)


def write_summary(
    result: PipelineResult,
    output_path: Path | str,
    *,
    timestamp: str = "",
) -> SummaryRecord:
    """Build and write the JSON report for ``result``.

    Args:
        result: Output of ``run_pipeline``.
        output_path: Destination file; parent directories are created.
        timestamp: Report timestamp (ISO 8601).  Defaults to now (UTC).

    Returns:
        The record that was written.

    Raises:
        SummaryWriteError: If the file cannot be written.
    """
    record = build_summary_record(result, timestamp=timestamp)
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(record.to_json(), encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write summary to {path}: {exc}"
        raise SummaryWriteError(msg, correlation_id=result.correlation_id) from exc

    logger.info(
        "Summary written | path=%s | categories=%d | correlation_id=%s",
        path,
        len(record.categories),
        result.correlation_id,
    )
    return record
