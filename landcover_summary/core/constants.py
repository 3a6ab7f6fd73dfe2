"""Shared pipeline constants — single source of truth.

Centralises the defaults and named values that are otherwise repeated
across activities, the orchestrator and the CLI.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Raster defaults
# ---------------------------------------------------------------------------

DEFAULT_NODATA: float = 0
"""No-data sentinel used when a raster source does not declare one."""

DEFAULT_RASTER_BAND: int = 1
"""Rasterio band indexes are 1-based."""

# ---------------------------------------------------------------------------
# Summary arithmetic
# ---------------------------------------------------------------------------

PERCENT_DECIMALS: int = 1
"""Decimal places kept when converting counts to percentages."""

PERCENT_SUM_TOLERANCE: float = 0.2
"""Maximum drift of the summed rounded percentages away from 100."""

# ---------------------------------------------------------------------------
# Code lookup
# ---------------------------------------------------------------------------

DEFAULT_LOOKUP_DELIMITER: str = ","


class CodePolicy(StrEnum):
    """How the code resolver treats raster values absent from the lookup."""

    STRICT = "strict"
    LENIENT = "lenient"


DEFAULT_CODE_POLICY: CodePolicy = CodePolicy.STRICT

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

SCHEMA_VERSION: str = "landcover-summary-v1"
