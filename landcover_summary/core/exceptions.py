"""Unified pipeline exception taxonomy.

Every domain exception inherits from ``PipelineError`` and carries
structured context fields so callers can report failures consistently
regardless of which stage raised them.

Taxonomy categories
-------------------
- ``ValidationError``   — input/contract violations, never retryable.
- ``PermanentError``    — unrecoverable failures (unreadable sources), not retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging and JSON reports.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"select_boundary"``, ``"clip_raster"``).
        code: Machine-readable error code (e.g. ``"CRS_MISMATCH"``).
        retryable: Whether a caller could reasonably retry the operation.
        correlation_id: Identifier of the pipeline run that failed.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class EmptySelectionError(ValidationError):
    """No feature matched the boundary predicate."""

    default_stage = "select_boundary"
    default_code = "EMPTY_SELECTION"


class AttributeNotFoundError(ValidationError):
    """The predicate attribute is missing from one or more features."""

    default_stage = "select_boundary"
    default_code = "ATTRIBUTE_NOT_FOUND"


class CRSMismatchError(ValidationError):
    """Raster and boundary are in different coordinate reference systems."""

    default_stage = "clip_raster"
    default_code = "CRS_MISMATCH"


class EmptyGeometryError(ValidationError):
    """The boundary geometry is empty or has zero area."""

    default_stage = "clip_raster"
    default_code = "EMPTY_GEOMETRY"


class MissingCodeError(ValidationError):
    """A raster value has no entry in the code lookup table.

    Attributes:
        missing_codes: Sorted codes that could not be resolved.
    """

    default_stage = "resolve_codes"
    default_code = "MISSING_CODE"

    def __init__(self, message: str = "", *, missing_codes: list[int] | None = None, **kwargs: object) -> None:
        self.missing_codes = sorted(missing_codes or [])
        super().__init__(message, **kwargs)


class LookupFormatError(ValidationError):
    """A code lookup source is malformed (bad row, duplicate code)."""

    default_stage = "read_codes"
    default_code = "LOOKUP_FORMAT_INVALID"


class SourceReadError(PermanentError):
    """A vector, raster or lookup source could not be opened or decoded."""

    default_code = "SOURCE_READ_FAILED"
