"""Pipeline configuration loaded from environment variables.

All configuration values have sensible defaults, so an empty
environment yields a working configuration.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is
    unparseable or out of its valid range.  This catches bad
    configuration before any source file is opened.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass

from landcover_summary.core.constants import (
    DEFAULT_CODE_POLICY,
    DEFAULT_LOOKUP_DELIMITER,
    DEFAULT_NODATA,
    DEFAULT_RASTER_BAND,
    CodePolicy,
)
from landcover_summary.core.exceptions import ValidationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Attributes:
        default_nodata: No-data sentinel for rasters that declare none.
        code_policy: Missing-code policy of the code resolver.
        all_touched: Mask every cell touched by the boundary instead of
            only cells whose centre lies inside it.
        auto_reproject: Reproject the boundary to the raster CRS before
            clipping.  When off, a CRS mismatch fails the clip.
        lookup_delimiter: Column delimiter of the code lookup file.
        raster_band: 1-based band index read from the raster.
        log_level: Logging level name used by the CLI.
    """

    default_nodata: float = DEFAULT_NODATA
    code_policy: CodePolicy = DEFAULT_CODE_POLICY
    all_touched: bool = False
    auto_reproject: bool = True
    lookup_delimiter: str = DEFAULT_LOOKUP_DELIMITER
    raster_band: int = DEFAULT_RASTER_BAND
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value cannot be parsed or is
                out of range.
        """
        config = cls(
            default_nodata=_parse_float(
                "LANDCOVER_DEFAULT_NODATA", os.getenv("LANDCOVER_DEFAULT_NODATA", str(DEFAULT_NODATA))
            ),
            code_policy=_parse_policy(
                os.getenv("LANDCOVER_CODE_POLICY", DEFAULT_CODE_POLICY.value)
            ),
            all_touched=_parse_bool("LANDCOVER_ALL_TOUCHED", os.getenv("LANDCOVER_ALL_TOUCHED", "false")),
            auto_reproject=_parse_bool(
                "LANDCOVER_AUTO_REPROJECT", os.getenv("LANDCOVER_AUTO_REPROJECT", "true")
            ),
            lookup_delimiter=os.getenv("LANDCOVER_LOOKUP_DELIMITER", DEFAULT_LOOKUP_DELIMITER),
            raster_band=_parse_int(
                "LANDCOVER_RASTER_BAND", os.getenv("LANDCOVER_RASTER_BAND", str(DEFAULT_RASTER_BAND))
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
        _validate(config)
        return config


def _parse_float(key: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigValidationError(key, raw, "must be a number") from exc


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigValidationError(key, raw, "must be an integer") from exc


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false)")


def _parse_policy(raw: str) -> CodePolicy:
    try:
        return CodePolicy(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(p.value for p in CodePolicy)
        raise ConfigValidationError("LANDCOVER_CODE_POLICY", raw, f"must be one of: {allowed}") from exc


def _validate(config: PipelineConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if math.isinf(config.default_nodata):
        raise ConfigValidationError(
            "LANDCOVER_DEFAULT_NODATA",
            config.default_nodata,
            "must be finite or nan",
        )

    if config.raster_band < 1:
        raise ConfigValidationError(
            "LANDCOVER_RASTER_BAND",
            config.raster_band,
            "must be >= 1 (bands are 1-based)",
        )

    if len(config.lookup_delimiter) != 1:
        raise ConfigValidationError(
            "LANDCOVER_LOOKUP_DELIMITER",
            config.lookup_delimiter,
            "must be a single character",
        )

    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigValidationError(
            "LOG_LEVEL",
            config.log_level,
            "must be a logging level name (DEBUG, INFO, WARNING, ERROR)",
        )
