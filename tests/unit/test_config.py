"""Tests for environment-driven pipeline configuration."""

from __future__ import annotations

import math
import os
from unittest.mock import patch

import pytest

from landcover_summary.core.config import ConfigValidationError, PipelineConfig
from landcover_summary.core.constants import CodePolicy


class TestDefaults:
    """An empty environment yields a working configuration."""

    def test_from_env_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = PipelineConfig.from_env()
        assert config == PipelineConfig()
        assert config.default_nodata == 0
        assert config.code_policy is CodePolicy.STRICT
        assert config.all_touched is False
        assert config.auto_reproject is True
        assert config.lookup_delimiter == ","
        assert config.raster_band == 1
        assert config.log_level == "INFO"

    def test_frozen(self) -> None:
        config = PipelineConfig()
        with pytest.raises(AttributeError):
            config.raster_band = 2  # type: ignore[misc]


class TestFromEnv:
    """Values are parsed from LANDCOVER_* variables."""

    def test_all_values(self) -> None:
        env = {
            "LANDCOVER_DEFAULT_NODATA": "255",
            "LANDCOVER_CODE_POLICY": "Lenient",
            "LANDCOVER_ALL_TOUCHED": "yes",
            "LANDCOVER_AUTO_REPROJECT": "off",
            "LANDCOVER_LOOKUP_DELIMITER": ";",
            "LANDCOVER_RASTER_BAND": "3",
            "LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=True):
            config = PipelineConfig.from_env()
        assert config.default_nodata == 255.0
        assert config.code_policy is CodePolicy.LENIENT
        assert config.all_touched is True
        assert config.auto_reproject is False
        assert config.lookup_delimiter == ";"
        assert config.raster_band == 3
        assert config.log_level == "DEBUG"

    def test_nan_nodata_allowed(self) -> None:
        with patch.dict(os.environ, {"LANDCOVER_DEFAULT_NODATA": "nan"}, clear=True):
            assert math.isnan(PipelineConfig.from_env().default_nodata)


class TestValidation:
    """Bad values fail fast with the offending key."""

    @pytest.mark.parametrize(
        ("key", "raw"),
        [
            ("LANDCOVER_DEFAULT_NODATA", "none"),
            ("LANDCOVER_DEFAULT_NODATA", "inf"),
            ("LANDCOVER_CODE_POLICY", "relaxed"),
            ("LANDCOVER_ALL_TOUCHED", "maybe"),
            ("LANDCOVER_AUTO_REPROJECT", "2"),
            ("LANDCOVER_LOOKUP_DELIMITER", "::"),
            ("LANDCOVER_RASTER_BAND", "0"),
            ("LANDCOVER_RASTER_BAND", "first"),
            ("LOG_LEVEL", "LOUD"),
        ],
    )
    def test_invalid_value(self, key: str, raw: str) -> None:
        with patch.dict(os.environ, {key: raw}, clear=True), pytest.raises(ConfigValidationError) as exc_info:
            PipelineConfig.from_env()
        err = exc_info.value
        assert err.key == key
        assert err.stage == "config"
        assert err.code == "CONFIG_VALIDATION_FAILED"
        assert err.category == "validation"
        assert key in err.message
