"""
Unit tests for Config class.

Tests defaults, environment variable handling and validation.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from tsdoctest.core.config import DEFAULT_EXTENSIONS, Config
from tsdoctest.core.exceptions import ConfigurationError


class TestConfig:
    """Test cases for Config class."""

    def test_default_config_creation(self):
        """Test creating config with default values."""
        config = Config()

        assert config.dialect is None
        assert config.watch is False
        assert config.ci_mode is False
        assert config.log_level == "INFO"
        assert config.log_format == "text"
        assert config.log_file is None
        assert config.extra_marker_policy == "ignore"
        assert config.extensions == DEFAULT_EXTENSIONS

    @patch.dict(os.environ, {"CI": "true"})
    def test_ci_mode_detection(self):
        """CI runs switch to JSON logs."""
        config = Config()

        assert config.ci_mode is True
        assert config.log_format == "json"

    @patch.dict(os.environ, {"CI": "true", "TS_DOCTEST_LOG_FORMAT": "text"})
    def test_explicit_log_format_wins_in_ci(self):
        assert Config().log_format == "text"

    @patch.dict(os.environ, {"CI": "false"})
    def test_ci_mode_false(self):
        assert Config().ci_mode is False

    @patch.dict(
        os.environ,
        {"TS_DOCTEST_LOG_LEVEL": "debug", "TS_DOCTEST_MARKER_POLICY": "WARN"},
    )
    def test_environment_overrides(self):
        config = Config()

        assert config.log_level == "DEBUG"
        assert config.extra_marker_policy == "warn"

    def test_log_level_normalisation(self):
        assert Config(log_level="warn").log_level == "WARNING"
        assert Config(log_level="verbose").log_level == "INFO"

    def test_log_file_becomes_path(self):
        assert Config(log_file="logs/run.log").log_file == Path("logs/run.log")

    @patch.dict(
        os.environ,
        {"TS_DOCTEST_DIALECT": "tape", "TS_DOCTEST_LOG_FILE": "/tmp/ts-doctest.log"},
    )
    def test_from_env(self):
        config = Config.from_env()

        assert config.dialect == "tape"
        assert config.log_file == Path("/tmp/ts-doctest.log")

    def test_to_dict(self):
        data = Config(dialect="jest", log_file=Path("run.log")).to_dict()

        assert data["dialect"] == "jest"
        assert data["log_file"] == "run.log"
        assert data["extensions"] == list(DEFAULT_EXTENSIONS)


class TestConfigValidation:
    """Test cases for Config.validate."""

    def test_valid_config(self):
        Config(dialect="ava").validate()

    def test_missing_dialect(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Config().validate()

        assert "No output dialect chosen" in exc_info.value.violations[0]

    def test_unknown_dialect(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Config(dialect="jasmine").validate()

        assert "Unknown dialect: jasmine" in exc_info.value.message

    def test_collects_all_violations(self):
        config = Config(
            dialect="mocha",
            log_format="xml",
            extra_marker_policy="explode",
            watch_debounce=-1.0,
            extensions=(),
        )

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert len(exc_info.value.violations) == 4
        assert exc_info.value.message.startswith("Configuration validation failed: ")
