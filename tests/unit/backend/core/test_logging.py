"""
Unit Tests for Centralized Logging.

Tests the logging configuration, structured fields, and source handling.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from notekeeper.backend.core import logging as logging_module
from notekeeper.backend.core.config_schema import LoggingSchema
from notekeeper.backend.core.logging import (
    QUIET_LOGGERS,
    VALID_SOURCES,
    _resolve_log_path,
    get_logger,
    log_with_source,
    setup_logging,
)


@pytest.fixture
def logging_config():
    return LoggingSchema.model_validate({
        "level": "INFO",
        "format": "json",
        "handlers": {
            "console": {"enabled": True},
            "file": {
                "enabled": False,
                "path": "logs/system.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    })


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_valid_sources_contains_expected_values(self):
        """Should contain every source the application logs with."""
        assert VALID_SOURCES == frozenset({"web", "cli", "api", "workspace", "internal", "unknown"})


class TestLoggingConfigLoading:
    """Tests for the logging section lookup."""

    def test_uses_validated_app_config(self, logging_config):
        """Should read the logging section of the cached app config."""
        app_config = MagicMock()
        app_config.logging = logging_config

        with patch("notekeeper.backend.core.logging.get_app_config", return_value=app_config):
            assert logging_module._load_logging_config() is logging_config


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_uses_config_defaults(self, logging_config):
        """Should use values from logging.yaml when not overridden."""
        with patch("notekeeper.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging()

            assert logging.getLogger().level == logging.INFO

    def test_override_takes_precedence(self, logging_config):
        """Explicit parameters should override config values."""
        with patch("notekeeper.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(level="ERROR", format_type="console")

            root_logger = logging.getLogger()
            assert root_logger.level == logging.ERROR
            handler_types = [type(h).__name__ for h in root_logger.handlers]
            assert "StreamHandler" in handler_types
            assert "RotatingFileHandler" not in handler_types

    def test_file_logging_enabled(self, tmp_path, logging_config):
        """Should add a RotatingFileHandler for the JSONL file."""
        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("notekeeper.backend.core.logging._load_logging_config", return_value=logging_config), \
             patch("notekeeper.backend.core.logging._resolve_log_path", return_value=log_file):
            setup_logging(enable_file_logging=True)

            handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
            assert "RotatingFileHandler" in handler_types
            assert log_file.parent.is_dir()

        setup_logging(enable_file_logging=False)


class TestLogWithSource:
    """Tests for log_with_source helper function."""

    def test_adds_source_field(self):
        """Should pass the source as a keyword."""
        logger = get_logger("test")
        mock_info = MagicMock()

        with patch.object(logger, "info", mock_info):
            log_with_source(logger, "workspace", "info", "Folder deleted", folder_id=4)

            mock_info.assert_called_once_with("Folder deleted", source="workspace", folder_id=4)

    def test_raises_on_invalid_level(self):
        """Should raise AttributeError for invalid log levels."""
        with pytest.raises(AttributeError):
            log_with_source(get_logger("test"), "cli", "nonexistent_level", "Test")


class TestResolveLogPath:
    """Tests for _resolve_log_path function."""

    def test_relative_to_project_root(self, tmp_path):
        with patch("notekeeper.backend.core.logging.find_project_root", return_value=tmp_path):
            assert _resolve_log_path("logs/system.jsonl") == tmp_path / "logs" / "system.jsonl"


class TestQuietLoggers:
    """Tests for third-party logger levels."""

    def test_quiet_loggers_stay_at_warning(self, logging_config):
        """Should keep noisy libraries at WARNING even in debug mode."""
        with patch("notekeeper.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(level="DEBUG")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
