"""
Unit Tests for Centralized Logging.

Tests the logging configuration, secret masking and source handling.
"""

import json
import logging
import sys
from unittest.mock import MagicMock, patch

import pytest

from ostack.core import logging as logging_module
from ostack.core.logging import (
    MASK,
    VALID_SOURCES,
    censor_secrets,
    get_logger,
    log_with_source,
    setup_logging,
)


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_valid_sources_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"cli", "tui", "sdk", "http", "auth", "catalog", "internal"})

    def test_valid_sources_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestLoggingConfigLoading:
    """Tests for logging configuration loading from YAML."""

    def test_load_logging_config_reads_yaml_file(self):
        test_config = {
            "level": "DEBUG",
            "format": "json",
            "handlers": {
                "console": {"enabled": True},
                "file": {"enabled": False, "path": "logs/x.jsonl", "max_bytes": 100, "backup_count": 1},
            },
        }
        logging_module._logging_config = None
        with patch("ostack.core.logging.load_yaml_config", return_value=test_config):
            config = logging_module._load_logging_config()
        assert config["level"] == "DEBUG"
        assert config["handlers"]["file"]["path"] == "logs/x.jsonl"

    def test_load_logging_config_is_cached(self):
        logging_module._logging_config = None
        with patch("ostack.core.logging.load_yaml_config", return_value={"level": "INFO"}) as loader:
            logging_module._load_logging_config()
            logging_module._load_logging_config()
        assert loader.call_count == 1

    def test_relative_log_path_resolves_under_state_dir(self, tmp_path):
        assert logging_module._resolve_log_path("logs/osc.jsonl") == tmp_path / "state" / "logs" / "osc.jsonl"

    def test_absolute_log_path_kept(self, tmp_path):
        target = tmp_path / "elsewhere.jsonl"
        assert logging_module._resolve_log_path(str(target)) == target


class TestCensorSecrets:
    """Tests for the credential masking processor."""

    def test_masks_top_level_secret_keys(self):
        event = censor_secrets(None, "info", {"event": "auth", "password": "s3cr3t", "token": "abc"})
        assert event["password"] == MASK
        assert event["token"] == MASK
        assert event["event"] == "auth"

    def test_masks_nested_headers(self):
        event = censor_secrets(None, "debug", {
            "event": "HTTP request",
            "headers": {"X-Auth-Token": "abc", "Accept": "application/json"},
        })
        assert event["headers"] == {"X-Auth-Token": MASK, "Accept": "application/json"}

    def test_masks_inside_lists(self):
        event = censor_secrets(None, "debug", {
            "event": "identity",
            "methods": [{"application_credential_secret": "x", "id": "1"}],
        })
        assert event["methods"] == [{"application_credential_secret": MASK, "id": "1"}]

    def test_non_secret_values_untouched(self):
        event = censor_secrets(None, "info", {"event": "Listing", "url": "https://x", "count": 3})
        assert event == {"event": "Listing", "url": "https://x", "count": 3}


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_file_logging_writes_json_lines(self, tmp_path):
        logging_module._logging_config = None
        setup_logging(level="INFO", enable_console=False, enable_file_logging=True)
        logger = get_logger("ostack.test")
        log_with_source(logger, "cli", "info", "Hello", password="hunter2")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_file = tmp_path / "state" / "logs" / "osc.jsonl"
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "Hello"
        assert record["source"] == "cli"
        assert record["password"] == MASK
        setup_logging(enable_console=False, enable_file_logging=False)

    def test_console_handler_writes_to_stderr(self):
        setup_logging(level="DEBUG", enable_console=True, enable_file_logging=False)
        handlers = logging.getLogger().handlers
        assert any(isinstance(h, logging.StreamHandler) and h.stream is sys.stderr for h in handlers)
        setup_logging(enable_console=False, enable_file_logging=False)

    def test_no_handlers_gives_null_handler(self):
        setup_logging(enable_console=False, enable_file_logging=False)
        assert any(isinstance(h, logging.NullHandler) for h in logging.getLogger().handlers)


class TestLogWithSource:
    """Tests for log_with_source."""

    def test_passes_source_and_fields(self):
        logger = MagicMock()
        log_with_source(logger, "http", "debug", "Request", method="GET")
        logger.debug.assert_called_once_with("Request", source="http", method="GET")

    def test_level_is_case_insensitive(self):
        logger = MagicMock()
        log_with_source(logger, "auth", "WARNING", "Careful")
        logger.warning.assert_called_once_with("Careful", source="auth")

    def test_invalid_level_raises(self):
        logger = MagicMock(spec=["info"])
        with pytest.raises(AttributeError):
            log_with_source(logger, "cli", "verbose", "x")
