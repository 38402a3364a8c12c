"""Unit tests for casemap.shared.logging module."""

import json
import logging

import pytest
import structlog

from casemap.shared.logging import configure_logging, get_logger, verbosity_to_level


@pytest.mark.cli_unit
class TestVerbosity:
    """Tests for verbosity_to_level."""

    @pytest.mark.parametrize(
        ("count", "level"), [(0, "warning"), (1, "info"), (2, "debug"), (5, "debug")]
    )
    def test_levels(self, count, level):
        assert verbosity_to_level(count) == level


@pytest.mark.cli_unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()
        logging.basicConfig(force=True)

    def test_sets_root_level(self):
        configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging("chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_json_file_output(self, tmp_path):
        log_file = tmp_path / "casemap.log"
        configure_logging("info", log_file=log_file, json_output=True)

        get_logger("casemap.test").info("loaded", version="v1")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "loaded"
        assert record["version"] == "v1"
        assert record["level"] == "info"

    def test_log_file_implies_json(self, tmp_path):
        log_file = tmp_path / "casemap.log"
        configure_logging("info", log_file=log_file)

        get_logger("casemap.test").info("saved", user="alice")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["event"] == "saved"
        assert record["user"] == "alice"

    def test_transport_loggers_quiet_below_debug(self):
        configure_logging("info")
        assert logging.getLogger("httpx").level == logging.WARNING

        configure_logging("debug")
        assert logging.getLogger("httpx").level == logging.DEBUG
