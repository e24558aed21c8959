"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
import structlog

from core.config import Settings
from core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from services.taxes import BracketRepository, compute_tax

if TYPE_CHECKING:
    from pathlib import Path


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_default(self) -> None:
        """configure_logging should work with defaults."""
        configure_logging()

        assert structlog.get_logger() is not None

    def test_logs_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Log lines never reach stdout."""
        configure_logging(log_level="INFO")

        get_logger("test").info("loaded table", table="us-federal 2024 single")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "loaded table" in captured.err

    def test_level_filters_messages(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Messages below the configured level are dropped."""
        configure_logging(log_level="WARNING")

        get_logger("test").info("hidden")
        get_logger("test").warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON format writes one JSON object per line."""
        configure_logging(json_format=True, log_level="DEBUG")

        get_logger("json.test").debug("computed tax", total="6053.00")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "computed tax"
        assert record["total"] == "6053.00"
        assert record["level"] == "debug"
        assert "timestamp" in record

    def test_configure_from_settings(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Settings select level and format."""
        configure_from_settings(Settings(log_level="error", log_json=True))

        get_logger("test").warning("ignored")
        get_logger("test").error("reported")

        lines = capsys.readouterr().err.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "reported"


class TestContextFunctions:
    """Tests for context binding functions."""

    def test_bind_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Bound context appears in every log line."""
        configure_logging(json_format=True, log_level="INFO")
        clear_context()

        bind_context(command="bracket")
        get_logger("test").info("first")
        get_logger("test").info("second")

        records = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        assert [r["command"] for r in records] == ["bracket", "bracket"]

    def test_clear_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """clear_context removes bound values."""
        configure_logging(json_format=True, log_level="INFO")

        bind_context(command="summary")
        clear_context()
        get_logger("test").info("after clear")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "command" not in record


class TestStandardLibraryRouting:
    """Tests for routing structlog through standard library loggers."""

    def test_reconfiguring_replaces_handler(self) -> None:
        """Configuring twice leaves a single root handler."""
        configure_logging(log_level="INFO")
        configure_logging(json_format=True, log_level="DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_records_use_module_logger(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Log lines are emitted by the named standard library logger."""
        configure_logging(json_format=True, log_level="INFO")
        seen: list[str] = []

        class _Collect(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                seen.append(record.name)

        handler = _Collect()
        logging.getLogger().addHandler(handler)
        try:
            get_logger("services.taxes.loader").info("loaded table")
        finally:
            logging.getLogger().removeHandler(handler)

        assert seen == ["services.taxes.loader"]
        assert "loaded table" in capsys.readouterr().err


class TestUnconfiguredLibraryUse:
    """Library calls made before logging is configured."""

    def test_compute_and_load_write_nothing_to_stdout(
        self,
        brackets_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Computing tax and loading tables keep stdout clean."""
        structlog.reset_defaults()

        table = BracketRepository(brackets_dir).get("test-land", 2024, "single")
        compute_tax("15000", table)

        assert capsys.readouterr().out == ""
