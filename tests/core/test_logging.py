"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from lutels.config.models import LoggingConfig, LogOutputConfig
from lutels.core.logging import (
    clear_lint_id,
    configure_logging,
    get_lint_id,
    lint_cycle,
    set_lint_id,
)


class TestLintIdCorrelation:
    """Lint-cycle ID context variable tests."""

    def setup_method(self) -> None:
        clear_lint_id()

    def test_given_lint_id_when_set_then_can_retrieve(self) -> None:
        """Lint ID can be set and retrieved."""
        # When
        result = set_lint_id("cycle-1")

        # Then
        assert result == "cycle-1"
        assert get_lint_id() == "cycle-1"

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        # When
        lid = set_lint_id()

        # Then
        assert len(lid) == 12

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        # Given
        set_lint_id("to-clear")

        # When
        clear_lint_id()

        # Then
        assert get_lint_id() is None

    def test_given_lint_cycle_when_entered_then_id_and_fields_bound(self) -> None:
        # When
        with lint_cycle("file:///a.luau", 3) as lid:
            bound = structlog.contextvars.get_contextvars()
            current = get_lint_id()

        # Then
        assert current == lid
        assert bound["uri"] == "file:///a.luau"
        assert bound["generation"] == 3
        assert get_lint_id() is None
        assert "uri" not in structlog.contextvars.get_contextvars()

    def test_given_lint_cycle_when_body_raises_then_id_cleared(self) -> None:
        with pytest.raises(RuntimeError), lint_cycle("file:///a.luau", 1):
            raise RuntimeError("boom")

        assert get_lint_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_lint_id()

    def test_given_json_format_when_log_then_valid_json_on_stderr(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON lines go to stderr; stdout stays clean for the protocol stream."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = structlog.get_logger()

        # When
        logger.info("lint_published", diagnostics=3)

        # Then
        captured = capsys.readouterr()
        assert captured.out == ""
        lines = [line for line in captured.err.strip().split("\n") if line]
        data = json.loads(lines[-1])
        assert data["event"] == "lint_published"
        assert data["diagnostics"] == 3
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_lint_id_when_log_then_id_attached(self, tmp_path: Path) -> None:
        # Given
        log_file = tmp_path / "lutels.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))]
            )
        )
        set_lint_id("abc123")

        # When
        structlog.get_logger().info("lint_started")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["lint_id"] == "abc123"

    def test_given_bound_contextvars_when_log_then_merged(self, tmp_path: Path) -> None:
        # Given
        log_file = tmp_path / "lutels.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))]
            )
        )

        # When
        with structlog.contextvars.bound_contextvars(uri="file:///a.luau", generation=2):
            structlog.get_logger().info("lint_result_stale")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["uri"] == "file:///a.luau"
        assert data["generation"] == 2

    def test_given_config_object_when_configure_then_takes_precedence(
        self, tmp_path: Path
    ) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When
        configure_logging(config=config, json_format=False, level="ERROR")
        structlog.get_logger().debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_levels_apply(
        self, tmp_path: Path
    ) -> None:
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="console", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = structlog.get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_debug_level_then_pygls_capped_at_info(self) -> None:
        # When
        configure_logging(level="DEBUG")

        # Then
        assert logging.getLogger("pygls").level == logging.INFO

    def test_given_stdlib_logger_when_log_then_rendered_like_structlog(
        self, tmp_path: Path
    ) -> None:
        # Given
        log_file = tmp_path / "lutels.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))]
            )
        )

        # When
        with lint_cycle("file:///b.luau", 4) as lid:
            logging.getLogger("pygls.protocol").warning("transport closed")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "transport closed"
        assert data["level"] == "warning"
        assert data["lint_id"] == lid
