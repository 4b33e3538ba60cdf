"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from snipe.config.models import LoggingConfig, LogOutputConfig
from snipe.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from snipe.core.progress import suppress_console_logs


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        """Clear run ID before each test."""
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        """Run ID can be set and retrieved."""
        # Given
        run_id = "test-123"

        # When
        result = set_run_id(run_id)

        # Then
        assert result == run_id
        assert get_run_id() == run_id

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        """Set generates UUID-based ID when none provided."""
        # When
        rid = set_run_id()

        # Then
        assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current run ID."""
        # Given
        set_run_id("to-clear")

        # When
        clear_run_id()

        # Then
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def test_given_json_file_output_when_log_then_valid_json_with_run_id(
        self, tmp_path: Path
    ) -> None:
        """JSON output carries event, fields, level, timestamp and run ID."""
        # Given
        log_file = tmp_path / "snipe.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        set_run_id("abc123")

        # When
        get_logger("index.store").info("index.saved", records=3)

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "index.saved"
        assert data["records"] == 3
        assert data["logger"] == "index.store"
        assert data["level"] == "info"
        assert data["run_id"] == "abc123"
        assert "timestamp" in data

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
        get_logger().debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_levels_per_output(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
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
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_default_level_when_info_logged_then_dropped(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The default level keeps diagnostics off the terminal."""
        # Given
        configure_logging()

        # When
        get_logger().info("resolver.rescan")
        get_logger().warning("index.load_corrupt")

        # Then
        err = capsys.readouterr().err
        assert "resolver.rescan" not in err
        assert "index.load_corrupt" in err

    def test_given_suppressed_console_when_log_then_file_still_written(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Console handlers pause during prompts; file handlers do not."""
        # Given
        log_file = tmp_path / "snipe.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[
                    LogOutputConfig(destination="stderr"),
                    LogOutputConfig(format="json", destination=str(log_file)),
                ],
            )
        )

        # When
        with suppress_console_logs():
            get_logger().warning("during.prompt")

        # Then
        assert "during.prompt" not in capsys.readouterr().err
        assert "during.prompt" in log_file.read_text()
