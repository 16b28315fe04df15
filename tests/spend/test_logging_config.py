"""Tests for centralized logging configuration."""

import logging
import sys
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, cast

import pytest

from spend.config import LoggingConfig
from spend.logging.config import load_logging_config, setup_logging


def _stream_handlers() -> list[logging.Handler]:
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


class TestSetupLogging:
    """Tests for setup_logging handler configuration."""

    @pytest.fixture(autouse=True)
    def _reset_root_logger(self) -> Generator[None, Any, None]:
        """Remove handlers added during each test to avoid leaking state."""
        root = logging.getLogger()
        original_handlers = list(root.handlers)
        original_level = root.level
        yield
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)

    @pytest.mark.unit
    def test_console_handler_uses_stderr(self) -> None:
        """Console output must stay off stdout, where CLI commands print results."""
        setup_logging(LoggingConfig(), force=True)

        handlers = _stream_handlers()
        assert handlers, "Expected at least one StreamHandler"
        for h in handlers:
            stream: object = getattr(cast(Any, h), "stream", None)
            assert stream is sys.stderr

    @pytest.mark.unit
    def test_cli_mode_uses_bare_messages(self) -> None:
        setup_logging(LoggingConfig(), cli_mode=True, force=True)

        (handler,) = _stream_handlers()
        assert handler.formatter is not None
        assert handler.formatter._fmt == "%(message)s"

    @pytest.mark.unit
    def test_configured_level(self) -> None:
        setup_logging(LoggingConfig(level="WARNING"), force=True)

        assert logging.getLogger().level == logging.WARNING

    @pytest.mark.unit
    def test_verbose_overrides_level(self) -> None:
        setup_logging(LoggingConfig(level="WARNING"), verbose=True, force=True)

        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.unit
    def test_http_client_loggers_quieted(self) -> None:
        setup_logging(LoggingConfig(), verbose=True, force=True)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    @pytest.mark.unit
    def test_file_logging(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "spend.log"

        setup_logging(
            LoggingConfig(log_to_file=True, log_file_path=log_file, backup_count=2),
            force=True,
        )
        logging.getLogger("spend.test").warning("written to file")

        file_handlers = [
            h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == 2
        file_handlers[0].flush()
        assert "written to file" in log_file.read_text()

    @pytest.mark.unit
    def test_reads_prefixed_settings_when_no_config_given(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPEND_LOGGING__LEVEL", "ERROR")

        setup_logging(force=True)

        assert logging.getLogger().level == logging.ERROR

    @pytest.mark.unit
    def test_invalid_settings_fall_back_to_defaults(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPEND_LOGGING__LEVEL", "LOUD")

        setup_logging(force=True)

        assert logging.getLogger().level == logging.INFO


class TestLoadLoggingConfig:
    """Tests for reading the logging section from the environment."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        config = load_logging_config()

        assert config.level == "INFO"
        assert config.log_to_file is False
        assert config.log_file_path == Path("logs/spend.log")

    @pytest.mark.unit
    def test_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPEND_LOGGING__LEVEL", "DEBUG")
        monkeypatch.setenv("SPEND_LOGGING__LOG_TO_FILE", "true")
        monkeypatch.setenv("SPEND_LOGGING__BACKUP_COUNT", "2")

        config = load_logging_config()

        assert config.level == "DEBUG"
        assert config.log_to_file is True
        assert config.backup_count == 2
