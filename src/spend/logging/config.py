"""Logging setup shared by the API server, the provider clients and the CLI.

Level, file output and rotation come from the ``logging`` section of
``SpendSettings`` (``SPEND_LOGGING__LEVEL``, ``SPEND_LOGGING__LOG_TO_FILE``,
``SPEND_LOGGING__LOG_FILE_PATH`` ...). Console output always goes to stderr;
stdout is reserved for CLI command results.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from pydantic import ValidationError

from ..config import LoggingConfig, SpendSettings

SERVER_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CLI_FORMAT = "%(message)s"

# Ceiling for chatty libraries; httpx logs every request at INFO
LIBRARY_LEVELS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "urllib3": logging.WARNING,
    "plaid": logging.INFO,
}


def load_logging_config() -> LoggingConfig:
    """Read the logging section of the settings from the environment.

    Provider credentials are not checked, so commands that never reach a
    provider can configure logging without them.
    """
    return SpendSettings().logging


def _console_handler(cli_mode: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(CLI_FORMAT if cli_mode else SERVER_FORMAT))
    return handler


def _file_handler(config: LoggingConfig) -> logging.Handler:
    config.log_file_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        config.log_file_path,
        maxBytes=config.max_file_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(SERVER_FORMAT))
    return handler


def setup_logging(
    config: LoggingConfig | None = None,
    cli_mode: bool = False,
    verbose: bool = False,
    force: bool = False,
) -> None:
    """Configure the root logger.

    Args:
        config: Logging settings; read from the environment when omitted
        cli_mode: Print bare messages instead of timestamped records
        verbose: Log at DEBUG regardless of the configured level
        force: Replace handlers installed by an earlier call
    """
    settings_error: ValidationError | None = None
    if config is None:
        try:
            config = load_logging_config()
        except ValidationError as e:
            config = LoggingConfig()
            settings_error = e

    handlers = [_console_handler(cli_mode)]
    if config.log_to_file:
        handlers.append(_file_handler(config))

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.level),
        handlers=handlers,
        force=force,
    )

    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    if settings_error is not None:
        logging.getLogger(__name__).warning(
            f"Invalid settings, logging with defaults: {settings_error}"
        )
