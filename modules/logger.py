"""Logging configuration and setup utilities.

This module provides a standardized logger setup for the application with
separation between user-facing messages and detailed technical logs.
All modules should use setup_logger(__name__) to get a properly configured logger.

The citation engine does not log through module globals. Each run receives a
logger from get_run_logger(), which tags every record with the document being
processed, so that reports from a batch of documents stay distinguishable.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, MutableMapping, Optional

# Public API
__all__ = [
    "setup_logger",
    "configure_logging",
    "get_run_logger",
    "RunLoggerAdapter",
    "APP_LOGGER_NAMES",
]

# Constants
DEFAULT_LOG_LEVEL = logging.INFO
USER_LOG_LEVEL = logging.WARNING  # Only show warnings and errors to users by default
DETAILED_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"
SIMPLE_FORMAT = "[%(levelname)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
RUN_LOGGER_NAME = "citeanchor.run"

# Loggers configured through setup_logger(); configure_logging() adjusts them all
APP_LOGGER_NAMES: set[str] = set()


def setup_logger(
    name: str,
    level: int = DEFAULT_LOG_LEVEL,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Set up a standardized logger for the application.

    This function creates or retrieves a logger with the specified name and
    configures it with a StreamHandler if it doesn't already have handlers.

    Args:
        name: Name for the logger (typically __name__ from the calling module)
        level: Logging level for file/detailed logging (default: INFO)
        format_string: Custom format string for console messages
        date_format: Custom date format for timestamps
        verbose: If True, show all logs on console; if False, only warnings/errors

    Returns:
        Configured Logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("This goes to detailed logs only")
        >>> logger.warning("This shows on console and in detailed logs")
    """
    logger = logging.getLogger(name)

    # Only configure if no handlers exist (avoid duplicate handlers)
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_level = level if verbose else USER_LOG_LEVEL
        console_handler.setLevel(console_level)

        console_formatter = logging.Formatter(
            fmt=format_string or SIMPLE_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
        )
        console_handler.setFormatter(console_formatter)

        logger.addHandler(console_handler)
        logger.setLevel(level)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

    APP_LOGGER_NAMES.add(name)
    return logger


def _add_file_handler(
    logger: logging.Logger,
    log_file_path: str,
    level: int = logging.DEBUG,
) -> None:
    """Attach a detailed file handler unless one already writes to the same file."""
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == log_file_path:
            return

    file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    )
    logger.addHandler(file_handler)


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Apply console verbosity and an optional log file to every application logger.

    Args:
        verbose: If True, INFO messages reach the console as well
        log_file: Path of a detailed log file shared by all loggers
    """
    console_level = DEFAULT_LOG_LEVEL if verbose else USER_LOG_LEVEL
    level = logging.DEBUG if log_file else DEFAULT_LOG_LEVEL

    for name in sorted(APP_LOGGER_NAMES | {RUN_LOGGER_NAME}):
        logger = setup_logger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(console_level)
        if log_file:
            _add_file_handler(logger, str(Path(log_file).expanduser().resolve()))


class RunLoggerAdapter(logging.LoggerAdapter):
    """Prefix every message with the document a run is working on."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        document = self.extra.get("document") if self.extra else None
        if document:
            return f"[{document}] {msg}", kwargs
        return msg, kwargs


def get_run_logger(document_name: Optional[str] = None) -> RunLoggerAdapter:
    """
    Return the logger a single engine run writes to.

    Args:
        document_name: Name shown in front of each message (e.g. the file stem)

    Example:
        >>> log = get_run_logger("thesis")
        >>> log.warning("Skipped entry %s", 7)   # "[thesis] Skipped entry 7"
    """
    return RunLoggerAdapter(setup_logger(RUN_LOGGER_NAME), {"document": document_name})
