"""Centralized error handling and reporting utilities.

This module provides consistent error handling patterns across the application,
including error classification, logging, and user-friendly error messages.

Fatal linking conditions abort a run and carry the offending identifiers so the
caller can report them; recoverable conditions are counted by the engine and
never raised past it.
"""

from __future__ import annotations

import sys
import traceback
from typing import Any, Iterable

from modules.logger import setup_logger
from modules.user_prompts import print_error, print_warning

logger = setup_logger(__name__)


# ============================================================================
# Error Classification
# ============================================================================
class ProcessingError(Exception):
    """Base exception for processing errors."""


class ConfigurationError(ProcessingError):
    """Exception for configuration-related errors."""


class FileProcessingError(ProcessingError):
    """Exception for file processing errors."""


class DocumentEditError(ProcessingError):
    """A span edit could not be applied to the document structure."""


# ============================================================================
# Fatal Linking Conditions
# ============================================================================
class FatalLinkingError(ProcessingError):
    """Base for conditions that abort a whole linking run.

    Attributes:
        condition: Short machine-readable name of the triggering condition.
        report: Partial run report attached by the orchestrator, if any.
    """

    condition = "fatal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.report: Any = None


class BibliographyNotFoundError(FatalLinkingError):
    """No bibliography field or heading was found in the document."""

    condition = "bibliography_not_found"


class EmptyBibliographyError(FatalLinkingError):
    """A bibliography was found but no entry could be indexed."""

    condition = "empty_bibliography"


class OrphanCitationError(FatalLinkingError):
    """Citations reference numbers that have no bibliography anchor."""

    condition = "orphan_citations"

    def __init__(self, orphans: Iterable[int]) -> None:
        self.orphans = sorted(set(orphans))
        listed = ", ".join(str(n) for n in self.orphans)
        super().__init__(f"Citations without bibliography entry: {listed}")


class IterationCapError(FatalLinkingError):
    """A scan produced more matches than the configured cap allows."""

    condition = "iteration_cap"

    def __init__(self, cap: int) -> None:
        self.cap = cap
        super().__init__(f"Scan exceeded the iteration cap of {cap} matches")


class SearchStalledError(FatalLinkingError):
    """A search returned a match that does not move the cursor forward."""

    condition = "search_stalled"

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Search did not advance past offset {position}")


class InvertedRangeError(FatalLinkingError):
    """A range citation ends before it starts and the strict policy is active."""

    condition = "inverted_range"

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Inverted citation range '{text}'")


# ============================================================================
# Error Handlers
# ============================================================================
def handle_critical_error(
    error: Exception,
    context: str,
    exit_on_error: bool = False,
    show_user_message: bool = True,
) -> None:
    """Handle critical errors with consistent logging and user feedback."""
    if isinstance(error, FatalLinkingError):
        # Expected abort: no traceback, the condition says it all
        logger.error("Aborted %s [%s]: %s", context, error.condition, error)
    else:
        logger.exception(f"Critical error in {context}: {error}")

    if show_user_message:
        print_error(f"Critical error: {context} failed. {error}")

    if exit_on_error:
        sys.exit(1)


def handle_recoverable_error(
    error: Exception,
    context: str,
    show_user_message: bool = True,
) -> None:
    """Handle recoverable errors with logging and optional user feedback."""
    logger.warning(f"Recoverable error in {context}: {error}")
    logger.debug(traceback.format_exc())

    if show_user_message:
        print_warning(
            f"Warning: {context} failed ({error}); processing continues."
        )


# ============================================================================
# Validation Helpers
# ============================================================================
def validate_file_exists(file_path: Any, context: str = "file") -> None:
    """Validate that a file exists, raising FileProcessingError if not."""
    from pathlib import Path

    path = Path(file_path)
    if not path.exists():
        raise FileProcessingError(f"{context} not found: {path}")
    if not path.is_file():
        raise FileProcessingError(f"{context} is not a file: {path}")


def validate_directory_exists(dir_path: Any, context: str = "directory") -> None:
    """Validate that a directory exists, raising FileProcessingError if not."""
    from pathlib import Path

    path = Path(dir_path)
    if not path.exists():
        raise FileProcessingError(f"{context} not found: {path}")
    if not path.is_dir():
        raise FileProcessingError(f"{context} is not a directory: {path}")


def _type_label(expected_type: type | tuple[type, ...]) -> str:
    if isinstance(expected_type, tuple):
        return " or ".join(t.__name__ for t in expected_type)
    return expected_type.__name__


def validate_config_value(
    value: Any,
    expected_type: type | tuple[type, ...],
    name: str,
    allow_none: bool = False,
) -> None:
    """Validate a configuration value."""
    if value is None and allow_none:
        return

    # bool is an int subclass; a YAML "true" must not pass as a number
    if expected_type is int and isinstance(value, bool):
        raise ConfigurationError(
            f"Invalid configuration for '{name}': expected int, got bool"
        )

    if not isinstance(value, expected_type):
        raise ConfigurationError(
            f"Invalid configuration for '{name}': expected {_type_label(expected_type)}, "
            f"got {type(value).__name__}"
        )


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "ProcessingError",
    "ConfigurationError",
    "FileProcessingError",
    "DocumentEditError",
    "FatalLinkingError",
    "BibliographyNotFoundError",
    "EmptyBibliographyError",
    "OrphanCitationError",
    "IterationCapError",
    "SearchStalledError",
    "InvertedRangeError",
    "handle_critical_error",
    "handle_recoverable_error",
    "validate_file_exists",
    "validate_directory_exists",
    "validate_config_value",
]
