"""Tests for modules/error_handler.py - Centralized error handling utilities."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from modules.error_handler import (
    BibliographyNotFoundError,
    ConfigurationError,
    DocumentEditError,
    EmptyBibliographyError,
    FatalLinkingError,
    FileProcessingError,
    InvertedRangeError,
    IterationCapError,
    OrphanCitationError,
    ProcessingError,
    SearchStalledError,
    handle_critical_error,
    handle_recoverable_error,
    validate_config_value,
    validate_directory_exists,
    validate_file_exists,
)


# ============================================================================
# Error Classification
# ============================================================================
class TestProcessingErrorHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "error_class",
        [ConfigurationError, FileProcessingError, DocumentEditError, FatalLinkingError],
    )
    def test_subclasses_of_processing_error(self, error_class):
        """Every application error can be caught as ProcessingError."""
        assert issubclass(error_class, ProcessingError)

    def test_instantiation(self):
        """ProcessingError keeps its message."""
        assert str(ProcessingError("something broke")) == "something broke"

    def test_document_edit_error_is_not_fatal(self):
        """Span edit failures are recoverable, not fatal linking conditions."""
        assert not issubclass(DocumentEditError, FatalLinkingError)


class TestFatalLinkingErrors:
    """Tests for the fatal condition subclasses."""

    @pytest.mark.parametrize(
        "error, condition",
        [
            (BibliographyNotFoundError("missing"), "bibliography_not_found"),
            (EmptyBibliographyError("empty"), "empty_bibliography"),
            (OrphanCitationError([5]), "orphan_citations"),
            (IterationCapError(100), "iteration_cap"),
            (SearchStalledError(42), "search_stalled"),
            (InvertedRangeError("9-3"), "inverted_range"),
        ],
    )
    def test_condition_names(self, error, condition):
        """Each subclass exposes a machine-readable condition."""
        assert isinstance(error, FatalLinkingError)
        assert error.condition == condition

    def test_report_starts_empty(self):
        """The orchestrator attaches the report later."""
        assert BibliographyNotFoundError("missing").report is None

    def test_orphans_sorted_and_unique(self):
        """Orphan numbers are reported sorted and without duplicates."""
        error = OrphanCitationError([9, 5, 9, 2])

        assert error.orphans == [2, 5, 9]
        assert "2, 5, 9" in str(error)

    def test_iteration_cap_keeps_cap(self):
        """IterationCapError records the configured cap."""
        error = IterationCapError(250)

        assert error.cap == 250
        assert "250" in str(error)

    def test_search_stalled_keeps_position(self):
        """SearchStalledError records the offset that did not advance."""
        assert SearchStalledError(17).position == 17

    def test_inverted_range_keeps_text(self):
        """InvertedRangeError records the literal range text."""
        error = InvertedRangeError("9-3")

        assert error.text == "9-3"
        assert "9-3" in str(error)


# ============================================================================
# Error Handlers
# ============================================================================
class TestHandleCriticalError:
    """Tests for handle_critical_error()."""

    def test_prints_user_message(self):
        """A user-facing message is printed when requested."""
        with patch("modules.error_handler.print_error") as mock_print:
            handle_critical_error(ValueError("boom"), "loading document")

        mock_print.assert_called_once()
        assert "loading document" in mock_print.call_args[0][0]

    def test_silent_without_user_message(self):
        """No user message when show_user_message is False."""
        with patch("modules.error_handler.print_error") as mock_print:
            handle_critical_error(ValueError("boom"), "ctx", show_user_message=False)

        mock_print.assert_not_called()

    def test_exits_when_requested(self):
        """exit_on_error terminates with status 1."""
        with patch("modules.error_handler.print_error"):
            with pytest.raises(SystemExit) as exc_info:
                handle_critical_error(ValueError("boom"), "ctx", exit_on_error=True)

        assert exc_info.value.code == 1

    def test_fatal_condition_logged_without_traceback(self):
        """Fatal linking conditions are logged as errors, not exceptions."""
        with patch("modules.error_handler.logger") as mock_logger:
            handle_critical_error(
                OrphanCitationError([5]), "link run", show_user_message=False
            )

        mock_logger.error.assert_called_once()
        mock_logger.exception.assert_not_called()

    def test_unexpected_error_logged_with_traceback(self):
        """Unexpected exceptions are logged with their traceback."""
        with patch("modules.error_handler.logger") as mock_logger:
            handle_critical_error(RuntimeError("bug"), "link run", show_user_message=False)

        mock_logger.exception.assert_called_once()


class TestHandleRecoverableError:
    """Tests for handle_recoverable_error()."""

    def test_prints_warning(self):
        """A warning is shown to the user."""
        with patch("modules.error_handler.print_warning") as mock_warn:
            handle_recoverable_error(DocumentEditError("crosses runs"), "linking [3]")

        mock_warn.assert_called_once()
        assert "linking [3]" in mock_warn.call_args[0][0]

    def test_silent_mode(self):
        """No warning printed when show_user_message is False."""
        with patch("modules.error_handler.print_warning") as mock_warn:
            handle_recoverable_error(ValueError("x"), "ctx", show_user_message=False)

        mock_warn.assert_not_called()

    def test_warning_names_the_error(self):
        with patch("modules.error_handler.print_warning") as mock_warn:
            handle_recoverable_error(ValueError("bad zip"), "processing document 'thesis'")

        assert "bad zip" in mock_warn.call_args[0][0]


# ============================================================================
# Validation Helpers
# ============================================================================
class TestValidateFileExists:
    """Tests for validate_file_exists()."""

    def test_existing_file(self, tmp_path: Path):
        """An existing file passes."""
        target = tmp_path / "thesis.docx"
        target.write_bytes(b"x")

        validate_file_exists(target)

    def test_missing_file(self, tmp_path: Path):
        """A missing file raises FileProcessingError."""
        with pytest.raises(FileProcessingError, match="not found"):
            validate_file_exists(tmp_path / "missing.docx", "Input document")

    def test_directory_is_not_a_file(self, tmp_path: Path):
        """A directory raises FileProcessingError."""
        with pytest.raises(FileProcessingError, match="not a file"):
            validate_file_exists(tmp_path)


class TestValidateDirectoryExists:
    """Tests for validate_directory_exists()."""

    def test_existing_directory(self, tmp_path: Path):
        validate_directory_exists(tmp_path)

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileProcessingError, match="not found"):
            validate_directory_exists(tmp_path / "missing")

    def test_file_is_not_a_directory(self, tmp_path: Path):
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(FileProcessingError, match="not a directory"):
            validate_directory_exists(target)


class TestValidateConfigValue:
    """Tests for validate_config_value()."""

    def test_valid_value(self):
        validate_config_value(10, int, "max_scan_matches")

    def test_wrong_type(self):
        """A wrong type raises ConfigurationError naming the key."""
        with pytest.raises(ConfigurationError, match="max_scan_matches"):
            validate_config_value("10", int, "max_scan_matches")

    def test_bool_is_not_int(self):
        """YAML booleans are rejected where an integer is expected."""
        with pytest.raises(ConfigurationError, match="got bool"):
            validate_config_value(True, int, "max_scan_matches")

    def test_tuple_of_types(self):
        """Several accepted types are listed in the message."""
        validate_config_value(["-"], (list, tuple), "range_separators")
        with pytest.raises(ConfigurationError, match="list or tuple"):
            validate_config_value(5, (list, tuple), "range_separators")

    def test_none_allowed(self):
        validate_config_value(None, str, "log_file", allow_none=True)

    def test_none_rejected_by_default(self):
        with pytest.raises(ConfigurationError):
            validate_config_value(None, str, "log_file")
