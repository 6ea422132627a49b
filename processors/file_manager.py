"""File management utilities for documents processed by CiteAnchor.

This module handles the file I/O around an engine run:

1. **Input Loading**:
   - Validates that the input exists and is a readable .docx package
   - Wraps python-docx load errors in FileProcessingError

2. **Output Paths**:
   - Resolves ``<output dir>/<stem><suffix>.docx`` for each document
   - Resolves the per-document JSON run log path
   - Creates the batch output directory up front

3. **Resume Handling**:
   - Skips documents whose output already exists unless overwriting

4. **Saving**:
   - Creates the output directory and saves the edited document
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from modules.constants import DEFAULT_OUTPUT_SUFFIX, DOCX_EXTENSION, RUN_LOG_SUFFIX
from modules.error_handler import (
    FileProcessingError,
    validate_directory_exists,
    validate_file_exists,
)
from modules.logger import setup_logger
from modules.types import ItemSpec

logger = setup_logger(__name__)


# ============================================================================
# Output Paths
# ============================================================================
def resolve_output_path(
    item: ItemSpec,
    output_dir: Optional[Path] = None,
    suffix: str = DEFAULT_OUTPUT_SUFFIX,
) -> Path:
    """
    Path the edited copy of a document is written to.

    Without an output directory the copy is written next to the input. An
    empty suffix with the input's own directory would overwrite the input;
    that case is rejected.
    """
    target_dir = Path(output_dir) if output_dir else item.path.parent
    output_path = target_dir / f"{item.output_stem}{suffix}{DOCX_EXTENSION}"
    if output_path.resolve() == item.path.resolve():
        raise FileProcessingError(
            f"Output would overwrite the input document {item.path}; set an output suffix or folder"
        )
    return output_path


def prepare_output_directory(output_dir: Path) -> Path:
    """
    Create the output directory of a batch and check that it is usable.

    Raises:
        FileProcessingError: If the path cannot be created or is not a directory
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileProcessingError(f"Could not create output directory {output_dir}: {e}") from e
    validate_directory_exists(output_dir, "Output directory")
    return output_dir


def resolve_log_path(output_path: Path) -> Path:
    """Path of the JSON run log written beside an output document."""
    return output_path.with_name(f"{output_path.stem}{RUN_LOG_SUFFIX}")


def should_skip_existing(output_path: Path, resume_mode: str) -> bool:
    """Return True if the output exists and the resume mode says to keep it."""
    if resume_mode == "skip" and output_path.exists():
        logger.info("Output already exists, skipping: %s", output_path)
        return True
    return False


# ============================================================================
# Loading and Saving
# ============================================================================
def load_document(path: Path) -> Any:
    """
    Open a Word document.

    Raises:
        FileProcessingError: If the file is missing or is not a .docx package
    """
    validate_file_exists(path, "Input document")
    try:
        return Document(str(path))
    except PackageNotFoundError as e:
        raise FileProcessingError(f"Not a Word document: {path}") from e
    except (OSError, KeyError, ValueError) as e:
        raise FileProcessingError(f"Could not read {path}: {e}") from e


def save_document(document: Any, output_path: Path) -> Path:
    """
    Save a document, creating the output directory if needed.

    Raises:
        FileProcessingError: If the file cannot be written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        document.save(str(output_path))
    except OSError as e:
        raise FileProcessingError(f"Could not save {output_path}: {e}") from e
    logger.info("Saved %s", output_path)
    return output_path


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "resolve_output_path",
    "prepare_output_directory",
    "resolve_log_path",
    "should_skip_existing",
    "load_document",
    "save_document",
]
