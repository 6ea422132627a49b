"""Item scanning utilities for discovering Word documents.

This module provides functions to scan directories and identify processable
.docx files for the CiteAnchor pipeline. Word lock files (``~$name.docx``) and
outputs previously written by the tool are left out.
"""

from __future__ import annotations

import os
from pathlib import Path
from collections.abc import Iterable
from typing import Optional

from modules.constants import DEFAULT_OUTPUT_SUFFIX, DOCX_EXTENSION
from modules.logger import setup_logger
from modules.types import ItemSpec

logger = setup_logger(__name__)

LOCK_FILE_PREFIX = "~$"


# ============================================================================
# File Type Detection
# ============================================================================
def is_docx_file(path: Path) -> bool:
    """Check if a path points to a Word document that is not a lock file."""
    return path.suffix.lower() == DOCX_EXTENSION and not path.name.startswith(LOCK_FILE_PREFIX)


def is_tool_output(path: Path, output_suffix: str = DEFAULT_OUTPUT_SUFFIX) -> bool:
    """Check if a document looks like an output of an earlier run."""
    return bool(output_suffix) and path.stem.endswith(output_suffix)


# ============================================================================
# Item Scanning
# ============================================================================
def scan_input_path(
    path_to_scan: Path,
    output_suffix: Optional[str] = DEFAULT_OUTPUT_SUFFIX,
) -> list[ItemSpec]:
    """Gather documents from a file or directory path, sorted by path."""
    logger.debug("Scanning input: %s", path_to_scan)
    collected: list[ItemSpec] = []

    if path_to_scan.is_file():
        if is_docx_file(path_to_scan):
            collected.append(_build_docx_item(path_to_scan))
        else:
            logger.warning(
                "Input path %s is not a .docx file. Skipping.",
                path_to_scan,
            )
    elif path_to_scan.is_dir():
        collected.extend(_collect_items_from_directory(path_to_scan, output_suffix or ""))
    else:
        logger.warning(
            "Input path %s is not a .docx file or a directory. Skipping.",
            path_to_scan,
        )

    collected.sort(key=lambda item: str(item.path).lower())
    logger.debug("Found %s potential items from %s.", len(collected), path_to_scan)
    return collected


# ============================================================================
# Private Helper Functions
# ============================================================================
def _collect_items_from_directory(path_to_scan: Path, output_suffix: str) -> Iterable[ItemSpec]:
    """Recursively collect .docx files from a directory."""
    items: list[ItemSpec] = []

    for root, dirs, files in os.walk(path_to_scan):
        current_dir = Path(root)
        dirs[:] = [name for name in dirs if not name.startswith(".")]

        for file_name in files:
            file_path = current_dir / file_name
            if not is_docx_file(file_path):
                continue
            if is_tool_output(file_path, output_suffix):
                logger.debug("Skipping earlier output %s", file_path)
                continue
            items.append(_build_docx_item(file_path))

    return items


def _build_docx_item(docx_path: Path) -> ItemSpec:
    """Create an ItemSpec for a Word document."""
    return ItemSpec(kind="docx", path=docx_path)


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "scan_input_path",
    "is_docx_file",
    "is_tool_output",
]
