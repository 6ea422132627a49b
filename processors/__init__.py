"""Processors package for CiteAnchor.

This package provides the Word document side of the application:

- **text_index**: flat text view of a document body with structural offsets
- **docx_writer**: run splitting, bookmarks, internal hyperlinks, field copies
- **docx_host**: DocxHost implementing the engine's host interfaces
- **bibliography_locator**: finding the bibliography by field or heading
- **file_manager**: loading, output paths, resume handling, saving
- **log_manager**: JSON log file management for processing runs
"""

from processors.docx_host import DocxHost
from processors.bibliography_locator import DocxBibliographyLocator
from processors.file_manager import (
    load_document,
    save_document,
    resolve_output_path,
    resolve_log_path,
    should_skip_existing,
)
from processors.log_manager import (
    initialize_log_file,
    append_to_log,
    finalize_log_file,
)

__all__ = [
    # Document host
    "DocxHost",
    "DocxBibliographyLocator",
    # File Management
    "load_document",
    "save_document",
    "resolve_output_path",
    "resolve_log_path",
    "should_skip_existing",
    # Run logs
    "initialize_log_file",
    "append_to_log",
    "finalize_log_file",
]
