"""Centralized constants for CiteAnchor.

This module provides a single source of truth for all default values,
constants, and configuration defaults used throughout the application.
"""

from __future__ import annotations

# ============================================================================
# Citation Pattern Defaults
# ============================================================================
HYPHEN = "-"
EN_DASH = "–"
DEFAULT_RANGE_SEPARATORS: tuple[str, ...] = (HYPHEN, EN_DASH)
PAGE_BREAK_MARKER = "\x0c"

# ============================================================================
# Engine Defaults
# ============================================================================
DEFAULT_ANCHOR_PREFIX = "BIB"
DEFAULT_MAX_SCAN_MATCHES = 10000
DEFAULT_MAX_RANGE_SPAN = 1000
INVERTED_RANGE_DEGRADE = "degrade"
INVERTED_RANGE_STRICT = "strict"
INVERTED_RANGE_POLICIES = frozenset({INVERTED_RANGE_DEGRADE, INVERTED_RANGE_STRICT})
DEFAULT_CITATION_FIELD_MARKER = "CSL_CITATION"
DEFAULT_BIBLIOGRAPHY_FIELD_MARKERS: tuple[str, ...] = (
    "ZOTERO_BIBL",
    "CSL_BIBLIOGRAPHY",
    "EN.REFLIST",
    "MENDELEY BIBLIOGRAPHY",
)
DEFAULT_BIBLIOGRAPHY_HEADINGS: tuple[str, ...] = (
    "References",
    "Bibliography",
    "Works Cited",
    "Literature Cited",
    "References and Notes",
)
DEFAULT_HYPERLINK_STYLE = "Hyperlink"

# Word limits bookmark names to 40 characters
MAX_BOOKMARK_NAME_LENGTH = 40

# ============================================================================
# WordprocessingML Text Markers
# ============================================================================
PARAGRAPH_MARK = "\r"
TAB_CHAR = "\t"
LINE_BREAK_CHAR = "\x0b"

# ============================================================================
# Output Defaults
# ============================================================================
DEFAULT_OUTPUT_SUFFIX = "_linked"
DOCX_EXTENSION = ".docx"
RUN_LOG_SUFFIX = "_citation_log.json"

# ============================================================================
# Processing Modes
# ============================================================================
MODE_LINK = "link"
MODE_CHECK = "check"
MODE_RECOVER = "recover"
MODE_UNLINK = "unlink"
PROCESSING_MODES: tuple[str, ...] = (MODE_LINK, MODE_CHECK, MODE_RECOVER, MODE_UNLINK)

# ============================================================================
# CLI Constants
# ============================================================================
EXIT_COMMANDS = frozenset({'exit', 'quit', 'q'})
BACK_COMMANDS = frozenset({'back', 'b'})
ALL_COMMANDS = frozenset({'all', 'a'})
DIVIDER_CHAR = '─'
DIVIDER_LENGTH = 70

# ============================================================================
# Public API
# ============================================================================
__all__ = [
    # Patterns
    "HYPHEN",
    "EN_DASH",
    "DEFAULT_RANGE_SEPARATORS",
    "PAGE_BREAK_MARKER",
    # Engine
    "DEFAULT_ANCHOR_PREFIX",
    "DEFAULT_MAX_SCAN_MATCHES",
    "DEFAULT_MAX_RANGE_SPAN",
    "INVERTED_RANGE_DEGRADE",
    "INVERTED_RANGE_STRICT",
    "INVERTED_RANGE_POLICIES",
    "DEFAULT_CITATION_FIELD_MARKER",
    "DEFAULT_BIBLIOGRAPHY_FIELD_MARKERS",
    "DEFAULT_BIBLIOGRAPHY_HEADINGS",
    "DEFAULT_HYPERLINK_STYLE",
    "MAX_BOOKMARK_NAME_LENGTH",
    # Text markers
    "PARAGRAPH_MARK",
    "TAB_CHAR",
    "LINE_BREAK_CHAR",
    # Output
    "DEFAULT_OUTPUT_SUFFIX",
    "DOCX_EXTENSION",
    "RUN_LOG_SUFFIX",
    # Modes
    "MODE_LINK",
    "MODE_CHECK",
    "MODE_RECOVER",
    "MODE_UNLINK",
    "PROCESSING_MODES",
    # CLI
    "EXIT_COMMANDS",
    "BACK_COMMANDS",
    "ALL_COMMANDS",
    "DIVIDER_CHAR",
    "DIVIDER_LENGTH",
]
