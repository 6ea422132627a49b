"""Pytest fixtures and configuration for CiteAnchor tests.

This module provides shared fixtures used across the test suite. Documents
are real python-docx documents built by the helpers in docx_builders.py.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest
from docx import Document

from core.context import RunContext
from docx_builders import ZOTERO_CITATION_CODE, add_complex_field, add_field_bibliography, build_document
from modules.types import LinkingConfig
from processors.docx_host import DocxHost


# ============================================================================
# Path Fixtures
# ============================================================================
@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Configuration Fixtures
# ============================================================================
@pytest.fixture
def linking_config() -> LinkingConfig:
    """Default engine configuration."""
    return LinkingConfig()


@pytest.fixture
def run_context(linking_config: LinkingConfig) -> RunContext:
    """Fresh run context with default configuration."""
    return RunContext.for_document("test", linking_config)


@pytest.fixture
def mock_linking_yaml() -> Dict[str, Any]:
    """linking.yaml content as loaded by yaml.safe_load."""
    return {
        "anchor_prefix": "REF",
        "range_separators": ["-", "–"],
        "inverted_range_policy": "strict",
        "max_scan_matches": 500,
        "max_range_span": 200,
        "require_bibliography": True,
        "require_bibliography_entries": False,
        "citation_field_marker": "CSL_CITATION",
        "hyperlink_style": "",
        "bibliography": {
            "field_markers": ["ZOTERO_BIBL"],
            "headings": ["References", "Literatur"],
        },
    }


# ============================================================================
# Document Fixtures
# ============================================================================
@pytest.fixture
def make_document() -> Callable[..., Any]:
    """Factory building a python-docx Document from body text and entries."""
    return build_document


@pytest.fixture
def make_host() -> Callable[..., DocxHost]:
    """Factory wrapping a freshly built document in a DocxHost."""

    def _make(*args: Any, **kwargs: Any) -> DocxHost:
        return DocxHost(build_document(*args, **kwargs), name="test")

    return _make


@pytest.fixture
def roundtrip_document() -> Any:
    """'See refs [1] and [3-5].' with entries 1, 3, 4 and 5 under 'References'."""
    return build_document(
        body=["See refs [1] and [3-5]."],
        entries={
            1: "Smith, J. On anchors. 2019.",
            3: "Jones, K. On links. 2020.",
            4: "Brown, L. On fields. 2021.",
            5: "Green, M. On ranges. 2022.",
        },
    )


@pytest.fixture
def roundtrip_host(roundtrip_document: Any) -> DocxHost:
    return DocxHost(roundtrip_document, name="roundtrip")


@pytest.fixture
def zotero_document() -> Any:
    """A Zotero [7] citation field, plain [7] and [8] citations, and a field bibliography."""
    document = Document()
    cited = document.add_paragraph("Earlier work ")
    add_complex_field(cited, ZOTERO_CITATION_CODE, "[7]")
    cited.add_run(" showed this.")
    document.add_paragraph("Pasted text repeats [7] and adds [8].")
    add_field_bibliography(
        document,
        {7: "Miller, A. Field codes. 2018.", 8: "Lopez, R. Plain text. 2017."},
    )
    return document


@pytest.fixture
def zotero_host(zotero_document: Any) -> DocxHost:
    return DocxHost(zotero_document, name="zotero")
