"""Locating the rendered bibliography in a Word document.

Reference managers insert the bibliography as a field (Zotero ``ADDIN
ZOTERO_BIBL``, Mendeley ``ADDIN Mendeley Bibliography CSL_BIBLIOGRAPHY``,
EndNote ``ADDIN EN.REFLIST``); its result range is the bibliography. Documents
without such a field fall back to the last heading paragraph reading
"References", "Bibliography" or similar, and the bibliography is everything
after it.
"""

from __future__ import annotations

import re
from typing import Optional

from core.host import BibliographyLocator, DocumentHost
from modules.logger import setup_logger
from modules.types import LinkingConfig, TextRange

logger = setup_logger(__name__)


class DocxBibliographyLocator(BibliographyLocator):
    """Find the bibliography by field code, then by heading text."""

    def __init__(self, config: Optional[LinkingConfig] = None) -> None:
        config = config or LinkingConfig()
        self.field_markers = tuple(marker.upper() for marker in config.bibliography_field_markers)
        headings = "|".join(
            r"\s+".join(re.escape(word) for word in heading.split())
            for heading in config.bibliography_headings
        )
        # Optional section number ("7." or "VII"), optional trailing colon
        self._heading_regex = re.compile(
            rf"^\s*(?:[\dIVXLC]+\.?\s+)?(?:{headings})\s*:?\s*$", re.IGNORECASE
        )

    def locate(self, host: DocumentHost) -> Optional[TextRange]:
        span = self._from_field(host)
        if span is None:
            span = self._from_heading(host)
        return span

    def _from_field(self, host: DocumentHost) -> Optional[TextRange]:
        for handle in host.list_fields():
            code = handle.code.upper()
            if any(marker in code for marker in self.field_markers):
                if handle.result_range.is_empty():
                    logger.warning("Bibliography field '%s' has an empty result", handle.code[:40])
                    continue
                logger.debug("Bibliography field found at %s", handle.result_range)
                return handle.result_range
        return None

    def _from_heading(self, host: DocumentHost) -> Optional[TextRange]:
        document = host.document_range()
        heading = None
        for paragraph in host.paragraphs():
            if self._heading_regex.match(paragraph.text):
                heading = paragraph

        if heading is None:
            return None

        # Skip the heading's paragraph mark
        start = min(heading.span.end + 1, document.end)
        logger.debug("Bibliography heading '%s' found; entries start at %d", heading.text.strip(), start)
        return TextRange(start, document.end)


__all__ = [
    "DocxBibliographyLocator",
]
