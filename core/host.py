"""Collaborator interfaces the citation engine works against.

The engine never touches a document object directly. It receives a host that
implements these interfaces, so the same engine runs against the python-docx
host in processors/ or against any other document model. All offsets are
character offsets into the host's flat text view; after any mutation offsets
may shift, so callers re-locate text with find() instead of keeping positions.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Optional

from modules.types import FieldHandle, LinkHandle, ParagraphView, TextMatch, TextRange


class TextSource(ABC):
    """Read access to the document text."""

    @abstractmethod
    def document_range(self) -> TextRange:
        """Range covering the whole document body."""

    @abstractmethod
    def text_of(self, span: TextRange) -> str:
        """Text inside the given range."""

    @abstractmethod
    def paragraphs(self, within: Optional[TextRange] = None) -> List[ParagraphView]:
        """Paragraphs overlapping ``within`` (all paragraphs when None), in order."""

    @abstractmethod
    def find(
        self,
        pattern: re.Pattern,
        within: TextRange,
        start: Optional[int] = None,
    ) -> Optional[TextMatch]:
        """
        Return the first match of ``pattern`` that starts at or after ``start``
        and ends at or before ``within.end``.

        Lookbehind assertions see the text before ``within``; the text after
        ``within.end`` is invisible to the pattern.
        """


class AnchorStore(ABC):
    """Named anchors (bookmarks)."""

    @abstractmethod
    def anchor_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def add_anchor(self, name: str, span: TextRange) -> None:
        """Create an anchor covering exactly ``span``."""

    @abstractmethod
    def delete_anchor(self, name: str) -> bool:
        """Delete an anchor; returns False if it did not exist."""

    @abstractmethod
    def list_anchors(self) -> List[str]:
        ...

    @abstractmethod
    def anchor_range(self, name: str) -> Optional[TextRange]:
        ...


class LinkStore(ABC):
    """Internal hyperlinks pointing at anchors."""

    @abstractmethod
    def add_link(self, span: TextRange, target: str) -> LinkHandle:
        """Turn the text in ``span`` into a link to the anchor ``target``."""

    @abstractmethod
    def delete_link(self, link: LinkHandle) -> None:
        """Remove a link, keeping its text."""

    @abstractmethod
    def links_with_prefix(self, prefix: str) -> List[LinkHandle]:
        """Links whose target anchor name starts with ``prefix``."""

    @abstractmethod
    def link_at(self, span: TextRange) -> Optional[LinkHandle]:
        """The link covering exactly ``span``, if there is one."""


class FieldStore(ABC):
    """Fields carrying reference manager metadata."""

    @abstractmethod
    def list_fields(self) -> List[FieldHandle]:
        """All fields in document order."""

    @abstractmethod
    def duplicate_field(self, source: FieldHandle, target: TextRange) -> TextRange:
        """
        Replace the text in ``target`` with an independent copy of ``source``.

        Returns:
            The range now occupied by the copy's rendered result
        """


class DocumentHost(TextSource, AnchorStore, LinkStore, FieldStore):
    """A document offering every store the engine uses."""

    name: str = ""


class BibliographyLocator(ABC):
    """Finds the rendered bibliography inside a document."""

    @abstractmethod
    def locate(self, host: DocumentHost) -> Optional[TextRange]:
        """Range of the bibliography, or None when there is none."""


__all__ = [
    "TextSource",
    "AnchorStore",
    "LinkStore",
    "FieldStore",
    "DocumentHost",
    "BibliographyLocator",
]
