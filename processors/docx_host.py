"""python-docx implementation of the citation engine's document host.

DocxHost exposes a loaded ``docx.Document`` through the host interfaces in
core/host.py. Reads go through a TextIndex that is rebuilt lazily after every
edit; edits are delegated to processors.docx_writer.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

from core.host import DocumentHost
from modules.constants import DEFAULT_HYPERLINK_STYLE
from modules.error_handler import DocumentEditError
from modules.logger import setup_logger
from modules.types import FieldHandle, LinkHandle, ParagraphView, TextMatch, TextRange
from processors import docx_writer
from processors.text_index import FieldSpan, TextIndex

logger = setup_logger(__name__)


class DocxHost(DocumentHost):
    """
    Document host backed by a python-docx Document.

    Example:
        >>> from docx import Document
        >>> host = DocxHost(Document("thesis.docx"), name="thesis")
        >>> host.text_of(host.document_range())[:20]
        'Introduction\\rRecent '
    """

    def __init__(
        self,
        document: Any,
        name: str = "",
        hyperlink_style: Optional[str] = DEFAULT_HYPERLINK_STYLE,
    ) -> None:
        self.document = document
        self.name = name
        self.hyperlink_style = hyperlink_style
        self.body = document.element.body
        self._index: Optional[TextIndex] = None

    # ------------------------------------------------------------------
    # Index management
    # ------------------------------------------------------------------
    @property
    def index(self) -> TextIndex:
        if self._index is None:
            self._index = TextIndex.build(self.body)
        return self._index

    def invalidate(self) -> None:
        self._index = None

    # ------------------------------------------------------------------
    # TextSource
    # ------------------------------------------------------------------
    def document_range(self) -> TextRange:
        return TextRange(0, len(self.index.text))

    def text_of(self, span: TextRange) -> str:
        return self.index.text[span.start:span.end]

    def paragraphs(self, within: Optional[TextRange] = None) -> List[ParagraphView]:
        index = self.index
        views = []
        for paragraph in index.paragraphs:
            if within is not None:
                if paragraph.start == paragraph.end:
                    if not within.start <= paragraph.start < within.end:
                        continue
                elif not (paragraph.start < within.end and within.start < paragraph.end):
                    continue
            views.append(
                ParagraphView(
                    index=paragraph.index,
                    span=TextRange(paragraph.start, paragraph.end),
                    text=index.text[paragraph.start:paragraph.end],
                )
            )
        return views

    def find(
        self,
        pattern: re.Pattern,
        within: TextRange,
        start: Optional[int] = None,
    ) -> Optional[TextMatch]:
        position = within.start if start is None else max(start, within.start)
        if position > within.end:
            return None
        match = pattern.search(self.index.text, position, within.end)
        if match is None:
            return None
        return TextMatch(match.start(), match.end(), match.group(0))

    # ------------------------------------------------------------------
    # AnchorStore
    # ------------------------------------------------------------------
    def anchor_exists(self, name: str) -> bool:
        return name in docx_writer.bookmark_names(self.body)

    def add_anchor(self, name: str, span: TextRange) -> None:
        elements = docx_writer.isolate_runs(self.index, span)
        docx_writer.insert_bookmark(elements, name, docx_writer.next_bookmark_id(self.body))
        self.invalidate()
        logger.debug("Added bookmark %s at %s", name, span)

    def delete_anchor(self, name: str) -> bool:
        removed = docx_writer.remove_bookmark(self.body, name)
        if removed:
            self.invalidate()
        return removed

    def list_anchors(self) -> List[str]:
        return docx_writer.bookmark_names(self.body)

    def anchor_range(self, name: str) -> Optional[TextRange]:
        mark = self.index.bookmarks.get(name)
        if mark is None or mark.end is None:
            return None
        return TextRange(mark.start, mark.end)

    # ------------------------------------------------------------------
    # LinkStore
    # ------------------------------------------------------------------
    def add_link(self, span: TextRange, target: str) -> LinkHandle:
        overlapping = self.index.hyperlinks_overlapping(span)
        for existing in overlapping:
            if existing.anchor is None:
                raise DocumentEditError(f"Text at {span} is already an external hyperlink")
        for existing in overlapping:
            docx_writer.unwrap_hyperlink(existing.element, self.hyperlink_style)
        if overlapping:
            self.invalidate()

        elements = docx_writer.isolate_runs(self.index, span)
        hyperlink = docx_writer.wrap_in_hyperlink(elements, target, self.hyperlink_style)
        self.invalidate()
        return LinkHandle(target=target, span=span, ref=hyperlink)

    def delete_link(self, link: LinkHandle) -> None:
        element = link.ref
        if element is None:
            matches = [h for h in self.index.hyperlinks if h.span == link.span and h.anchor == link.target]
            if not matches:
                return
            element = matches[0].element
        docx_writer.unwrap_hyperlink(element, self.hyperlink_style)
        self.invalidate()

    def links_with_prefix(self, prefix: str) -> List[LinkHandle]:
        return [
            LinkHandle(target=h.anchor, span=h.span, ref=h.element)
            for h in self.index.hyperlinks
            if h.anchor and h.anchor.startswith(prefix)
        ]

    def link_at(self, span: TextRange) -> Optional[LinkHandle]:
        for h in self.index.hyperlinks:
            if h.span == span:
                return LinkHandle(target=h.anchor or "", span=h.span, ref=h.element)
        return None

    # ------------------------------------------------------------------
    # FieldStore
    # ------------------------------------------------------------------
    def list_fields(self) -> List[FieldHandle]:
        text = self.index.text
        handles = []
        for field_span in self.index.fields:
            result = field_span.result_range
            handles.append(
                FieldHandle(
                    code=field_span.code,
                    display=text[result.start:result.end],
                    result_range=result,
                    ref=field_span,
                )
            )
        return handles

    def duplicate_field(self, source: FieldHandle, target: TextRange) -> TextRange:
        if not isinstance(source.ref, FieldSpan):
            raise DocumentEditError("Field handle does not belong to a Word document")
        docx_writer.replace_with_field_copy(self.index, source.ref, target)
        self.invalidate()
        return TextRange(target.start, target.start + len(source.display))


__all__ = [
    "DocxHost",
]
