"""Flat text view over a WordprocessingML body.

The citation engine works with character offsets into one string holding the
whole document text. This module builds that string from the body XML and
records, for every offset, which run and which XML node it came from, so edits
can be mapped back to the document structure.

Text conventions:
- each paragraph is followed by a paragraph mark ``\\r``
- ``w:tab`` and ``w:ptab`` become ``\\t``
- a page break ``w:br w:type="page"`` becomes ``\\x0c``, other breaks ``\\x0b``
- ``w:noBreakHyphen`` becomes ``-``
- field instructions are not part of the text, field results are
- deleted text (``w:del``, ``w:delText``) and text boxes are left out

Paragraphs inside tables and content controls are included in document order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from docx.oxml.ns import qn

from modules.constants import LINE_BREAK_CHAR, PAGE_BREAK_MARKER, PARAGRAPH_MARK, TAB_CHAR
from modules.logger import setup_logger
from modules.types import TextRange

logger = setup_logger(__name__)

# ============================================================================
# WordprocessingML Tags
# ============================================================================
W_P = qn("w:p")
W_R = qn("w:r")
W_T = qn("w:t")
W_TAB = qn("w:tab")
W_PTAB = qn("w:ptab")
W_BR = qn("w:br")
W_CR = qn("w:cr")
W_SYM = qn("w:sym")
W_NO_BREAK_HYPHEN = qn("w:noBreakHyphen")
W_FLD_CHAR = qn("w:fldChar")
W_INSTR_TEXT = qn("w:instrText")
W_FLD_SIMPLE = qn("w:fldSimple")
W_HYPERLINK = qn("w:hyperlink")
W_BOOKMARK_START = qn("w:bookmarkStart")
W_BOOKMARK_END = qn("w:bookmarkEnd")

# Elements whose children are walked as if they were inline in the parent
_BODY_CONTAINERS = frozenset(
    qn(tag) for tag in ("w:tbl", "w:tr", "w:tc", "w:sdt", "w:sdtContent", "w:customXml")
)
_INLINE_CONTAINERS = frozenset(
    qn(tag)
    for tag in ("w:smartTag", "w:customXml", "w:sdt", "w:sdtContent", "w:ins", "w:moveTo", "w:dir", "w:bdo")
)


# ============================================================================
# Index Records
# ============================================================================
@dataclass
class TextPiece:
    """Text contributed by one node of a run (a ``w:t`` or a single-character node)."""
    start: int
    end: int
    run: Any
    node: Any
    paragraph: int


@dataclass
class ParagraphSpan:
    index: int
    start: int
    end: int
    element: Any


@dataclass
class BookmarkSpan:
    name: str
    bookmark_id: str
    start: int
    end: Optional[int] = None


@dataclass
class HyperlinkSpan:
    start: int
    end: int
    anchor: Optional[str]
    element: Any

    @property
    def span(self) -> TextRange:
        return TextRange(self.start, self.end)


@dataclass
class FieldSpan:
    """A simple or complex field with its instruction and result offsets.

    For a complex field ``elements`` holds the begin and end runs; for a simple
    field it holds the ``w:fldSimple`` element.
    """
    kind: str  # "complex" or "simple"
    start: int
    code_parts: List[str] = field(default_factory=list)
    result_start: Optional[int] = None
    end: Optional[int] = None
    begin_run: Any = None
    end_run: Any = None
    element: Any = None

    @property
    def code(self) -> str:
        return "".join(self.code_parts).strip()

    @property
    def result_range(self) -> TextRange:
        start = self.result_start if self.result_start is not None else self.end
        return TextRange(start, self.end)


# ============================================================================
# Text Index
# ============================================================================
class TextIndex:
    """
    Flat text of a document body plus the offsets of its structural parts.

    The index is a snapshot: any edit to the XML makes it stale and the owner
    must build a new one.

    Example:
        >>> index = TextIndex.build(document.element.body)
        >>> index.text
        'See refs [1] and [3-5].\\rReferences\\r[1]\\tSmith...\\r'
    """

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._length = 0
        self.text = ""
        self.pieces: List[TextPiece] = []
        self.paragraphs: List[ParagraphSpan] = []
        self.bookmarks: Dict[str, BookmarkSpan] = {}
        self.hyperlinks: List[HyperlinkSpan] = []
        self.fields: List[FieldSpan] = []
        self._open_bookmarks: Dict[str, BookmarkSpan] = {}
        self._field_stack: List[FieldSpan] = []

    @classmethod
    def build(cls, body: Any) -> TextIndex:
        index = cls()
        index._walk_container(body)
        index.text = "".join(index._parts)
        index._parts = []
        if index._field_stack:
            logger.debug("%d fields left open at the end of the body", len(index._field_stack))
        index.fields.sort(key=lambda f: f.start)
        return index

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def pieces_in(self, span: TextRange) -> List[TextPiece]:
        """Pieces sharing at least one character with ``span``, in order."""
        return [p for p in self.pieces if p.start < span.end and span.start < p.end]

    def hyperlinks_overlapping(self, span: TextRange) -> List[HyperlinkSpan]:
        return [h for h in self.hyperlinks if h.start < span.end and span.start < h.end]

    # ------------------------------------------------------------------
    # Body walking
    # ------------------------------------------------------------------
    def _emit(self, text: str) -> None:
        self._parts.append(text)
        self._length += len(text)

    def _walk_container(self, element: Any) -> None:
        for child in element:
            tag = child.tag
            if tag == W_P:
                self._walk_paragraph(child)
            elif tag in _BODY_CONTAINERS:
                self._walk_container(child)
            elif tag in (W_BOOKMARK_START, W_BOOKMARK_END):
                self._bookmark(child)

    def _walk_paragraph(self, p: Any) -> None:
        paragraph = ParagraphSpan(
            index=len(self.paragraphs), start=self._length, end=self._length, element=p
        )
        self.paragraphs.append(paragraph)
        self._walk_inline(p, paragraph.index)
        paragraph.end = self._length
        self._emit(PARAGRAPH_MARK)

    def _walk_inline(self, element: Any, paragraph: int) -> None:
        for child in element:
            tag = child.tag
            if tag == W_R:
                self._walk_run(child, paragraph)
            elif tag == W_HYPERLINK:
                start = self._length
                self._walk_inline(child, paragraph)
                self.hyperlinks.append(
                    HyperlinkSpan(start, self._length, child.get(qn("w:anchor")), child)
                )
            elif tag == W_FLD_SIMPLE:
                simple = FieldSpan(
                    kind="simple",
                    start=self._length,
                    code_parts=[child.get(qn("w:instr")) or ""],
                    result_start=self._length,
                    element=child,
                )
                self._walk_inline(child, paragraph)
                simple.end = self._length
                self.fields.append(simple)
            elif tag in (W_BOOKMARK_START, W_BOOKMARK_END):
                self._bookmark(child)
            elif tag in _INLINE_CONTAINERS:
                self._walk_inline(child, paragraph)

    def _walk_run(self, run: Any, paragraph: int) -> None:
        for node in run:
            tag = node.tag
            if tag == W_FLD_CHAR:
                self._field_char(node, run)
                continue
            if tag == W_INSTR_TEXT:
                if self._field_stack and self._field_stack[-1].result_start is None:
                    self._field_stack[-1].code_parts.append(node.text or "")
                continue

            text = self._node_text(node)
            if not text:
                continue
            # Text between a field's begin and separate is instruction, not result
            if self._field_stack and self._field_stack[-1].result_start is None:
                continue
            start = self._length
            self._emit(text)
            self.pieces.append(TextPiece(start, self._length, run, node, paragraph))

    @staticmethod
    def _node_text(node: Any) -> str:
        tag = node.tag
        if tag == W_T:
            return node.text or ""
        if tag in (W_TAB, W_PTAB):
            return TAB_CHAR
        if tag == W_BR:
            return PAGE_BREAK_MARKER if node.get(qn("w:type")) == "page" else LINE_BREAK_CHAR
        if tag == W_CR:
            return LINE_BREAK_CHAR
        if tag == W_NO_BREAK_HYPHEN:
            return "-"
        if tag == W_SYM:
            code = node.get(qn("w:char"))
            try:
                return chr(int(code, 16)) if code else ""
            except ValueError:
                return ""
        return ""

    def _field_char(self, node: Any, run: Any) -> None:
        kind = node.get(qn("w:fldCharType"))
        if kind == "begin":
            self._field_stack.append(FieldSpan(kind="complex", start=self._length, begin_run=run))
        elif kind == "separate" and self._field_stack:
            self._field_stack[-1].result_start = self._length
        elif kind == "end" and self._field_stack:
            complex_field = self._field_stack.pop()
            if complex_field.result_start is None:
                complex_field.result_start = self._length
            complex_field.end = self._length
            complex_field.end_run = run
            self.fields.append(complex_field)

    def _bookmark(self, node: Any) -> None:
        bookmark_id = node.get(qn("w:id")) or ""
        if node.tag == W_BOOKMARK_START:
            name = node.get(qn("w:name")) or ""
            mark = BookmarkSpan(name=name, bookmark_id=bookmark_id, start=self._length)
            self._open_bookmarks[bookmark_id] = mark
            self.bookmarks.setdefault(name, mark)
        else:
            mark = self._open_bookmarks.pop(bookmark_id, None)
            if mark is not None:
                mark.end = self._length


__all__ = [
    "TextIndex",
    "TextPiece",
    "ParagraphSpan",
    "BookmarkSpan",
    "HyperlinkSpan",
    "FieldSpan",
]
