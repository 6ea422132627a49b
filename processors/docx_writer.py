"""Low-level WordprocessingML edits for CiteAnchor.

Provides the structural edits the docx host performs on behalf of the engine:
- splitting runs at character offsets so a span maps onto whole runs
- inserting and removing bookmarks around a span
- wrapping runs in an internal hyperlink (``w:hyperlink w:anchor``) and undoing it
- copying a citation field over a plain-text span

All functions work on the XML of a python-docx document and take their
offsets from a TextIndex, which is stale after any of these edits.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, List, Optional

from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from modules.error_handler import DocumentEditError
from modules.logger import setup_logger
from modules.types import TextRange
from processors.text_index import (
    W_BOOKMARK_END,
    W_BOOKMARK_START,
    W_FLD_CHAR,
    W_INSTR_TEXT,
    W_R,
    W_T,
    FieldSpan,
    TextIndex,
)

logger = setup_logger(__name__)

W_RPR = qn("w:rPr")
W_RSTYLE = qn("w:rStyle")
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

# Elements that may sit between the runs of a span without blocking an edit
_PASSIVE_SIBLINGS = frozenset({W_BOOKMARK_START, W_BOOKMARK_END, qn("w:proofErr")})


# ============================================================================
# Run Splitting
# ============================================================================
def _content_children(run: Any) -> List[Any]:
    return [child for child in run if child.tag != W_RPR]


def _set_text(node: Any, text: str) -> None:
    node.text = text
    node.set(XML_SPACE, "preserve")


def split_run(run: Any, node: Any, offset: int) -> Any:
    """
    Split ``run`` inside ``node`` at ``offset`` characters into that node.

    The original run keeps the text before the split point; a copy carrying the
    same formatting is inserted after it with the rest.

    Returns:
        The new run holding the text after the split point
    """
    children = _content_children(run)
    position = children.index(node)
    length = len(node.text or "") if node.tag == W_T else 1

    new_run = deepcopy(run)
    run.addnext(new_run)
    new_children = _content_children(new_run)

    for child in children[position + 1:]:
        run.remove(child)
    for child in new_children[:position]:
        new_run.remove(child)

    if offset <= 0:
        run.remove(node)
    elif offset >= length:
        new_run.remove(new_children[position])
    else:
        text = node.text or ""
        _set_text(node, text[:offset])
        _set_text(new_children[position], text[offset:])

    return new_run


def isolate_runs(index: TextIndex, span: TextRange) -> List[Any]:
    """
    Split runs so that ``span`` is covered by whole runs, and return them.

    The returned list holds the sibling elements from the first to the last
    covering run, including bookmarks between them.

    Raises:
        DocumentEditError: If the span is empty, crosses paragraphs, crosses a
            field boundary or covers runs with different parents
    """
    pieces = index.pieces_in(span)
    if span.is_empty() or not pieces:
        raise DocumentEditError(f"No document text in {span}")
    if pieces[0].start > span.start or pieces[-1].end < span.end:
        raise DocumentEditError(f"Span {span} is not covered by run text")
    if pieces[0].paragraph != pieces[-1].paragraph:
        raise DocumentEditError(f"Span {span} crosses a paragraph boundary")
    if pieces[0].run.getparent() is not pieces[-1].run.getparent():
        raise DocumentEditError(f"Span {span} crosses a hyperlink or field boundary")

    first, last = pieces[0], pieces[-1]

    # Split at the end first so the start offsets stay valid
    if last.end > span.end or _content_children(last.run)[-1] is not last.node:
        split_run(last.run, last.node, span.end - last.start)

    first_run = first.run
    last_run = last.run
    if first.start < span.start or _content_children(first.run)[0] is not first.node:
        first_run = split_run(first.run, first.node, span.start - first.start)
        if last.run is first.run:
            last_run = first_run

    elements = [first_run]
    if first_run is not last_run:
        for sibling in first_run.itersiblings():
            elements.append(sibling)
            if sibling is last_run:
                break
        else:
            raise DocumentEditError(f"Runs of span {span} are not siblings")

    for element in elements:
        if element.tag == W_R:
            if element.find(W_FLD_CHAR) is not None or element.find(W_INSTR_TEXT) is not None:
                raise DocumentEditError(f"Span {span} crosses a field boundary")
        elif element.tag not in _PASSIVE_SIBLINGS:
            raise DocumentEditError(f"Span {span} contains a {element.tag} element")

    return elements


# ============================================================================
# Bookmarks
# ============================================================================
def next_bookmark_id(body: Any) -> int:
    """One more than the highest bookmark id in the body."""
    max_id = -1
    for bookmark_start in body.iter(W_BOOKMARK_START):
        try:
            max_id = max(max_id, int(bookmark_start.get(qn("w:id"), "0")))
        except ValueError:
            pass
    return max_id + 1


def insert_bookmark(elements: List[Any], name: str, bookmark_id: int) -> None:
    """Place a bookmark around the given sibling elements."""
    start = OxmlElement("w:bookmarkStart")
    start.set(qn("w:id"), str(bookmark_id))
    start.set(qn("w:name"), name)
    end = OxmlElement("w:bookmarkEnd")
    end.set(qn("w:id"), str(bookmark_id))

    elements[0].addprevious(start)
    elements[-1].addnext(end)


def bookmark_names(body: Any) -> List[str]:
    return [b.get(qn("w:name")) or "" for b in body.iter(W_BOOKMARK_START)]


def remove_bookmark(body: Any, name: str) -> bool:
    """Remove a bookmark's start and end markers. Returns False if absent."""
    starts = [b for b in body.iter(W_BOOKMARK_START) if b.get(qn("w:name")) == name]
    if not starts:
        return False

    ids = {b.get(qn("w:id")) for b in starts}
    ends = [b for b in body.iter(W_BOOKMARK_END) if b.get(qn("w:id")) in ids]
    for element in starts + ends:
        element.getparent().remove(element)
    return True


# ============================================================================
# Internal Hyperlinks
# ============================================================================
def set_run_style(run: Any, style: str) -> None:
    rPr = run.get_or_add_rPr()
    rStyle = rPr.find(W_RSTYLE)
    if rStyle is None:
        rStyle = OxmlElement("w:rStyle")
        rPr.insert(0, rStyle)
    rStyle.set(qn("w:val"), style)


def clear_run_style(run: Any, style: str) -> None:
    rPr = run.find(W_RPR)
    if rPr is None:
        return
    rStyle = rPr.find(W_RSTYLE)
    if rStyle is not None and rStyle.get(qn("w:val")) == style:
        rPr.remove(rStyle)
    if len(rPr) == 0 and not rPr.attrib:
        run.remove(rPr)


def wrap_in_hyperlink(elements: List[Any], anchor: str, style: Optional[str] = None) -> Any:
    """Move the elements into a new internal hyperlink to ``anchor``."""
    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("w:anchor"), anchor)
    hyperlink.set(qn("w:history"), "1")

    elements[0].addprevious(hyperlink)
    for element in elements:
        hyperlink.append(element)
        if style and element.tag == W_R:
            set_run_style(element, style)
    return hyperlink


def unwrap_hyperlink(hyperlink: Any, style: Optional[str] = None) -> None:
    """Replace a hyperlink by its content, dropping the link style from its runs."""
    parent = hyperlink.getparent()
    if parent is None:
        return
    for child in list(hyperlink):
        if style and child.tag == W_R:
            clear_run_style(child, style)
        hyperlink.addprevious(child)
    parent.remove(hyperlink)


# ============================================================================
# Field Copies
# ============================================================================
def copy_field_elements(source: FieldSpan) -> List[Any]:
    """
    Deep copies of the XML making up a field, without its bookmarks.

    Raises:
        DocumentEditError: If a complex field does not start and end in the
            same paragraph
    """
    if source.kind == "simple":
        originals = [source.element]
    else:
        begin, end = source.begin_run, source.end_run
        if begin is None or end is None or begin.getparent() is not end.getparent():
            raise DocumentEditError("Field does not start and end in the same paragraph")
        originals = [begin]
        if begin is not end:
            for sibling in begin.itersiblings():
                originals.append(sibling)
                if sibling is end:
                    break
            else:
                raise DocumentEditError("Field end marker not found after its begin marker")

    copies = []
    for element in originals:
        if element.tag in (W_BOOKMARK_START, W_BOOKMARK_END):
            continue
        duplicate = deepcopy(element)
        for marker in list(duplicate.iter(W_BOOKMARK_START, W_BOOKMARK_END)):
            marker.getparent().remove(marker)
        copies.append(duplicate)
    return copies


def replace_with_field_copy(index: TextIndex, source: FieldSpan, target: TextRange) -> None:
    """Replace the runs covering ``target`` with a copy of the field ``source``."""
    copies = copy_field_elements(source)
    elements = isolate_runs(index, target)

    for duplicate in copies:
        elements[0].addprevious(duplicate)
    for element in elements:
        if element.tag == W_R:
            element.getparent().remove(element)


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "split_run",
    "isolate_runs",
    "next_bookmark_id",
    "insert_bookmark",
    "bookmark_names",
    "remove_bookmark",
    "set_run_style",
    "clear_run_style",
    "wrap_in_hyperlink",
    "unwrap_hyperlink",
    "copy_field_elements",
    "replace_with_field_copy",
]
