"""python-docx document builders shared by the test suite.

Documents are assembled in memory: body paragraphs, numbered ``[n]<tab>``
bibliography lines under a heading, and Zotero-style complex fields for
citations and bibliographies.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

ZOTERO_CITATION_CODE = 'ADDIN ZOTERO_ITEM CSL_CITATION {"citationID":"a1b2","citationItems":[{"id":7}]}'
ZOTERO_BIBLIOGRAPHY_CODE = 'ADDIN ZOTERO_BIBL {"uncited":[],"omitted":[]} CSL_BIBLIOGRAPHY'


# ============================================================================
# Document Builders
# ============================================================================
def add_field_char(paragraph: Any, kind: str) -> Any:
    """Append a run holding a single ``w:fldChar`` of the given type."""
    run = paragraph.add_run()
    fld_char = OxmlElement("w:fldChar")
    fld_char.set(qn("w:fldCharType"), kind)
    run._r.append(fld_char)
    return run


def add_instruction(paragraph: Any, instruction: str) -> Any:
    run = paragraph.add_run()
    instr = OxmlElement("w:instrText")
    instr.set(XML_SPACE, "preserve")
    instr.text = f" {instruction} "
    run._r.append(instr)
    return run


def add_complex_field(paragraph: Any, instruction: str, result: str) -> None:
    """Append a complete begin/instruction/separate/result/end field to a paragraph."""
    add_field_char(paragraph, "begin")
    add_instruction(paragraph, instruction)
    add_field_char(paragraph, "separate")
    paragraph.add_run(result)
    add_field_char(paragraph, "end")


def add_bibliography_lines(document: Any, entries: Dict[int, str]) -> None:
    for number, text in entries.items():
        document.add_paragraph(f"[{number}]\t{text}")


def add_field_bibliography(document: Any, entries: Dict[int, str]) -> None:
    """Add a bibliography rendered inside a ZOTERO_BIBL field spanning paragraphs."""
    items = list(entries.items())
    for position, (number, text) in enumerate(items):
        paragraph = document.add_paragraph()
        if position == 0:
            add_field_char(paragraph, "begin")
            add_instruction(paragraph, ZOTERO_BIBLIOGRAPHY_CODE)
            add_field_char(paragraph, "separate")
        paragraph.add_run(f"[{number}]\t{text}")
        if position == len(items) - 1:
            add_field_char(paragraph, "end")


def build_document(
    body: Iterable[str] = (),
    entries: Optional[Dict[int, str]] = None,
    heading: Optional[str] = "References",
) -> Any:
    """Body paragraphs, then a heading and one ``[n]<tab>`` paragraph per entry."""
    document = Document()
    for text in body:
        document.add_paragraph(text)
    if heading is not None:
        document.add_paragraph(heading)
    if entries:
        add_bibliography_lines(document, entries)
    return document


