"""Tests for processors/text_index.py - Flat text view of a document body."""

from __future__ import annotations

from docx import Document
from docx.enum.text import WD_BREAK
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from docx_builders import ZOTERO_BIBLIOGRAPHY_CODE, ZOTERO_CITATION_CODE
from modules.types import TextRange
from processors.text_index import TextIndex


def _index(document) -> TextIndex:
    return TextIndex.build(document.element.body)


class TestTextConventions:
    """Tests for the characters produced by each node type."""

    def test_paragraph_marks(self, make_document):
        document = make_document(body=["One", "Two"], heading=None)

        assert _index(document).text == "One\rTwo\r"

    def test_tab(self):
        document = Document()
        document.add_paragraph("[1]\tSmith")

        assert _index(document).text == "[1]\tSmith\r"

    def test_breaks(self):
        document = Document()
        paragraph = document.add_paragraph("a")
        paragraph.add_run().add_break(WD_BREAK.PAGE)
        paragraph.add_run("b")
        paragraph.add_run().add_break()
        paragraph.add_run("c")

        assert _index(document).text == "a\x0cb\x0bc\r"

    def test_no_break_hyphen(self):
        document = Document()
        paragraph = document.add_paragraph("3")
        paragraph.add_run()._r.append(OxmlElement("w:noBreakHyphen"))
        paragraph.add_run("5")

        assert _index(document).text == "3-5\r"

    def test_table_cells_included(self):
        document = Document()
        document.add_paragraph("Before")
        table = document.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "[1]"
        table.cell(0, 1).text = "[2]"
        document.add_paragraph("After")

        text = _index(document).text

        assert text.startswith("Before\r")
        assert "[1]\r" in text and "[2]\r" in text
        assert text.endswith("After\r")


class TestParagraphs:
    """Tests for paragraph spans."""

    def test_spans_exclude_mark(self, make_document):
        document = make_document(body=["One", "Two"], heading=None)
        index = _index(document)

        assert [(p.start, p.end) for p in index.paragraphs] == [(0, 3), (4, 7)]
        assert [p.index for p in index.paragraphs] == [0, 1]

    def test_empty_paragraph(self):
        document = Document()
        document.add_paragraph("")
        document.add_paragraph("x")

        index = _index(document)

        assert index.paragraphs[0].start == index.paragraphs[0].end == 0
        assert index.text == "\rx\r"


class TestPieces:
    """Tests for run pieces."""

    def test_pieces_in_span(self, make_document):
        document = make_document(body=["See refs [1] and [3-5]."], heading=None)
        index = _index(document)

        pieces = index.pieces_in(TextRange(9, 12))

        assert len(pieces) == 1
        assert pieces[0].node.tag == qn("w:t")
        assert pieces[0].start == 0

    def test_each_node_is_a_piece(self):
        document = Document()
        document.add_paragraph("[1]\tSmith")

        pieces = _index(document).pieces

        assert [(p.start, p.end) for p in pieces] == [(0, 3), (3, 4), (4, 9)]


class TestFields:
    """Tests for complex and simple fields."""

    def test_instruction_not_in_text(self, zotero_document):
        text = _index(zotero_document).text

        assert "ZOTERO" not in text
        assert text.startswith("Earlier work [7] showed this.\r")

    def test_citation_field(self, zotero_document):
        index = _index(zotero_document)
        citation = index.fields[0]

        assert citation.kind == "complex"
        assert citation.code == ZOTERO_CITATION_CODE
        assert index.text[citation.result_range.start:citation.result_range.end] == "[7]"

    def test_field_across_paragraphs(self, zotero_document):
        """The bibliography field result spans all of its paragraphs."""
        index = _index(zotero_document)
        bibliography = index.fields[1]

        result = index.text[bibliography.result_range.start:bibliography.result_range.end]

        assert bibliography.code == ZOTERO_BIBLIOGRAPHY_CODE
        assert result.startswith("[7]\tMiller")
        assert result.endswith("Plain text. 2017.")
        assert "\r[8]\t" in result

    def test_simple_field(self):
        document = Document()
        paragraph = document.add_paragraph("See ")
        simple = OxmlElement("w:fldSimple")
        simple.set(qn("w:instr"), " ADDIN CSL_CITATION ")
        run = OxmlElement("w:r")
        text = OxmlElement("w:t")
        text.text = "[2]"
        run.append(text)
        simple.append(run)
        paragraph._p.append(simple)

        index = _index(document)

        assert index.text == "See [2]\r"
        assert index.fields[0].kind == "simple"
        assert index.fields[0].code == "ADDIN CSL_CITATION"
        assert index.fields[0].result_range == TextRange(4, 7)


class TestHyperlinksAndBookmarks:
    """Tests for hyperlink and bookmark spans."""

    def test_hyperlink_span(self):
        document = Document()
        paragraph = document.add_paragraph("See ")
        hyperlink = OxmlElement("w:hyperlink")
        hyperlink.set(qn("w:anchor"), "BIB_1")
        run = OxmlElement("w:r")
        text = OxmlElement("w:t")
        text.text = "1"
        run.append(text)
        hyperlink.append(run)
        paragraph._p.append(hyperlink)

        index = _index(document)

        assert index.text == "See 1\r"
        assert index.hyperlinks[0].anchor == "BIB_1"
        assert index.hyperlinks[0].span == TextRange(4, 5)
        assert index.hyperlinks_overlapping(TextRange(0, 5))
        assert not index.hyperlinks_overlapping(TextRange(0, 4))

    def test_bookmark_span(self):
        document = Document()
        paragraph = document.add_paragraph("A ")
        start = OxmlElement("w:bookmarkStart")
        start.set(qn("w:id"), "0")
        start.set(qn("w:name"), "BIB_1")
        end = OxmlElement("w:bookmarkEnd")
        end.set(qn("w:id"), "0")
        paragraph._p.append(start)
        paragraph.add_run("[1]")
        paragraph._p.append(end)

        mark = _index(document).bookmarks["BIB_1"]

        assert (mark.start, mark.end) == (2, 5)
