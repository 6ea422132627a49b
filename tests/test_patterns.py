"""Tests for core/patterns.py - Citation pattern library."""

from __future__ import annotations

import pytest

from core.patterns import PatternLibrary


@pytest.fixture
def library() -> PatternLibrary:
    return PatternLibrary()


# ============================================================================
# Citation bracket
# ============================================================================
class TestCitationBracketPattern:
    """Tests for citation_bracket_pattern()."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("see [3].", "[3]"),
            ("see [1,4].", "[1,4]"),
            ("see [1, 4].", "[1, 4]"),
            ("see [3-5].", "[3-5]"),
            ("see [9–14, 23].", "[9–14, 23]"),
        ],
    )
    def test_matches_citations(self, library, text, expected):
        assert library.citation_bracket_pattern().search(text).group() == expected

    @pytest.mark.parametrize("text", ["[a]", "[]", "[-]", "[, ]", "[Fig. 3]", "(3)"])
    def test_ignores_non_citations(self, library, text):
        """Brackets must contain a digit and nothing but citation characters."""
        assert library.citation_bracket_pattern().search(text) is None

    def test_finds_successive_matches(self, library):
        text = "See refs [1] and [3-5]."

        found = [m.group() for m in library.citation_bracket_pattern().finditer(text)]

        assert found == ["[1]", "[3-5]"]

    def test_stable_across_calls(self, library):
        """The same compiled pattern is returned every time."""
        assert library.citation_bracket_pattern() is library.citation_bracket_pattern()

    def test_custom_separator(self):
        """Separators come from configuration, not from the pattern text."""
        library = PatternLibrary(range_separators=("~",))

        assert library.citation_bracket_pattern().search("[3~5]").group() == "[3~5]"
        assert library.citation_bracket_pattern().search("[3-5]") is None


# ============================================================================
# Components
# ============================================================================
class TestComponentPattern:
    """Tests for component_pattern()."""

    def test_single_number(self, library):
        match = library.component_pattern().match("23")

        assert match.group(1) == "23"
        assert match.group(2) is None

    @pytest.mark.parametrize("text", ["9-14", "9–14", "9 - 14", "9 – 14"])
    def test_range(self, library, text):
        """Hyphen and en dash, with or without spaces, give the same range."""
        match = library.component_pattern().match(text)

        assert (match.group(1), match.group(2)) == ("9", "14")
        assert match.group(0) == text

    def test_all_components(self, library):
        found = [m.group(0) for m in library.component_pattern().finditer("9-14, 23")]

        assert found == ["9-14", "23"]


# ============================================================================
# Bibliography entry marker
# ============================================================================
class TestBibliographyEntryMarkerPattern:
    """Tests for bibliography_entry_marker_pattern()."""

    def test_entry_line(self, library):
        match = library.bibliography_entry_marker_pattern().match("[12]\tSmith, J. 2019.")

        assert match.group(1) == "12"

    def test_leading_page_break(self, library):
        """A page break before the marker is allowed."""
        assert library.bibliography_entry_marker_pattern().match("\x0c[3]\tJones").group(1) == "3"

    @pytest.mark.parametrize("text", ["[12] Smith", "Smith [12]\t", " [12]\tSmith", "[1-2]\tX"])
    def test_rejects_non_entries(self, library, text):
        """The marker must open the line and be followed by a tab."""
        assert library.bibliography_entry_marker_pattern().match(text) is None


# ============================================================================
# Strict display and literals
# ============================================================================
class TestStrictDisplayPattern:
    """Tests for strict_display_pattern()."""

    @pytest.mark.parametrize("text", ["[7]", "[1,4]", "[1, 4]", "[9-14]", "[9–14, 23]"])
    def test_accepts(self, library, text):
        assert library.strict_display_pattern().fullmatch(text)

    @pytest.mark.parametrize("text", ["[7", "[7,]", "[,7]", "[7]x", "[1,  4]"])
    def test_rejects(self, library, text):
        assert library.strict_display_pattern().fullmatch(text) is None


class TestLiteralPatterns:
    """Tests for literal_pattern() and entry_literal_pattern()."""

    def test_literal_not_part_of_longer_number(self):
        pattern = PatternLibrary.literal_pattern("1")

        assert pattern.search("[12, 1]").start() == 5

    def test_literal_escapes(self):
        assert PatternLibrary.literal_pattern("3-5").search("[3-5]").group() == "3-5"

    def test_entry_literal(self):
        assert PatternLibrary.entry_literal_pattern(4).search("x [4]\tY").start() == 2


class TestPatternLibrary:
    """Tests for PatternLibrary construction."""

    def test_requires_separator(self):
        with pytest.raises(ValueError):
            PatternLibrary(range_separators=())

    def test_list_stored_as_tuple(self):
        library = PatternLibrary(range_separators=["-"])

        assert library.range_separators == ("-",)
        assert hash(library) == hash(PatternLibrary(range_separators=("-",)))
