"""Forward, non-overlapping scanning for bracket citations.

MatchCursor is the search loop shared by the scanner and by field recovery:
it asks the host for the next match from the current position and moves to
the end offset the host returned for that match. A match that would not move
the cursor forward raises SearchStalledError, and more matches than the
configured cap raise IterationCapError; both abort the run.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from core.citation_parser import CitationParser
from core.context import RunContext
from core.host import TextSource
from core.patterns import PatternLibrary
from modules.error_handler import IterationCapError, SearchStalledError
from modules.types import CitationOccurrence, TextMatch, TextRange


# ============================================================================
# Match Cursor
# ============================================================================
class MatchCursor:
    """
    Lazy iterator over successive matches of a pattern inside a range.

    Example:
        >>> cursor = MatchCursor(host, pattern, host.document_range(), max_matches=100)
        >>> for match in cursor:
        ...     new_end = replace(match)  # mutate the document
        ...     cursor.advance_to(new_end, new_end - match.end)
    """

    def __init__(
        self,
        source: TextSource,
        pattern: re.Pattern,
        within: TextRange,
        max_matches: int,
    ) -> None:
        self.source = source
        self.pattern = pattern
        self.position = within.start
        self.limit = within.end
        self.max_matches = max_matches
        self.matches = 0
        self._last_start: Optional[int] = None

    def __iter__(self) -> MatchCursor:
        return self

    def __next__(self) -> TextMatch:
        if self.position > self.limit:
            raise StopIteration

        match = self.source.find(
            self.pattern, TextRange(self.position, self.limit), start=self.position
        )
        if match is None:
            raise StopIteration

        if match.end <= self.position or match.start < self.position:
            raise SearchStalledError(self.position)

        self.matches += 1
        if self.matches > self.max_matches:
            raise IterationCapError(self.max_matches)

        self._last_start = match.start
        self.position = match.end
        return match

    def advance_to(self, offset: int, length_delta: int = 0) -> None:
        """
        Continue from ``offset`` after the last match was edited in place.

        Args:
            offset: End of the edited text, as returned by the edit itself
            length_delta: Change in document length caused by the edit
        """
        if self._last_start is None or offset <= self._last_start:
            raise SearchStalledError(self.position)
        self.limit += length_delta
        self.position = offset


# ============================================================================
# Citation Scanner
# ============================================================================
class CitationScanner:
    """
    Yield every bracket citation in a range, left to right, with its components.

    Citations overlapping the bibliography range are skipped and counted as
    excluded. Brackets whose content yields no component are still yielded,
    with an empty component tuple.
    """

    def __init__(
        self,
        source: TextSource,
        patterns: PatternLibrary,
        parser: CitationParser,
        context: RunContext,
    ) -> None:
        self.source = source
        self.patterns = patterns
        self.parser = parser
        self.context = context

    def scan(
        self,
        document_range: TextRange,
        bibliography_range: Optional[TextRange] = None,
    ) -> Iterator[CitationOccurrence]:
        cursor = MatchCursor(
            self.source,
            self.patterns.citation_bracket_pattern(),
            document_range,
            self.context.config.max_scan_matches,
        )
        for match in cursor:
            span = match.span
            if bibliography_range is not None and span.overlaps(bibliography_range):
                self.context.count("occurrences_excluded")
                continue

            self.context.count("occurrences_scanned")
            components = self.parser.parse(match.text[1:-1])
            self.context.count("components_found", len(components))
            if not components:
                self.context.debug("Citation %s at %d has no usable component", match.text, span.start)

            yield CitationOccurrence(span=span, text=match.text, components=tuple(components))


__all__ = [
    "MatchCursor",
    "CitationScanner",
]
