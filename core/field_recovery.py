"""Restoring plain-text citations to reference manager fields.

When a document is edited outside the reference manager (or pasted as plain
text), citations like ``[7]`` lose their field and with it the metadata the
manager needs. Any field still present elsewhere in the document with the same
rendered text is copied back over the plain-text citation.
"""

from __future__ import annotations

from typing import List, Optional

from core.citation_scanner import MatchCursor
from core.context import RunContext
from core.host import DocumentHost
from core.patterns import PatternLibrary
from modules.error_handler import DocumentEditError
from modules.types import (
    CitationDisplay,
    FieldRecoveryMap,
    RecoveryReport,
    TextRange,
)


class FieldRecoveryMatcher:
    """
    Replace plain-text citations in a region with copies of matching fields.

    Only fields whose code contains the configured marker (``CSL_CITATION`` by
    default) and whose rendered text is a well-formed citation are used; when
    several fields render the same text, the first one in the document is used.
    Brackets that already sit inside a field result are not plain-text
    citations and are ignored. Every other bracket is either replaced or
    reported as unmatched and left untouched.
    """

    def __init__(
        self,
        host: DocumentHost,
        patterns: PatternLibrary,
        context: RunContext,
    ) -> None:
        self.host = host
        self.patterns = patterns
        self.context = context

    def build_map(self, report: Optional[RecoveryReport] = None) -> FieldRecoveryMap:
        marker = self.context.config.citation_field_marker
        grammar = self.patterns.strict_display_pattern()
        field_map = FieldRecoveryMap()

        for source in self.host.list_fields():
            if marker not in source.code:
                continue
            try:
                display = CitationDisplay(source.display, grammar)
            except ValueError:
                self.context.debug("Ignoring citation field with display %r", source.display)
                if report is not None:
                    report.invalid_displays += 1
                continue
            if not field_map.add(display, source) and report is not None:
                report.duplicate_displays += 1

        if report is not None:
            report.fields_mapped = len(field_map)
        self.context.debug("Mapped %d citation displays to fields", len(field_map))
        return field_map

    def recover(self, sub_range: TextRange) -> RecoveryReport:
        report = RecoveryReport(region=sub_range)
        field_map = self.build_map(report)

        cursor = MatchCursor(
            self.host,
            self.patterns.citation_bracket_pattern(),
            sub_range,
            self.context.config.max_scan_matches,
        )
        for match in cursor:
            if self._inside_field(match.span):
                continue

            report.matches += 1
            source = field_map.lookup(match.text)
            if source is None:
                self._unmatched(report, match.text, "no citation field renders this text")
                continue

            try:
                replaced = self.host.duplicate_field(source, match.span)
            except DocumentEditError as e:
                self._unmatched(report, match.text, f"field copy failed: {e}")
                continue

            report.replaced += 1
            self.context.count("fields_replaced")
            cursor.advance_to(replaced.end, replaced.end - match.end)

        report.notes.extend(self.context.notes)
        return report

    def _inside_field(self, span: TextRange) -> bool:
        results: List[TextRange] = [field.result_range for field in self.host.list_fields()]
        return any(result.overlaps(span) for result in results)

    def _unmatched(self, report: RecoveryReport, text: str, reason: str) -> None:
        report.unmatched.append(text)
        self.context.count("fields_unmatched")
        self.context.logger.warning("Unmatched citation %s: %s", text, reason)


__all__ = [
    "FieldRecoveryMatcher",
]
