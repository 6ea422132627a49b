"""Orchestration of a complete linking run over one document.

The main flow is: locate the bibliography, purge anchors left by earlier runs,
anchor the bibliography entries, scan the body for citations, check that every
cited number has an entry, and only then create the links. A fatal condition
stops the run immediately; edits already made stay in place and the partial
report is attached to the raised error.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from core.bibliography_indexer import AnchorNaming, BibliographyIndexer, purge_anchors
from core.citation_parser import CitationParser
from core.citation_scanner import CitationScanner
from core.context import RunContext
from core.field_recovery import FieldRecoveryMatcher
from core.host import BibliographyLocator, DocumentHost
from core.link_binder import LinkBinder
from core.patterns import PatternLibrary
from core.validation_gate import ValidationGate
from modules.error_handler import (
    BibliographyNotFoundError,
    EmptyBibliographyError,
    FatalLinkingError,
)
from modules.types import (
    BibliographyAnchor,
    CitationOccurrence,
    LinkingConfig,
    LinkingReport,
    RecoveryReport,
    TextRange,
    UnlinkReport,
)


class CitationLinker:
    """
    Run the citation engine against one document host.

    Example:
        >>> linker = CitationLinker(host, DocxBibliographyLocator(config), config)
        >>> report = linker.run()
        >>> report.links_created
        12
    """

    def __init__(
        self,
        host: DocumentHost,
        locator: BibliographyLocator,
        config: Optional[LinkingConfig] = None,
        context: Optional[RunContext] = None,
    ) -> None:
        self.host = host
        self.locator = locator
        self.context = context or RunContext.for_document(host.name, config)
        self.config = self.context.config

        self.patterns = PatternLibrary(self.config.range_separators)
        self.naming = AnchorNaming(self.config.anchor_prefix)
        self.parser = CitationParser(self.patterns, self.context)
        self.scanner = CitationScanner(host, self.patterns, self.parser, self.context)
        self.indexer = BibliographyIndexer(host, self.patterns, self.naming, self.context)
        self.gate = ValidationGate()
        self.binder = LinkBinder(host, self.patterns, self.context)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def run(self) -> LinkingReport:
        """
        Anchor the bibliography and link every citation to its entry.

        Raises:
            FatalLinkingError: On any abort condition, with ``report`` attached
        """
        report = LinkingReport(document=self.host.name)
        try:
            anchors, occurrences = self._prepare(report, enforce=True)
            # Links add no text, so the spans collected above stay valid
            for occurrence in occurrences:
                self.binder.bind(occurrence, anchors)
        except FatalLinkingError as e:
            self._abort(report, e)
            raise

        self._fill_report(report)
        self.context.info(
            "Linked %d citation components (%d already linked, %d skipped)",
            report.links_created,
            report.links_already_present,
            report.components_skipped,
        )
        return report

    def check(self) -> LinkingReport:
        """
        Anchor the bibliography and validate citations without linking.

        Orphans are returned in the report instead of raised. Anchors are
        recreated in the document, so callers that must not change the file
        simply do not save it.

        Raises:
            FatalLinkingError: For every abort condition except orphans
        """
        report = LinkingReport(document=self.host.name)
        try:
            self._prepare(report, enforce=False)
        except FatalLinkingError as e:
            self._abort(report, e)
            raise
        self._fill_report(report)
        return report

    def recover(self, region: Optional[TextRange] = None) -> RecoveryReport:
        """Restore plain-text citations in ``region`` (whole document if None)."""
        document_range = self.host.document_range()
        if region is not None and not document_range.contains(region):
            self.context.logger.warning(
                "Region %d-%d extends past the document end %d; clamped",
                region.start,
                region.end,
                document_range.end,
            )
        sub_range = document_range.narrow(region.start, region.end) if region else document_range
        matcher = FieldRecoveryMatcher(self.host, self.patterns, self.context)
        try:
            report = matcher.recover(sub_range)
        except FatalLinkingError as e:
            e.report = RecoveryReport(
                document=self.host.name, region=sub_range, aborted=e.condition
            )
            raise
        report.document = self.host.name
        self.context.info(
            "Restored %d of %d citations (%d unmatched)",
            report.replaced,
            report.matches,
            report.unmatched_count,
        )
        return report

    def unlink(self) -> UnlinkReport:
        """Remove every link and anchor created by earlier runs."""
        report = UnlinkReport(document=self.host.name)

        for link in self.host.links_with_prefix(self.naming.link_prefix):
            if self.naming.owns(link.target):
                self.host.delete_link(link)
                report.links_removed += 1
        self.context.count("links_removed", report.links_removed)

        report.anchors_removed = purge_anchors(self.host, self.naming, self.context)
        report.notes.extend(self.context.notes)
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _prepare(
        self,
        report: LinkingReport,
        enforce: bool,
    ) -> Tuple[Dict[int, BibliographyAnchor], List[CitationOccurrence]]:
        purge_anchors(self.host, self.naming, self.context)

        bibliography = self.locator.locate(self.host)
        report.bibliography_range = bibliography
        anchors: Dict[int, BibliographyAnchor] = {}

        if bibliography is None:
            if self.config.require_bibliography:
                raise BibliographyNotFoundError(
                    f"No bibliography found in '{self.host.name or 'document'}'"
                )
            self.context.logger.warning("No bibliography found; every citation will be an orphan")
        else:
            anchors = self.indexer.index(bibliography)
            if not anchors and self.config.require_bibliography_entries:
                raise EmptyBibliographyError(
                    "The bibliography contains no numbered [n]<tab> entries"
                )

        occurrences = list(self.scanner.scan(self.host.document_range(), bibliography))
        referenced = self.gate.referenced_numbers(occurrences)
        report.orphans = self.gate.find_orphans(referenced, anchors)
        report.uncited = sorted(set(anchors) - referenced)

        if report.uncited:
            self.context.info("Bibliography entries never cited: %s", report.uncited)
        if enforce:
            self.gate.enforce(referenced, anchors)
        return anchors, occurrences

    def _abort(self, report: LinkingReport, error: FatalLinkingError) -> None:
        self._fill_report(report)
        report.aborted = error.condition
        error.report = report

    def _fill_report(self, report: LinkingReport) -> None:
        counters = self.context.counters
        report.anchors_purged = counters.anchors_purged
        report.anchors_created = counters.anchors_created
        report.entries_skipped = counters.entries_skipped
        report.occurrences_scanned = counters.occurrences_scanned
        report.occurrences_excluded = counters.occurrences_excluded
        report.components_found = counters.components_found
        report.components_skipped = counters.components_skipped
        report.links_created = counters.links_created
        report.links_already_present = counters.links_already_present
        report.notes = list(self.context.notes)


__all__ = [
    "CitationLinker",
]
