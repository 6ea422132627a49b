"""Linking of citation components to their bibliography anchors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from core.context import RunContext
from core.host import DocumentHost
from core.patterns import PatternLibrary
from modules.error_handler import DocumentEditError
from modules.types import BibliographyAnchor, CitationOccurrence


@dataclass
class BindOutcome:
    """What happened to the components of one occurrence."""
    created: int = 0
    already_present: int = 0
    skipped: int = 0


class LinkBinder:
    """
    Link each component of a citation to the anchor of its first number.

    The component text is searched for again inside the occurrence, starting
    after the previous component, instead of trusting offsets computed by the
    parser. A range such as ``9-14`` becomes one link to entry 9. A component
    that already carries a link to the right anchor is left alone, so binding
    the same document twice creates no new links.
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

    def bind(
        self,
        occurrence: CitationOccurrence,
        anchors: Dict[int, BibliographyAnchor],
    ) -> BindOutcome:
        outcome = BindOutcome()
        span = occurrence.span

        if self.host.text_of(span) != occurrence.text:
            for component in occurrence.components:
                self._skip(outcome, "Citation %s moved before linking; component '%s' skipped",
                           occurrence.text, component.text)
            return outcome

        # Skip the opening bracket
        search_from = span.start + 1
        for component in occurrence.components:
            found = self.host.find(
                self.patterns.literal_pattern(component.text), span, start=search_from
            )
            if found is None:
                self._skip(outcome, "Could not locate '%s' inside citation %s at %d",
                           component.text, occurrence.text, span.start)
                continue
            search_from = found.end

            anchor = anchors.get(component.start)
            if anchor is None:
                self._skip(outcome, "No anchor for citation %d in %s", component.start, occurrence.text)
                continue

            existing = self.host.link_at(found.span)
            if existing is not None and existing.target == anchor.name:
                outcome.already_present += 1
                self.context.count("links_already_present")
                continue

            try:
                self.host.add_link(found.span, anchor.name)
            except DocumentEditError as e:
                self._skip(outcome, "Could not link '%s' in %s: %s", component.text, occurrence.text, e)
                continue

            outcome.created += 1
            self.context.count("links_created")

        return outcome

    def _skip(self, outcome: BindOutcome, message: str, *args: object) -> None:
        outcome.skipped += 1
        self.context.skip("components_skipped", message, *args)


__all__ = [
    "BindOutcome",
    "LinkBinder",
]
