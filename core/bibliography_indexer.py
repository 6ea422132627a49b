"""Anchoring of numbered bibliography entries.

Every bibliography paragraph that starts with ``[n]`` followed by a tab gets an
anchor named ``<PREFIX>_<n>`` around exactly the ``[n]`` literal. Anchors owned
by the naming convention are purged before indexing, which makes reruns safe.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from core.context import RunContext
from core.host import AnchorStore, DocumentHost
from core.patterns import PatternLibrary
from modules.error_handler import DocumentEditError
from modules.types import BibliographyAnchor, TextRange


# ============================================================================
# Anchor Naming
# ============================================================================
class AnchorNaming:
    """The ``PREFIX_<number>`` convention used to recognize owned anchors."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._owned = re.compile(rf"^{re.escape(prefix)}_(\d+)$")

    def name_for(self, number: int) -> str:
        return f"{self.prefix}_{number}"

    def number_from(self, name: str) -> Optional[int]:
        match = self._owned.match(name or "")
        return int(match.group(1)) if match else None

    def owns(self, name: str) -> bool:
        return self.number_from(name) is not None

    @property
    def link_prefix(self) -> str:
        """Prefix shared by the targets of every owned link."""
        return f"{self.prefix}_"


def purge_anchors(store: AnchorStore, naming: AnchorNaming, context: RunContext) -> int:
    """Delete every anchor the naming convention owns. Returns the count."""
    removed = 0
    for name in store.list_anchors():
        if naming.owns(name) and store.delete_anchor(name):
            removed += 1
    if removed:
        context.info("Purged %d anchors from an earlier run", removed)
    context.count("anchors_purged", removed)
    return removed


# ============================================================================
# Bibliography Indexer
# ============================================================================
class BibliographyIndexer:
    """
    Bind each bibliography entry number to an anchor around its ``[n]`` marker.

    Entries are skipped (logged and counted, never raised) when the number is
    not positive, when it repeats an earlier entry (the first one wins), when
    an anchor with the same name already exists, or when the ``[n]`` literal
    cannot be found again inside the paragraph.
    """

    def __init__(
        self,
        host: DocumentHost,
        patterns: PatternLibrary,
        naming: AnchorNaming,
        context: RunContext,
    ) -> None:
        self.host = host
        self.patterns = patterns
        self.naming = naming
        self.context = context

    def index(self, bibliography_range: TextRange) -> Dict[int, BibliographyAnchor]:
        anchors: Dict[int, BibliographyAnchor] = {}
        marker = self.patterns.bibliography_entry_marker_pattern()

        for paragraph in self.host.paragraphs(bibliography_range):
            if not paragraph.text.strip():
                continue

            match = marker.match(paragraph.text)
            if match is None:
                self.context.skip(
                    "entries_skipped",
                    "Bibliography paragraph %d has no [n]<tab> entry marker: %.40r",
                    paragraph.index,
                    paragraph.text,
                )
                continue

            number = int(match.group(1))
            if number <= 0:
                self.context.skip(
                    "entries_skipped", "Bibliography entry [%d] is not a valid number", number
                )
                continue
            if number in anchors:
                self.context.skip(
                    "entries_skipped",
                    "Duplicate bibliography entry [%d] in paragraph %d; keeping the first",
                    number,
                    paragraph.index,
                )
                continue

            name = self.naming.name_for(number)
            if self.host.anchor_exists(name):
                self.context.skip(
                    "entries_skipped", "Anchor %s already exists; entry [%d] skipped", name, number
                )
                continue

            # The marker match offset is not reused: find the literal again
            literal = self.host.find(self.patterns.entry_literal_pattern(number), paragraph.span)
            if literal is None:
                self.context.skip(
                    "entries_skipped",
                    "Could not locate [%d] in bibliography paragraph %d",
                    number,
                    paragraph.index,
                )
                continue

            try:
                self.host.add_anchor(name, literal.span)
            except DocumentEditError as e:
                self.context.skip(
                    "entries_skipped", "Could not anchor entry [%d]: %s", number, e
                )
                continue

            anchors[number] = BibliographyAnchor(number=number, name=name, span=literal.span)
            self.context.count("anchors_created")

        self.context.debug(
            "Indexed %d bibliography entries in %s", len(anchors), bibliography_range
        )
        return anchors


__all__ = [
    "AnchorNaming",
    "purge_anchors",
    "BibliographyIndexer",
]
