"""Orphan detection between cited numbers and bibliography anchors."""

from __future__ import annotations

from typing import Iterable, List

from modules.error_handler import OrphanCitationError
from modules.types import CitationOccurrence


class ValidationGate:
    """
    All-or-nothing check run before any link is created.

    Every number reachable from a citation in the body must have an anchor.
    Adding anchors can only shrink the orphan list.
    """

    @staticmethod
    def referenced_numbers(occurrences: Iterable[CitationOccurrence]) -> set[int]:
        referenced: set[int] = set()
        for occurrence in occurrences:
            referenced.update(occurrence.numbers())
        return referenced

    @staticmethod
    def find_orphans(referenced: Iterable[int], anchor_keys: Iterable[int]) -> List[int]:
        """Referenced numbers without an anchor, ascending."""
        return sorted(set(referenced) - set(anchor_keys))

    def enforce(self, referenced: Iterable[int], anchor_keys: Iterable[int]) -> None:
        """
        Raise if any referenced number has no anchor.

        Raises:
            OrphanCitationError: Listing every orphan number
        """
        orphans = self.find_orphans(referenced, anchor_keys)
        if orphans:
            raise OrphanCitationError(orphans)


__all__ = [
    "ValidationGate",
]
