"""Decomposition of bracket contents into citation components."""

from __future__ import annotations

from typing import Iterable, List, Optional

from core.context import RunContext
from core.patterns import PatternLibrary
from modules.constants import INVERTED_RANGE_STRICT
from modules.error_handler import InvertedRangeError
from modules.types import CitationComponent


class CitationParser:
    """
    Split the text between citation brackets into components.

    ``"9-14, 23"`` yields the range 9..14 followed by the single number 23.
    Components come back in the order they are written and duplicates are kept.

    A range written backwards (``"9-3"``) is handled by the configured policy:
    with ``degrade`` it becomes the single number 9 and a warning is logged,
    with ``strict`` InvertedRangeError aborts the run. Zero is not a citation
    number, and a range wider than ``max_range_span`` is not a plausible
    citation; both kinds of component are skipped and counted.
    """

    def __init__(self, patterns: PatternLibrary, context: Optional[RunContext] = None) -> None:
        self.patterns = patterns
        self.context = context or RunContext()

    def parse(self, content: str) -> List[CitationComponent]:
        """Parse bracket contents (without the outer brackets)."""
        components: List[CitationComponent] = []
        if not content:
            return components

        for match in self.patterns.component_pattern().finditer(content):
            start = int(match.group(1))
            end = int(match.group(2)) if match.group(2) is not None else start
            literal = match.group(0)

            if start <= 0 or end <= 0:
                self.context.skip(
                    "components_skipped",
                    "Skipped citation component '%s': citation numbers start at 1",
                    literal,
                )
                continue

            if end < start:
                if self.context.config.inverted_range_policy == INVERTED_RANGE_STRICT:
                    raise InvertedRangeError(literal)
                self.context.logger.warning(
                    "Inverted range '%s' treated as the single citation %d", literal, start
                )
                end = start

            if end - start + 1 > self.context.config.max_range_span:
                self.context.skip(
                    "components_skipped",
                    "Skipped citation component '%s': range covers more than %d numbers",
                    literal,
                    self.context.config.max_range_span,
                )
                continue

            components.append(CitationComponent(start=start, end=end, text=literal))

        return components

    @staticmethod
    def expand(components: Iterable[CitationComponent]) -> set[int]:
        """All citation numbers covered by the components."""
        numbers: set[int] = set()
        for component in components:
            numbers.update(component.numbers())
        return numbers


__all__ = [
    "CitationParser",
]
