"""Regular expressions for numeric bracket citations.

Range separators are configuration data (hyphen and en dash by default): every
pattern is built from the escaped separator list rather than spelling a dash
out in the pattern text.

Patterns built here:
- citation bracket: ``[`` digits, commas, spaces and separators ``]`` with at
  least one digit, the coarse locator used for forward scanning
- component: one number, optionally followed by a separator and a second number
- bibliography entry marker: at paragraph start an optional page break, then
  ``[n]`` and a tab
- strict display: the whole string must be a well-formed citation
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Tuple

from modules.constants import DEFAULT_RANGE_SEPARATORS, PAGE_BREAK_MARKER


@dataclass(frozen=True)
class PatternLibrary:
    """Citation patterns for one set of range separators.

    Instances are immutable; each compiled pattern is built on first use and
    reused afterwards.

    Example:
        >>> library = PatternLibrary()
        >>> library.citation_bracket_pattern().search("see [9–14, 23].").group()
        '[9–14, 23]'
    """
    range_separators: Tuple[str, ...] = DEFAULT_RANGE_SEPARATORS

    def __post_init__(self) -> None:
        if not self.range_separators:
            raise ValueError("At least one range separator is required")
        # Accept any iterable of strings but store a tuple so instances hash
        object.__setattr__(self, "range_separators", tuple(self.range_separators))

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    @cached_property
    def separator_alternation(self) -> str:
        """Non-capturing group matching any one separator, longest first."""
        ordered = sorted(set(self.range_separators), key=len, reverse=True)
        return "(?:" + "|".join(re.escape(sep) for sep in ordered) + ")"

    @cached_property
    def _bracket_chars(self) -> str:
        separator_chars = sorted(set("".join(self.range_separators)))
        return r"\d, " + "".join(re.escape(ch) for ch in separator_chars)

    @cached_property
    def _component_source(self) -> str:
        return rf"(\d+)(?:\s*{self.separator_alternation}\s*(\d+))?"

    # ------------------------------------------------------------------
    # Public patterns
    # ------------------------------------------------------------------
    @cached_property
    def _citation_bracket(self) -> re.Pattern:
        chars = self._bracket_chars
        return re.compile(rf"\[(?=[{chars}]*\d)[{chars}]+\]")

    @cached_property
    def _component(self) -> re.Pattern:
        return re.compile(self._component_source)

    @cached_property
    def _entry_marker(self) -> re.Pattern:
        return re.compile(rf"^{re.escape(PAGE_BREAK_MARKER)}?\[(\d+)\]\t")

    @cached_property
    def _strict_display(self) -> re.Pattern:
        component = rf"\d+(?:\s*{self.separator_alternation}\s*\d+)?"
        return re.compile(rf"\[{component}(?:,\s?{component})*\]")

    def citation_bracket_pattern(self) -> re.Pattern:
        return self._citation_bracket

    def component_pattern(self) -> re.Pattern:
        """Group 1 is the start number, group 2 the optional end number."""
        return self._component

    def bibliography_entry_marker_pattern(self) -> re.Pattern:
        """Group 1 is the entry number. Use with ``match`` on paragraph text."""
        return self._entry_marker

    def strict_display_pattern(self) -> re.Pattern:
        """Use with ``fullmatch``; a string merely containing a citation fails."""
        return self._strict_display

    # ------------------------------------------------------------------
    # Literal search patterns
    # ------------------------------------------------------------------
    @staticmethod
    def literal_pattern(literal: str) -> re.Pattern:
        """Exact text that is not part of a longer number (``"1"`` skips ``"12"``)."""
        return re.compile(rf"(?<!\d){re.escape(literal)}(?!\d)")

    @staticmethod
    def entry_literal_pattern(number: int) -> re.Pattern:
        """The literal ``[n]`` of a bibliography entry."""
        return re.compile(rf"\[{number}\]")


__all__ = [
    "PatternLibrary",
]
