"""Type definitions and data structures for CiteAnchor.

This module provides validated value types for the citation engine and the
typed maps, handles and reports that flow between the engine and its host.
Construction rejects invalid values at the boundary (non-positive citation
numbers, inverted spans, display strings outside the citation grammar), so the
rest of the code can rely on them.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from modules.constants import (
    DEFAULT_ANCHOR_PREFIX,
    DEFAULT_BIBLIOGRAPHY_FIELD_MARKERS,
    DEFAULT_BIBLIOGRAPHY_HEADINGS,
    DEFAULT_CITATION_FIELD_MARKER,
    DEFAULT_HYPERLINK_STYLE,
    DEFAULT_MAX_RANGE_SPAN,
    DEFAULT_MAX_SCAN_MATCHES,
    DEFAULT_RANGE_SEPARATORS,
    INVERTED_RANGE_DEGRADE,
    INVERTED_RANGE_POLICIES,
    MAX_BOOKMARK_NAME_LENGTH,
)
from modules.error_handler import ConfigurationError, validate_config_value

# Bookmark names start with a letter and contain letters, digits and underscores
_ANCHOR_PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


# ============================================================================
# Text Spans
# ============================================================================
@dataclass(frozen=True)
class TextRange:
    """Half-open character span ``[start, end)`` over a document's flat text."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid text range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, other: TextRange | int) -> bool:
        """Return True if an offset or a whole range lies inside this range."""
        if isinstance(other, TextRange):
            return self.start <= other.start and other.end <= self.end
        return self.start <= other < self.end

    def overlaps(self, other: TextRange) -> bool:
        """Return True if the two ranges share at least one character."""
        return self.start < other.end and other.start < self.end

    def narrow(self, start: Optional[int] = None, end: Optional[int] = None) -> TextRange:
        """Return a sub-range clamped to this range, leaving this one untouched."""
        new_start = self.start if start is None else min(max(start, self.start), self.end)
        new_end = self.end if end is None else min(max(end, new_start), self.end)
        return TextRange(new_start, new_end)


@dataclass(frozen=True)
class TextMatch:
    """A search hit; ``end`` is the post-match offset the cursor advances to."""
    start: int
    end: int
    text: str

    @property
    def span(self) -> TextRange:
        return TextRange(self.start, self.end)


# ============================================================================
# Citation Values
# ============================================================================
def validate_citation_number(value: Any) -> int:
    """
    Return value as a citation number, rejecting anything but a positive integer.

    Raises:
        ValueError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Citation number must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"Citation number must be positive, got {value}")
    return value


@dataclass(frozen=True)
class CitationComponent:
    """A single cited number or a closed range ``start..end`` inside brackets.

    ``text`` is the literal as written (e.g. ``"9-14"`` or ``"9 – 14"``), which
    is what gets re-located in the document when the component is linked.
    """
    start: int
    end: int
    text: str

    def __post_init__(self) -> None:
        validate_citation_number(self.start)
        validate_citation_number(self.end)
        if self.end < self.start:
            raise ValueError(f"Component range {self.start}-{self.end} is inverted")

    @property
    def is_range(self) -> bool:
        return self.end != self.start

    def numbers(self) -> range:
        return range(self.start, self.end + 1)


@dataclass(frozen=True)
class CitationOccurrence:
    """A bracket citation found in the body text with its parsed components."""
    span: TextRange
    text: str
    components: Tuple[CitationComponent, ...] = ()

    def numbers(self) -> set[int]:
        found: set[int] = set()
        for component in self.components:
            found.update(component.numbers())
        return found


@dataclass(frozen=True)
class BibliographyAnchor:
    """Named anchor placed exactly around the ``[n]`` literal of an entry."""
    number: int
    name: str
    span: TextRange


@dataclass(frozen=True)
class CitationDisplay:
    """A citation display string such as ``"[9-14]"``.

    The string must match ``grammar`` as a whole; partial matches are rejected.
    Equality and hashing use the display value only.
    """
    value: str
    grammar: re.Pattern = field(compare=False, repr=False, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.grammar.fullmatch(self.value):
            raise ValueError(f"Not a citation display string: {self.value!r}")

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Host Handles
# ============================================================================
@dataclass(frozen=True)
class ParagraphView:
    """One paragraph of the flat text view, without its paragraph mark."""
    index: int
    span: TextRange
    text: str


@dataclass(frozen=True)
class FieldHandle:
    """A field in the document: its instruction code and rendered result.

    ``ref`` is host specific; the docx host keeps the XML elements of the
    field there. ``result_range`` is only valid until the next mutation.
    """
    code: str
    display: str
    result_range: TextRange
    ref: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class LinkHandle:
    """An internal hyperlink and the anchor name it points at."""
    target: str
    span: TextRange
    ref: Any = field(default=None, compare=False, repr=False)


class FieldRecoveryMap:
    """Display string to field map; the first field registered per display wins."""

    def __init__(self) -> None:
        self._fields: Dict[str, FieldHandle] = {}

    def add(self, display: CitationDisplay, source: FieldHandle) -> bool:
        """Register a field. Returns False if the display was already mapped."""
        if display.value in self._fields:
            return False
        self._fields[display.value] = source
        return True

    def lookup(self, text: str) -> Optional[FieldHandle]:
        return self._fields.get(text)

    def __contains__(self, text: object) -> bool:
        return text in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)


# ============================================================================
# Configuration Data Classes
# ============================================================================
def _as_str_tuple(value: Any, name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        value = [value]
    validate_config_value(value, (list, tuple), name)
    items = tuple(str(item) for item in value if str(item))
    if not items:
        raise ConfigurationError(f"Invalid configuration for '{name}': list is empty")
    return items


@dataclass(frozen=True)
class LinkingConfig:
    """Configuration for one linking or recovery run."""
    anchor_prefix: str = DEFAULT_ANCHOR_PREFIX
    range_separators: Tuple[str, ...] = DEFAULT_RANGE_SEPARATORS
    inverted_range_policy: str = INVERTED_RANGE_DEGRADE
    max_scan_matches: int = DEFAULT_MAX_SCAN_MATCHES
    max_range_span: int = DEFAULT_MAX_RANGE_SPAN
    require_bibliography: bool = True
    require_bibliography_entries: bool = True
    citation_field_marker: str = DEFAULT_CITATION_FIELD_MARKER
    bibliography_field_markers: Tuple[str, ...] = DEFAULT_BIBLIOGRAPHY_FIELD_MARKERS
    bibliography_headings: Tuple[str, ...] = DEFAULT_BIBLIOGRAPHY_HEADINGS
    hyperlink_style: Optional[str] = DEFAULT_HYPERLINK_STYLE

    def __post_init__(self) -> None:
        if not _ANCHOR_PREFIX_RE.match(self.anchor_prefix or ""):
            raise ConfigurationError(
                f"Invalid anchor prefix '{self.anchor_prefix}': must start with a letter "
                "and contain only letters, digits and underscores"
            )
        # Leave room for "_" and a citation number of up to 9 digits
        if len(self.anchor_prefix) > MAX_BOOKMARK_NAME_LENGTH - 10:
            raise ConfigurationError(
                f"Anchor prefix '{self.anchor_prefix}' is too long for a bookmark name"
            )
        if self.inverted_range_policy not in INVERTED_RANGE_POLICIES:
            raise ConfigurationError(
                f"Unknown inverted_range_policy '{self.inverted_range_policy}'. "
                f"Expected one of: {', '.join(sorted(INVERTED_RANGE_POLICIES))}"
            )
        validate_config_value(self.max_scan_matches, int, "max_scan_matches")
        if self.max_scan_matches <= 0:
            raise ConfigurationError("max_scan_matches must be a positive integer")
        validate_config_value(self.max_range_span, int, "max_range_span")
        if self.max_range_span <= 0:
            raise ConfigurationError("max_range_span must be a positive integer")
        if not self.range_separators or any(not sep for sep in self.range_separators):
            raise ConfigurationError("range_separators must list at least one non-empty string")
        if any(ch.isdigit() or ch in ",[]" for sep in self.range_separators for ch in sep):
            raise ConfigurationError(
                "range_separators must not contain digits, commas or brackets"
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> LinkingConfig:
        """Create LinkingConfig from configuration dictionary."""
        config = config or {}
        bibliography = config.get("bibliography", {})
        if not isinstance(bibliography, dict):
            bibliography = {}

        style = config.get("hyperlink_style", DEFAULT_HYPERLINK_STYLE)

        require_bib = config.get("require_bibliography", True)
        require_entries = config.get("require_bibliography_entries", True)
        validate_config_value(require_bib, bool, "require_bibliography")
        validate_config_value(require_entries, bool, "require_bibliography_entries")

        return cls(
            anchor_prefix=str(config.get("anchor_prefix", DEFAULT_ANCHOR_PREFIX)),
            range_separators=_as_str_tuple(
                config.get("range_separators"), "range_separators", DEFAULT_RANGE_SEPARATORS
            ),
            inverted_range_policy=str(
                config.get("inverted_range_policy", INVERTED_RANGE_DEGRADE)
            ).lower(),
            max_scan_matches=config.get("max_scan_matches", DEFAULT_MAX_SCAN_MATCHES),
            max_range_span=config.get("max_range_span", DEFAULT_MAX_RANGE_SPAN),
            require_bibliography=require_bib,
            require_bibliography_entries=require_entries,
            citation_field_marker=str(
                config.get("citation_field_marker", DEFAULT_CITATION_FIELD_MARKER)
            ),
            bibliography_field_markers=_as_str_tuple(
                bibliography.get("field_markers"),
                "bibliography.field_markers",
                DEFAULT_BIBLIOGRAPHY_FIELD_MARKERS,
            ),
            bibliography_headings=_as_str_tuple(
                bibliography.get("headings"),
                "bibliography.headings",
                DEFAULT_BIBLIOGRAPHY_HEADINGS,
            ),
            hyperlink_style=str(style) if style else None,
        )


# ============================================================================
# Processing Data Classes
# ============================================================================
@dataclass(frozen=True)
class ItemSpec:
    """Descriptor for a Word document to process."""
    kind: str  # "docx"
    path: Path

    @property
    def output_stem(self) -> str:
        """Get the output filename stem."""
        return self.path.stem

    def display_label(self) -> str:
        """Generate a human-readable display label."""
        return f"Word document: {self.path.name} (from: {self.path.parent})"


# ============================================================================
# Run Reports
# ============================================================================
@dataclass
class LinkingReport:
    """Result of a link or check run over one document."""
    document: str = ""
    bibliography_range: Optional[TextRange] = None
    anchors_purged: int = 0
    anchors_created: int = 0
    entries_skipped: int = 0
    occurrences_scanned: int = 0
    occurrences_excluded: int = 0
    components_found: int = 0
    components_skipped: int = 0
    links_created: int = 0
    links_already_present: int = 0
    orphans: List[int] = field(default_factory=list)
    uncited: List[int] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    aborted: Optional[str] = None

    @property
    def bibliography_found(self) -> bool:
        return self.bibliography_range is not None

    @property
    def succeeded(self) -> bool:
        return self.aborted is None and not self.orphans

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["bibliography_found"] = self.bibliography_found
        return data


@dataclass
class RecoveryReport:
    """Result of a field recovery run over a sub-range."""
    document: str = ""
    region: Optional[TextRange] = None
    fields_mapped: int = 0
    duplicate_displays: int = 0
    invalid_displays: int = 0
    matches: int = 0
    replaced: int = 0
    unmatched: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    aborted: Optional[str] = None

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["unmatched_count"] = self.unmatched_count
        return data


@dataclass
class UnlinkReport:
    """Result of removing the tool's own links and anchors."""
    document: str = ""
    links_removed: int = 0
    anchors_removed: int = 0
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProcessingStats:
    """Statistics for a batch of documents."""
    total_items: int = 0
    successful_items: int = 0
    aborted_items: int = 0
    failed_items: int = 0
    processing_times: List[float] = field(default_factory=list)

    def add_success(self, processing_time: float) -> None:
        """Record a document processed to completion."""
        self.successful_items += 1
        self.processing_times.append(processing_time)

    def add_abort(self) -> None:
        """Record a document whose run stopped on a fatal linking condition."""
        self.aborted_items += 1

    def add_failure(self) -> None:
        """Record a document that could not be loaded or saved."""
        self.failed_items += 1

    @property
    def average_time_per_item(self) -> float:
        if not self.processing_times:
            return 0.0
        return sum(self.processing_times) / len(self.processing_times)


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "TextRange",
    "TextMatch",
    "validate_citation_number",
    "CitationComponent",
    "CitationOccurrence",
    "BibliographyAnchor",
    "CitationDisplay",
    "ParagraphView",
    "FieldHandle",
    "LinkHandle",
    "FieldRecoveryMap",
    "LinkingConfig",
    "ItemSpec",
    "LinkingReport",
    "RecoveryReport",
    "UnlinkReport",
    "ProcessingStats",
]
