"""Per-run state shared by the engine components.

A RunContext is created for every run and passed to each component's
constructor. It carries the configuration, the run logger and the counters
that end up in the run report; nothing in the engine keeps state at module
level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from modules.logger import get_run_logger
from modules.types import LinkingConfig


@dataclass
class RunCounters:
    """Counts of everything the engine did or skipped during one run."""
    anchors_created: int = 0
    anchors_purged: int = 0
    entries_skipped: int = 0
    occurrences_scanned: int = 0
    occurrences_excluded: int = 0
    components_found: int = 0
    components_skipped: int = 0
    links_created: int = 0
    links_already_present: int = 0
    links_removed: int = 0
    fields_replaced: int = 0
    fields_unmatched: int = 0


@dataclass
class RunContext:
    """Configuration, logger and counters of one engine run."""
    config: LinkingConfig = field(default_factory=LinkingConfig)
    logger: Any = None
    counters: RunCounters = field(default_factory=RunCounters)
    notes: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = get_run_logger()

    @classmethod
    def for_document(
        cls,
        document_name: str,
        config: Optional[LinkingConfig] = None,
    ) -> RunContext:
        """Create a context whose log lines are tagged with ``document_name``."""
        return cls(config=config or LinkingConfig(), logger=get_run_logger(document_name))

    def count(self, counter: str, amount: int = 1) -> None:
        setattr(self.counters, counter, getattr(self.counters, counter) + amount)

    def skip(self, counter: str, message: str, *args: Any) -> None:
        """Count a recoverable condition, log it as a warning and keep a note."""
        self.count(counter)
        text = message % args if args else message
        self.notes.append(text)
        self.logger.warning(text)

    def debug(self, message: str, *args: Any) -> None:
        self.logger.debug(message, *args)

    def info(self, message: str, *args: Any) -> None:
        self.logger.info(message, *args)


__all__ = [
    "RunCounters",
    "RunContext",
]
