"""CLI display and user interaction utilities."""

from __future__ import annotations

import collections.abc
from pathlib import Path
from typing import Optional, Union

from modules import app_config as config
from modules.constants import MODE_CHECK, MODE_LINK, MODE_RECOVER, MODE_UNLINK
from modules.error_handler import FatalLinkingError, OrphanCitationError
from modules.logger import setup_logger
from modules.types import (
    ItemSpec,
    LinkingConfig,
    LinkingReport,
    ProcessingStats,
    RecoveryReport,
    UnlinkReport,
)
from modules.user_prompts import (
    print_dim,
    print_error,
    print_header,
    print_info,
    print_key_values,
    print_section,
    print_success,
    print_warning,
    prompt_selection,
    prompt_yes_no,
)

logger = setup_logger(__name__)

MODE_DESCRIPTIONS = {
    MODE_LINK: "Anchor bibliography entries and link citations",
    MODE_CHECK: "Validate citations against the bibliography (no output written)",
    MODE_RECOVER: "Restore reference manager fields over plain-text citations",
    MODE_UNLINK: "Remove links and anchors created by earlier runs",
}

Report = Union[LinkingReport, RecoveryReport, UnlinkReport]


def prompt_for_item_selection(
    items: collections.abc.Sequence[ItemSpec],
) -> list[ItemSpec]:
    """Prompt user to select documents to process."""
    if not items:
        print_warning("No Word documents found in the input.")
        return []

    print_section("Document Selection")
    print_info(f"Found {len(items)} document(s) available for processing")
    print()

    selected = prompt_selection(
        items=items,
        display_func=lambda item: item.display_label(),
        prompt_message="Select documents to process",
        allow_multiple=True,
        allow_all=True,
        allow_back=False,
        allow_exit=True,
    )

    return selected if selected is not None else []


def _display_processing_summary(
    selected_items: list[ItemSpec],
    base_output_dir: Optional[Path],
    mode: str,
    linking_config: LinkingConfig,
) -> bool:
    """Display the run configuration and ask for confirmation.

    Returns:
        True if user confirms, False to cancel
    """
    print_header("PROCESSING SUMMARY")
    print_info("Review your selections before processing")
    print()

    rows = [
        ("Documents", len(selected_items)),
        ("Mode", f"{mode} ({MODE_DESCRIPTIONS.get(mode, mode)})"),
        ("Anchor prefix", linking_config.anchor_prefix),
        ("Range separators", " ".join(linking_config.range_separators)),
        ("Inverted ranges", linking_config.inverted_range_policy),
    ]
    if mode != MODE_CHECK:
        rows.append(("Output folder", base_output_dir or "beside each input"))
        rows.append(("Output suffix", config.OUTPUT_SUFFIX or "(none)"))
    print_key_values(rows, indent=4)
    print()

    return prompt_yes_no("Proceed with processing?", default=True)


def display_report(report: Report) -> None:
    """Print the counts of a finished run."""
    if isinstance(report, LinkingReport):
        _display_linking_report(report)
    elif isinstance(report, RecoveryReport):
        _display_recovery_report(report)
    else:
        print_key_values(
            [
                ("Links removed", report.links_removed),
                ("Anchors removed", report.anchors_removed),
            ],
            indent=4,
        )


def _display_linking_report(report: LinkingReport) -> None:
    if report.bibliography_range is None:
        print_warning("    No bibliography located")
    print_key_values(
        [
            ("Anchors created", report.anchors_created),
            ("Anchors replaced", report.anchors_purged),
            ("Entries skipped", report.entries_skipped),
            ("Citations found", report.occurrences_scanned),
            ("Components found", report.components_found),
            ("Links created", report.links_created),
            ("Already linked", report.links_already_present),
            ("Components skipped", report.components_skipped),
        ],
        indent=4,
    )
    if report.uncited:
        print_dim(f"    Entries never cited: {_format_numbers(report.uncited)}")
    if report.orphans:
        print_error(f"    Citations without an entry: {_format_numbers(report.orphans)}")


def _display_recovery_report(report: RecoveryReport) -> None:
    print_key_values(
        [
            ("Fields mapped", report.fields_mapped),
            ("Citations matched", report.matches),
            ("Fields restored", report.replaced),
            ("Unmatched", report.unmatched_count),
        ],
        indent=4,
    )
    if report.unmatched:
        print_warning(f"    Unmatched citations: {', '.join(report.unmatched)}")


def display_abort(error: FatalLinkingError) -> None:
    """Print the abort condition and the identifiers that caused it."""
    print_error(f"    Run aborted ({error.condition}): {error}")
    if isinstance(error, OrphanCitationError):
        print_error(f"    Missing bibliography entries: {_format_numbers(error.orphans)}")


def _format_numbers(numbers: collections.abc.Iterable[int]) -> str:
    return ", ".join(f"[{n}]" for n in numbers)


def display_final_summary(stats: ProcessingStats, mode: str) -> None:
    """Print the batch totals once every document has been processed."""
    done = stats.successful_items
    total = stats.total_items

    if config.CLI_MODE:
        logger.info(
            "%s/%s document(s) processed in %s mode (%s aborted, %s failed).",
            done,
            total,
            mode,
            stats.aborted_items,
            stats.failed_items,
        )
        return

    print_section("Run Summary")
    print_key_values(
        [
            ("Processed", f"{done}/{total}"),
            ("Aborted", stats.aborted_items),
            ("Failed", stats.failed_items),
            ("Average time", f"{stats.average_time_per_item:.2f}s"),
        ]
    )
    if done == total:
        print_success(f"\n✓ {done}/{total} selected document(s) have been processed!")
    else:
        print_warning(f"\n{done}/{total} selected document(s) completed successfully.")
