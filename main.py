"""
Citation linking for Word documents produced with numeric citation styles.

This script:
1. Scans the input path for .docx documents
2. Locates each document's bibliography and bookmarks its numbered entries
3. Finds bracketed citations such as [3], [1, 4] or [3-5] in the body
4. Aborts a document if any cited number has no bibliography entry
5. Turns each cited number into an internal hyperlink to its entry

Further modes validate without linking (check), restore reference manager
fields over plain-text citations (recover) and remove earlier links (unlink).
"""

from __future__ import annotations

import sys
from typing import List

from tqdm import tqdm

from cli.argument_parser import ExecutionSettings, _parse_cli_selection, _parse_execution_mode, setup_argparse
from cli.display import _display_processing_summary, display_final_summary, prompt_for_item_selection
from cli.processing import (
    OUTCOME_ABORTED,
    OUTCOME_FAILED,
    OUTCOME_SKIPPED,
    OUTCOME_SUCCESS,
    _process_single_item,
)
from modules import app_config as config
from modules.config_loader import get_config_loader
from modules.constants import MODE_CHECK
from modules.error_handler import ConfigurationError, FileProcessingError, handle_critical_error
from modules.item_scanner import scan_input_path
from modules.logger import configure_logging, setup_logger
from modules.types import ItemSpec, ProcessingStats
from modules.user_prompts import (
    exit_program,
    print_error,
    print_header,
    print_info,
    print_section,
)
from processors.file_manager import prepare_output_directory

logger = setup_logger(__name__)


def _select_items_for_processing(
    all_items: List[ItemSpec], settings: ExecutionSettings
) -> List[ItemSpec]:
    """Select items for processing based on mode and user input."""
    if config.CLI_MODE:
        if settings.select_pattern:
            selected = _parse_cli_selection(all_items, settings.select_pattern)
            logger.info(f"Selected {len(selected)} of {len(all_items)} document(s) by '{settings.select_pattern}'")
            return selected
        if settings.process_all or len(all_items) == 1:
            logger.info(f"Processing {len(all_items)} document(s) in CLI mode")
            return list(all_items)
        # If multiple items found but --all not specified, process only the first
        logger.info(f"Processing first document (use --all to process all {len(all_items)} documents)")
        return [all_items[0]]

    return prompt_for_item_selection(all_items) or []


def main() -> None:
    args = setup_argparse()
    settings = _parse_execution_mode(args)
    configure_logging(verbose=settings.verbose, log_file=settings.log_file)

    if not config.CLI_MODE:
        print_header("CiteAnchor - Citation Linking for Word Documents")

    try:
        linking_config = get_config_loader().get_linking_config(**settings.linking_overrides())
    except ConfigurationError as exc:
        handle_critical_error(exc, "loading linking configuration", exit_on_error=True)
        return

    # Scan for documents to process
    all_items_to_consider = scan_input_path(settings.input_path, config.OUTPUT_SUFFIX)
    if not all_items_to_consider:
        if config.CLI_MODE:
            logger.error(f"No documents found to process in: {settings.input_path}")
            sys.exit(1)
        else:
            print_info("No documents found to process. Please check your input path.")
            logger.debug("No documents found in: %s", settings.input_path)
            sys.exit(0)

    try:
        selected_items = _select_items_for_processing(all_items_to_consider, settings)
    except ValueError as exc:
        print_error(f"Invalid --select value: {exc}")
        sys.exit(2)
    if not selected_items:
        if not config.CLI_MODE:
            print_info("No documents selected for processing. Exiting.")
        sys.exit(0)

    logger.info("Selected %s document(s) for processing.", len(selected_items))

    if not config.CLI_MODE:
        if not _display_processing_summary(
            selected_items, settings.output_dir, settings.mode, linking_config
        ):
            exit_program("Processing cancelled.")
        print_section(f"Processing {len(selected_items)} Document(s)")

    if settings.output_dir is not None and settings.mode != MODE_CHECK:
        try:
            prepare_output_directory(settings.output_dir)
        except FileProcessingError as exc:
            handle_critical_error(exc, "preparing the output directory", exit_on_error=True)
            return

    stats = ProcessingStats(total_items=len(selected_items))
    progress = tqdm(
        selected_items,
        desc="Documents",
        unit="doc",
        disable=not config.CLI_MODE or len(selected_items) < 2,
    )
    for index, item_spec in enumerate(progress, start=1):
        outcome, elapsed = _process_single_item(
            item_spec, index, len(selected_items), settings, linking_config
        )
        if outcome == OUTCOME_SUCCESS:
            stats.add_success(elapsed)
        elif outcome == OUTCOME_ABORTED:
            stats.add_abort()
        elif outcome == OUTCOME_FAILED:
            stats.add_failure()
        elif outcome == OUTCOME_SKIPPED:
            stats.total_items -= 1

    display_final_summary(stats, settings.mode)

    if stats.aborted_items or stats.failed_items:
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Processing interrupted by user (Ctrl+C). Exiting.")
        exit_program("\nProcessing interrupted by user.")
    except Exception as exc:
        handle_critical_error(
            exc,
            "main execution flow",
            exit_on_error=True,
            show_user_message=True,
        )
