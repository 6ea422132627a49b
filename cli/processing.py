"""Per-document processing for the CLI."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from cli.argument_parser import ExecutionSettings
from cli.display import Report, display_abort, display_report
from core.host import DocumentHost
from core.linker import CitationLinker
from modules import app_config as config
from modules.constants import MODE_CHECK, MODE_LINK, MODE_RECOVER, MODE_UNLINK
from modules.error_handler import (
    ConfigurationError,
    FatalLinkingError,
    ProcessingError,
    handle_critical_error,
    handle_recoverable_error,
)
from modules.logger import setup_logger
from modules.types import ItemSpec, LinkingConfig, LinkingReport, TextRange
from modules.user_prompts import print_dim, print_info, print_success, print_warning
from processors import (
    DocxBibliographyLocator,
    DocxHost,
    append_to_log,
    finalize_log_file,
    initialize_log_file,
    load_document,
    resolve_log_path,
    resolve_output_path,
    save_document,
    should_skip_existing,
)

logger = setup_logger(__name__)

# Outcomes of a single document
OUTCOME_SUCCESS = "success"
OUTCOME_ABORTED = "aborted"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


def resolve_region(
    host: DocumentHost,
    paragraphs: Optional[tuple[int, int]] = None,
    bookmark: Optional[str] = None,
) -> Optional[TextRange]:
    """
    Turn the --region-* options into a text range of the document.

    Args:
        host: Document the range refers to
        paragraphs: 1-based inclusive paragraph numbers
        bookmark: Name of a bookmark whose text is the region

    Returns:
        The region, or None for the whole document

    Raises:
        ConfigurationError: If the paragraphs or the bookmark do not exist
    """
    if paragraphs is not None:
        first, last = paragraphs
        views = host.paragraphs()
        if last > len(views):
            raise ConfigurationError(
                f"Paragraph range {first}-{last} exceeds the {len(views)} paragraphs of the document"
            )
        return TextRange(views[first - 1].span.start, views[last - 1].span.end)

    if bookmark is not None:
        region = host.anchor_range(bookmark)
        if region is None:
            raise ConfigurationError(f"Bookmark '{bookmark}' not found")
        return region

    return None


def _run_mode(linker: CitationLinker, host: DocumentHost, settings: ExecutionSettings) -> Report:
    if settings.mode == MODE_LINK:
        return linker.run()
    if settings.mode == MODE_CHECK:
        return linker.check()
    if settings.mode == MODE_RECOVER:
        region = resolve_region(host, settings.region_paragraphs, settings.region_bookmark)
        if region is None:
            logger.warning("No region given; recovering citations over the whole document")
        return linker.recover(region)
    if settings.mode == MODE_UNLINK:
        return linker.unlink()
    raise ConfigurationError(f"Unknown processing mode '{settings.mode}'")


def _process_single_item(
    item_spec: ItemSpec,
    index: int,
    total_items: int,
    settings: ExecutionSettings,
    linking_config: LinkingConfig,
) -> tuple[str, float]:
    """Process a single Word document.

    Args:
        item_spec: Document to process.
        index: Current item index (1-based).
        total_items: Total number of items to process.
        settings: Resolved command line settings.
        linking_config: Engine configuration for this batch.

    Returns:
        The outcome constant and the elapsed time in seconds.
    """
    logger.info(
        "--- Starting Item %s of %s: %s (%s) ---",
        index,
        total_items,
        item_spec.output_stem,
        settings.mode,
    )
    if not config.CLI_MODE:
        print()
        print_info(f"  [{index}/{total_items}] {item_spec.path.name}")

    started = time.perf_counter()
    saves_output = settings.mode != MODE_CHECK
    log_path: Optional[Path] = None

    try:
        output_path = resolve_output_path(item_spec, settings.output_dir, config.OUTPUT_SUFFIX)
        if saves_output and should_skip_existing(output_path, settings.resume_mode):
            if not config.CLI_MODE:
                print_dim(f"    Skipped, output exists: {output_path.name}")
            return OUTCOME_SKIPPED, 0.0

        document = load_document(item_spec.path)
        host = DocxHost(
            document,
            name=item_spec.output_stem,
            hyperlink_style=linking_config.hyperlink_style or None,
        )
        linker = CitationLinker(host, DocxBibliographyLocator(linking_config), linking_config)

        if config.WRITE_JSON_LOG:
            log_path = resolve_log_path(output_path)
            if not initialize_log_file(
                log_path, item_spec.path.name, str(item_spec.path), settings.mode, linking_config
            ):
                log_path = None

        report = _run_mode(linker, host, settings)
        if log_path:
            append_to_log(log_path, report.to_dict())

        if saves_output:
            save_document(document, output_path)

        if not config.CLI_MODE:
            display_report(report)
            if saves_output:
                print_success(f"    Saved {output_path.name}")

        if isinstance(report, LinkingReport) and not report.succeeded:
            logger.warning("%s: citations without an entry: %s", item_spec.output_stem, report.orphans)
            return OUTCOME_ABORTED, time.perf_counter() - started
        return OUTCOME_SUCCESS, time.perf_counter() - started

    except FatalLinkingError as exc:
        handle_critical_error(
            exc,
            f"{settings.mode} run on '{item_spec.output_stem}'",
            exit_on_error=False,
            show_user_message=False,
        )
        display_abort(exc)
        if log_path and exc.report is not None:
            append_to_log(log_path, exc.report.to_dict())
        if saves_output and not config.CLI_MODE:
            print_warning("    Document not saved")
        return OUTCOME_ABORTED, time.perf_counter() - started

    except ProcessingError as exc:
        handle_recoverable_error(
            exc,
            f"processing document '{item_spec.output_stem}'",
            show_user_message=not config.CLI_MODE,
        )
        logger.info("--- Attempting to continue with the next item if any. ---")
        return OUTCOME_FAILED, time.perf_counter() - started

    finally:
        if log_path:
            finalize_log_file(log_path)
