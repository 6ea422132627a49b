"""CLI argument parsing and execution-mode resolution."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from modules import app_config as config
from modules.constants import INVERTED_RANGE_STRICT, MODE_LINK, PROCESSING_MODES
from modules.logger import setup_logger
from modules.types import ItemSpec
from modules.user_prompts import parse_selection

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ExecutionSettings:
    """Everything a batch run needs from the command line and app.yaml."""
    input_path: Path
    output_dir: Optional[Path]
    mode: str = MODE_LINK
    process_all: bool = False
    select_pattern: Optional[str] = None
    resume_mode: str = "skip"
    region_paragraphs: Optional[tuple[int, int]] = None
    region_bookmark: Optional[str] = None
    anchor_prefix: Optional[str] = None
    inverted_range_policy: Optional[str] = None
    verbose: bool = False
    log_file: Optional[str] = None

    def linking_overrides(self) -> dict[str, Optional[str]]:
        """Keyword overrides for ConfigLoader.get_linking_config()."""
        return {
            "anchor_prefix": self.anchor_prefix,
            "inverted_range_policy": self.inverted_range_policy,
        }


def _positive_int(value: str) -> int:
    """Argparse type validator for positive integers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return parsed


def _paragraph_range(value: str) -> tuple[int, int]:
    """Argparse type validator for 1-based inclusive paragraph ranges ("12-30" or "12")."""
    first, sep, last = value.strip().partition("-")
    start = _positive_int(first)
    end = _positive_int(last) if sep else start
    if end < start:
        raise argparse.ArgumentTypeError(f"range {value} ends before it starts")
    return start, end


def build_parser(cli_mode: Optional[bool] = None) -> argparse.ArgumentParser:
    """Build the argument parser for CLI or interactive mode."""
    if cli_mode is None:
        cli_mode = config.CLI_MODE

    parser = argparse.ArgumentParser(
        description="Link numeric bracket citations in Word documents to their bibliography entries",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    if cli_mode:
        parser.add_argument(
            "input",
            type=str,
            help="Path to a .docx file or a directory containing .docx files (relative or absolute).",
        )
        parser.add_argument(
            "output",
            nargs="?",
            type=str,
            default=None,
            help="Output directory for the linked copies. Defaults to the folder of each input document.",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Process all documents found in the input directory without prompting.",
        )
        parser.add_argument(
            "--select",
            type=str,
            default=None,
            help="Select documents by number (e.g., '1,3,5'), range (e.g., '1-5'), or filename pattern (e.g., 'thesis').",
        )
    else:
        parser.add_argument(
            "--input",
            type=str,
            default=config.INPUT_FOLDER_PATH,
            help="Path to the folder containing .docx files, or path to a single .docx file.",
        )

    # Options available in both modes
    parser.add_argument(
        "--mode",
        choices=PROCESSING_MODES,
        default=MODE_LINK,
        help="link: anchor the bibliography and link citations; check: validate only, never saves; "
        "recover: restore reference manager fields over plain-text citations; unlink: remove earlier links.",
    )

    resume_group = parser.add_mutually_exclusive_group()
    resume_group.add_argument(
        "--resume",
        action="store_true",
        default=None,
        help="Skip documents whose output already exists. Overrides resume_mode in config.",
    )
    resume_group.add_argument(
        "--force",
        "--overwrite",
        action="store_true",
        dest="force",
        default=None,
        help="Process every document again, overwriting existing output.",
    )

    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Bookmark name prefix for bibliography anchors. Overrides anchor_prefix in linking.yaml.",
    )
    parser.add_argument(
        "--strict-ranges",
        action="store_true",
        help="Abort on backwards ranges such as [9-3] instead of linking the first number.",
    )

    region_group = parser.add_mutually_exclusive_group()
    region_group.add_argument(
        "--region-paragraphs",
        type=_paragraph_range,
        default=None,
        metavar="A-B",
        help="Recover mode: restrict recovery to paragraphs A through B (1-based, inclusive).",
    )
    region_group.add_argument(
        "--region-bookmark",
        type=str,
        default=None,
        metavar="NAME",
        help="Recover mode: restrict recovery to the text covered by a bookmark.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Show informational messages on the console. Overrides logging.verbose in config.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write a detailed log to this file. Overrides logging.log_file in config.",
    )
    return parser


def setup_argparse(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.region_paragraphs or args.region_bookmark) and args.mode != "recover":
        parser.error("--region-paragraphs and --region-bookmark only apply to --mode recover")
    return args


def _parse_execution_mode(args: argparse.Namespace) -> ExecutionSettings:
    """Resolve paths and options from parsed arguments and app.yaml."""
    if getattr(args, "force", None):
        resume_mode = "overwrite"
    elif getattr(args, "resume", None):
        resume_mode = "skip"
    else:
        resume_mode = config.RESUME_MODE

    if config.CLI_MODE:
        input_path_arg = Path(args.input)
        base_output_dir = Path(args.output) if args.output else None
        process_all = args.all
        select_pattern = args.select

        # Resolve relative paths to absolute
        if not input_path_arg.is_absolute():
            input_path_arg = Path.cwd() / input_path_arg
        if base_output_dir is not None and not base_output_dir.is_absolute():
            base_output_dir = Path.cwd() / base_output_dir

        logger.info(f"CLI Mode: Input={input_path_arg}, Output={base_output_dir or 'beside input'}")
    else:
        input_path_arg = Path(args.input)
        base_output_dir = Path(config.OUTPUT_FOLDER_PATH)
        process_all = False
        select_pattern = None

    verbose = config.VERBOSE if args.verbose is None else args.verbose
    return ExecutionSettings(
        input_path=input_path_arg,
        output_dir=base_output_dir,
        mode=args.mode,
        process_all=process_all,
        select_pattern=select_pattern,
        resume_mode=resume_mode,
        region_paragraphs=args.region_paragraphs,
        region_bookmark=args.region_bookmark,
        anchor_prefix=args.prefix,
        inverted_range_policy=INVERTED_RANGE_STRICT if args.strict_ranges else None,
        verbose=verbose,
        log_file=args.log_file or config.LOG_FILE,
    )


def _parse_cli_selection(items: list[ItemSpec], pattern: str) -> list[ItemSpec]:
    """Parse CLI selection pattern and return matching items.

    Args:
        items: List of available items (ItemSpec instances)
        pattern: Selection pattern (numbers, ranges, or filename search)

    Returns:
        List of selected items

    Raises:
        ValueError: If a numeric selection is malformed or out of range
    """
    pattern = pattern.strip()
    numeric_pattern = pattern.replace(" ", "").replace(";", ",")
    is_numeric = all(c.isdigit() or c in ",-" for c in numeric_pattern) and any(
        c.isdigit() for c in numeric_pattern
    )

    if is_numeric:
        return [items[i] for i in parse_selection(numeric_pattern, len(items))]

    # Filename search
    search_lower = pattern.lower()
    return [item for item in items if search_lower in item.path.name.lower()]
