"""Centralized user prompt utilities for consistent CLI interactions.

This module provides a standardized way to interact with users through the CLI,
including options to exit, go back, and make selections with clear formatting.

Features:
- Color-coded output (success, warning, error, info)
- Interactive document selection with numbers, ranges and 'all'
- Selection parsing shared with the --select command-line option
- Yes/No prompts with defaults
- Aligned key/value listings for run summaries
- Windows color support via colorama
"""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Optional, Sequence, TypeVar

# Initialize colorama for Windows color support
try:
    import colorama
    colorama.just_fix_windows_console()
except ImportError:
    pass  # colorama not available, colors may still work on Unix-like systems

from modules.constants import (
    EXIT_COMMANDS,
    BACK_COMMANDS,
    ALL_COMMANDS,
    DIVIDER_CHAR,
    DIVIDER_LENGTH,
)

T = TypeVar('T')


# ============================================================================
# ANSI Color Codes
# ============================================================================
class Colors:
    """ANSI color codes for terminal output formatting."""
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

    INFO = '\033[0;36m'        # Cyan (informational messages)
    PROMPT = '\033[1;37m'      # White bold (user prompts)
    DIM = '\033[2;37m'         # Dimmed white (secondary text)


# ============================================================================
# Output Functions (Print Messages)
# ============================================================================
def print_header(message: str, subtitle: str = "") -> None:
    """Print a prominent header message with optional subtitle."""
    print(f"\n{Colors.BOLD}{Colors.HEADER}{'=' * DIVIDER_LENGTH}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.HEADER}  {message}{Colors.ENDC}")
    if subtitle:
        print(f"{Colors.OKCYAN}  {subtitle}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.HEADER}{'=' * DIVIDER_LENGTH}{Colors.ENDC}\n")


def print_section(message: str) -> None:
    """Print a section divider with message."""
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}{DIVIDER_CHAR * DIVIDER_LENGTH}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.OKBLUE}{message}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.OKBLUE}{DIVIDER_CHAR * DIVIDER_LENGTH}{Colors.ENDC}\n")


def print_success(message: str) -> None:
    """Print a success message."""
    print(f"{Colors.OKGREEN}✓ {message}{Colors.ENDC}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    print(f"{Colors.WARNING}⚠ {message}{Colors.ENDC}")


def print_error(message: str) -> None:
    """Print an error message."""
    print(f"{Colors.FAIL}✗ {message}{Colors.ENDC}")


def print_info(message: str) -> None:
    """Print an info message."""
    print(f"{Colors.OKCYAN}ℹ {message}{Colors.ENDC}")


def print_dim(message: str) -> None:
    """Print a dimmed/secondary message."""
    print(f"{Colors.DIM}{message}{Colors.ENDC}")


def print_key_values(rows: Iterable[tuple[str, object]], indent: int = 2) -> None:
    """Print label/value pairs with the values aligned in one column.

    Example:
        >>> print_key_values([("Anchors created", 12), ("Links created", 30)])
    """
    rows = list(rows)
    if not rows:
        return
    width = max(len(label) for label, _ in rows) + 1
    pad = " " * indent
    for label, value in rows:
        print(f"{pad}{Colors.DIM}{(label + ':').ljust(width)}{Colors.ENDC} {value}")


# ============================================================================
# Program Control Functions
# ============================================================================
def exit_program(message: str = "Exiting program. Goodbye!", exit_code: int = 0) -> None:
    """Exit the program gracefully with a message."""
    print(f"\n{Colors.OKCYAN}{message}{Colors.ENDC}\n")
    sys.exit(exit_code)


# ============================================================================
# Selection Parsing
# ============================================================================
def parse_selection(choice_str: str, item_count: int, allow_multiple: bool = True) -> list[int]:
    """
    Convert a selection string into sorted zero-based indices.

    Accepts single numbers, comma or semicolon separated lists and dash ranges
    (e.g. ``"1,3-5"``), all 1-based.

    Raises:
        ValueError: If any part is malformed or out of range
    """
    selected_indices: set[int] = set()
    normalized_input = choice_str.replace(";", ",").replace(" ", "")
    parts = normalized_input.split(",") if allow_multiple else [normalized_input]

    for part in parts:
        if not part:
            continue

        if "-" in part and allow_multiple:
            start_str, end_str = part.split("-", 1)
            if not (start_str.isdigit() and end_str.isdigit()):
                raise ValueError(f"Invalid range '{part}'.")
            start, end = int(start_str), int(end_str)
            if not (1 <= start <= end <= item_count):
                raise ValueError(
                    f"Range {part} is invalid. Must be between 1 and {item_count}."
                )
            selected_indices.update(range(start - 1, end))

        elif part.isdigit():
            index = int(part) - 1
            if not (0 <= index < item_count):
                raise ValueError(
                    f"Selection {part} is out of range. Must be between 1 and {item_count}."
                )
            selected_indices.add(index)

        else:
            raise ValueError(
                f"Invalid input: '{part}'. Use numbers, ranges (e.g., 1-3), or 'all'."
            )

    return sorted(selected_indices)


# ============================================================================
# Interactive Prompt Functions
# ============================================================================
def prompt_yes_no(
    question: str,
    default: Optional[bool] = None,
    allow_exit: bool = True,
) -> bool:
    """
    Prompt user for yes/no response.

    Args:
        question: The question to ask
        default: Default response if user just presses Enter (None means no default)
        allow_exit: Whether to allow 'exit' or 'quit' commands

    Returns:
        True for yes, False for no
    """
    if default is True:
        prompt_suffix = " [Y/n]"
    elif default is False:
        prompt_suffix = " [y/N]"
    else:
        prompt_suffix = " [y/n]"

    exit_hint = " (or 'exit' to quit)" if allow_exit else ""

    while True:
        response = input(f"{question}{prompt_suffix}{exit_hint}: ").lower().strip()

        if allow_exit and response in EXIT_COMMANDS:
            exit_program()

        if not response and default is not None:
            return default

        if response in {'y', 'yes'}:
            return True
        if response in {'n', 'no'}:
            return False

        print_warning("Please answer 'yes' or 'no' (or 'y'/'n').")


def prompt_selection(
    items: Sequence[T],
    display_func: Callable[[T], str],
    prompt_message: str = "Enter your choice",
    allow_multiple: bool = True,
    allow_all: bool = True,
    allow_back: bool = False,
    allow_exit: bool = True,
) -> Optional[list[T]]:
    """
    Prompt user to select one or more items from a list.

    Args:
        items: List of items to select from
        display_func: Function to convert item to display string
        prompt_message: Custom prompt message
        allow_multiple: Allow selecting multiple items (ranges, comma-separated)
        allow_all: Allow selecting all items at once
        allow_back: Allow going back (returns None)
        allow_exit: Allow exiting the program

    Returns:
        List of selected items, or None if user chose to go back
    """
    if not items:
        print_warning("No items available to select.")
        return []

    for index, item in enumerate(items, start=1):
        description = display_func(item)
        if len(description) > 75:
            description = description[:72] + "..."
        print(f"  {Colors.BOLD}{index}.{Colors.ENDC} {description}")

    print(f"\n  {Colors.INFO}Selection options:{Colors.ENDC}")
    if allow_multiple:
        print(f"    {Colors.DIM}• Enter numbers separated by commas (e.g., '1,3,5'){Colors.ENDC}")
        print(f"    {Colors.DIM}• Enter a range with a dash (e.g., '1-5'){Colors.ENDC}")
    if allow_all:
        print(f"    {Colors.DIM}• Enter 'all' to select everything{Colors.ENDC}")

    nav_hints = []
    if allow_back:
        nav_hints.append("'back' to go back")
    if allow_exit:
        nav_hints.append("'exit' to quit")
    if nav_hints:
        print(f"\n  {Colors.DIM}{' | '.join(nav_hints)}{Colors.ENDC}")

    while True:
        try:
            choice_str = input(f"\n{Colors.PROMPT}{prompt_message}: {Colors.ENDC}").lower().strip()

            if not choice_str:
                print_warning("No selection made. Please make a choice.")
                continue

            if allow_exit and choice_str in EXIT_COMMANDS:
                exit_program()

            if allow_back and choice_str in BACK_COMMANDS:
                return None

            if allow_all and choice_str in ALL_COMMANDS:
                print_success(f"Selected all {len(items)} items.")
                return list(items)

            selected_indices = parse_selection(choice_str, len(items), allow_multiple)
            if not selected_indices:
                print_warning("No valid items selected. Please try again.")
                continue

            selected_items = [items[i] for i in selected_indices]
            if len(selected_items) == 1:
                print_success(f"Selected: {display_func(selected_items[0])}")
            else:
                print_success(f"Selected {len(selected_items)} item(s).")

            return selected_items

        except ValueError as e:
            print_error(f"Invalid selection: {e}")
        except KeyboardInterrupt:
            if allow_exit:
                exit_program("\n\nInterrupted by user.")
            raise


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "print_header",
    "print_section",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "print_dim",
    "print_key_values",
    "parse_selection",
    "prompt_selection",
    "prompt_yes_no",
    "exit_program",
    "Colors",
]
