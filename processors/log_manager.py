"""JSON log file management for CiteAnchor processing runs.

Each processed document gets a log holding a JSON array: a header entry with
the run configuration, one entry per report, and the closing bracket written
when the run finishes.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from modules.logger import setup_logger
from modules.types import LinkingConfig

logger = setup_logger(__name__)

_LOG_HANDLES: dict[Path, Any] = {}


def _get_log_handle(log_path: Path):
    handle = _LOG_HANDLES.get(log_path)
    if handle is None:
        handle = log_path.open("a", encoding="utf-8")
        _LOG_HANDLES[log_path] = handle
    return handle


def _close_log_handle(log_path: Path) -> None:
    handle = _LOG_HANDLES.pop(log_path, None)
    if handle is None:
        return
    try:
        handle.close()
    except OSError:
        pass


def initialize_log_file(
    log_path: Path,
    item_name: str,
    input_path: str,
    mode: str,
    linking_config: LinkingConfig,
) -> bool:
    """Create the per-document log file header as the start of a JSON array."""
    configuration = asdict(linking_config)

    payload = {
        "input_item_name": item_name,
        "input_item_path": input_path,
        "mode": mode,
        "processing_start_time": datetime.now().isoformat(),
        "configuration": configuration,
    }

    try:
        _close_log_handle(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("w", encoding="utf-8") as log_file:
            log_file.write("[\n")  # Start JSON array
            json.dump(payload, log_file, ensure_ascii=False)
        return True
    except OSError as exc:
        logger.warning("Failed to initialize log file %s: %s", log_path, exc)
        return False


def append_to_log(log_path: Path, entry: dict[str, Any]) -> bool:
    """Append a JSON entry to the log file array (comma-separated)."""
    try:
        log_file = _get_log_handle(log_path)
        log_file.write(",\n")  # Add comma separator
        json.dump(entry, log_file, ensure_ascii=False)
        return True
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Failed to write to log file %s: %s", log_path, exc)
        return False


def finalize_log_file(log_path: Path) -> bool:
    """Finalize the log file by closing the JSON array."""
    try:
        log_file = _get_log_handle(log_path)
        log_file.write("\n]")  # Close JSON array
        _close_log_handle(log_path)
        return True
    except (OSError, ValueError) as exc:
        logger.warning("Failed to finalize log file %s: %s", log_path, exc)
        return False


__all__ = [
    "initialize_log_file",
    "append_to_log",
    "finalize_log_file",
]
