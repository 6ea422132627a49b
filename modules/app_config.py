"""Application configuration loader from YAML files.

This module loads configuration from modules/config/app.yaml and exposes
settings as module-level constants. Configuration includes:
- Execution mode (CLI vs interactive)
- File paths (input/output directories) and the output file suffix
- Resume behaviour for documents that already have an output
- Run logging (JSON run logs, detailed log file, console verbosity)

Import as:
    from modules import app_config as config

Configuration is loaded at module import time and exposed as constants:
    - CLI_MODE: bool
    - INPUT_FOLDER_PATH: str
    - OUTPUT_FOLDER_PATH: str
    - OUTPUT_SUFFIX: str
    - RESUME_MODE: str
    - etc.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from modules.constants import DEFAULT_OUTPUT_SUFFIX
from modules.logger import setup_logger

logger = setup_logger(__name__)

# ============================================================================
# Constants and Defaults
# ============================================================================
RESUME_MODES = ("skip", "overwrite")
DEFAULT_RESUME_MODE = "skip"

# ============================================================================
# Configuration File Paths
# ============================================================================
_MODULES_DIR = Path(__file__).resolve().parent
_APP_CONFIG_PATH = _MODULES_DIR / "config" / "app.yaml"


# ============================================================================
# Configuration Loading Functions
# ============================================================================
def _load_yaml_app_config() -> Dict[str, Any]:
    """
    Load the application config YAML.

    Returns:
        Configuration dictionary, or empty dict on error
    """
    if not _APP_CONFIG_PATH.exists():
        logger.warning(f"App config file not found: {_APP_CONFIG_PATH}. Using defaults.")
        return {}

    try:
        with _APP_CONFIG_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            logger.warning("App config is not a dictionary. Using defaults.")
            return {}

        return data

    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in app.yaml: {e}. Using defaults.")
        return {}
    except OSError as e:
        logger.error(f"Error loading app config: {e}. Using defaults.")
        return {}


def _get_str(data: Dict[str, Any], key: str, default: str) -> str:
    """Safely get a string value from config dictionary."""
    value = data.get(key, default)
    return str(value) if value is not None else default


def _get_optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    """Get a string value, treating a missing or empty value as None."""
    value = data.get(key)
    return str(value) if value else None


def _get_bool(data: Dict[str, Any], key: str, default: bool) -> bool:
    """Safely get a boolean value from config dictionary."""
    value = data.get(key, default)
    return bool(value)


def _get_choice(data: Dict[str, Any], key: str, choices: tuple[str, ...], default: str) -> str:
    """Get a string value restricted to a fixed set of choices."""
    value = _get_str(data, key, default).lower()
    if value not in choices:
        logger.warning(f"Invalid value '{value}' for '{key}', using default: {default}")
        return default
    return value


# ============================================================================
# Configuration Values (loaded at module import)
# ============================================================================
_APP_CFG: Dict[str, Any] = _load_yaml_app_config()
_LOGGING: Dict[str, Any] = _APP_CFG.get("logging", {}) if isinstance(_APP_CFG.get("logging"), dict) else {}

# --- Execution Mode ---
CLI_MODE = _get_bool(_APP_CFG, "cli_mode", False)

# --- File Paths ---
INPUT_FOLDER_PATH = _get_str(_APP_CFG, "input_folder_path", str(Path.cwd()))
OUTPUT_FOLDER_PATH = _get_str(_APP_CFG, "output_folder_path", str(Path.cwd() / "linked"))
OUTPUT_SUFFIX = _get_str(_APP_CFG, "output_suffix", DEFAULT_OUTPUT_SUFFIX)

# --- Resume Settings ---
RESUME_MODE = _get_choice(_APP_CFG, "resume_mode", RESUME_MODES, DEFAULT_RESUME_MODE)

# --- Logging ---
WRITE_JSON_LOG = _get_bool(_LOGGING, "write_json_log", True)
LOG_FILE = _get_optional_str(_LOGGING, "log_file")
VERBOSE = _get_bool(_LOGGING, "verbose", False)

# ============================================================================
# Logging
# ============================================================================
logger.debug(f"Configuration loaded: CLI_MODE={CLI_MODE}, RESUME_MODE={RESUME_MODE}, OUTPUT_SUFFIX={OUTPUT_SUFFIX}")
logger.debug(f"Run logging: json={WRITE_JSON_LOG}, log_file={LOG_FILE}, verbose={VERBOSE}")
