"""Configuration loader for YAML-based settings.

This module loads the citation engine settings from modules/config/linking.yaml
and turns them into a validated LinkingConfig.

Usage Pattern:
    >>> from modules.config_loader import get_config_loader
    >>> loader = get_config_loader()
    >>> linking = loader.get_linking_config()
    >>> linking.anchor_prefix
    'BIB'

Path Constants:
- PROJECT_ROOT: Root directory of the project
- MODULES_DIR: modules/ directory
- CONFIG_DIR: modules/config/ directory

A missing file yields the built-in defaults; a file with invalid YAML is logged
and also falls back to defaults. Values that parse but are invalid (an unknown
inverted-range policy, a prefix that is not a legal bookmark name) raise
ConfigurationError when the LinkingConfig is built.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from modules.logger import setup_logger
from modules.types import LinkingConfig

logger = setup_logger(__name__)

# ============================================================================
# Path Resolution
# ============================================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]
MODULES_DIR = Path(__file__).resolve().parent
CONFIG_DIR = MODULES_DIR / "config"
LINKING_CONFIG_FILE = "linking.yaml"


# ============================================================================
# Configuration Loader Class
# ============================================================================
class ConfigLoader:
    """
    Lightweight loader for the YAML configs residing under modules/config/.

    Example:
        >>> loader = ConfigLoader()
        >>> loader.load_configs()
        >>> raw = loader.get_raw_linking_config()
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize the loader; config_dir defaults to modules/config/."""
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._linking: dict[str, Any] = {}

    def load_configs(self) -> None:
        """
        Load all configuration files from the config directory.

        Errors during loading are logged but do not raise exceptions.
        """
        self._linking = self._load_yaml_config(LINKING_CONFIG_FILE)

    def _load_yaml_config(self, filename: str) -> dict[str, Any]:
        """Load a single YAML configuration file."""
        config_path = self.config_dir / filename

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}")
            return {}

        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

            if not isinstance(data, dict):
                logger.warning(f"Config file {filename} did not contain a dictionary. Using empty config.")
                return {}

            return data

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error in {filename}: {e}")
            return {}
        except OSError as e:
            logger.error(f"Error loading config {filename}: {e}")
            return {}

    def get_raw_linking_config(self) -> dict[str, Any]:
        """Get the linking configuration as loaded from YAML."""
        return dict(self._linking)

    def get_linking_config(self, **overrides: Any) -> LinkingConfig:
        """
        Build a validated LinkingConfig, applying keyword overrides on top.

        Overrides with a value of None are ignored, so CLI options that were
        not given leave the YAML value in place.

        Raises:
            ConfigurationError: If a value is invalid
        """
        data = self.get_raw_linking_config()
        for key, value in overrides.items():
            if value is not None:
                data[key] = value
        return LinkingConfig.from_dict(data)

    def is_loaded(self) -> bool:
        """Check if configurations have been loaded."""
        return bool(self._linking)


# ============================================================================
# Singleton Pattern for Config Loader
# ============================================================================
_config_loader_instance: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get or create a singleton ConfigLoader instance."""
    global _config_loader_instance

    if _config_loader_instance is None:
        _config_loader_instance = ConfigLoader()
        _config_loader_instance.load_configs()
        logger.debug("Initialized singleton ConfigLoader")

    return _config_loader_instance


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "ConfigLoader",
    "get_config_loader",
    "PROJECT_ROOT",
    "MODULES_DIR",
    "CONFIG_DIR",
    "LINKING_CONFIG_FILE",
]
