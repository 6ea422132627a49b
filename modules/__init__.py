"""Modules package for CiteAnchor.

This package contains utility modules for configuration, logging, types,
error handling, and other shared functionality.
"""

__all__ = [
    "app_config",
    "config_loader",
    "constants",
    "error_handler",
    "item_scanner",
    "logger",
    "types",
    "user_prompts",
]
