"""Configuration management for CBOMkit."""

from cbomkit.core.config.loader import load_config_file
from cbomkit.core.config.settings import (
    IndexingSettings,
    LoggingSettings,
    OutputSettings,
    ScanningSettings,
    Settings,
    get_settings,
)

__all__ = [
    "IndexingSettings",
    "LoggingSettings",
    "OutputSettings",
    "ScanningSettings",
    "Settings",
    "get_settings",
    "load_config_file",
]
