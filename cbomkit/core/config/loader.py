"""YAML configuration file loading."""

from pathlib import Path
from typing import Any

import yaml

from cbomkit.core.exceptions.errors import ConfigurationError


def load_config_file(path: Path) -> dict[str, dict[str, Any]]:
    """Read a CBOMkit YAML file into its settings sections.

    Top-level keys name the sections (``logging``, ``scanning``, ...).
    Sections that are empty in the file come back as empty mappings.

    Raises:
        ConfigurationError: If the file is missing or does not hold a
            YAML mapping of mappings.
    """
    try:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            config_key=str(path),
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {path}",
            config_key=str(path),
            details={"error": str(e)},
        ) from e

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Configuration root must be a mapping: {path}",
            config_key=str(path),
        )

    sections: dict[str, dict[str, Any]] = {}
    for name, values in loaded.items():
        if values is None:
            values = {}
        if not isinstance(values, dict):
            raise ConfigurationError(
                f"Configuration section '{name}' must be a mapping: {path}",
                config_key=str(name),
            )
        sections[str(name)] = values
    return sections
