"""
Configuration loader for git_semver.

Settings come from three layers, highest precedence first:

1. Explicit overrides (command line options or ``INPUT_*`` environment
   variables, both resolved by the CLI).
2. An optional JSON configuration file, by default ``.git_semver.json``
   in the repository root.
3. Built-in defaults.

The merged result is validated and returned as an immutable
:class:`VersionConfig`. Missing or malformed settings raise
:class:`ConfigError` before any Git command is executed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = ".git_semver.json"

DEFAULTS: Dict[str, str] = {
    "tag_prefix": "",
    "main_format": "${major}.${minor}.${patch}",
    "increment_format": "${increment}",
    "change_path": "",
}

REQUIRED_KEYS = ["branch", "major_pattern", "minor_pattern", "increment_delimiter"]


class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class VersionConfig:
    """Validated settings for one version calculation."""

    branch: str
    major_pattern: str
    minor_pattern: str
    increment_delimiter: str
    tag_prefix: str = DEFAULTS["tag_prefix"]
    main_format: str = DEFAULTS["main_format"]
    increment_format: str = DEFAULTS["increment_format"]
    change_path: str = DEFAULTS["change_path"]


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")
    return data


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> VersionConfig:
    """Merge and validate the configuration.

    Args:
        config_path: JSON file to read. A missing file is an error only
            when it was requested explicitly; pass ``None`` to skip the
            file layer.
        overrides: Values that take precedence over the file. ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        The validated :class:`VersionConfig`.

    Raises:
        ConfigError: If the file is unreadable, a required key is missing
            or empty, a value is not a string, or a format template lacks
            a required placeholder.
    """
    data: Dict[str, Any] = dict(DEFAULTS)

    if config_path is not None:
        if not config_path.exists():
            logger.error("Configuration file '%s' does not exist", config_path)
            raise ConfigError(f"Missing configuration file: {config_path}")
        data.update(_read_config_file(config_path))
        logger.debug("Loaded configuration file: %s", config_path)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    known = {f.name for f in fields(VersionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    missing = [key for key in REQUIRED_KEYS if not data.get(key)]
    if missing:
        logger.error("Configuration missing required keys: %s", missing)
        raise ConfigError(f"Missing required configuration keys: {', '.join(missing)}")

    for key, value in data.items():
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string")

    for placeholder in ("major", "minor", "patch"):
        if "${" + placeholder + "}" not in data["main_format"]:
            raise ConfigError(f"'main_format' must contain ${{{placeholder}}}")
    if "${increment}" not in data["increment_format"]:
        raise ConfigError("'increment_format' must contain ${increment}")

    config = VersionConfig(**data)
    logger.debug("Configuration: %s", config)
    return config
