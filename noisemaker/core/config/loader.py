"""
Configuration loader — reads noisemaker.yml into NoiseSettings.

The config file is optional. Settings resolve in precedence order:

    CLI flag  >  noisemaker.yml  >  built-in default

Example noisemaker.yml:

    logfile: /var/tmp/noise/activity-log.csv
    overwrite: false
    record_response: true
    log_level: INFO
    diagnostics_file: /var/tmp/noise/diagnostics.log
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from noisemaker.core.persistence.activity_log import DEFAULT_LOG_FILE

logger = logging.getLogger(__name__)

CONFIG_FILE = "noisemaker.yml"


class ConfigError(Exception):
    """Raised when the config file is unreadable or invalid."""


class NoiseSettings(BaseModel):
    """Effective settings for one invocation."""

    model_config = ConfigDict(extra="forbid")

    logfile: str = DEFAULT_LOG_FILE
    overwrite: bool = False
    record_response: bool = False   # append responseStatusCd/responseBody columns
    log_level: str = "WARNING"
    diagnostics_file: str | None = None   # stdlib logging output, never the activity log


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for noisemaker.yml starting from ``start_dir``, walking up.

    Returns:
        Path to the file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_settings(path: Path | None = None) -> NoiseSettings:
    """Load settings from a config file.

    Args:
        path: Explicit config path. If None, searches upward from the
            current directory and falls back to defaults.

    Raises:
        ConfigError: If an explicit path is missing, or any file found
            cannot be read or validated.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return NoiseSettings()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return NoiseSettings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Settings may sit at the top level or under a "noisemaker" key
    if isinstance(data.get("noisemaker"), dict):
        data = data["noisemaker"]

    try:
        settings = NoiseSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings


def resolve_settings(
    config_path: Path | None = None,
    logfile: str | None = None,
    overwrite: bool = False,
    record_response: bool = False,
) -> NoiseSettings:
    """Merge command-line values over the config file.

    ``logfile`` overrides when given. The boolean flags can only switch
    a behavior on; absent, the file's value stands.
    """
    settings = load_settings(config_path)
    updates: dict[str, object] = {}
    if logfile:
        updates["logfile"] = logfile
    if overwrite:
        updates["overwrite"] = True
    if record_response:
        updates["record_response"] = True
    return settings.model_copy(update=updates) if updates else settings
