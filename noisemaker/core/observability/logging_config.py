"""
Logging configuration — diagnostics for one noisemaker invocation.

Diagnostics (log mode decisions, skipped log rows, resolved URLs, child
process lines) go through stdlib logging. They are separate from the CSV
activity log and from the console messages the CLI prints.

Console level, in precedence order:
    --debug / --verbose / --quiet  >  NOISEMAKER_LOG_LEVEL  >  log_level  >  WARNING

An optional diagnostics file (``diagnostics_file`` or NOISEMAKER_LOG_FILE)
logs at NOISEMAKER_LOG_FILE_LEVEL, else at the configured ``log_level``.
A console flag such as ``--quiet`` never changes what the file records.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from noisemaker.core.config.loader import ConfigError, NoiseSettings

ENV_LEVEL = "NOISEMAKER_LOG_LEVEL"
ENV_FILE = "NOISEMAKER_LOG_FILE"
ENV_FILE_LEVEL = "NOISEMAKER_LOG_FILE_LEVEL"

# WARNING and above: message only
_FMT_CONSOLE = "%(message)s"

# INFO/DEBUG console and the diagnostics file
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric


def console_level(settings: NoiseSettings, flag_level: str | None = None) -> int:
    return parse_level(flag_level or os.environ.get(ENV_LEVEL) or settings.log_level)


def diagnostics_file(settings: NoiseSettings) -> Path | None:
    """Where file diagnostics go, if anywhere.

    Raises:
        ConfigError: If it points at the activity log itself.
    """
    raw = os.environ.get(ENV_FILE) or settings.diagnostics_file
    if not raw:
        return None
    path = Path(raw)
    if path.resolve() == Path(settings.logfile).resolve():
        raise ConfigError(f"Diagnostics file {path} is the activity log; choose another path")
    return path


def setup_logging(settings: NoiseSettings, flag_level: str | None = None) -> None:
    """Configure the root logger for this invocation.

    Args:
        settings: Effective settings (``log_level``, ``diagnostics_file``).
        flag_level: Level chosen by a CLI flag, overriding everything else
            for the console.

    Raises:
        ConfigError: If the diagnostics file is the activity log or
            cannot be opened.
    """
    level = console_level(settings, flag_level)
    log_file = diagnostics_file(settings)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    if level <= logging.INFO:
        console.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT))
    else:
        console.setFormatter(logging.Formatter(_FMT_CONSOLE))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective = level

    if log_file is not None:
        file_level = parse_level(os.environ.get(ENV_FILE_LEVEL) or settings.log_level)
        try:
            fh = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot open diagnostics file {log_file}: {e}") from e
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT))
        root.addHandler(fh)
        effective = min(effective, file_level)

    root.setLevel(effective)
