"""
Filesystem adapter — create, overwrite and remove single files.

Every operation returns a FileOutcome. OS errors are sorted into
``access_denied``, ``not_found`` and ``error`` so the classifiers can
decide the status without inspecting exceptions.
"""

from __future__ import annotations

import logging
from pathlib import Path

from noisemaker.adapters.base import FileSystem
from noisemaker.core.models.outcome import FileOutcome

logger = logging.getLogger(__name__)


def _failure(path: str, e: OSError) -> FileOutcome:
    if isinstance(e, PermissionError):
        kind = "access_denied"
    elif isinstance(e, FileNotFoundError):
        kind = "not_found"
    else:
        kind = "error"
    logger.info("Filesystem %s on %s: %s", kind, path, e)
    return FileOutcome.failure(path, kind, str(e))


class LocalFileSystem(FileSystem):
    """Operate on the local disk with UTF-8 text contents."""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def create(self, path: str, contents: str) -> FileOutcome:
        target = Path(path)
        if target.is_file():
            return FileOutcome.failure(path, "exists", f"File already exists: {path}")

        data = contents.encode("utf-8")
        try:
            with target.open("xb") as f:
                f.write(data)
        except FileExistsError as e:
            # Lost a race, or the path is a directory
            kind = "exists" if target.is_file() else "error"
            return FileOutcome.failure(path, kind, str(e))
        except OSError as e:
            return _failure(path, e)

        logger.debug("Created %s (%d bytes)", path, len(data))
        return FileOutcome.success(path, bytes_written=len(data))

    def overwrite(self, path: str, contents: str) -> FileOutcome:
        target = Path(path)
        if not target.is_file():
            return FileOutcome.failure(path, "not_found", f"File not found: {path}")

        data = contents.encode("utf-8")
        try:
            with target.open("wb") as f:
                f.write(data)
        except OSError as e:
            return _failure(path, e)

        logger.debug("Overwrote %s (%d bytes)", path, len(data))
        return FileOutcome.success(path, bytes_written=len(data))

    def remove(self, path: str) -> FileOutcome:
        target = Path(path)
        if not target.is_file():
            return FileOutcome.failure(path, "not_found", f"File not found: {path}")

        try:
            target.unlink()
        except OSError as e:
            return _failure(path, e)

        logger.debug("Removed %s", path)
        return FileOutcome.success(path)
