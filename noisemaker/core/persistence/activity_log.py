"""
Activity log — the on-disk CSV file that records one line per invocation.

Opening the log scans any existing file and recovers every row that still
decodes. A bad row is reported at INFO and dropped; it never stops the scan.
After that, ``append`` is the only mutation:

    file absent (or empty)   -> create: header, then the new record
    present, append mode     -> append the new record, existing bytes untouched
    present, overwrite mode  -> rebuild: header, recovered rows, new record

The rebuild is atomic (temp file in the same directory, then rename), so
a crash mid-write leaves the previous log in place.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Literal

from noisemaker.core.models.record import Record
from noisemaker.core.persistence.csv_codec import ParseError, RecordCodec, parse_layout

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "./activity-log.csv"

WriteMode = Literal["create", "append", "overwrite"]


class LogStoreError(Exception):
    """Raised when the activity log cannot be read or written."""


class ActivityLog:
    """Owner of the activity log file for one invocation.

    Args:
        path: Location of the CSV file.
        overwrite: Rebuild the file from recovered history instead of
            appending to it.
        codec: Column layout to write with (default: the 16 base columns).
    """

    def __init__(
        self,
        path: Path | str = DEFAULT_LOG_FILE,
        overwrite: bool = False,
        codec: RecordCodec | None = None,
    ):
        self._path = Path(path)
        self._overwrite = overwrite
        self._codec = codec or RecordCodec()
        self._skipped: list[ParseError] = []
        try:
            st = self._path.stat()
        except (FileNotFoundError, NotADirectoryError):
            st = None
        except OSError as e:
            raise LogStoreError(f"Cannot access activity log {self._path}: {e}") from e
        self._exists = st is not None and stat.S_ISREG(st.st_mode)
        self._empty = self._exists and st.st_size == 0
        self._history: list[Record] = self._scan() if self._exists else []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def exists(self) -> bool:
        return self._exists

    @property
    def history(self) -> list[Record]:
        """Records recovered from the file as it was when opened."""
        return list(self._history)

    @property
    def skipped(self) -> list[ParseError]:
        """Rows that were dropped during the scan."""
        return list(self._skipped)

    @property
    def mode(self) -> WriteMode:
        """How the next ``append`` will write to disk."""
        if not self._exists or self._empty:
            return "create"
        return "overwrite" if self._overwrite else "append"

    # ── Recovery ────────────────────────────────────────────────

    def _scan(self) -> list[Record]:
        records: list[Record] = []
        layout: tuple[str, ...] | None = None

        try:
            with self._path.open("r", encoding="utf-8", errors="replace", newline="\n") as f:
                for row, raw in enumerate(f, start=1):
                    line = raw.rstrip("\r\n")

                    if row == 1:
                        if self._codec.is_header_line(line):
                            continue
                        layout = parse_layout(line)
                        if layout is not None:
                            logger.info(
                                "Non-canonical header in %s, decoding by column name",
                                self._path,
                            )
                            continue
                        logger.debug("First line of %s is not a header: %r", self._path, line)

                    if not line.strip():
                        continue

                    result = self._codec.decode(line, row=row, layout=layout)
                    if isinstance(result, ParseError):
                        logger.info("Skipping malformed log row in %s: %s", self._path, result)
                        self._skipped.append(result)
                        continue
                    records.append(result)
        except OSError as e:
            raise LogStoreError(f"Cannot read activity log {self._path}: {e}") from e

        logger.debug(
            "Recovered %d record(s) from %s (%d skipped)",
            len(records), self._path, len(self._skipped),
        )
        return records

    # ── Mutation ────────────────────────────────────────────────

    def append(self, record: Record) -> None:
        """Write one record, creating or rebuilding the file as needed.

        Raises:
            LogStoreError: If the file cannot be created or written.
        """
        mode = self.mode
        logger.info("Writing activity log %s (mode=%s)", self._path, mode)

        try:
            if mode == "create":
                self._write_fresh([record])
            elif mode == "overwrite":
                self._write_atomic(self._history + [record])
            else:
                self._append_line(record)
        except OSError as e:
            raise LogStoreError(f"Cannot write activity log {self._path}: {e}") from e

        # The file now holds a header, so any further record just appends.
        self._history.append(record)
        self._exists = True
        self._empty = False
        self._overwrite = False

    def _render(self, records: list[Record]) -> str:
        lines = [self._codec.header]
        lines.extend(self._codec.encode(r) for r in records)
        return "\n".join(lines) + "\n"

    def _write_fresh(self, records: list[Record]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8", newline="") as f:
            f.write(self._render(records))

    def _write_atomic(self, records: list[Record]) -> None:
        content = self._render(records)
        fd, tmp_path = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=".activity-log_",
            suffix=".tmp",
        )
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            tmp.replace(self._path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    def _append_line(self, record: Record) -> None:
        # The activity may have emptied or removed the log since it was scanned.
        try:
            size = self._path.stat().st_size
        except FileNotFoundError:
            size = 0
        if size == 0:
            logger.info("Activity log %s is now empty, writing a fresh header", self._path)
            self._write_fresh([record])
            return

        # Keep the new record on its own line if the file lacks a final newline.
        with self._path.open("rb") as f:
            f.seek(-1, os.SEEK_END)
            needs_separator = f.read(1) != b"\n"

        with self._path.open("a", encoding="utf-8", newline="") as f:
            if needs_separator:
                f.write("\n")
            f.write(self._codec.encode(record) + "\n")
