"""
Record — the activity log entry.

One Record is produced per invocation and appended to the activity log.
Records are frozen: the dispatcher stamps the context fields once, and each
classifier contributes its fields through ``Record.merge`` which returns a
new instance.

Fields that do not apply to an activity keep their empty defaults
("" / 0), never None, so every column always serializes to a value.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
import sys
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


def now_rfc3339() -> str:
    """Local time with UTC offset, second precision (RFC 3339)."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


class RuntimeContext(BaseModel):
    """Identity of the host and of the running noisemaker process."""

    model_config = ConfigDict(frozen=True)

    os: str = ""
    username: str = ""
    process_name: str = ""
    pid: int = 0

    @classmethod
    def capture(cls) -> RuntimeContext:
        """Snapshot the current OS, user, executable and PID."""
        try:
            username = getpass.getuser()
        except (KeyError, OSError) as e:
            logger.debug("Cannot resolve current user: %s", e)
            username = ""
        return cls(
            os=platform.system().lower(),
            username=username,
            process_name=sys.executable or "",
            pid=os.getpid(),
        )


class Record(BaseModel):
    """A single activity log entry.

    Column names in the CSV file are camelCase; see
    ``noisemaker.core.persistence.csv_codec.BASE_COLUMNS`` for the
    mapping between columns and these attributes.
    """

    model_config = ConfigDict(frozen=True)

    # ── Context (dispatcher) ────────────────────────────────────
    timestamp: str = ""
    activity: str = ""             # execute, create, update, delete, send
    os: str = ""
    username: str = ""
    process_name: str = ""
    process_cmd: str = ""          # raw text, escaped by the codec
    pid: int = 0

    # ── Outcome (classifier) ────────────────────────────────────
    path: str = ""                 # file path, or resolved URL for send
    status: str = ""

    # ── send only ───────────────────────────────────────────────
    method: str = ""
    source_addr: str = ""
    source_port: int = 0
    dest_addr: str = ""
    dest_port: int = 0
    bytes_sent: int = 0
    protocol: str = ""

    # Only serialized when the response columns are enabled
    response_status: int = 0
    response_body: str = ""

    @classmethod
    def stamp(
        cls,
        activity: str,
        process_cmd: str,
        context: RuntimeContext,
        timestamp: str | None = None,
    ) -> Record:
        """Create the initial record for an invocation.

        The timestamp is captured here, before any classification runs,
        and is never refreshed afterwards.
        """
        return cls(
            timestamp=timestamp or now_rfc3339(),
            activity=activity,
            os=context.os,
            username=context.username,
            process_name=context.process_name,
            process_cmd=process_cmd,
            pid=context.pid,
        )

    def merge(self, updates: dict[str, Any]) -> Record:
        """Return a copy with classifier-provided fields applied."""
        unknown = set(updates) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown record fields: {', '.join(sorted(unknown))}")
        return self.model_copy(update=updates)


class ActivityResult(BaseModel):
    """What one invocation produced: the record plus console text."""

    record: Record
    messages: list[str] = Field(default_factory=list)
