"""
Collaborator outcomes — what the process, filesystem and transport
adapters report back.

Adapters never raise for expected OS or network failures. They describe
what happened in one of these models and the classifiers turn that into
a status. This mirrors the Action/Receipt contract: requests go out,
outcomes come back, never exceptions.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

FileOutcomeKind = Literal["ok", "exists", "not_found", "access_denied", "error"]


class ProcessOutcome(BaseModel):
    """Terminal state of a spawned child process."""

    command: str                     # resolved executable path
    pid: int = 0
    started: bool = True
    exit_code: int | None = None
    description: str = ""            # "exit status 0", "signal: killed"
    output_lines: list[str] = Field(default_factory=list)
    error: str | None = None


class FileOutcome(BaseModel):
    """Result of a create/overwrite/remove on a single path."""

    path: str
    kind: FileOutcomeKind = "ok"
    bytes_written: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == "ok"

    @classmethod
    def success(cls, path: str, bytes_written: int = 0) -> FileOutcome:
        return cls(path=path, kind="ok", bytes_written=bytes_written)

    @classmethod
    def failure(cls, path: str, kind: FileOutcomeKind, error: str = "") -> FileOutcome:
        return cls(path=path, kind=kind, error=error or None)


class TransportOutcome(BaseModel):
    """Result of one HTTP(S) round trip.

    ``bytes_sent`` counts request body bytes actually handed to the
    connection, so it stays 0 when the request never left the host.
    """

    url: str
    ok: bool = True
    status_code: int = 0
    body: str = ""
    bytes_sent: int = 0
    source_addr: str = ""
    source_port: int = 0
    error: str | None = None
