"""
Activity classifier — map a collaborator outcome to a log status.

One pure function per activity. Each takes the already-validated inputs
plus whatever the collaborator reported and returns a Classification:
the terminal status and the Record fields that activity owns. Nothing
here touches the OS; the decision is made at a single point and never
retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from urllib.parse import urlsplit

from noisemaker.core.models.outcome import FileOutcome, ProcessOutcome, TransportOutcome

logger = logging.getLogger(__name__)

SUPPORTED_PROTOCOLS = ("http", "https")


class Status(StrEnum):
    """Fixed status vocabulary. ``execute`` also logs free-text exit descriptions."""

    CREATED = "created"
    EXISTS = "exists"
    UPDATED = "updated"
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    SENT = "sent"
    ERROR = "error"
    UNABLE_TO_RUN = "unable_to_run"


@dataclass(frozen=True)
class Classification:
    """Terminal status plus the record fields an activity fills in."""

    status: str
    updates: dict[str, Any] = field(default_factory=dict)

    def fields(self) -> dict[str, Any]:
        """All record updates, status included."""
        return {**self.updates, "status": str(self.status)}


@dataclass(frozen=True)
class SendRequest:
    """Parsed ``send`` arguments."""

    method: str
    destination: str
    port: int = 80
    protocol: str = "http"
    body: str = ""

    @property
    def body_size(self) -> int:
        return len(self.body.encode("utf-8"))


# ── execute ─────────────────────────────────────────────────────


def classify_execute(outcome: ProcessOutcome) -> Classification:
    """Status is the child's terminal description; pid is the child's."""
    if not outcome.started:
        return Classification(Status.UNABLE_TO_RUN, {"pid": 0})
    return Classification(outcome.description, {"pid": outcome.pid})


# ── create / update / delete ────────────────────────────────────


def classify_create(outcome: FileOutcome) -> Classification:
    if outcome.kind == "exists":
        return Classification(Status.EXISTS)
    if outcome.ok:
        return Classification(Status.CREATED)
    return Classification(Status.ERROR)


def classify_update(outcome: FileOutcome) -> Classification:
    if outcome.kind == "not_found":
        return Classification(Status.NOT_FOUND)
    if outcome.ok:
        return Classification(Status.UPDATED)
    return Classification(Status.ERROR)


def classify_delete(outcome: FileOutcome) -> Classification:
    if outcome.kind == "not_found":
        return Classification(Status.NOT_FOUND)
    if outcome.ok:
        return Classification(Status.DELETED)
    return Classification(Status.ERROR)


# ── send ────────────────────────────────────────────────────────


def inject_port(destination: str, port: int, protocol: str) -> str | None:
    """Build the request URL with ``port`` set on the destination host.

    ``('www.example.com/images', 443, 'https')`` becomes
    ``'https://www.example.com:443/images'``. A port already present in
    the destination is replaced. Returns None when no host can be parsed.
    """
    try:
        parts = urlsplit(f"{protocol}://{destination}")
        host = parts.hostname
    except ValueError:
        return None
    if not host:
        return None

    userinfo, _, _ = parts.netloc.rpartition("@")
    host_text = f"[{host}]" if ":" in host else host
    netloc = f"{userinfo}@{host_text}:{port}" if userinfo else f"{host_text}:{port}"
    return parts._replace(netloc=netloc).geturl()


def classify_send(
    request: SendRequest,
    url: str | None,
    outcome: TransportOutcome | None,
) -> Classification:
    """Classify a send attempt.

    Args:
        request: The parsed arguments.
        url: The resolved URL, or None if the destination had no host.
        outcome: The transport result, or None if nothing was attempted.
    """
    updates: dict[str, Any] = {
        "method": request.method,
        "dest_addr": request.destination,
        "dest_port": request.port,
        "protocol": request.protocol,
        "bytes_sent": 0,
    }

    if request.protocol not in SUPPORTED_PROTOCOLS:
        logger.info("unknown_protocol: %s", request.protocol)
        updates["path"] = f"{request.protocol}://{request.destination}"
        return Classification(Status.ERROR, updates)

    if url is None:
        logger.info("invalid_address: %s", request.destination)
        updates["path"] = f"{request.protocol}://{request.destination}"
        return Classification(Status.ERROR, updates)

    updates["path"] = url
    if outcome is None:
        return Classification(Status.ERROR, updates)

    updates.update(
        bytes_sent=outcome.bytes_sent,
        source_addr=outcome.source_addr,
        source_port=outcome.source_port,
    )
    if not outcome.ok:
        return Classification(Status.ERROR, updates)

    updates.update(response_status=outcome.status_code, response_body=outcome.body)
    return Classification(Status.SENT, updates)
