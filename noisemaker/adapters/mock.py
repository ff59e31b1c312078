"""
Mock adapters — scripted process and transport collaborators.

Used in tests (and for dry exercising of the log pipeline) to avoid
spawning real processes or opening sockets. Each mock records the calls
it receives and returns a configurable outcome.
"""

from __future__ import annotations

from noisemaker.adapters.base import ProcessRunner, Transport
from noisemaker.core.models.outcome import ProcessOutcome, TransportOutcome


class MockProcessRunner(ProcessRunner):
    """Process runner that resolves from a fixed table and never spawns.

    By default every command resolves to ``/mock/bin/<command>`` and
    exits with status 0.
    """

    def __init__(
        self,
        known: dict[str, str] | None = None,
        resolve_all: bool = True,
        pid: int = 4242,
    ):
        self._known = dict(known or {})
        self._resolve_all = resolve_all
        self._pid = pid
        self._outcomes: dict[str, ProcessOutcome] = {}
        self._call_log: list[tuple[str, list[str]]] = []

    @property
    def call_log(self) -> list[tuple[str, list[str]]]:
        """All (executable, args) pairs this mock was asked to run."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_outcome(self, executable: str, outcome: ProcessOutcome) -> None:
        """Return ``outcome`` whenever ``executable`` is run."""
        self._outcomes[executable] = outcome

    def resolve(self, command: str) -> str | None:
        if command in self._known:
            return self._known[command]
        return f"/mock/bin/{command}" if self._resolve_all else None

    def run(self, executable: str, args: list[str]) -> ProcessOutcome:
        self._call_log.append((executable, list(args)))
        if executable in self._outcomes:
            return self._outcomes[executable]
        return ProcessOutcome(
            command=executable,
            pid=self._pid,
            exit_code=0,
            description="exit status 0",
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._outcomes.clear()


class MockTransport(Transport):
    """Transport that answers every request with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        body: str = "[mock] ok",
        source_addr: str = "127.0.0.1",
        source_port: int = 50000,
    ):
        self._status_code = status_code
        self._body = body
        self._source_addr = source_addr
        self._source_port = source_port
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, str, str]] = []

    @property
    def call_log(self) -> list[tuple[str, str, str]]:
        """All (method, url, body) triples this mock received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_failure(self, url: str, error: str = "Mock failure") -> None:
        """Fail requests to ``url`` before anything is sent."""
        self._failures[url] = error

    def send(self, method: str, url: str, body: str = "") -> TransportOutcome:
        self._call_log.append((method, url, body))
        if url in self._failures:
            return TransportOutcome(url=url, ok=False, error=self._failures[url])
        return TransportOutcome(
            url=url,
            status_code=self._status_code,
            body=self._body,
            bytes_sent=len(body.encode("utf-8")),
            source_addr=self._source_addr,
            source_port=self._source_port,
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._failures.clear()
