"""
Adapter base — the contracts between the activity engine and the OS.

The engine never touches processes, files or sockets directly. It calls
one of these collaborators and classifies the outcome model it gets back.
Implementations report expected failures in the outcome and do not raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from noisemaker.core.models.outcome import FileOutcome, ProcessOutcome, TransportOutcome


class ProcessRunner(ABC):
    """Spawns a child process and waits for it to exit."""

    @abstractmethod
    def resolve(self, command: str) -> str | None:
        """Resolve a command against the search path.

        Returns:
            Absolute path to the executable, or None if it cannot be found.
        """

    @abstractmethod
    def run(self, executable: str, args: list[str]) -> ProcessOutcome:
        """Start ``executable`` with ``args`` and block until it exits."""


class FileSystem(ABC):
    """Single-path file primitives."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """True if ``path`` is an existing regular file."""

    @abstractmethod
    def create(self, path: str, contents: str) -> FileOutcome:
        """Create a new file. Reports ``exists`` if it is already there."""

    @abstractmethod
    def overwrite(self, path: str, contents: str) -> FileOutcome:
        """Replace an existing file's contents. Reports ``not_found`` if absent."""

    @abstractmethod
    def remove(self, path: str) -> FileOutcome:
        """Delete an existing file. Reports ``not_found`` if absent."""


class Transport(ABC):
    """One synchronous HTTP(S) request/response exchange."""

    @abstractmethod
    def send(self, method: str, url: str, body: str = "") -> TransportOutcome:
        """Send ``body`` to ``url`` and read the whole response."""


def _default_process_runner() -> ProcessRunner:
    from noisemaker.adapters.shell.process import SubprocessRunner

    return SubprocessRunner()


def _default_filesystem() -> FileSystem:
    from noisemaker.adapters.shell.filesystem import LocalFileSystem

    return LocalFileSystem()


def _default_transport() -> Transport:
    from noisemaker.adapters.network.http import HttpTransport

    return HttpTransport()


@dataclass
class Collaborators:
    """The set of adapters an invocation runs against.

    Defaults to the real implementations; tests swap in doubles.
    """

    processes: ProcessRunner = field(default_factory=_default_process_runner)
    files: FileSystem = field(default_factory=_default_filesystem)
    transport: Transport = field(default_factory=_default_transport)
