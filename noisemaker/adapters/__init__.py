"""Adapters — process, filesystem and network bindings.

Public re-exports for convenient access.
"""

from noisemaker.adapters.base import Collaborators, FileSystem, ProcessRunner, Transport
from noisemaker.adapters.mock import MockProcessRunner, MockTransport

__all__ = [
    "Collaborators",
    "FileSystem",
    "MockProcessRunner",
    "MockTransport",
    "ProcessRunner",
    "Transport",
]
