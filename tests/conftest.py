"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from noisemaker.adapters.base import Collaborators
from noisemaker.adapters.mock import MockProcessRunner, MockTransport
from noisemaker.adapters.shell.filesystem import LocalFileSystem
from noisemaker.core.config.loader import NoiseSettings
from noisemaker.core.models.record import Record, RuntimeContext


@pytest.fixture
def context() -> RuntimeContext:
    """A fixed host/process identity."""
    return RuntimeContext(
        os="linux",
        username="tester",
        process_name="/usr/bin/python3",
        pid=1234,
    )


@pytest.fixture
def collaborators() -> Collaborators:
    """Real filesystem, scripted processes and transport."""
    return Collaborators(
        processes=MockProcessRunner(),
        files=LocalFileSystem(),
        transport=MockTransport(),
    )


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Location for an activity log that does not exist yet."""
    return tmp_path / "activity-log.csv"


@pytest.fixture
def settings(log_path: Path) -> NoiseSettings:
    return NoiseSettings(logfile=str(log_path))


@pytest.fixture
def sample_record() -> Record:
    """A fully populated send record."""
    return Record(
        timestamp="2024-05-01T12:00:00+00:00",
        activity="send",
        os="linux",
        username="tester",
        process_name="/usr/bin/python3",
        process_cmd="send POST example.com 8080 http hello",
        pid=1234,
        path="http://example.com:8080",
        status="sent",
        method="POST",
        source_addr="10.0.0.5",
        source_port=51515,
        dest_addr="example.com",
        dest_port=8080,
        bytes_sent=5,
        protocol="http",
    )
