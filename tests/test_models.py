"""
Tests for domain models — records, runtime context, outcomes.
"""

import os

import pytest
from pydantic import ValidationError

from noisemaker.core.models import (
    FileOutcome,
    ProcessOutcome,
    Record,
    RuntimeContext,
    TransportOutcome,
)


class TestRecord:
    """Record model tests."""

    def test_defaults_are_never_none(self):
        """Every field has an empty default, never None."""
        r = Record()
        for name, value in r.model_dump().items():
            assert value is not None, name
        assert r.pid == 0
        assert r.path == ""

    def test_frozen(self):
        r = Record(activity="create")
        with pytest.raises(ValidationError):
            r.status = "created"

    def test_stamp_fills_context(self, context):
        r = Record.stamp("create", "create ./a.txt", context, timestamp="2024-01-01T00:00:00Z")
        assert r.timestamp == "2024-01-01T00:00:00Z"
        assert r.activity == "create"
        assert r.os == "linux"
        assert r.username == "tester"
        assert r.process_name == "/usr/bin/python3"
        assert r.process_cmd == "create ./a.txt"
        assert r.pid == 1234
        assert r.status == ""

    def test_stamp_generates_timestamp(self, context):
        r = Record.stamp("delete", "delete x", context)
        assert r.timestamp
        assert "T" in r.timestamp

    def test_merge_returns_new_record(self, context):
        base = Record.stamp("execute", "ls", context)
        merged = base.merge({"status": "exit status 0", "pid": 99})
        assert merged.status == "exit status 0"
        assert merged.pid == 99
        assert base.pid == 1234
        assert base.status == ""
        assert merged.timestamp == base.timestamp

    def test_merge_rejects_unknown_fields(self):
        with pytest.raises(ValueError, match="bogus"):
            Record().merge({"bogus": 1})


class TestRuntimeContext:
    def test_capture(self):
        ctx = RuntimeContext.capture()
        assert ctx.pid == os.getpid()
        assert ctx.os
        assert ctx.process_name


class TestOutcomes:
    def test_file_success(self):
        o = FileOutcome.success("a.txt", bytes_written=3)
        assert o.ok
        assert o.kind == "ok"
        assert o.bytes_written == 3

    def test_file_failure(self):
        o = FileOutcome.failure("a.txt", "access_denied", "Permission denied")
        assert not o.ok
        assert o.kind == "access_denied"
        assert o.error == "Permission denied"

    def test_file_failure_rejects_unknown_kind(self):
        with pytest.raises(ValidationError):
            FileOutcome.failure("a.txt", "melted")

    def test_process_defaults(self):
        o = ProcessOutcome(command="/bin/true")
        assert o.started
        assert o.output_lines == []

    def test_transport_defaults(self):
        o = TransportOutcome(url="http://x:80")
        assert o.ok
        assert o.bytes_sent == 0
        assert o.error is None
