"""
Tests for the generate use case — one invocation, one record.
"""

from pathlib import Path

import pytest

from noisemaker.adapters.mock import MockProcessRunner, MockTransport
from noisemaker.core.config.loader import NoiseSettings
from noisemaker.core.engine.activities import ActivityError
from noisemaker.core.persistence.activity_log import ActivityLog, LogStoreError
from noisemaker.core.persistence.csv_codec import HEADER, RecordCodec, encode
from noisemaker.core.use_cases.generate import open_log, run_activity


def _rows(log_path: Path) -> list[str]:
    return log_path.read_text(encoding="utf-8").splitlines()


class TestCreate:
    def test_create_new_file(self, tmp_path, settings, collaborators, context, log_path):
        target = tmp_path / "test.txt"
        result = run_activity("create", [str(target)], settings, collaborators, context)

        record = result.record
        assert record.activity == "create"
        assert record.status == "created"
        assert record.path == ""
        assert record.bytes_sent == 0
        assert record.process_cmd == f"create {target}"
        assert target.read_text() == ""

        rows = _rows(log_path)
        assert rows == [HEADER, encode(record)]

    def test_create_existing_file(self, tmp_path, settings, collaborators, context, log_path):
        target = tmp_path / "README.md"
        target.write_text("original")

        result = run_activity("create", [str(target), "Hello"], settings, collaborators, context)

        assert result.record.status == "exists"
        assert target.read_text() == "original"
        assert len(_rows(log_path)) == 2

    def test_contents_with_delimiters_stay_on_one_row(
        self, tmp_path, settings, collaborators, context, log_path,
    ):
        target = tmp_path / "test.txt"
        contents = "Hello, World!\n------------\n"
        result = run_activity("create", [str(target), contents], settings, collaborators, context)

        assert result.record.process_cmd == f"create {target} {contents}"
        rows = _rows(log_path)
        assert len(rows) == 2
        assert "Hello\\, World!\\n" in rows[1]


class TestUpdateDelete:
    def test_update_replaces(self, tmp_path, settings, collaborators, context):
        target = tmp_path / "test.txt"
        target.write_text("Hello World!")
        result = run_activity("update", [str(target), "Goodbye"], settings, collaborators, context)
        assert result.record.status == "updated"
        assert target.read_text() == "Goodbye"

    def test_update_missing_file(self, tmp_path, settings, collaborators, context, log_path):
        target = tmp_path / "missing-file"
        result = run_activity("update", [str(target), "x"], settings, collaborators, context)
        assert result.record.status == "not_found"
        assert not target.exists()
        assert len(_rows(log_path)) == 2

    def test_delete(self, tmp_path, settings, collaborators, context):
        target = tmp_path / "test.txt"
        target.write_text("x")
        result = run_activity("delete", [str(target)], settings, collaborators, context)
        assert result.record.status == "deleted"
        assert not target.exists()

    def test_delete_missing_file(self, tmp_path, settings, collaborators, context):
        result = run_activity("delete", [str(tmp_path / "nope")], settings, collaborators, context)
        assert result.record.status == "not_found"


class TestExecute:
    def test_execute_record(self, settings, collaborators, context):
        result = run_activity("execute", ["whoami"], settings, collaborators, context)
        record = result.record
        assert record.status == "exit status 0"
        assert record.pid == 4242
        assert record.process_cmd == "whoami"
        assert record.process_name == "/usr/bin/python3"

    def test_unresolvable_writes_nothing(self, settings, collaborators, context, log_path):
        collaborators.processes = MockProcessRunner(resolve_all=False)
        with pytest.raises(ActivityError, match="unable to resolve path"):
            run_activity("execute", ["nonexistent-program"], settings, collaborators, context)
        assert not log_path.exists()


class TestSend:
    def test_send_success(self, settings, collaborators, context):
        result = run_activity(
            "send", ["POST", "example.com/api", "8080", "http", "hello"],
            settings, collaborators, context,
        )
        record = result.record
        assert record.status == "sent"
        assert record.path == "http://example.com:8080/api"
        assert record.method == "POST"
        assert record.dest_addr == "example.com/api"
        assert record.dest_port == 8080
        assert record.bytes_sent == 5
        assert record.source_addr == "127.0.0.1"
        assert record.source_port == 50000

    def test_plain_http_to_tls_port(self, settings, collaborators, context):
        transport = MockTransport()
        transport.set_failure("http://www.example.com:443", "Remote end closed connection")
        collaborators.transport = transport

        result = run_activity(
            "send", ["GET", "www.example.com", "443", "http"], settings, collaborators, context,
        )

        record = result.record
        assert record.status == "error"
        assert record.bytes_sent == 0
        assert record.path == "http://www.example.com:443"
        assert record.process_cmd == "send GET www.example.com 443 http"

    def test_response_columns_when_enabled(self, log_path, collaborators, context):
        settings = NoiseSettings(logfile=str(log_path), record_response=True)
        run_activity("send", ["GET", "example.com"], settings, collaborators, context)

        codec = RecordCodec(include_response=True)
        rows = _rows(log_path)
        assert rows[0] == codec.header
        assert rows[1].endswith(",200,[mock] ok")


class TestFatal:
    @pytest.mark.parametrize(
        "command,args,message",
        [
            (None, [], "No command specified!"),
            ("", [], "No command specified!"),
            ("modify", ["x"], "invalid command specified: modify"),
            ("create", [], "not enough arguments for create"),
            ("update", [], "not enough arguments for update"),
            ("send", ["GET"], "not enough arguments for send"),
            ("send", ["GET", "example.com", "http"], "invalid port"),
            ("send", ["GET", "example.com", "0"], "out of range"),
        ],
    )
    def test_no_record_written(self, command, args, message, settings, collaborators, context, log_path):
        with pytest.raises(ActivityError, match=message):
            run_activity(command, args, settings, collaborators, context)
        assert not log_path.exists()
        assert collaborators.transport.call_count == 0

    def test_unwritable_log(self, tmp_path, collaborators, context):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        settings = NoiseSettings(logfile=str(blocker / "log.csv"))
        with pytest.raises(LogStoreError):
            run_activity("execute", ["ls"], settings, collaborators, context)


class TestLogModes:
    def test_successive_runs_append(self, tmp_path, settings, collaborators, context, log_path):
        target = tmp_path / "a.txt"
        run_activity("create", [str(target)], settings, collaborators, context)
        run_activity("update", [str(target), "x"], settings, collaborators, context)
        run_activity("delete", [str(target)], settings, collaborators, context)

        log = ActivityLog(log_path)
        assert [r.status for r in log.history] == ["created", "updated", "deleted"]
        assert _rows(log_path).count(HEADER) == 1

    def test_overwrite_repairs_log(self, tmp_path, log_path, collaborators, context):
        log_path.write_text("junk\nmore,junk\n")
        settings = NoiseSettings(logfile=str(log_path), overwrite=True)

        result = run_activity("execute", ["ls"], settings, collaborators, context)

        assert _rows(log_path) == [HEADER, encode(result.record)]

    def test_context_fields_stamped(self, settings, collaborators, context):
        record = run_activity("execute", ["ls"], settings, collaborators, context).record
        assert (record.os, record.username, record.process_name) == (
            "linux", "tester", "/usr/bin/python3",
        )
        assert "T" in record.timestamp

    def test_open_log_uses_settings(self, log_path):
        log = open_log(NoiseSettings(logfile=str(log_path), overwrite=True, record_response=True))
        assert log.path == log_path
        assert log.mode == "create"
