"""
Smoke tests — verify the bootstrap is healthy.

These tests ensure the basic scaffolding works:
- Package imports successfully
- CLI entrypoint responds
- Version is set
"""

import subprocess
import sys

from click.testing import CliRunner

from noisemaker import __version__
from noisemaker.main import cli


class TestBootstrap:
    """Verify the project bootstrap is healthy."""

    def test_version_is_set(self):
        """Version string should be defined and non-empty."""
        assert __version__
        assert isinstance(__version__, str)

    def test_cli_help(self):
        """CLI --help should list the activities."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("execute", "create", "update", "delete", "send"):
            assert name in result.output

    def test_cli_version(self):
        """CLI --version should print the version."""
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_module_entrypoint(self, tmp_path):
        """``python -m noisemaker.main`` runs a real activity end to end."""
        proc = subprocess.run(
            [sys.executable, "-m", "noisemaker.main", "execute", sys.executable, "-c", "print('hi')"],
            cwd=tmp_path,
            capture_output=True,
            text=True,
        )
        assert proc.returncode == 0, proc.stderr
        assert "hi" in proc.stdout
        assert "exit status 0" in proc.stdout

        row = (tmp_path / "activity-log.csv").read_text().splitlines()[1]
        assert ",execute," in row
        assert ",exit status 0," in row
