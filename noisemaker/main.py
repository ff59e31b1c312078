"""
Noisemaker — CLI entrypoint.

Usage:
    noisemaker [-logfile=<path>] [-overwrite] <activity> [args...]

    noisemaker create ./test.txt "hello"
    noisemaker -logfile=/tmp/noise.csv update ./test.txt "bye"
    noisemaker -overwrite delete ./test.txt
    noisemaker execute whoami
    noisemaker send GET www.example.com 443 https
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from noisemaker import __version__
from noisemaker.core.config.loader import ConfigError, resolve_settings
from noisemaker.core.engine.activities import ActivityError
from noisemaker.core.engine.classifier import Status
from noisemaker.core.observability.logging_config import setup_logging
from noisemaker.core.persistence.activity_log import LogStoreError
from noisemaker.core.use_cases.generate import run_activity

_STATUS_COLORS = {
    Status.CREATED: "green",
    Status.UPDATED: "green",
    Status.DELETED: "green",
    Status.SENT: "green",
    Status.EXISTS: "yellow",
    Status.NOT_FOUND: "yellow",
    Status.ERROR: "red",
    Status.UNABLE_TO_RUN: "red",
}


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
)
@click.version_option(version=__version__, prog_name="noisemaker")
@click.option(
    "-logfile",
    "--logfile",
    "logfile",
    default=None,
    help="Path to the activity log CSV file (default: ./activity-log.csv).",
)
@click.option(
    "-overwrite",
    "--overwrite",
    "overwrite",
    is_flag=True,
    help="Rebuild the activity log from its recovered rows instead of appending.",
)
@click.option(
    "--record-response",
    is_flag=True,
    help="Add responseStatusCd/responseBody columns to the log.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to noisemaker.yml (default: auto-detect).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the record as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.argument("activity", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(
    logfile: str | None,
    overwrite: bool,
    record_response: bool,
    config_path: str | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    activity: str | None,
    args: tuple[str, ...],
) -> None:
    """Noisemaker — generate endpoint activity and log it.

    ACTIVITY is one of: execute, create, update, delete, send.

    \b
      execute <command> [args...]
      create  <path> [contents]
      update  <path> [contents]
      delete  <path>
      send    <method> <destination> [port] [protocol] [body]
    """
    if debug:
        flag_level = "DEBUG"
    elif verbose:
        flag_level = "INFO"
    elif quiet:
        flag_level = "ERROR"
    else:
        flag_level = None

    try:
        settings = resolve_settings(
            config_path=Path(config_path) if config_path else None,
            logfile=logfile,
            overwrite=overwrite,
            record_response=record_response,
        )
        setup_logging(settings, flag_level)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    try:
        result = run_activity(activity, list(args), settings)
    except (ActivityError, LogStoreError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    record = result.record

    if as_json:
        click.echo(json.dumps(record.model_dump(mode="json"), indent=2))
        return

    if not quiet:
        for message in result.messages:
            click.echo(message)

    color = _STATUS_COLORS.get(record.status, "white")
    click.echo(f"{record.activity} → ", nl=False)
    click.secho(record.status, fg=color, bold=True)
    if not quiet:
        click.echo(f"   logged to {settings.logfile}")


if __name__ == "__main__":
    cli()
