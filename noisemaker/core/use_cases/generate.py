"""
Generate use case — perform one activity and log it.

This is the dispatcher: it picks the activity by name, checks the
argument floor, opens (and recovers) the activity log, stamps the
context fields, runs the activity, merges the classification into a
Record and appends that single Record to the log.

Fatal conditions raise and leave the log untouched:
    ActivityError  unknown/missing activity, too few or invalid arguments,
                   unresolvable execute command
    LogStoreError  the log file cannot be read or written
"""

from __future__ import annotations

import logging

from noisemaker.adapters.base import Collaborators
from noisemaker.core.config.loader import NoiseSettings
from noisemaker.core.engine.activities import ActivityError, lookup
from noisemaker.core.models.record import ActivityResult, Record, RuntimeContext, now_rfc3339
from noisemaker.core.persistence.activity_log import ActivityLog
from noisemaker.core.persistence.csv_codec import RecordCodec

logger = logging.getLogger(__name__)


def open_log(settings: NoiseSettings) -> ActivityLog:
    """Open the configured log file with the configured column layout."""
    return ActivityLog(
        settings.logfile,
        overwrite=settings.overwrite,
        codec=RecordCodec(include_response=settings.record_response),
    )


def run_activity(
    command: str | None,
    args: list[str],
    settings: NoiseSettings | None = None,
    collaborators: Collaborators | None = None,
    context: RuntimeContext | None = None,
) -> ActivityResult:
    """Perform ``command`` with ``args`` and append its record to the log.

    Args:
        command: Activity name (execute, create, update, delete, send).
        args: The activity's positional arguments.
        settings: Effective settings (default: built-in defaults).
        collaborators: Adapters to act through (default: the real ones).
        context: Host/process identity (default: captured now).

    Returns:
        ActivityResult with the record written and console messages.
    """
    if not command:
        raise ActivityError("No command specified!")

    spec = lookup(command)
    spec.check_args(args)

    settings = settings or NoiseSettings()
    log = open_log(settings)
    logger.info("Activity log %s: %d prior record(s), mode=%s", log.path, len(log.history), log.mode)

    # Captured once, before the activity runs
    timestamp = now_rfc3339()
    context = context or RuntimeContext.capture()
    collaborators = collaborators or Collaborators()

    run = spec.handler(list(args), collaborators)

    record = Record.stamp(
        spec.activity.value,
        run.process_cmd,
        context,
        timestamp=timestamp,
    ).merge(run.classification.fields())

    log.append(record)
    logger.info("Logged %s -> %s", record.activity, record.status)

    return ActivityResult(record=record, messages=run.messages)
