"""
Activities — the five kinds of noise and their argument contracts.

Each Activity maps to an ActivitySpec: the minimum argument count, a
usage string, and the handler that validates the remaining arguments,
calls its collaborator, and classifies the outcome.

Argument floors:

    execute  <command> [args...]                              1
    create   <path> [contents]                                1
    update   <path> [contents]                                1
    delete   <path>                                           1
    send     <method> <dest> [port] [protocol] [body]         2
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from noisemaker.adapters.base import Collaborators
from noisemaker.core.engine.classifier import (
    Classification,
    SendRequest,
    classify_create,
    classify_delete,
    classify_execute,
    classify_send,
    classify_update,
    inject_port,
)

logger = logging.getLogger(__name__)


class ActivityError(Exception):
    """Fatal: the invocation cannot proceed and no record is written."""


class Activity(StrEnum):
    EXECUTE = "execute"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SEND = "send"


@dataclass
class ActivityRun:
    """What a handler produced, before it is merged into a Record."""

    process_cmd: str
    classification: Classification
    messages: list[str] = field(default_factory=list)


Handler = Callable[[list[str], Collaborators], ActivityRun]


@dataclass(frozen=True)
class ActivitySpec:
    activity: Activity
    min_args: int
    usage: str
    handler: Handler

    def check_args(self, args: list[str]) -> None:
        """Raise ActivityError if fewer than ``min_args`` were given."""
        if len(args) < self.min_args:
            raise ActivityError(
                f"not enough arguments for {self.activity}! Args: {args}"
                f" (usage: {self.activity} {self.usage})"
            )


def command_string(command: str, args: list[str]) -> str:
    """The command line as logged in ``processCmd`` (unescaped)."""
    return " ".join([command, *args])


# ── Handlers ────────────────────────────────────────────────────


def run_execute(args: list[str], collaborators: Collaborators) -> ActivityRun:
    command, proc_args = args[0], list(args[1:])
    executable = collaborators.processes.resolve(command)
    if executable is None:
        raise ActivityError(f"unable to resolve path for {command}: executable file not found")

    messages = [f"Running command {executable} with args {proc_args}"]
    outcome = collaborators.processes.run(executable, proc_args)
    messages.extend(outcome.output_lines)
    if outcome.started:
        messages.append(f"Process {outcome.pid} finished: {outcome.description}")
    else:
        messages.append(f"Unable to run {executable}: {outcome.error}")

    return ActivityRun(
        process_cmd=command_string(command, proc_args),
        classification=classify_execute(outcome),
        messages=messages,
    )


def run_create(args: list[str], collaborators: Collaborators) -> ActivityRun:
    path = args[0]
    contents = args[1] if len(args) > 1 else ""

    outcome = collaborators.files.create(path, contents)
    classification = classify_create(outcome)
    if outcome.ok:
        message = f"{outcome.bytes_written} bytes written to new file {path}"
    elif outcome.kind == "exists":
        message = f"File {path} already exists, unable to write!"
    else:
        message = f"Error: {outcome.error}"

    return ActivityRun(command_string(Activity.CREATE, args), classification, [message])


def run_update(args: list[str], collaborators: Collaborators) -> ActivityRun:
    path = args[0]
    contents = args[1] if len(args) > 1 else ""

    outcome = collaborators.files.overwrite(path, contents)
    classification = classify_update(outcome)
    if outcome.ok:
        message = f"{outcome.bytes_written} bytes written to updated file {path}"
    elif outcome.kind == "not_found":
        message = f"File {path} not found for updating!"
    else:
        message = f"Error: {outcome.error}"

    return ActivityRun(command_string(Activity.UPDATE, args), classification, [message])


def run_delete(args: list[str], collaborators: Collaborators) -> ActivityRun:
    path = args[0]

    outcome = collaborators.files.remove(path)
    classification = classify_delete(outcome)
    if outcome.ok:
        message = f"File {path} deleted"
    elif outcome.kind == "not_found":
        message = f"File {path} not found for deleting!"
    else:
        message = f"Error: {outcome.error}"

    return ActivityRun(command_string(Activity.DELETE, args), classification, [message])


def parse_send_args(args: list[str]) -> SendRequest:
    """Turn positional send arguments into a SendRequest.

    Raises:
        ActivityError: If the port is not an integer in 1..65535.
    """
    port = 80
    if len(args) > 2:
        try:
            port = int(args[2])
        except ValueError:
            raise ActivityError(f"invalid port for send: {args[2]!r}! Args: {args}") from None
        if not 0 < port < 65536:
            raise ActivityError(f"port out of range for send: {port}! Args: {args}")

    return SendRequest(
        method=args[0],
        destination=args[1],
        port=port,
        protocol=args[3] if len(args) > 3 else "http",
        body=args[4] if len(args) > 4 else "",
    )


def run_send(args: list[str], collaborators: Collaborators) -> ActivityRun:
    request = parse_send_args(args)
    process_cmd = command_string(Activity.SEND, args)
    messages = [
        f"Sending {request.body_size} bytes of data to {request.method} {request.destination}"
        f" (port {request.port}) using protocol {request.protocol}..."
    ]

    url = inject_port(request.destination, request.port, request.protocol)
    outcome = None
    if url is not None and request.protocol in ("http", "https"):
        logger.info("Resolved URL: %s", url)
        outcome = collaborators.transport.send(request.method, url, request.body)

    classification = classify_send(request, url, outcome)
    if outcome is not None and outcome.ok:
        messages.append(
            f"Received HTTP(s) response code {outcome.status_code}, and response body:\n"
            f"=== START ===\n{outcome.body}\n=== END ===\n"
        )
    elif outcome is not None:
        messages.append(f"Error: {outcome.error}")
    else:
        messages.append(f"Error: cannot send to {classification.updates['path']}")

    return ActivityRun(process_cmd, classification, messages)


ACTIVITIES: dict[Activity, ActivitySpec] = {
    Activity.EXECUTE: ActivitySpec(Activity.EXECUTE, 1, "<command> [args...]", run_execute),
    Activity.CREATE: ActivitySpec(Activity.CREATE, 1, "<path> [contents]", run_create),
    Activity.UPDATE: ActivitySpec(Activity.UPDATE, 1, "<path> [contents]", run_update),
    Activity.DELETE: ActivitySpec(Activity.DELETE, 1, "<path>", run_delete),
    Activity.SEND: ActivitySpec(
        Activity.SEND, 2, "<method> <destination> [port] [protocol] [body]", run_send,
    ),
}


def lookup(name: str) -> ActivitySpec:
    """Find the ActivitySpec for an activity name.

    Raises:
        ActivityError: If the name is not one of the five activities.
    """
    try:
        return ACTIVITIES[Activity(name)]
    except ValueError:
        valid = ", ".join(a.value for a in Activity)
        raise ActivityError(f"invalid command specified: {name} (expected one of: {valid})") from None
