"""
Process adapter — spawn a command and wait for it to exit.

The child's stdout is drained line by line on a background thread while
the caller blocks in ``wait()``, so a chatty child can never fill the pipe
and stall. stderr is inherited; stdin is closed.
"""

from __future__ import annotations

import logging
import shutil
import signal
import subprocess
import threading
from typing import IO

from noisemaker.adapters.base import ProcessRunner
from noisemaker.core.models.outcome import ProcessOutcome

logger = logging.getLogger(__name__)


def describe_exit(returncode: int) -> str:
    """Human description of a terminal process state.

    ``exit status N`` for a normal exit, ``signal: <name>`` when the child
    was killed by a signal (negative return code on POSIX).
    """
    if returncode >= 0:
        return f"exit status {returncode}"
    signum = -returncode
    try:
        name = signal.strsignal(signum)
    except ValueError:
        name = None
    return f"signal: {name.lower()}" if name else f"signal: {signum}"


def _drain(stream: IO[str], sink: list[str]) -> None:
    for line in stream:
        text = line.rstrip("\r\n")
        logger.debug("child> %s", text)
        sink.append(text)


class SubprocessRunner(ProcessRunner):
    """Run commands with ``subprocess.Popen``."""

    def resolve(self, command: str) -> str | None:
        return shutil.which(command)

    def run(self, executable: str, args: list[str]) -> ProcessOutcome:
        logger.debug("Starting %s with args %s", executable, args)

        try:
            proc = subprocess.Popen(
                [executable, *args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.info("Unable to start %s: %s", executable, e)
            return ProcessOutcome(command=executable, started=False, error=str(e))

        lines: list[str] = []
        assert proc.stdout is not None
        reader = threading.Thread(
            target=_drain,
            args=(proc.stdout, lines),
            name=f"drain-{proc.pid}",
            daemon=True,
        )
        reader.start()

        returncode = proc.wait()
        reader.join()
        proc.stdout.close()

        logger.info("Process %d exited (%s), %d line(s) of output", proc.pid, returncode, len(lines))
        return ProcessOutcome(
            command=executable,
            pid=proc.pid,
            exit_code=returncode,
            description=describe_exit(returncode),
            output_lines=lines,
        )
