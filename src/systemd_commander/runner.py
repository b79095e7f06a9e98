from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from .util import split_args

log = logging.getLogger(__name__)


class StatusReporter(Protocol):
    """Receives one message per executed command."""

    def report_success(self, message: str) -> None: ...

    def report_error(self, message: str) -> None: ...


class CommandError(RuntimeError):
    """Raised when a command exits non-zero or cannot be spawned."""

    def __init__(self, invocation: str, output: bytes = b"", returncode: int | None = None) -> None:
        super().__init__(f"command failed: {invocation}")
        self.invocation = invocation
        self.output = output
        self.returncode = returncode


class CommandRunner:
    """Run external commands synchronously and report each outcome.

    ``args`` is split on single spaces before execution. There is no quoting,
    so an argument can never contain a space.
    """

    def __init__(self, reporter: StatusReporter) -> None:
        self.reporter = reporter

    def exec(self, command: str, args: str) -> bytes:
        invocation = f"{command} {args}"
        argv = [command, *split_args(args)]
        log.debug("exec %r", argv)
        try:
            proc = subprocess.run(argv, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=False)
        except OSError as e:
            log.warning("failed to spawn %s: %s", command, e)
            self.reporter.report_error(f"{invocation}\n{e}")
            raise CommandError(invocation) from e

        out = proc.stdout or b""
        if proc.returncode != 0:
            log.warning("%s exited with %d", invocation, proc.returncode)
            self.reporter.report_error(f"{invocation}\n" + out.decode(errors="replace"))
            raise CommandError(invocation, out, proc.returncode)

        self.reporter.report_success(f"{invocation}\n")
        return out
