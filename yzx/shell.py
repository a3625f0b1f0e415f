"""Command helper injected into scripts as ``sh``.

Shell-fenced Markdown blocks extract to ``sh(r\"\"\"...\"\"\")`` calls; plain
scripts can call ``sh("ls -la")`` directly.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from yzx.errors import YzxError

DEFAULT_SHELL = "/bin/bash"


@dataclass(frozen=True)
class ProcessOutput:
    """Captured result of one shell command."""

    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def __str__(self) -> str:
        return self.stdout


class ExecutionError(YzxError):
    """A shell command run by a script exited non-zero."""

    def __init__(self, output: ProcessOutput):
        self.output = output
        message = f"exit code: {output.exit_code}"
        if output.stderr.strip():
            message += f"\n{output.stderr.rstrip()}"
        super().__init__(message)


class Shell:
    """Runs commands through a shell binary, echoing them unless quiet."""

    def __init__(
        self,
        shell: str = DEFAULT_SHELL,
        prefix: str = "",
        quiet: bool = False,
        console: Console | None = None,
    ):
        self.shell = shell
        self.prefix = prefix
        self.quiet = quiet
        self.console = console or Console(stderr=True, highlight=False)

    def __call__(self, command: str) -> ProcessOutput:
        command = command.strip("\n")
        if not self.quiet:
            self.console.print(f"[green]$[/] {escape(command)}")

        proc = subprocess.run(
            [self.shell, "-c", self.prefix + command],
            capture_output=True,
            text=True,
        )
        if proc.stdout:
            sys.stdout.write(proc.stdout)
        if proc.stderr:
            sys.stderr.write(proc.stderr)

        output = ProcessOutput(
            command=command,
            exit_code=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
        if not output.ok:
            raise ExecutionError(output)
        return output
