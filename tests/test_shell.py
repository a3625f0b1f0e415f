"""Tests for the ``sh`` command helper."""

import io
import subprocess
from unittest.mock import patch

import pytest
from rich.console import Console

from yzx.errors import YzxError
from yzx.shell import ExecutionError, ProcessOutput, Shell


def _completed(code: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], code, stdout=stdout, stderr=stderr)


def test_runs_command_through_shell_with_prefix():
    shell = Shell(shell="/bin/sh", prefix="set -e; ", quiet=True)
    with patch("yzx.shell.subprocess.run", return_value=_completed(stdout="hi\n")) as run:
        output = shell("\necho hi\n")

    assert run.call_args.args[0] == ["/bin/sh", "-c", "set -e; echo hi"]
    assert output == ProcessOutput(command="echo hi", exit_code=0, stdout="hi\n", stderr="")
    assert output.ok
    assert str(output) == "hi\n"


def test_echoes_command_unless_quiet():
    buffer = io.StringIO()
    shell = Shell(console=Console(file=buffer, highlight=False))
    with patch("yzx.shell.subprocess.run", return_value=_completed()):
        shell("ls -la")
    assert "$ ls -la" in buffer.getvalue()

    buffer = io.StringIO()
    shell = Shell(quiet=True, console=Console(file=buffer))
    with patch("yzx.shell.subprocess.run", return_value=_completed()):
        shell("ls -la")
    assert buffer.getvalue() == ""


def test_forwards_output_streams(capsys):
    shell = Shell(quiet=True)
    with patch("yzx.shell.subprocess.run", return_value=_completed(stdout="out\n", stderr="warn\n")):
        shell("anything")
    captured = capsys.readouterr()
    assert captured.out == "out\n"
    assert captured.err == "warn\n"


def test_nonzero_exit_raises_execution_error():
    shell = Shell(quiet=True)
    with patch("yzx.shell.subprocess.run", return_value=_completed(code=2, stderr="boom\n")):
        with pytest.raises(ExecutionError) as excinfo:
            shell("false")

    error = excinfo.value
    assert isinstance(error, YzxError)
    assert str(error) == "exit code: 2\nboom"
    assert error.output.exit_code == 2


def test_execution_error_message_without_stderr():
    error = ExecutionError(ProcessOutput(command="false", exit_code=1))
    assert str(error) == "exit code: 1"
