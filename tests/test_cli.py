"""Tests for the yzx command line."""

import os
import tempfile
from pathlib import Path

from click.testing import CliRunner

from yzx import __version__
from yzx.cli import extract_main, main, script_path


def _write(tmpdir: str, name: str, body: str) -> Path:
    path = Path(tmpdir) / name
    path.write_text(body)
    return path


def test_version_flags():
    runner = CliRunner()
    for flag in ("--version", "-v", "-V"):
        result = runner.invoke(main, [flag])
        assert result.exit_code == 0
        assert f"yzx version {__version__}" in result.output


def test_script_path_forms():
    assert script_path("/abs/run.py") == Path("/abs/run.py")
    assert script_path("file:///abs/my%20run.py") == Path("/abs/my run.py")
    assert script_path("rel/run.py") == Path("rel/run.py").resolve()


def test_runs_python_script_with_args():
    with tempfile.TemporaryDirectory() as tmpdir:
        script = _write(tmpdir, "args.py", "import sys\nprint('args:', sys.argv[1:])\n")
        result = CliRunner().invoke(main, ["--quiet", str(script), "one", "--two"])
        assert result.exit_code == 0, result.output
        assert "args: ['one', '--two']" in result.output


def test_runs_extensionless_script():
    with tempfile.TemporaryDirectory() as tmpdir:
        script = _write(tmpdir, "hello", "print('hello from yzx')\n")
        result = CliRunner().invoke(main, [str(script)])
        assert result.exit_code == 0, result.output
        assert "hello from yzx" in result.output
        assert os.listdir(tmpdir) == ["hello"]


def test_runs_markdown_with_origin_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        doc = _write(
            tmpdir,
            "guide.md",
            "# Guide\n\nThis prints its own name.\n\n```python\nimport os\nprint(os.path.basename(__file__))\n```\n",
        )
        result = CliRunner().invoke(main, [str(doc)])
        assert result.exit_code == 0, result.output
        assert "guide.md" in result.output


def test_markdown_shell_block_runs_command():
    with tempfile.TemporaryDirectory() as tmpdir:
        doc = _write(tmpdir, "build.md", "Build it:\n\n```sh\necho built-ok\n```\n")
        result = CliRunner().invoke(main, ["--quiet", "--shell", "/bin/sh", str(doc)])
        assert result.exit_code == 0, result.output
        assert "built-ok" in result.output


def test_failed_command_reports_error_and_exits_1():
    with tempfile.TemporaryDirectory() as tmpdir:
        script = _write(tmpdir, "fail.py", "sh('exit 3')\nprint('unreachable')\n")
        result = CliRunner().invoke(main, ["--quiet", "--shell", "/bin/sh", str(script)])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "exit code: 3" in result.output
        assert "unreachable" not in result.output


def test_unknown_extension_exits_nonzero():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "data.xyz", "print('never')\n")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == 1
        assert "Unrecognized script format" in result.output
        assert "never" not in result.output


def test_unknown_option_is_a_usage_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        script = _write(tmpdir, "run.py", "print('script-body-ran')\n")
        result = CliRunner().invoke(main, ["--experimental", str(script)])
        assert result.exit_code == 2
        assert "No such option" in result.output
        assert "script-body-ran" not in result.output


def test_invalid_log_level_env_is_a_usage_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        script = _write(tmpdir, "run.py", "print('ran')\n")
        result = CliRunner().invoke(main, [str(script)], env={"YZX_LOG_LEVEL": "chatty"})
        assert result.exit_code == 2
        assert "YZX_LOG_LEVEL" in result.output
        assert "Traceback" not in result.output


def test_other_exceptions_propagate():
    with tempfile.TemporaryDirectory() as tmpdir:
        script = _write(tmpdir, "crash.py", "raise ValueError('bug')\n")
        result = CliRunner().invoke(main, [str(script)])
        assert result.exit_code != 0
        assert isinstance(result.exception, ValueError)


def test_reads_script_from_stdin():
    runner = CliRunner()
    result = runner.invoke(main, [], input="print('from stdin')\n")
    assert result.exit_code == 0, result.output
    assert "from stdin" in result.output

    result = runner.invoke(main, ["-"], input="print(__file__.endswith('stdin.py'))\n")
    assert result.exit_code == 0, result.output
    assert "True" in result.output


def test_empty_stdin_prints_usage():
    result = CliRunner().invoke(main, [], input="")
    assert result.exit_code == 2
    assert "Usage" in result.output


def test_extract_command():
    with tempfile.TemporaryDirectory() as tmpdir:
        doc = _write(tmpdir, "doc.md", "hello\n```sh\necho hi\n```")
        runner = CliRunner()

        result = runner.invoke(extract_main, [str(doc), "--dialect", "js"])
        assert result.exit_code == 0
        assert result.output == "// hello\nawait $`\necho hi\n`"

        result = runner.invoke(extract_main, [str(doc)])
        assert result.output == '# hello\nsh(r"""\necho hi\n""")'
