"""yzx CLI — run a script file, a Markdown document, or stdin."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import click
from rich.console import Console
from rich.markup import escape

from yzx import __version__
from yzx.config import LOG_LEVELS, Settings
from yzx.errors import YzxError
from yzx.log import configure_logging
from yzx.resolver import Resolver, SourceRef
from yzx.shell import ExecutionError, ProcessOutput, Shell

err_console = Console(stderr=True, highlight=False)

logger = logging.getLogger(__name__)


def script_path(arg: str) -> Path:
    """Turn the SCRIPT argument into an absolute path."""
    if arg.startswith("file:///"):
        return Path(unquote(urlparse(arg).path))
    if arg.startswith("/"):
        return Path(arg)
    return Path(arg).resolve()


def read_stdin_script() -> str:
    """Return piped stdin, or an empty string when stdin is a terminal."""
    stream = click.get_text_stream("stdin")
    if stream.isatty():
        return ""
    return stream.read()


@click.command(
    context_settings={"allow_interspersed_args": False},
)
@click.version_option(
    __version__, "-v", "-V", "--version", prog_name="yzx", message="%(prog)s version %(version)s"
)
@click.option("--quiet", is_flag=True, help="Don't echo commands")
@click.option("--shell", default=None, metavar="PATH", help="Custom shell binary")
@click.option("--prefix", default=None, metavar="COMMAND", help="Prefix all commands")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Diagnostic logging level (default: YZX_LOG_LEVEL or WARNING)",
)
@click.argument("script", required=False)
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(
    ctx: click.Context,
    quiet: bool,
    shell: str | None,
    prefix: str | None,
    log_level: str | None,
    script: str | None,
    script_args: tuple[str, ...],
):
    """Run SCRIPT (.py, .md, .coco, .hy, or extensionless).

    With no SCRIPT, or SCRIPT '-', the script is read from stdin.
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e), ctx=ctx) from e
    settings = settings.with_overrides(
        quiet=quiet or None, shell=shell, prefix=prefix, log_level=log_level
    )
    configure_logging(settings.logging_level)

    resolver = Resolver(
        tmpdir=settings.temp_directory,
        script_globals={
            "sh": Shell(shell=settings.shell, prefix=settings.prefix, quiet=settings.quiet),
            "ProcessOutput": ProcessOutput,
            "ExecutionError": ExecutionError,
        },
        argv=script_args,
        console=err_console,
    )

    try:
        if script is None or script == "-":
            source = read_stdin_script()
            if not source:
                click.echo(ctx.get_help())
                ctx.exit(2)
            resolver.resolve(SourceRef.from_text(source, Path.cwd() / "stdin.py"))
        else:
            resolver.resolve(SourceRef.from_path(script_path(script)))
    except YzxError as e:
        logger.debug("Aborted with %s", type(e).__name__)
        err_console.print(f"[red]Error:[/] {escape(str(e))}", soft_wrap=True)
        ctx.exit(1)


@click.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--dialect",
    "-d",
    default="python",
    type=click.Choice(["python", "py", "javascript", "js"], case_sensitive=False),
    help="Target language of the extracted script",
)
def extract_main(document: str, dialect: str):
    """Print the script extracted from a literate Markdown DOCUMENT."""
    from yzx.literate import extract, get_dialect

    text = Path(document).read_text(encoding="utf-8")
    click.echo(extract(text, get_dialect(dialect)), nl=False)


if __name__ == "__main__":
    main()
