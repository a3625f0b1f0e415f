"""Literate extractor — a single fold over document lines.

Every input line produces exactly one output line, so line numbers in
tracebacks from the extracted script match the Markdown source. A trailing
carriage return is dropped, so CRLF documents extract like LF ones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from yzx.literate.dialects import PYTHON, Dialect


class Mode(Enum):
    PROSE = "prose"
    INDENTED_BLOCK = "indented-block"
    FENCED_SCRIPT = "fenced-script"
    FENCED_SHELL = "fenced-shell"
    FENCED_OTHER = "fenced-other"


@dataclass(frozen=True)
class Cursor:
    """Extraction state between two lines."""

    mode: Mode = Mode.PROSE
    prev_blank: bool = True  # lets a document open with an indented block


FENCE_CLOSE = "```"

_INDENT_OPEN = re.compile(r"^( {4}|\t)")
_INDENT_CONTINUE = re.compile(r"^( +|\t)")
_ANY_FENCE = re.compile(r"```.*")


def advance(cursor: Cursor, line: str, dialect: Dialect = PYTHON) -> tuple[Cursor, str]:
    """Consume one line, returning the next cursor and the emitted line."""
    mode = cursor.mode

    if mode is Mode.PROSE:
        if cursor.prev_blank and _INDENT_OPEN.match(line):
            return Cursor(Mode.INDENTED_BLOCK, cursor.prev_blank), dialect.code_line(line)
        if dialect.is_script_fence(line):
            return Cursor(Mode.FENCED_SCRIPT, cursor.prev_blank), ""
        if dialect.is_shell_fence(line):
            return Cursor(Mode.FENCED_SHELL, cursor.prev_blank), dialect.shell_open
        if _ANY_FENCE.fullmatch(line):
            return Cursor(Mode.FENCED_OTHER, cursor.prev_blank), ""
        return Cursor(Mode.PROSE, prev_blank=line == ""), dialect.comment(line)

    if mode is Mode.INDENTED_BLOCK:
        if _INDENT_CONTINUE.match(line):
            return cursor, dialect.code_line(line)
        if line == "":
            return cursor, ""
        # Not re-examined for fences: the line is prose again.
        return Cursor(Mode.PROSE, cursor.prev_blank), dialect.comment(line)

    if line == FENCE_CLOSE:
        closing = dialect.shell_close if mode is Mode.FENCED_SHELL else ""
        return Cursor(Mode.PROSE, cursor.prev_blank), closing

    if mode is Mode.FENCED_OTHER:
        return cursor, dialect.comment_prefix + line

    # Script and shell bodies are emitted verbatim. Shell lines are not
    # escaped for the command literal they end up in.
    return cursor, line


def extract_with_cursor(source: str, dialect: Dialect = PYTHON) -> tuple[str, Cursor]:
    """Convert a literate document and also return the final cursor."""
    cursor = Cursor()
    output: list[str] = []
    for line in source.split("\n"):
        cursor, emitted = advance(cursor, line.removesuffix("\r"), dialect)
        output.append(emitted)
    return "\n".join(output), cursor


def extract(source: str, dialect: Dialect = PYTHON) -> str:
    """Convert a literate document into an executable script body.

    Args:
        source: The full Markdown text.
        dialect: Target language framing. Defaults to Python.

    Returns:
        Script text with the same number of lines as ``source``.
    """
    script, _ = extract_with_cursor(source, dialect)
    return script
