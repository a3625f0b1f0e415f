"""Target-language dialects for the literate extractor."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class Dialect:
    """How extracted code is framed for one target language."""

    name: str
    extension: str
    comment_prefix: str
    script_tags: tuple[str, ...]
    shell_tags: tuple[str, ...] = ("sh", "bash")
    shell_open: str = ""
    shell_close: str = ""
    strip_indent: bool = False
    """Drop one indent unit from indented-block lines (needed for Python)."""

    aliases: tuple[str, ...] = field(default_factory=tuple)

    def comment(self, line: str) -> str:
        if line == "":
            return ""
        return self.comment_prefix + line

    def is_script_fence(self, line: str) -> bool:
        return _fence_pattern(self.script_tags).fullmatch(line) is not None

    def is_shell_fence(self, line: str) -> bool:
        return _fence_pattern(self.shell_tags).fullmatch(line) is not None

    def code_line(self, line: str) -> str:
        if self.strip_indent:
            return _INDENT_UNIT.sub("", line, count=1)
        return line


_INDENT_UNIT = re.compile(r"^(\t| {1,4})")


@lru_cache(maxsize=None)
def _fence_pattern(tags: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(tag) for tag in tags)
    return re.compile(f"```({alternatives})")


PYTHON = Dialect(
    name="python",
    extension=".py",
    comment_prefix="# ",
    script_tags=("python", "py"),
    shell_open='sh(r"""',
    shell_close='""")',
    strip_indent=True,
    aliases=("py",),
)

JAVASCRIPT = Dialect(
    name="javascript",
    extension=".mjs",
    comment_prefix="// ",
    script_tags=("js", "javascript"),
    shell_open="await $`",
    shell_close="`",
    aliases=("js",),
)

DIALECTS = (PYTHON, JAVASCRIPT)


def get_dialect(name: str) -> Dialect:
    """Look up a dialect by name or alias (case-insensitive)."""
    key = name.strip().lower()
    for dialect in DIALECTS:
        if key == dialect.name or key in dialect.aliases:
            return dialect
    known = ", ".join(d.name for d in DIALECTS)
    raise ValueError(f"Unknown dialect '{name}'. Must be one of: {known}")
