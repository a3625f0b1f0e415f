"""Format resolver — normalize a script source until it can be executed.

Dispatch is by file extension:

- no extension (or stdin) — the content already is a Python script;
  materialize it as a ``.py`` artifact and resolve again
- ``.md`` — run the literate extractor, materialize, resolve again
- a transpiler extension (``.coco``, ``.hy``) — compile to the sibling
  ``.py`` file, resolve it, then delete it
- ``.py`` — execute, with ``__file__`` bound to the original origin

Every artifact created along the way is deleted before :meth:`Resolver.resolve`
returns or raises.
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Sequence, Union

from rich.console import Console

from yzx.compilers import EXECUTABLE_EXTENSION, TRANSPILERS, Transpiler
from yzx.errors import UnrecognizedFormatError
from yzx.literate import PYTHON, extract
from yzx.loader import load_module

logger = logging.getLogger(__name__)

LITERATE_EXTENSION = ".md"


@dataclass(frozen=True)
class SourceRef:
    """Where a script comes from and which file it should appear to be."""

    path: Path | None
    origin: Path
    content: bytes | None = None

    @classmethod
    def from_path(cls, path: str | Path, origin: str | Path | None = None) -> "SourceRef":
        path = Path(path)
        return cls(path=path, origin=Path(origin) if origin is not None else path)

    @classmethod
    def from_text(cls, content: str | bytes, origin: str | Path) -> "SourceRef":
        if isinstance(content, str):
            content = content.encode()
        return cls(path=None, origin=Path(origin), content=content)

    @property
    def extension(self) -> str:
        if self.path is None:
            return ""
        return self.path.suffix.lower()

    @property
    def stem(self) -> str:
        name = self.path.name if self.path is not None else self.origin.name
        return Path(name).stem or "script"

    def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        return self.path.read_bytes()


# ── Pending steps ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Raw:
    """Script text with no extension; needs a ``.py`` file."""

    source: SourceRef


@dataclass(frozen=True)
class Literate:
    """A Markdown document; needs extraction."""

    source: SourceRef


@dataclass(frozen=True)
class Transpiled:
    """A source that an external compiler turns into ``.py``."""

    source: SourceRef
    transpiler: Transpiler


@dataclass(frozen=True)
class Executable:
    """A ``.py`` file ready to run."""

    source: SourceRef


Step = Union[Raw, Literate, Transpiled, Executable]


def classify(ref: SourceRef, transpilers: Mapping[str, Transpiler] = TRANSPILERS) -> Step:
    """Pick the next normalization step for ``ref`` from its extension."""
    ext = ref.extension
    if ext == "":
        return Raw(ref)
    if ext == LITERATE_EXTENSION:
        return Literate(ref)
    if ext in transpilers:
        return Transpiled(ref, transpilers[ext])
    if ext == EXECUTABLE_EXTENSION:
        return Executable(ref)
    raise UnrecognizedFormatError(ref.path, ext)


@contextmanager
def materialize(data: bytes, stem: str = "script", directory: str | None = None) -> Iterator[Path]:
    """Write ``data`` to a uniquely named ``.py`` file and remove it on exit."""
    fd, name = tempfile.mkstemp(prefix=f"{stem}-", suffix=EXECUTABLE_EXTENSION, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        logger.debug("Materialized %s", path)
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed %s", path)


Loader = Callable[..., Any]


class Resolver:
    """Resolves a :class:`SourceRef` through zero or more steps and runs it."""

    def __init__(
        self,
        loader: Loader = load_module,
        transpilers: Mapping[str, Transpiler] | None = None,
        tmpdir: str | None = None,
        script_globals: Mapping[str, Any] | None = None,
        argv: Sequence[str] = (),
        console: Console | None = None,
    ):
        """Initialize the resolver.

        Args:
            loader: Called as ``loader(path, filename=..., dirname=...,
                    extra_globals=..., argv=...)`` for the final script.
            transpilers: Extension to compiler map. Defaults to the built-in set.
            tmpdir: Directory for materialized artifacts (system default if None).
            script_globals: Extra names for the executed script, such as ``sh``.
            argv: Script arguments, exposed as ``sys.argv[1:]``.
            console: Where compiler progress is shown.
        """
        self.loader = loader
        self.transpilers = dict(TRANSPILERS if transpilers is None else transpilers)
        self.tmpdir = tmpdir or None
        self.script_globals = dict(script_globals or {})
        self.argv = list(argv)
        self.console = console or Console(stderr=True)

    def resolve(self, ref: SourceRef) -> Any:
        """Normalize ``ref`` and execute the resulting script.

        Raises:
            UnrecognizedFormatError: No handler for the extension.
            CompilationError: An external compiler failed.
            OSError: Reading or writing a file failed.
        """
        step = classify(ref, self.transpilers)
        logger.debug("%s -> %s", ref.path or ref.origin, type(step).__name__)

        if isinstance(step, Raw):
            return self._run_materialized(ref.read_bytes(), ref)

        if isinstance(step, Literate):
            text = ref.read_bytes().decode("utf-8")
            return self._run_materialized(extract(text, PYTHON).encode("utf-8"), ref)

        if isinstance(step, Transpiled):
            output = step.transpiler.compile(ref.path, console=self.console)
            try:
                return self.resolve(SourceRef.from_path(output, origin=ref.origin))
            finally:
                output.unlink(missing_ok=True)
                logger.debug("Removed %s", output)

        return self._execute(step.source)

    def _run_materialized(self, data: bytes, ref: SourceRef) -> Any:
        with materialize(data, stem=ref.stem, directory=self.tmpdir) as path:
            return self.resolve(SourceRef.from_path(path, origin=ref.origin))

    def _execute(self, ref: SourceRef) -> Any:
        filename = ref.origin.resolve()
        return self.loader(
            ref.path,
            filename=filename,
            dirname=filename.parent,
            extra_globals=self.script_globals,
            argv=self.argv,
        )
