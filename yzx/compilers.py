"""External compilers that turn a source dialect into a runnable ``.py`` file.

Each transpiler writes its output beside the source (same stem, ``.py``
suffix); the resolver deletes that output once the script has run.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from yzx.errors import CompilationError

logger = logging.getLogger(__name__)

EXECUTABLE_EXTENSION = ".py"


@dataclass(frozen=True)
class Transpiler:
    """A command-line compiler for one source extension."""

    name: str
    extension: str
    command: tuple[str, ...]
    """argv template; ``{source}`` and ``{output}`` are substituted."""

    def __post_init__(self) -> None:
        if self.extension.lower() == EXECUTABLE_EXTENSION:
            raise ValueError(f"Transpiler '{self.name}' cannot compile {EXECUTABLE_EXTENSION} to itself")

    def output_path(self, source: Path) -> Path:
        return source.with_suffix(EXECUTABLE_EXTENSION)

    def argv(self, source: Path) -> list[str]:
        output = self.output_path(source)
        return [part.format(source=source, output=output) for part in self.command]

    def compile(self, source: str | Path, console: Console | None = None) -> Path:
        """Run the compiler on ``source`` and return the generated script path.

        Raises:
            CompilationError: The tool could not be started, exited non-zero,
                or did not write the expected output file.
        """
        source = Path(source)
        output = self.output_path(source)
        argv = self.argv(source)
        console = console or Console(stderr=True)

        logger.debug("Compiling %s with %s", source, " ".join(argv))
        try:
            with console.status(f"Compiling {source.name} with {self.name}", spinner="dots"):
                proc = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            raise CompilationError(f"Could not run {self.name}: {e}") from e

        if proc.returncode != 0:
            output.unlink(missing_ok=True)
            message = (proc.stderr or proc.stdout).strip()
            raise CompilationError(message or f"{self.name} exited with code {proc.returncode}")

        if not output.exists():
            raise CompilationError(f"{self.name} did not produce {output}")

        return output


TRANSPILERS: dict[str, Transpiler] = {
    ".coco": Transpiler(
        name="coconut",
        extension=".coco",
        command=("coconut", "--quiet", "{source}"),
    ),
    ".hy": Transpiler(
        name="hy2py",
        extension=".hy",
        command=("hy2py", "{source}", "-o", "{output}"),
    ),
}
