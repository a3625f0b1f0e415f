"""Error taxonomy for script loading.

I/O failures are not wrapped; they surface as plain ``OSError``.
"""

from __future__ import annotations

from pathlib import Path


class YzxError(Exception):
    """Base class for failures yzx reports with a one-line message."""


class UnrecognizedFormatError(YzxError):
    """No handler exists for the script's file extension."""

    def __init__(self, path: str | Path, extension: str):
        self.path = Path(path)
        self.extension = extension
        super().__init__(f"Unrecognized script format '{extension}': {path}")


class CompilationError(YzxError):
    """An external compiler failed to turn a source into a runnable script."""
