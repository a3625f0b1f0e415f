"""Runtime configuration read from ``YZX_*`` environment variables."""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Mapping

from yzx.shell import DEFAULT_SHELL

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Options shared by the CLI, the resolver and the ``sh`` helper."""

    shell: str = DEFAULT_SHELL
    prefix: str = ""
    quiet: bool = False
    tmpdir: str = ""
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        log_level = source.get("YZX_LOG_LEVEL", "WARNING").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"YZX_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'")

        return cls(
            shell=source.get("YZX_SHELL", "").strip() or DEFAULT_SHELL,
            prefix=source.get("YZX_PREFIX", ""),
            quiet=source.get("YZX_QUIET", "").strip().lower() in _TRUTHY,
            tmpdir=source.get("YZX_TMPDIR", "").strip(),
            log_level=log_level,
        )

    def with_overrides(self, **values) -> "Settings":
        """Return a copy with every non-None value applied."""
        changes = {key: value for key, value in values.items() if value is not None}
        if "log_level" in changes:
            changes["log_level"] = changes["log_level"].upper()
        return dataclasses.replace(self, **changes)

    @property
    def temp_directory(self) -> str:
        return self.tmpdir or tempfile.gettempdir()

    @property
    def logging_level(self) -> int:
        return logging.getLevelName(self.log_level)
