"""Module loader — run a final ``.py`` script as ``__main__``.

The script file is read completely before it runs, so the caller may delete
it as soon as :func:`load_module` returns or raises.
"""

from __future__ import annotations

import builtins
import logging
import sys
import types
from pathlib import Path
from typing import Any, Mapping, Sequence

logger = logging.getLogger(__name__)


def load_module(
    path: str | Path,
    filename: str | Path,
    dirname: str | Path,
    extra_globals: Mapping[str, Any] | None = None,
    argv: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Execute the script at ``path`` and return its globals.

    Args:
        path: The file to run (possibly a temporary artifact).
        filename: Logical script location, bound to ``__file__`` and used in
            tracebacks.
        dirname: Directory of ``filename``, bound to ``__dirname__`` and put
            first on ``sys.path`` so sibling imports work.
        extra_globals: Additional names visible to the script (e.g. ``sh``).
        argv: Arguments after the script name, exposed as ``sys.argv[1:]``.
    """
    source = Path(path).read_bytes()
    code = compile(source, str(filename), "exec", dont_inherit=True)

    module = types.ModuleType("__main__")
    namespace = module.__dict__
    namespace.update(extra_globals or {})
    namespace.update(
        __file__=str(filename),
        __dirname__=str(dirname),
        __builtins__=builtins,
    )

    saved_main = sys.modules.get("__main__")
    saved_path = list(sys.path)
    saved_argv = list(sys.argv)

    sys.modules["__main__"] = module
    sys.path.insert(0, str(dirname))
    sys.argv = [str(filename), *(argv or [])]
    logger.debug("Executing %s as %s", path, filename)
    try:
        exec(code, namespace)
    finally:
        if saved_main is not None:
            sys.modules["__main__"] = saved_main
        else:
            sys.modules.pop("__main__", None)
        sys.path[:] = saved_path
        sys.argv = saved_argv

    return namespace
