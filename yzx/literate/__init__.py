"""Literate Markdown to script conversion.

A literate document mixes prose with code. The extractor keeps the code
(fenced blocks tagged with the dialect's language, indented blocks after a
blank line) and comments out everything else, one output line per input line.
Shell-tagged fences become a single call to the ``sh`` command helper.
"""

from yzx.literate.dialects import JAVASCRIPT, PYTHON, Dialect, get_dialect
from yzx.literate.extractor import Cursor, Mode, advance, extract, extract_with_cursor

__all__ = [
    "JAVASCRIPT",
    "PYTHON",
    "Cursor",
    "Dialect",
    "Mode",
    "advance",
    "extract",
    "extract_with_cursor",
    "get_dialect",
]
