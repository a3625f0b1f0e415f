"""yzx — run Python scripts from files, stdin, Markdown documents and transpiled sources."""

__version__ = "0.3.0"
