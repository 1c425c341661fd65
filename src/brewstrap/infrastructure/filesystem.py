"""Plain-text file I/O for configuration patches.

Writes are read-modify-write in place with no atomic rename; a crash
mid-write can leave a truncated file.
"""

from __future__ import annotations

from pathlib import Path


def read_text(path: Path) -> str:
    """Read a UTF-8 text file."""
    return path.read_text(encoding="utf-8")


def read_text_or_empty(path: Path) -> str:
    """Read a UTF-8 text file, or return ``""`` if it does not exist."""
    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    """Overwrite *path* with *content*."""
    path.write_text(content, encoding="utf-8")


def append_text(path: Path, content: str) -> None:
    """Append *content* to *path*, creating it and its parents if missing."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(content)
