"""Parsers for ``brew info`` and ``brew config`` output."""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel

# ``brew info`` prints "Installed" / "Not installed" on this line.
INSTALLED_LINE = 3
INSTALLED_MARKER = "Installed"


class InstalledPackage(BaseModel):
    """An installed formula as reported by ``brew info``."""

    model_config = {"frozen": True}

    name: str
    path: str
    version: str


def parse_info(name: str, output: str) -> InstalledPackage | None:
    """Return the installed keg for *name*, or None if not installed.

    The keg path is the first field of the line after the marker, e.g.
    ``/home/linuxbrew/.linuxbrew/Cellar/podman/5.2.2 (200 files, 80MB) *``.
    The version is the basename of that path.
    """
    lines = output.split("\n")
    if len(lines) <= INSTALLED_LINE + 1:
        return None
    if lines[INSTALLED_LINE].strip() != INSTALLED_MARKER:
        return None

    fields = lines[INSTALLED_LINE + 1].split()
    if not fields:
        return None
    path = fields[0]
    return InstalledPackage(name=name, path=path, version=PurePosixPath(path).name)


def parse_config(output: str) -> dict[str, str]:
    """Parse ``brew config`` into ``key -> value``.

    Splits on the first colon so URL values survive intact. Lines without
    a colon are skipped.

    Examples:
        >>> parse_config("HOMEBREW_VERSION: 4.3.0\\nORIGIN: https://github.com/Homebrew/brew")
        {'HOMEBREW_VERSION': '4.3.0', 'ORIGIN': 'https://github.com/Homebrew/brew'}
    """
    config: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        config[key.strip()] = value.strip()
    return config
