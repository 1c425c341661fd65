"""Rich Console factory and theme for brewstrap output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BREW_THEME = Theme(
    {
        "brew.ok": "bold green",
        "brew.error": "bold red",
        "brew.warning": "bold yellow",
        "brew.op": "bold cyan",
        "brew.key": "dim",
        "brew.name": "bold",
        "brew.path": "dim",
        "brew.status.started": "green",
        "brew.status.stopped": "yellow",
        "brew.status.none": "dim",
        "brew.status.error": "red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "started": "brew.status.started",
    "stopped": "brew.status.stopped",
    "none": "brew.status.none",
    "error": "brew.status.error",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=BREW_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str | None) -> str:
    """Return the Rich style name for a service status."""
    return _STATUS_STYLES.get(status or "", "")
