"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from brewstrap.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from brewstrap.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "service_list":
        return "\n".join(item["name"] for item in result.data.get("items", []))
    if result.op == "service_status":
        return str(result.data.get("status") or "")
    if result.data.get("socket"):
        return str(result.data["socket"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="brew.ok")
    op = Text(f"  {result.op}", style="brew.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="brew.key")
    if key in ("path", "prefix", "directory", "socket"):
        v = Text(str(value), style="brew.path")
    elif key in ("name", "service", "package"):
        v = Text(str(value), style="brew.name")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}", markup=False)


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 10_000:
        style = "bold red"
    elif duration > 1000:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>10.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        extras = ", ".join(f"{ak}={av}" for ak, av in annotations.items())
        line += f"  ({escape(extras)})"

    console.print(line, markup=True)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  warning: ", style="brew.warning"), Text(warning), sep="")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="brew.error")
    op = Text(f"  {result.op}", style="brew.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)
    if verbose and err and err.command:
        console.print(Text("  command:", style="dim"))
        for k, v in err.command.model_dump().items():
            console.print(f"    {k}: {v}", markup=False)


# ── Generic / mutation renderers ──────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Status line followed by every scalar data field."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            continue
        _field(console, key, value)
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_service_change(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render service_start / service_stop results."""
    _status_line(console, result)
    d = result.data
    _field(console, "service", d.get("service", "?"))
    _field(console, "status", d.get("status", "?"))
    if not result.changed:
        _field(console, "changed", "no (already in desired status)")
    else:
        _field(console, "attempts", d.get("attempts", 0))
    if verbose:
        _field(console, "checks", d.get("checks", 0))
        _field(console, "commands", d.get("commands", 0))
        _render_meta(console, result)


# ── Table renderers ───────────────────────────────────────────────────


def _render_service_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a status snapshot as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="brew.name", no_wrap=True)
    table.add_column("Status")
    table.add_column("User")
    table.add_column("File", style="brew.path")

    for item in items:
        status = str(item.get("status", ""))
        table.add_row(
            str(item.get("name", "")),
            Text(status, style=style_for_status(status)),
            str(item.get("user") or ""),
            str(item.get("file") or ""),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} services")
    if verbose:
        _render_meta(console, result)


def _render_config(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render ``brew config`` key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.get("config", {}).items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_steps(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render bootstrap / podman_setup pipelines as a step table."""
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Step", style="brew.op")
    table.add_column("Target", style="brew.name")
    table.add_column("Result")

    for step in result.data.get("steps", []):
        if step.get("ok"):
            outcome = Text("changed" if step.get("changed") else "ok", style="brew.ok")
        else:
            outcome = Text(str(step.get("error", "failed")), style="brew.error")
        table.add_row(str(step.get("op", "")), str(step.get("package", "")), outcome)
    console.print(table)

    socket = result.data.get("socket")
    if socket:
        _field(console, "socket", socket)
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


_Renderer = Callable[..., None]

_OP_RENDERERS: dict[str, _Renderer] = {
    # Services
    "service_list": _render_service_list,
    "service_start": _render_service_change,
    "service_stop": _render_service_change,
    # Homebrew
    "brew_config": _render_config,
    # Pipelines
    "bootstrap": _render_steps,
    "podman_setup": _render_steps,
}
