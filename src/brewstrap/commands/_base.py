"""Click base classes for brewstrap commands.

Every command may declare:

* ``examples`` -- shell lines shown by an eager ``--examples`` flag,
  rendered as a ``$``-prompted transcript (or a JSON document under the
  root ``--json`` flag, for scripts that discover usage).
* ``runs`` -- the external programs the command executes on the host,
  listed in ``--help`` under *Runs*.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import click

from brewstrap.commands._context import AppContext


def example_lines(examples: str) -> list[str]:
    """Split an examples block into stripped, non-empty lines."""
    return [line.strip() for line in examples.splitlines() if line.strip()]


def _render_examples(ctx: click.Context, lines: list[str], runs: Sequence[str]) -> str:
    app = ctx.find_object(AppContext)
    if app is not None and app.settings.json_output:
        payload = {"command": ctx.command_path, "examples": lines, "runs": list(runs)}
        return json.dumps(payload, indent=2)
    body = "\n".join(line if line.startswith("#") else f"  $ {line}" for line in lines)
    return f"Examples for '{ctx.command_path}':\n\n{body}"


class _BrewMixin:
    """Shared ``examples``/``runs`` handling for commands and groups."""

    params: list[click.Parameter]
    examples: list[str]
    runs: tuple[str, ...]

    def _init_brew(self, examples: str | None, runs: Sequence[str]) -> None:
        self.examples = example_lines(examples or "")
        self.runs = tuple(runs)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(_render_examples(ctx, self.examples, self.runs))
        ctx.exit(0)

    def _format_runs(self, formatter: click.HelpFormatter) -> None:
        if not self.runs:
            return
        with formatter.section("Runs"):
            for program in self.runs:
                formatter.write_text(program)


class BrewCommand(_BrewMixin, click.Command):
    """Command with ``--examples`` and a *Runs* help section."""

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        runs: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._init_brew(examples, runs)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        self._format_runs(formatter)
        super().format_epilog(ctx, formatter)


class BrewGroup(_BrewMixin, click.Group):
    """Group whose subcommands default to :class:`BrewCommand`."""

    command_class = BrewCommand

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        runs: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._init_brew(examples, runs)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        self._format_runs(formatter)
        super().format_epilog(ctx, formatter)
