"""Command: provision a fresh machine end to end."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from brewstrap.commands._base import BrewCommand

if TYPE_CHECKING:
    from brewstrap.commands._context import AppContext

_BOOTSTRAP_EXAMPLES = """\
  brewstrap bootstrap
  brewstrap bootstrap --yes
  brewstrap bootstrap --skip-podman
  brewstrap -c ./brewstrap.toml --no-interact bootstrap"""


@click.command(
    cls=BrewCommand,
    examples=_BOOTSTRAP_EXAMPLES,
    runs=("curl", "/bin/bash -c <install script>", "brew install", "brew services"),
)
@click.option("--skip-podman", is_flag=True, help="Skip podman service setup.")
@click.option("-y", "--yes", is_flag=True, help="Run the install script without asking.")
@click.pass_obj
def bootstrap(app: AppContext, skip_podman: bool, yes: bool) -> None:
    """Install Homebrew and packages, then set up podman."""
    from brewstrap.services.bootstrap import BootstrapService
    from brewstrap.services.homebrew import HomebrewService

    if not HomebrewService(app.host).installed:
        app.confirm_remote_script(app.settings.homebrew.install_script, assume_yes=yes)
    app.emit(BootstrapService(app.host).initialize(podman=not skip_podman))
