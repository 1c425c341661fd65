"""Command group: Homebrew itself and its formulae."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from brewstrap.commands._base import BrewGroup

if TYPE_CHECKING:
    from brewstrap.commands._context import AppContext

_BREW_EXAMPLES = """\
  brewstrap brew install-self
  brewstrap brew info podman
  brewstrap brew install podman-compose
  brewstrap --json brew config"""


@click.group(cls=BrewGroup, examples=_BREW_EXAMPLES)
@click.pass_obj
def brew(app: AppContext) -> None:
    """Install Homebrew and manage formulae."""


@brew.command(
    "install-self",
    runs=("curl -fsSL <install script>", "/bin/bash -c <script>"),
    examples="""\
  brewstrap brew install-self
  brewstrap brew install-self --yes""",
)
@click.option("-y", "--yes", is_flag=True, help="Run the install script without asking.")
@click.pass_obj
def install_self(app: AppContext, yes: bool) -> None:
    """Install Homebrew from the configured install script."""
    from brewstrap.services.homebrew import HomebrewService

    svc = HomebrewService(app.host)
    if not svc.installed:
        app.confirm_remote_script(app.settings.homebrew.install_script, assume_yes=yes)
    app.emit(svc.install_self())


@brew.command(
    "uninstall-self",
    runs=("curl -fsSL <uninstall script>", "/bin/bash -c <script>"),
    examples="""\
  brewstrap brew uninstall-self --yes""",
)
@click.option("-y", "--yes", is_flag=True, help="Run the uninstall script without asking.")
@click.pass_obj
def uninstall_self(app: AppContext, yes: bool) -> None:
    """Remove Homebrew with the configured uninstall script."""
    from brewstrap.services.homebrew import HomebrewService

    svc = HomebrewService(app.host)
    if svc.installed:
        app.confirm_remote_script(app.settings.homebrew.uninstall_script, assume_yes=yes)
    app.emit(svc.uninstall_self())


@brew.command(
    runs=("brew info NAME",),
    examples="""\
  brewstrap brew info podman
  brewstrap --json brew info gcc"""
)
@click.argument("name")
@click.pass_obj
def info(app: AppContext, name: str) -> None:
    """Show whether a formula is installed."""
    from brewstrap.services.homebrew import HomebrewService

    app.emit(HomebrewService(app.host).info(name))


@brew.command(
    runs=("brew config",),
    examples="""\
  brewstrap brew config
  brewstrap --json brew config"""
)
@click.pass_obj
def config(app: AppContext) -> None:
    """Show ``brew config``."""
    from brewstrap.services.homebrew import HomebrewService

    app.emit(HomebrewService(app.host).config())


@brew.command(
    runs=("brew info NAME", "brew install NAME"),
    examples="""\
  brewstrap brew install go
  brewstrap brew install podman --force"""
)
@click.argument("name")
@click.option("--force", is_flag=True, help="Install even if already present.")
@click.pass_obj
def install(app: AppContext, name: str, force: bool) -> None:
    """Install a formula (skipped when already installed)."""
    from brewstrap.services.homebrew import HomebrewService

    svc = HomebrewService(app.host)
    app.emit(svc.install(name) if force else svc.ensure_package(name))


@brew.command(
    runs=("brew remove NAME",),
    examples="""\
  brewstrap brew uninstall go"""
)
@click.argument("name")
@click.pass_obj
def uninstall(app: AppContext, name: str) -> None:
    """Remove a formula."""
    from brewstrap.services.homebrew import HomebrewService

    app.emit(HomebrewService(app.host).uninstall(name))
