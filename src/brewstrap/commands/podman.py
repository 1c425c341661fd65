"""Command group: podman service file, registry mirror, and compose."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from brewstrap.commands._base import BrewGroup

if TYPE_CHECKING:
    from brewstrap.commands._context import AppContext

_PODMAN_EXAMPLES = """\
  brewstrap podman setup
  brewstrap podman mirror
  brewstrap -q podman socket
  brewstrap podman up ./stack
  brewstrap podman down ./stack"""


@click.group(cls=BrewGroup, examples=_PODMAN_EXAMPLES, runs=("brew", "podman-compose"))
@click.pass_obj
def podman(app: AppContext) -> None:
    """Configure and drive the Homebrew podman."""


@podman.command(
    runs=("brew info podman", "brew services list", "brew services start podman"),
    examples="""\
  brewstrap podman setup
  brewstrap -v podman setup"""
)
@click.pass_obj
def setup(app: AppContext) -> None:
    """Fix the service file, add the mirror, start the service."""
    from brewstrap.services.podman import PodmanService

    app.emit(PodmanService(app.host).setup())


@podman.command(
    runs=("brew info podman",),
    examples="""\
  brewstrap podman fix"""
)
@click.pass_obj
def fix(app: AppContext) -> None:
    """Patch the escaped --time flag in homebrew.podman.service."""
    from brewstrap.services.podman import PodmanService

    app.emit(PodmanService(app.host).fix_service_file())


@podman.command(
    examples="""\
  brewstrap podman mirror
  BREWSTRAP_PODMAN__DOCKER_REGISTRY=registry.example.com brewstrap podman mirror"""
)
@click.pass_obj
def mirror(app: AppContext) -> None:
    """Append the docker.io registry mirror to registries.conf."""
    from brewstrap.services.podman import PodmanService

    app.emit(PodmanService(app.host).configure_registry())


@podman.command(
    examples="""\
  brewstrap podman socket
  export CONTAINER_HOST=$(brewstrap -q podman socket)"""
)
@click.pass_obj
def socket(app: AppContext) -> None:
    """Print the podman API socket URL."""
    from brewstrap.services.podman import PodmanService

    app.emit(PodmanService(app.host).socket_url())


@podman.command(
    runs=("podman-compose up -d",),
    examples="""\
  brewstrap podman up
  brewstrap podman up ./stack"""
)
@click.argument("directory", required=False, default=".")
@click.pass_obj
def up(app: AppContext, directory: str) -> None:
    """Run ``podman-compose up -d`` in DIRECTORY."""
    from brewstrap.services.podman import PodmanService

    app.emit(PodmanService(app.host).compose_up(directory))


@podman.command(
    runs=("podman-compose down",),
    examples="""\
  brewstrap podman down
  brewstrap podman down ./stack"""
)
@click.argument("directory", required=False, default=".")
@click.pass_obj
def down(app: AppContext, directory: str) -> None:
    """Run ``podman-compose down`` in DIRECTORY."""
    from brewstrap.services.podman import PodmanService

    app.emit(PodmanService(app.host).compose_down(directory))
