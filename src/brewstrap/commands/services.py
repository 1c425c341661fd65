"""Command group: Homebrew-managed background services."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from brewstrap.commands._base import BrewGroup

if TYPE_CHECKING:
    from brewstrap.commands._context import AppContext

_SERVICES_EXAMPLES = """\
  brewstrap services list
  brewstrap services start podman
  brewstrap services stop podman
  brewstrap services status podman --status started
  brewstrap --json services list"""


@click.group(cls=BrewGroup, examples=_SERVICES_EXAMPLES)
@click.pass_obj
def services(app: AppContext) -> None:
    """List, start, and stop brew services."""


@services.command(
    "list",
    runs=("brew services list",),
    examples="""\
  brewstrap services list
  brewstrap -q services list
  brewstrap --json services list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """Show the current status snapshot."""
    from brewstrap.services.brew_services import BrewServicesService

    app.emit(BrewServicesService(app.host).snapshot())


@services.command(
    runs=("brew services list", "brew services start NAME"),
    examples="""\
  brewstrap services start podman
  brewstrap -v services start podman"""
)
@click.argument("name")
@click.pass_obj
def start(app: AppContext, name: str) -> None:
    """Start a service and wait until it reports 'started'."""
    from brewstrap.services.brew_services import BrewServicesService

    app.emit(BrewServicesService(app.host).ensure_started(name))


@services.command(
    runs=("brew services list", "brew services stop NAME"),
    examples="""\
  brewstrap services stop podman"""
)
@click.argument("name")
@click.pass_obj
def stop(app: AppContext, name: str) -> None:
    """Stop a service and wait until it reports 'none'."""
    from brewstrap.services.brew_services import BrewServicesService

    app.emit(BrewServicesService(app.host).ensure_stopped(name))


@services.command(
    runs=("brew services list",),
    examples="""\
  brewstrap services status podman
  brewstrap services status podman --status started
  brewstrap -q services status podman"""
)
@click.argument("name")
@click.option("--status", "desired", default=None, help="Test against this status.")
@click.option(
    "--require",
    is_flag=True,
    help="Exit 1 unless the service reports --status.",
)
@click.pass_obj
def status(app: AppContext, name: str, desired: str | None, require: bool) -> None:
    """Report a service's current status."""
    from brewstrap.services.brew_services import BrewServicesService
    from brewstrap.services.result import ServiceError, ServiceResult

    result = BrewServicesService(app.host).status(name, desired)
    if result.ok and require and desired is not None and not result.data.get("matched"):
        result = ServiceResult(
            ok=False,
            op=result.op,
            data=result.data,
            error=ServiceError(
                code="STATUS_MISMATCH",
                message=f"{name} is {result.data.get('status')!r}, expected {desired!r}",
                detail=result.data,
            ),
        )
    app.emit(result)
