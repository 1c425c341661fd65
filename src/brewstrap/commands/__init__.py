"""Subcommand modules for brewstrap.

Provides register_commands() which uses deferred imports to keep
``brewstrap --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 1 standalone command.
    """
    # --- Groups ---
    from brewstrap.commands.brew import brew
    from brewstrap.commands.podman import podman
    from brewstrap.commands.services import services

    cli.add_command(brew)
    cli.add_command(services)
    cli.add_command(podman)

    # --- Standalone commands ---
    from brewstrap.commands.bootstrap import bootstrap

    cli.add_command(bootstrap)
