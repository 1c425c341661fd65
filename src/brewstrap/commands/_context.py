"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Host construction, the remote-script
confirmation prompt, and centralized result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from brewstrap.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from brewstrap.config.settings import BrewstrapSettings
    from brewstrap.infrastructure.host import Host
    from brewstrap.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The host (and its command runner) is created on first use so
    ``--help`` and ``--version`` never touch the machine.
    """

    def __init__(self, settings: BrewstrapSettings) -> None:
        self.settings = settings
        self._host: Host | None = None

        from brewstrap.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from brewstrap.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def host(self) -> Host:
        """The provisioning host (created lazily on first access)."""
        if self._host is None:
            from brewstrap.infrastructure.host import Host

            self._host = Host(self.settings)
        return self._host

    def confirm_remote_script(self, url: str, *, assume_yes: bool = False) -> None:
        """Ask before executing an unverified remote script.

        Skipped with ``--yes`` or ``--no-interact``. Declining aborts with
        exit code 1.
        """
        if assume_yes or self.settings.no_interact:
            return
        click.confirm(
            f"Download and execute {url} without verification?",
            default=False,
            abort=True,
            err=True,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
