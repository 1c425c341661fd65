"""BaseService — shared foundation for brewstrap services.

Every service receives a :class:`Host` at construction time and reaches
external tools only through ``self._host.runner``. Each invocation is
recorded as a telemetry span annotated with its outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from brewstrap.services.result import ServiceResult
from brewstrap.services.telemetry import trace_span

if TYPE_CHECKING:
    from brewstrap.infrastructure.host import Host
    from brewstrap.infrastructure.runner import CommandError, CommandResult

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class HomebrewService(BaseService):
            def config(self) -> ServiceResult:
                result = self._brew("config").raise_for_outcome()
                ...
    """

    def __init__(self, host: Host) -> None:
        self._host = host

    def _brew_env(self) -> dict[str, str]:
        """Per-call environment overlay pointing Homebrew at its mirrors."""
        env = self._host.settings.homebrew.env
        return {
            "NONINTERACTIVE": "1",
            "HOMEBREW_BREW_GIT_REMOTE": env.brew_git_remote,
            "HOMEBREW_CORE_GIT_REMOTE": env.core_git_remote,
            "HOMEBREW_API_DOMAIN": env.api_domain,
            "HOMEBREW_BOTTLE_DOMAIN": env.bottle_domain,
        }

    def _run(
        self,
        program: str,
        *args: str,
        env: dict[str, str] | None = None,
        cwd: Path | None = None,
        stream: bool = False,
    ) -> CommandResult:
        """Execute a command through the host runner inside a telemetry span."""
        runner = self._host.runner
        with trace_span(f"exec:{program}") as span:
            if stream:
                result = runner.stream(program, args, env=env, cwd=cwd)
            else:
                result = runner.run(program, args, env=env, cwd=cwd)
            if span is not None:
                span.annotate("argv", result.command_line)
                span.annotate("outcome", str(result.outcome))
        if not result.ok:
            logger.debug("%s", result.describe())
        return result

    def _brew(self, *args: str, stream: bool = False) -> CommandResult:
        """Run the configured package manager with the mirror overlay."""
        return self._run(
            self._host.settings.homebrew.manager,
            *args,
            env=self._brew_env(),
            stream=stream,
        )


def command_failure(
    op: str,
    exc: CommandError,
    *,
    hint: str | None = None,
    warnings: Sequence[str] = (),
    **detail: Any,
) -> ServiceResult:
    """Convert a CommandError into a failed ServiceResult."""
    message = str(exc)
    if hint:
        message = f"{message}, check {hint}"
    return ServiceResult.failure(
        op, exc.code, message, command=exc.result, warnings=list(warnings), **detail
    )
