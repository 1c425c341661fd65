"""Host — the machine being provisioned.

Bundles settings, the command runner, and the environment snapshot that
services read (``XDG_RUNTIME_DIR``). Services receive a Host at
construction time; tests build one with a scripted runner and a fake
environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from brewstrap.infrastructure.runner import CommandRunner

if TYPE_CHECKING:
    from brewstrap.config.settings import BrewstrapSettings


class Host:
    """Provisioning target: settings + runner + environment."""

    def __init__(
        self,
        settings: BrewstrapSettings,
        *,
        runner: CommandRunner | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.settings = settings
        self.runner = runner or CommandRunner(
            timeout=settings.runner.timeout_seconds or None,
            stream_timeout=settings.runner.stream_timeout_seconds or None,
        )
        self.environ: dict[str, str] = dict(os.environ if environ is None else environ)

    @property
    def root(self) -> Path:
        return self.settings.root

    @property
    def prefix(self) -> Path:
        """Homebrew installation prefix."""
        return self.settings.homebrew.prefix

    def resolve(self, path: str | Path) -> Path:
        """Resolve *path* against the project root unless already absolute."""
        p = Path(path).expanduser()
        return p if p.is_absolute() else self.root / p
