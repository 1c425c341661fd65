"""BootstrapService — provision a fresh machine end to end.

Pipeline: HOMEBREW -> PACKAGES -> PODMAN SETUP (optional) -> REPORT
"""

from __future__ import annotations

from typing import Any

from brewstrap.services._helpers import failed_pipeline, step_summary
from brewstrap.services.base import BaseService
from brewstrap.services.homebrew import HomebrewService
from brewstrap.services.podman import PodmanService
from brewstrap.services.result import ServiceResult
from brewstrap.services.telemetry import traced


class BootstrapService(BaseService):
    """Install Homebrew, the configured packages, and set up podman."""

    @traced
    def initialize(self, *, podman: bool = True) -> ServiceResult:
        op = "bootstrap"
        homebrew = HomebrewService(self._host)
        steps: list[dict[str, Any]] = []
        warnings: list[str] = []

        result = homebrew.install_self()
        steps.append(step_summary(result))
        if not result.ok:
            return failed_pipeline(op, result, steps)

        for name in self._host.settings.homebrew.packages:
            result = homebrew.ensure_package(name)
            steps.append({**step_summary(result), "package": name})
            warnings.extend(result.warnings)
            if not result.ok:
                return failed_pipeline(op, result, steps)

        socket: str | None = None
        if podman:
            result = PodmanService(self._host).setup()
            steps.append(step_summary(result))
            if not result.ok:
                return failed_pipeline(op, result, steps)
            socket = result.data.get("socket")

        return ServiceResult(
            ok=True,
            op=op,
            warnings=warnings,
            data={
                "prefix": str(self._host.prefix),
                "packages": list(self._host.settings.homebrew.packages),
                "steps": steps,
                "socket": socket,
            },
        )
