"""PodmanService — make the Homebrew podman usable.

Setup pipeline: FIX SERVICE FILE -> CONFIGURE MIRROR -> START SERVICE -> SOCKET

The container engine itself is reached through its own client over the
socket URL reported here; image and container operations are not part
of brewstrap.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from brewstrap.domain.registry import (
    REGISTRIES_CONF,
    SERVICE_FILE_NAME,
    fix_service_unit,
    has_mirror,
    render_mirror_block,
)
from brewstrap.infrastructure import filesystem
from brewstrap.infrastructure.runner import CommandError
from brewstrap.services._helpers import failed_pipeline, step_summary
from brewstrap.services.base import BaseService, command_failure
from brewstrap.services.brew_services import BrewServicesService
from brewstrap.services.homebrew import HomebrewService
from brewstrap.services.result import ServiceError, ServiceResult
from brewstrap.services.telemetry import traced

logger = logging.getLogger(__name__)

RUNTIME_DIR_VAR = "XDG_RUNTIME_DIR"


class PodmanService(BaseService):
    """Patch, configure, start, and compose with Homebrew's podman."""

    @property
    def registries_path(self) -> Path:
        return self._host.prefix / REGISTRIES_CONF

    @traced
    def fix_service_file(self) -> ServiceResult:
        """Unescape ``--time\\=0`` in the generated systemd unit."""
        op = "podman_fix"
        formula = self._host.settings.podman.formula
        try:
            package = HomebrewService(self._host).installed_package(formula)
        except CommandError as exc:
            return command_failure(op, exc, package=formula)
        if package is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NOT_INSTALLED",
                    message=f"{formula} is not installed",
                    detail={"package": formula},
                ),
            )

        path = Path(package.path) / SERVICE_FILE_NAME
        try:
            content, changed = fix_service_unit(filesystem.read_text(path))
            if changed:
                filesystem.write_text(path, content)
        except OSError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="SERVICE_FILE_ERROR",
                    message=f"Cannot patch {path}: {exc}",
                    detail={"path": str(path)},
                ),
            )
        return ServiceResult(ok=True, op=op, data={"path": str(path), "changed": changed})

    @traced
    def configure_registry(self) -> ServiceResult:
        """Append the docker.io mirror block unless the mirror is already present."""
        op = "podman_mirror"
        cfg = self._host.settings.podman
        path = self.registries_path
        data: dict[str, Any] = {"path": str(path), "location": cfg.docker_registry}
        try:
            if has_mirror(filesystem.read_text_or_empty(path), cfg.docker_registry):
                logger.info("Registry mirror %s already configured", cfg.docker_registry)
                return ServiceResult(ok=True, op=op, data={**data, "changed": False})
            block = render_mirror_block(
                cfg.docker_registry,
                prefix=cfg.registry_prefix,
                insecure=cfg.insecure,
            )
            filesystem.append_text(path, block)
        except OSError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="REGISTRY_WRITE_FAILED",
                    message=f"Cannot update {path}: {exc}",
                    detail=data,
                ),
            )
        return ServiceResult(ok=True, op=op, data={**data, "changed": True})

    @traced
    def socket_url(self) -> ServiceResult:
        """Derive the podman API socket URL from XDG_RUNTIME_DIR."""
        op = "podman_socket"
        runtime_dir = self._host.environ.get(RUNTIME_DIR_VAR)
        if not runtime_dir:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NO_RUNTIME_DIR",
                    message=f"{RUNTIME_DIR_VAR} is not set, set it first",
                ),
            )
        url = f"unix://{runtime_dir.rstrip('/')}/podman/podman.sock"
        return ServiceResult(ok=True, op=op, data={"socket": url})

    @traced
    def setup(self) -> ServiceResult:
        """Run the full setup pipeline, stopping at the first failing step."""
        op = "podman_setup"
        steps: list[dict[str, Any]] = []
        service = self._host.settings.podman.service

        pipeline = (
            self.fix_service_file,
            self.configure_registry,
            lambda: BrewServicesService(self._host).ensure_started(service),
            self.socket_url,
        )
        last: ServiceResult | None = None
        for step in pipeline:
            last = step()
            steps.append(step_summary(last))
            if not last.ok:
                return failed_pipeline(op, last, steps)

        assert last is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={"steps": steps, "socket": last.data["socket"]},
        )

    # ------------------------------------------------------------------
    # Compose
    # ------------------------------------------------------------------

    @traced
    def compose_up(self, directory: str | Path = ".") -> ServiceResult:
        """``podman-compose up -d`` in *directory*."""
        return self._compose("compose_up", directory, "up", "-d")

    @traced
    def compose_down(self, directory: str | Path = ".") -> ServiceResult:
        """``podman-compose down`` in *directory*."""
        return self._compose("compose_down", directory, "down")

    def _compose(self, op: str, directory: str | Path, *args: str) -> ServiceResult:
        cwd = self._host.resolve(directory)
        if not cwd.is_dir():
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NOT_A_DIRECTORY",
                    message=f"Compose directory does not exist: {cwd}",
                    detail={"directory": str(cwd)},
                ),
            )
        command = self._host.settings.podman.compose_command
        try:
            self._run(command, *args, cwd=cwd, stream=True).raise_for_outcome()
        except CommandError as exc:
            return command_failure(op, exc, directory=str(cwd))
        return ServiceResult(ok=True, op=op, data={"directory": str(cwd)})
