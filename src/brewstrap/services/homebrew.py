"""HomebrewService — Homebrew itself and the packages it installs.

Install scripts are fetched as raw text with ``curl -fsSL`` and executed
through ``/bin/bash -c`` with no checksum or signature verification.
The CLI confirms before running them.
"""

from __future__ import annotations

import logging
from typing import Any

from brewstrap.domain.packages import InstalledPackage, parse_config, parse_info
from brewstrap.infrastructure.runner import CommandError
from brewstrap.services.base import BaseService, command_failure
from brewstrap.services.result import ServiceResult
from brewstrap.services.telemetry import traced

logger = logging.getLogger(__name__)

SHELL = "/bin/bash"
FETCH = "curl"


class HomebrewService(BaseService):
    """Install and query Homebrew and its formulae."""

    def environment(self) -> dict[str, str]:
        """Mirror overlay applied to every brew child process."""
        return self._brew_env()

    # ------------------------------------------------------------------
    # Homebrew itself
    # ------------------------------------------------------------------

    @property
    def installed(self) -> bool:
        return self._host.prefix.exists()

    @traced
    def install_self(self) -> ServiceResult:
        """Download and run the Homebrew install script unless already present."""
        op = "install_self"
        cfg = self._host.settings.homebrew
        if self.installed:
            logger.info("Homebrew already installed at %s", cfg.prefix)
            return ServiceResult(
                ok=True,
                op=op,
                data={"prefix": str(cfg.prefix), "changed": False},
            )
        try:
            self._run_script(cfg.install_script)
        except CommandError as exc:
            return command_failure(op, exc, hint=cfg.preset_intro, script=cfg.install_script)
        return ServiceResult(
            ok=True,
            op=op,
            data={"prefix": str(cfg.prefix), "changed": True, "script": cfg.install_script},
        )

    @traced
    def uninstall_self(self) -> ServiceResult:
        """Download and run the Homebrew uninstall script if installed."""
        op = "uninstall_self"
        cfg = self._host.settings.homebrew
        if not self.installed:
            logger.info("Homebrew is not installed at %s", cfg.prefix)
            return ServiceResult(
                ok=True,
                op=op,
                data={"prefix": str(cfg.prefix), "changed": False},
            )
        try:
            self._run_script(cfg.uninstall_script)
        except CommandError as exc:
            return command_failure(op, exc, script=cfg.uninstall_script)
        return ServiceResult(
            ok=True,
            op=op,
            data={"prefix": str(cfg.prefix), "changed": True, "script": cfg.uninstall_script},
        )

    def _run_script(self, url: str) -> None:
        """Fetch *url* and pipe it through bash, streaming its output."""
        script = self._run(FETCH, "-fsSL", url).raise_for_outcome()
        self._run(
            SHELL,
            "-c",
            script.stdout,
            env=self._brew_env(),
            stream=True,
        ).raise_for_outcome()

    # ------------------------------------------------------------------
    # Formulae
    # ------------------------------------------------------------------

    def installed_package(self, name: str) -> InstalledPackage | None:
        """The installed keg for *name*, or None. Raises CommandError."""
        result = self._brew("info", name).raise_for_outcome()
        return parse_info(name, result.stdout)

    @traced
    def info(self, name: str) -> ServiceResult:
        """Report whether *name* is installed, and where."""
        op = "package_info"
        try:
            package = self.installed_package(name)
        except CommandError as exc:
            return command_failure(op, exc, package=name)
        data: dict[str, Any] = {"name": name, "installed": package is not None}
        if package is not None:
            data.update(path=package.path, version=package.version)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def config(self) -> ServiceResult:
        """``brew config`` as key-value pairs."""
        op = "brew_config"
        try:
            result = self._brew("config").raise_for_outcome()
        except CommandError as exc:
            return command_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"config": parse_config(result.stdout)})

    @traced
    def install(self, name: str) -> ServiceResult:
        """``brew install NAME``, streaming progress to the terminal."""
        op = "package_install"
        try:
            self._brew("install", name, stream=True).raise_for_outcome()
        except CommandError as exc:
            return command_failure(op, exc, package=name)
        return ServiceResult(ok=True, op=op, data={"name": name, "changed": True})

    @traced
    def uninstall(self, name: str) -> ServiceResult:
        """``brew remove NAME``, streaming progress to the terminal."""
        op = "package_uninstall"
        try:
            self._brew("remove", name, stream=True).raise_for_outcome()
        except CommandError as exc:
            return command_failure(op, exc, package=name)
        return ServiceResult(ok=True, op=op, data={"name": name, "changed": True})

    @traced
    def ensure_package(self, name: str) -> ServiceResult:
        """Install *name* only when ``brew info`` says it is missing."""
        op = "package_ensure"
        try:
            package = self.installed_package(name)
        except CommandError as exc:
            return command_failure(op, exc, package=name)
        if package is not None:
            logger.info("Already installed %s:%s", package.name, package.version)
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "name": name,
                    "changed": False,
                    "version": package.version,
                    "path": package.path,
                },
            )

        installed = self.install(name)
        if not installed.ok:
            return installed.model_copy(update={"op": op})
        return ServiceResult(ok=True, op=op, data={"name": name, "changed": True})
