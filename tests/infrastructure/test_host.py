"""Tests for Host construction."""

from pathlib import Path

from brewstrap.config.settings import BrewstrapSettings
from brewstrap.infrastructure.host import Host
from brewstrap.infrastructure.runner import CommandRunner


class TestHost:
    def test_default_runner_uses_configured_timeouts(self, tmp_path: Path) -> None:
        settings = BrewstrapSettings.from_cli(
            root=tmp_path,
            runner={"timeout_seconds": 5, "stream_timeout_seconds": 0},
        )
        host = Host(settings)
        assert isinstance(host.runner, CommandRunner)
        assert host.runner.timeout == 5
        assert host.runner.stream_timeout is None

    def test_environ_is_a_copy(self, settings: BrewstrapSettings) -> None:
        source = {"XDG_RUNTIME_DIR": "/run/user/1"}
        host = Host(settings, environ=source)
        host.environ["X"] = "y"
        assert "X" not in source

    def test_prefix_and_root(self, settings: BrewstrapSettings, brew_prefix: Path) -> None:
        host = Host(settings, environ={})
        assert host.prefix == brew_prefix
        assert host.root == settings.root

    def test_resolve(self, settings: BrewstrapSettings, tmp_path: Path) -> None:
        host = Host(settings, environ={})
        assert host.resolve("stack") == tmp_path / "stack"
        assert host.resolve("/srv/stack") == Path("/srv/stack")
