"""Shared pytest fixtures and test helpers for brewstrap tests."""

from __future__ import annotations

import stat
from collections.abc import Generator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from brewstrap.config.settings import BrewstrapSettings
from brewstrap.infrastructure.host import Host
from brewstrap.infrastructure.runner import CommandResult, Outcome
from brewstrap.services.telemetry import _current_span, disable_telemetry

RUNTIME_DIR = "/run/user/1000"

LIST_HEADER = "Name           Status  User File\n"


def services_output(*rows: str) -> str:
    """``brew services list`` output with the standard header."""
    return LIST_HEADER + "".join(f"{row}\n" for row in rows)


def info_output(name: str, keg: str | None) -> str:
    """``brew info NAME`` output; *keg* None means not installed."""
    head = f"==> {name}: stable 5.2.2 (bottled), HEAD\nA formula\nhttps://example.com/{name}\n"
    if keg is None:
        return head + "Not installed\nFrom: https://github.com/Homebrew/homebrew-core\n"
    return head + f"Installed\n{keg} (200 files, 80MB) *\n  Poured from bottle\n"


# ---------------------------------------------------------------------------
# Scripted command runner
# ---------------------------------------------------------------------------


@dataclass
class Reply:
    """One scripted response from :class:`FakeRunner`."""

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    outcome: Outcome | None = None

    def to_result(self, argv: tuple[str, ...]) -> CommandResult:
        if self.outcome is Outcome.SPAWN_ERROR:
            return CommandResult(
                argv=argv,
                stdout="",
                stderr="",
                outcome=Outcome.SPAWN_ERROR,
                exit_error=f"[Errno 2] No such file or directory: '{argv[0]}'",
            )
        if self.outcome is Outcome.TIMEOUT:
            return CommandResult(
                argv=argv,
                stdout=self.stdout,
                stderr=self.stderr,
                outcome=Outcome.TIMEOUT,
                exit_error="timed out after 1s",
            )
        if self.returncode == 0:
            return CommandResult(
                argv=argv,
                stdout=self.stdout,
                stderr=self.stderr,
                outcome=Outcome.OK,
                returncode=0,
            )
        return CommandResult(
            argv=argv,
            stdout=self.stdout,
            stderr=self.stderr,
            outcome=Outcome.EXIT_STATUS,
            returncode=self.returncode,
            exit_error=f"exit status {self.returncode}",
        )


@dataclass
class Call:
    argv: tuple[str, ...]
    env: dict[str, str] | None
    cwd: Path | None
    stream: bool


@dataclass
class FakeRunner:
    """Stand-in for CommandRunner that replays scripted replies.

    Replies are registered against an argv prefix; the longest matching
    prefix wins. Queued replies are consumed in order and the last one
    repeats. Unscripted commands exit 127.
    """

    calls: list[Call] = field(default_factory=list)
    _replies: dict[tuple[str, ...], list[Reply]] = field(default_factory=dict)

    def on(self, *argv: str, **reply: Any) -> FakeRunner:
        self._replies.setdefault(argv, []).append(Reply(**reply))
        return self

    def count(self, *prefix: str) -> int:
        return sum(1 for c in self.calls if c.argv[: len(prefix)] == prefix)

    def _reply(
        self,
        program: str,
        args: Sequence[str],
        env: Mapping[str, str] | None,
        cwd: Path | None,
        stream: bool,
    ) -> CommandResult:
        argv = (program, *args)
        self.calls.append(Call(argv, dict(env) if env else None, cwd, stream))
        matches = [key for key in self._replies if argv[: len(key)] == key]
        if not matches:
            return Reply(stderr="no reply scripted", returncode=127).to_result(argv)
        queue = self._replies[max(matches, key=len)]
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        result = reply.to_result(argv)
        if stream:
            return CommandResult(
                argv=result.argv,
                stdout="",
                stderr=result.stderr,
                outcome=result.outcome,
                returncode=result.returncode,
                exit_error=result.exit_error,
            )
        return result

    def run(
        self,
        program: str,
        args: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        return self._reply(program, args, env, cwd, stream=False)

    def stream(
        self,
        program: str,
        args: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
        sink: Any = None,
    ) -> CommandResult:
        return self._reply(program, args, env, cwd, stream=True)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """``-v`` CLI runs enable telemetry in the test thread's context."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BREWSTRAP_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def brew_prefix(tmp_path: Path) -> Path:
    """Homebrew prefix inside the temp dir (not created)."""
    return tmp_path / "linuxbrew"


@pytest.fixture
def settings(tmp_path: Path, brew_prefix: Path) -> BrewstrapSettings:
    """Settings rooted at tmp_path with a temp prefix and zero retry delay."""
    return BrewstrapSettings.from_cli(
        root=tmp_path,
        homebrew={"prefix": str(brew_prefix)},
        services={"retry": {"delay_seconds": 0}},
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def host(settings: BrewstrapSettings, fake_runner: FakeRunner) -> Host:
    """Host wired to the scripted runner and a fixed runtime dir."""
    return Host(settings, runner=fake_runner, environ={"XDG_RUNTIME_DIR": RUNTIME_DIR})  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Fake ``brew`` executable for end-to-end CLI tests
# ---------------------------------------------------------------------------

_FAKE_BREW = r"""#!/bin/sh
state="$FAKE_BREW_STATE"
echo "$*" >> "$state/calls"
echo "$HOMEBREW_BOTTLE_DOMAIN" > "$state/env"
case "$1" in
  services)
    case "$2" in
      list) cat "$state/services" ;;
      start)
        if [ -f "$state/refuse" ]; then echo "Error: Failure while executing" >&2; exit 1; fi
        printf 'Name Status User File\n%s started root %s.service\n' "$3" "$3" > "$state/services"
        echo "==> Successfully started \`$3\`"
        ;;
      stop)
        printf 'Name Status User File\n%s none\n' "$3" > "$state/services"
        echo "==> Successfully stopped \`$3\`"
        ;;
    esac
    ;;
  config) cat "$state/config" ;;
  info)
    if [ -f "$state/info-$2" ]; then cat "$state/info-$2"
    else echo "Error: No available formula with the name \"$2\"." >&2; exit 1; fi
    ;;
  install) echo "==> Pouring $2"; touch "$state/installed-$2" ;;
  remove) echo "Uninstalling $2" ;;
  *) echo "unknown command: $*" >&2; exit 1 ;;
esac
"""


@dataclass
class FakeBrew:
    """Handle on the fake brew state directory."""

    state: Path
    prefix: Path

    @property
    def calls(self) -> list[str]:
        path = self.state / "calls"
        return path.read_text().splitlines() if path.exists() else []

    def set_services(self, *rows: str) -> None:
        (self.state / "services").write_text(services_output(*rows))

    def set_info(self, name: str, keg: str | None) -> None:
        (self.state / f"info-{name}").write_text(info_output(name, keg))

    def set_config(self, text: str) -> None:
        (self.state / "config").write_text(text)

    def refuse_start(self) -> None:
        (self.state / "refuse").touch()


@pytest.fixture
def fake_brew(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeBrew:
    """Put a scripted ``brew`` first on PATH and point config at temp dirs."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "brew"
    script.write_text(_FAKE_BREW)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    state = tmp_path / "state"
    state.mkdir()
    prefix = tmp_path / "linuxbrew"

    config = tmp_path / "brewstrap.toml"
    config.write_text(
        f'[homebrew]\nprefix = "{prefix}"\n\n[services.retry]\ndelay_seconds = 0\n'
    )

    monkeypatch.setenv("PATH", f"{bin_dir}:/usr/bin:/bin")
    monkeypatch.setenv("FAKE_BREW_STATE", str(state))
    monkeypatch.setenv("BREWSTRAP_CONFIG", str(config))
    monkeypatch.setenv("XDG_RUNTIME_DIR", RUNTIME_DIR)
    monkeypatch.chdir(tmp_path)

    brew = FakeBrew(state=state, prefix=prefix)
    brew.set_services()
    return brew
