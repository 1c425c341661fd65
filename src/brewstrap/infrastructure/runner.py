"""CommandRunner — synchronous child-process execution.

INVARIANT: ``run`` and ``stream`` never raise on a non-zero exit, a
missing executable, undecodable output, or a timeout. Output is decoded
as UTF-8 with replacement characters. The condition is classified in
:class:`CommandResult`; callers decide what counts as failure and may
call :meth:`CommandResult.raise_for_outcome`.

Environment overlays apply to the single child invocation only. The
parent process environment is never mutated.
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
import sys
import threading
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)


class Outcome(StrEnum):
    """How a child process ended."""

    OK = "ok"
    EXIT_STATUS = "exit_status"
    SPAWN_ERROR = "spawn_error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one invocation. Immutable; never retried internally.

    ``stdout`` is empty for streamed invocations, whose output went to the
    caller's stream instead.
    """

    argv: tuple[str, ...]
    stdout: str
    stderr: str
    outcome: Outcome
    returncode: int | None = None
    exit_error: str | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @property
    def has_stderr(self) -> bool:
        return bool(self.stderr.strip())

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)

    def failed(self, *, stderr_is_failure: bool = False) -> bool:
        """True on spawn error, non-zero exit or timeout.

        With *stderr_is_failure*, any stderr text also counts as failure.
        """
        if not self.ok:
            return True
        return stderr_is_failure and self.has_stderr

    def describe(self) -> str:
        """One-line failure description naming the command."""
        msg = f"failed to call '{self.command_line}'"
        if self.exit_error:
            msg += f": {self.exit_error}"
        if self.has_stderr:
            msg += f", stderr: {self.stderr.strip()}"
        return msg

    def raise_for_outcome(self, *, stderr_is_failure: bool = False) -> CommandResult:
        """Return self, or raise TimeoutFailure / ExecutionFailure."""
        if self.outcome is Outcome.TIMEOUT:
            raise TimeoutFailure(self)
        if self.failed(stderr_is_failure=stderr_is_failure):
            raise ExecutionFailure(self)
        return self


class CommandError(Exception):
    """Base for command failures; carries the offending result."""

    code = "COMMAND_FAILED"

    def __init__(self, result: CommandResult) -> None:
        super().__init__(result.describe())
        self.result = result


class ExecutionFailure(CommandError):
    """The process could not start, exited non-zero, or wrote to stderr (strict)."""

    code = "EXECUTION_FAILED"


class TimeoutFailure(CommandError):
    """The process exceeded its timeout and was killed."""

    code = "COMMAND_TIMEOUT"


class CommandRunner:
    """Execute external programs synchronously.

    Args:
        timeout: Default timeout in seconds for captured calls (None = none).
        stream_timeout: Default timeout for streamed calls.
        env: Base environment overlay applied to every child.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        stream_timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.timeout = timeout
        self.stream_timeout = stream_timeout
        self._env = dict(env or {})

    def _environment(self, overlay: Mapping[str, str] | None) -> dict[str, str] | None:
        if not self._env and not overlay:
            return None
        merged = dict(os.environ)
        merged.update(self._env)
        merged.update(overlay or {})
        return merged

    def _spawn(
        self,
        argv: tuple[str, ...],
        env: Mapping[str, str] | None,
        cwd: Path | None,
        bufsize: int = -1,
    ) -> subprocess.Popen[str]:
        # New session: a timeout kills the whole process group.
        return subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            env=self._environment(env),
            cwd=cwd,
            bufsize=bufsize,
            start_new_session=True,
        )

    def run(
        self,
        program: str,
        args: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run *program* capturing stdout and stderr separately."""
        argv = (program, *args)
        limit = timeout if timeout is not None else self.timeout
        logger.debug("exec: %s", shlex.join(argv))
        start = time.perf_counter()
        try:
            proc = self._spawn(argv, env, cwd)
        except OSError as exc:
            return _spawn_error(argv, exc, start)

        try:
            stdout, stderr = proc.communicate(timeout=limit or None)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            stdout, stderr = proc.communicate()
            logger.warning("Command timed out after %ss: %s", limit, shlex.join(argv))
            return CommandResult(
                argv=argv,
                stdout=stdout,
                stderr=stderr,
                outcome=Outcome.TIMEOUT,
                exit_error=f"timed out after {limit}s",
                duration_ms=_elapsed_ms(start),
            )
        except BaseException:
            _kill_group(proc)
            proc.wait()
            raise

        return _completed(argv, stdout, stderr, proc.returncode, start)

    def stream(
        self,
        program: str,
        args: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
        sink: TextIO | None = None,
    ) -> CommandResult:
        """Run *program* copying stdout live to *sink* (default: sys.stdout).

        stderr is drained on a helper thread into a buffer so a chatty
        error stream cannot block the child.
        """
        argv = (program, *args)
        limit = timeout if timeout is not None else self.stream_timeout
        out = sink if sink is not None else sys.stdout
        logger.debug("exec (streaming): %s", shlex.join(argv))
        start = time.perf_counter()
        try:
            proc = self._spawn(argv, env, cwd, bufsize=1)
        except OSError as exc:
            return _spawn_error(argv, exc, start)

        assert proc.stdout is not None
        assert proc.stderr is not None
        err_stream = proc.stderr
        stderr_chunks: list[str] = []
        drain = threading.Thread(target=lambda: stderr_chunks.append(err_stream.read()))
        drain.daemon = True
        drain.start()

        timed_out = threading.Event()

        def _expire() -> None:
            timed_out.set()
            _kill_group(proc)

        timer = threading.Timer(limit, _expire) if limit else None
        if timer is not None:
            timer.daemon = True
            timer.start()
        try:
            for line in proc.stdout:
                out.write(line)
                out.flush()
            returncode = proc.wait()
        finally:
            if timer is not None:
                timer.cancel()
            if proc.poll() is None:
                _kill_group(proc)
                proc.wait()
            drain.join()
            proc.stdout.close()
            err_stream.close()

        stderr = "".join(stderr_chunks)
        if timed_out.is_set():
            logger.warning("Command timed out after %ss: %s", limit, shlex.join(argv))
            return CommandResult(
                argv=argv,
                stdout="",
                stderr=stderr,
                outcome=Outcome.TIMEOUT,
                returncode=returncode,
                exit_error=f"timed out after {limit}s",
                duration_ms=_elapsed_ms(start),
            )
        return _completed(argv, "", stderr, returncode, start)


def _kill_group(proc: subprocess.Popen[str]) -> None:
    """SIGKILL the child's process group, grandchildren included."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _spawn_error(argv: tuple[str, ...], exc: OSError, start: float) -> CommandResult:
    logger.debug("Could not start %s: %s", argv[0], exc)
    return CommandResult(
        argv=argv,
        stdout="",
        stderr="",
        outcome=Outcome.SPAWN_ERROR,
        exit_error=str(exc),
        duration_ms=_elapsed_ms(start),
    )


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _completed(
    argv: tuple[str, ...], stdout: str, stderr: str, returncode: int, start: float
) -> CommandResult:
    if returncode == 0:
        return CommandResult(
            argv=argv,
            stdout=stdout,
            stderr=stderr,
            outcome=Outcome.OK,
            returncode=0,
            duration_ms=_elapsed_ms(start),
        )
    return CommandResult(
        argv=argv,
        stdout=stdout,
        stderr=stderr,
        outcome=Outcome.EXIT_STATUS,
        returncode=returncode,
        exit_error=f"exit status {returncode}",
        duration_ms=_elapsed_ms(start),
    )
