"""BrewServicesService — readiness polling for Homebrew-managed services.

One ``ensure_started`` call walks the state machine in
:mod:`brewstrap.domain.services`:

    checking -> done                               (already started)
    checking -> starting -> checking -> ... -> done | failed

INVARIANT: At most ``1 + max_attempts`` status checks and at most
``1 + max_attempts`` start commands per call. Nothing persists across
calls; every check rebuilds the snapshot from scratch.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from brewstrap.domain.services import (
    PollState,
    ServiceRecord,
    has_status,
    is_valid_transition,
    parse_service_list,
    status_of,
)
from brewstrap.services.base import BaseService
from brewstrap.services.result import ServiceError, ServiceResult
from brewstrap.services.telemetry import traced

if TYPE_CHECKING:
    from brewstrap.domain.retry import RetryPolicy
    from brewstrap.infrastructure.host import Host
    from brewstrap.infrastructure.runner import CommandResult

logger = logging.getLogger(__name__)


class BrewServicesService(BaseService):
    """List, start, and stop ``brew services`` entries.

    Args:
        host: Provisioning target.
        policy: Retry policy; defaults to ``[services.retry]`` from settings.
        sleep: Wait function between attempts (injected in tests).
    """

    def __init__(
        self,
        host: Host,
        *,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(host)
        self._policy = policy or host.settings.services.retry
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def _snapshot(self) -> tuple[list[ServiceRecord], CommandResult]:
        result = self._brew("services", "list")
        if result.failed():
            return [], result
        return parse_service_list(result.stdout), result

    def list_services(self) -> list[ServiceRecord]:
        """Parse the current ``brew services list`` into records.

        A failing list command yields an empty snapshot.
        """
        records, _ = self._snapshot()
        return records

    def check_status(self, name: str, status: str) -> bool:
        """True if *name* currently reports exactly *status*."""
        return has_status(self.list_services(), name, status)

    @traced
    def snapshot(self) -> ServiceResult:
        """The current snapshot as a ServiceResult."""
        op = "service_list"
        records, result = self._snapshot()
        if result.failed():
            return _list_failed(op, result)
        items = [r.model_dump() for r in records]
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    @traced
    def status(self, name: str, desired: str | None = None) -> ServiceResult:
        """Report the status of *name*, optionally testing it against *desired*."""
        op = "service_status"
        records, result = self._snapshot()
        if result.failed():
            return _list_failed(op, result, service=name)
        current = status_of(records, name)
        data: dict[str, object] = {"service": name, "status": current}
        if desired is not None:
            data["desired"] = desired
            data["matched"] = has_status(records, name, desired)
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Readiness loops
    # ------------------------------------------------------------------

    @traced
    def ensure_started(self, name: str) -> ServiceResult:
        """Start *name* and poll until it reports the configured start status."""
        return self._ensure(
            name,
            action="start",
            desired=self._host.settings.services.start_status,
            op="service_start",
        )

    @traced
    def ensure_stopped(self, name: str) -> ServiceResult:
        """Stop *name* and poll until it reports the configured stop status."""
        return self._ensure(
            name,
            action="stop",
            desired=self._host.settings.services.stop_status,
            op="service_stop",
        )

    def _ensure(self, name: str, *, action: str, desired: str, op: str) -> ServiceResult:
        state = PollState.CHECKING
        checks = 0
        commands = 0
        last_error: str | None = None

        def advance(target: PollState) -> None:
            nonlocal state
            assert is_valid_transition(state, target), f"{state} -> {target}"
            logger.debug("service %s: %s -> %s", name, state, target)
            state = target

        def check() -> bool:
            nonlocal checks, last_error
            checks += 1
            records, listing = self._snapshot()
            if listing.failed():
                last_error = listing.describe()
            return has_status(records, name, desired)

        def issue() -> None:
            nonlocal commands, last_error
            commands += 1
            result = self._brew("services", action, name)
            if result.failed():
                last_error = result.describe()

        if check():
            advance(PollState.DONE)
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "service": name,
                    "status": desired,
                    "changed": False,
                    "attempts": 0,
                    "checks": checks,
                    "commands": commands,
                },
            )

        advance(PollState.STARTING)
        issue()
        advance(PollState.CHECKING)

        attempts = 0
        remaining = self._policy.max_attempts
        while remaining > 0:
            attempts += 1
            delay = self._policy.delay_for(attempts)
            if delay > 0:
                self._sleep(delay)
            if check():
                advance(PollState.DONE)
                return ServiceResult(
                    ok=True,
                    op=op,
                    data={
                        "service": name,
                        "status": desired,
                        "changed": True,
                        "attempts": attempts,
                        "checks": checks,
                        "commands": commands,
                    },
                )
            advance(PollState.STARTING)
            issue()
            advance(PollState.CHECKING)
            remaining -= 1

        advance(PollState.FAILED)
        message = f"tried {attempts} times to {action} {name}, status never became {desired!r}"
        if last_error:
            message = f"{message}, last error: {last_error}"
        logger.warning("%s", message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="RETRY_EXHAUSTED",
                message=message,
                detail={
                    "service": name,
                    "desired": desired,
                    "attempts": attempts,
                    "checks": checks,
                    "commands": commands,
                    "last_error": last_error,
                },
            ),
        )


def _list_failed(op: str, result: CommandResult, **detail: object) -> ServiceResult:
    return ServiceResult.failure(op, "LIST_FAILED", result.describe(), command=result, **detail)
