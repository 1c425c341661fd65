"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: Every public service operation returns ServiceResult.
Command failures never escape a service as exceptions; they arrive here
as ``ok=False`` with the failing command recorded in ``error.command``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from brewstrap.infrastructure.runner import CommandResult


class CommandTrace(BaseModel):
    """The external invocation behind a failure."""

    model_config = {"frozen": True}

    command: str
    outcome: str
    returncode: int | None = None
    stderr: str = ""

    @classmethod
    def from_result(cls, result: CommandResult) -> CommandTrace:
        return cls(
            command=result.command_line,
            outcome=str(result.outcome),
            returncode=result.returncode,
            stderr=result.stderr.strip(),
        )


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``command`` is set when the failure came from an external program.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)
    command: CommandTrace | None = None


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"service_start"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        command: CommandResult | None = None,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Build an ``ok=False`` result, tracing *command* when given."""
        return cls(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError(
                code=code,
                message=message,
                detail=detail,
                command=CommandTrace.from_result(command) if command is not None else None,
            ),
        )

    @property
    def changed(self) -> bool:
        """Whether the operation modified the host."""
        return bool(self.data.get("changed", False))
