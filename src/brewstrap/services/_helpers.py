"""Shared service-layer helper functions for multi-step pipelines."""

from __future__ import annotations

from typing import Any

from brewstrap.services.result import ServiceError, ServiceResult


def step_summary(result: ServiceResult) -> dict[str, Any]:
    """Condense one pipeline step into ``{op, ok, changed?, error?}``."""
    summary: dict[str, Any] = {"op": result.op, "ok": result.ok}
    if "changed" in result.data:
        summary["changed"] = result.changed
    if result.error is not None:
        summary["error"] = result.error.code
    return summary


def failed_pipeline(
    op: str,
    failed: ServiceResult,
    steps: list[dict[str, Any]],
) -> ServiceResult:
    """Re-label a failing step's error under the pipeline *op*.

    The step trail is kept in ``error.detail["steps"]``.
    """
    error = failed.error
    code = error.code if error else "STEP_FAILED"
    message = error.message if error else "Unknown error"
    detail = dict(error.detail) if error else {}
    return ServiceResult(
        ok=False,
        op=op,
        warnings=failed.warnings,
        error=ServiceError(
            code=code,
            message=f"{failed.op}: {message}",
            detail={**detail, "steps": steps},
            command=error.command if error else None,
        ),
    )
