"""Tests for operation-specific Rich renderers."""

from brewstrap.output.renderers import render_quiet, render_result
from brewstrap.services.result import CommandTrace, ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("service_start", "RETRY_EXHAUSTED", "tried 3 times"))
        assert "ERROR" in output
        assert "service_start" in output
        assert "tried 3 times" in output

    def test_verbose_shows_detail(self) -> None:
        result = _err("package_info", "EXECUTION_FAILED", "bad", command="brew info x")
        output = render_result(result, verbose=True)
        assert "detail" in output
        assert "brew info x" in output

    def test_verbose_shows_command_trace(self) -> None:
        result = ServiceResult(
            ok=False,
            op="service_list",
            error=ServiceError(
                code="LIST_FAILED",
                message="failed",
                command=CommandTrace(command="brew services list", outcome="exit_status"),
            ),
        )
        assert "brew services list" not in render_result(result)
        output = render_result(result, verbose=True)
        assert "command: brew services list" in output
        assert "outcome: exit_status" in output

    def test_brackets_in_message_survive(self) -> None:
        output = render_result(_err("podman_mirror", "X", "cannot write [[registry]] [warn]"))
        assert "[[registry]] [warn]" in output

    def test_no_error_object(self) -> None:
        output = render_result(ServiceResult(ok=False, op="test"))
        assert "Unknown error" in output


# ── Success rendering ────────────────────────────────────────────────


class TestGenericRenderer:
    def test_scalar_fields(self) -> None:
        output = render_result(_ok("package_info", name="podman", installed=True, version="5.2"))
        assert "OK" in output
        assert "package_info" in output
        assert "name: podman" in output
        assert "version: 5.2" in output

    def test_nested_values_skipped(self) -> None:
        output = render_result(_ok("x", items=[1, 2], path="/p"))
        assert "items" not in output
        assert "path: /p" in output

    def test_warnings(self) -> None:
        result = ServiceResult(ok=True, op="x", warnings=["slow mirror"])
        assert "warning: slow mirror" in render_result(result)


class TestServiceRenderers:
    def test_service_list_table(self) -> None:
        items = [
            {"name": "podman", "status": "started", "user": "root", "file": "f.service"},
            {"name": "redis", "status": "none", "user": None, "file": None},
        ]
        output = render_result(_ok("service_list", items=items, count=2))
        assert "Name" in output
        assert "podman" in output
        assert "redis" in output
        assert "2 services" in output

    def test_service_start_unchanged(self) -> None:
        output = render_result(
            _ok("service_start", service="podman", status="started", changed=False, attempts=0)
        )
        assert "already in desired status" in output

    def test_service_start_changed(self) -> None:
        output = render_result(
            _ok("service_start", service="podman", status="started", changed=True, attempts=2)
        )
        assert "attempts: 2" in output

    def test_config(self) -> None:
        output = render_result(_ok("brew_config", config={"HOMEBREW_VERSION": "4.3.0"}))
        assert "HOMEBREW_VERSION: 4.3.0" in output

    def test_steps(self) -> None:
        steps = [
            {"op": "install_self", "ok": True, "changed": False},
            {"op": "package_ensure", "ok": True, "changed": True, "package": "podman"},
        ]
        output = render_result(_ok("bootstrap", steps=steps, socket="unix:///s"))
        assert "install_self" in output
        assert "changed" in output
        assert "socket: unix:///s" in output

    def test_verbose_meta_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="service_list",
            data={"items": [], "count": 0},
            meta={
                "telemetry": {
                    "name": "BrewServicesService.snapshot",
                    "duration_ms": 12.5,
                    "children": [
                        {
                            "name": "exec:brew",
                            "duration_ms": 11.0,
                            "annotations": {"argv": "brew services list"},
                        }
                    ],
                }
            },
        )
        output = render_result(result, verbose=True)
        assert "BrewServicesService.snapshot" in output
        assert "exec:brew" in output
        assert "argv=brew services list" in output


class TestQuiet:
    def test_service_list_names(self) -> None:
        items = [{"name": "podman"}, {"name": "redis"}]
        assert render_quiet(_ok("service_list", items=items)) == "podman\nredis"

    def test_status(self) -> None:
        assert render_quiet(_ok("service_status", service="p", status="started")) == "started"

    def test_socket(self) -> None:
        assert render_quiet(_ok("podman_socket", socket="unix:///s")) == "unix:///s"

    def test_default(self) -> None:
        assert render_quiet(_ok("podman_fix")) == "OK: podman_fix"

    def test_error(self) -> None:
        assert render_quiet(_err("podman_fix", "X", "nope")) == "ERROR: podman_fix — nope"
