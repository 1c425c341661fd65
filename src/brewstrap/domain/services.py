"""Service records and the readiness state machine.

A status snapshot is the list of :class:`ServiceRecord` parsed from one
``brew services list`` invocation. Snapshots are rebuilt on every poll and
never merged or cached.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

# Column label that marks the header row of ``brew services list``.
HEADER_LABEL = "Name"


class ServiceStatus(StrEnum):
    """Status values reported by ``brew services list``."""

    STARTED = "started"
    STOPPED = "stopped"
    NONE = "none"
    SCHEDULED = "scheduled"
    ERROR = "error"
    UNKNOWN = "unknown"


class ServiceRecord(BaseModel):
    """One row of a status snapshot."""

    model_config = {"frozen": True}

    name: str
    status: str
    user: str | None = None
    file: str | None = None


def parse_service_list(output: str) -> list[ServiceRecord]:
    """Parse ``brew services list`` output into ordered records.

    Everything before the first occurrence of ``Name`` is ignored, and the
    header line itself is skipped. Rows are split on whitespace:

    - 2 fields: ``name status`` (no user, no file; e.g. ``unbound none``)
    - 3 fields: ``name status file``
    - 4 fields: ``name status user file``

    Any other shape is dropped silently.

    Examples:
        >>> rows = parse_service_list("Name Status User File\\npodman started root x.plist\\n")
        >>> [(r.name, r.status, r.user, r.file) for r in rows]
        [('podman', 'started', 'root', 'x.plist')]
        >>> parse_service_list("no services")
        []
    """
    idx = output.find(HEADER_LABEL)
    if idx < 0:
        return []

    records: list[ServiceRecord] = []
    for line in output[idx:].splitlines()[1:]:
        fields = line.split()
        if len(fields) == 2:
            records.append(ServiceRecord(name=fields[0], status=fields[1]))
        elif len(fields) == 3:
            records.append(ServiceRecord(name=fields[0], status=fields[1], file=fields[2]))
        elif len(fields) == 4:
            records.append(
                ServiceRecord(name=fields[0], status=fields[1], user=fields[2], file=fields[3])
            )
    return records


def has_status(records: list[ServiceRecord], name: str, status: str) -> bool:
    """True if any record matches *name* and *status* exactly (case-sensitive)."""
    for record in records:
        if record.name == name and record.status == status:
            return True
    return False


def status_of(records: list[ServiceRecord], name: str) -> str | None:
    """Status of the first record named *name*, or None if absent."""
    for record in records:
        if record.name == name:
            return record.status
    return None


# --- Readiness polling ---


class PollState(StrEnum):
    """States of a single ensure-status call."""

    CHECKING = "checking"
    STARTING = "starting"
    DONE = "done"
    FAILED = "failed"


POLL_TRANSITIONS: dict[str, list[str]] = {
    "checking": ["starting", "done", "failed"],
    "starting": ["checking"],
    "done": [],
    "failed": [],
}

TERMINAL_STATES = frozenset({PollState.DONE, PollState.FAILED})


def is_valid_transition(current: str, target: str) -> bool:
    """Check whether a poll state transition is allowed."""
    return target in POLL_TRANSITIONS.get(current, [])
