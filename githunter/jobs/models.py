"""Job records and the public job status state machine.

The registry stores :class:`JobRecord` values using queue-internal states
(``waiting``, ``delayed``, ``active``, ``completed``, ``failed``). Clients
only ever see the four public statuses of :class:`JobStatus`:

``queued -> processing -> completed | failed``

Terminal statuses are final; a job is never resurrected.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum
import math
import typing as typ

import msgspec

from githunter.jobs.errors import IllegalJobTransitionError

_MAX_PROGRESS = 100


class JobStatus(enum.StrEnum):
    """Public job status."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        """Return whether no further transition is possible."""
        return self in {JobStatus.COMPLETED, JobStatus.FAILED}


class JobState(enum.StrEnum):
    """Queue-internal job state as stored by the registry."""

    WAITING = "waiting"
    DELAYED = "delayed"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


_STATE_TO_STATUS: dict[JobState, JobStatus] = {
    JobState.WAITING: JobStatus.QUEUED,
    JobState.DELAYED: JobStatus.QUEUED,
    JobState.ACTIVE: JobStatus.PROCESSING,
    JobState.COMPLETED: JobStatus.COMPLETED,
    JobState.FAILED: JobStatus.FAILED,
}

_ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.QUEUED: frozenset({JobStatus.QUEUED, JobStatus.PROCESSING}),
    JobStatus.PROCESSING: frozenset(
        {JobStatus.PROCESSING, JobStatus.COMPLETED, JobStatus.FAILED}
    ),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


def translate_state(state: JobState) -> JobStatus:
    """Map a queue-internal state onto its public status."""
    return _STATE_TO_STATUS[state]


def ensure_transition(job_id: str, current: JobStatus, target: JobStatus) -> None:
    """Raise unless moving from *current* to *target* is legal.

    Raises
    ------
    IllegalJobTransitionError
        If the move skips a status, goes backwards, or leaves a terminal
        status.

    """
    if target not in _ALLOWED_TRANSITIONS[current]:
        raise IllegalJobTransitionError(job_id, current, target)


def normalize_progress(raw: object) -> int:
    """Return *raw* progress as an integer percentage, or ``0`` if unusable."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int | float):
        value = raw
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return 0
    else:
        return 0
    if math.isnan(value):
        return 0
    return int(min(max(value, 0), _MAX_PROGRESS))


class JobRecord(msgspec.Struct, kw_only=True, frozen=True):
    """Registry entry for one analysis job."""

    id: str
    state: JobState
    username: str
    view: str
    created_at: dt.datetime
    updated_at: dt.datetime
    context: str | None = None
    progress: typ.Any = 0
    failed_reason: str | None = None

    @property
    def status(self) -> JobStatus:
        """Return the public status of this record."""
        return translate_state(self.state)

    def to_job(self) -> Job:
        """Return the public view of this record."""
        status = self.status
        return Job(
            id=self.id,
            status=status,
            progress=normalize_progress(self.progress),
            error=self.failed_reason if status is JobStatus.FAILED else None,
        )


class Job(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Public job status snapshot.

    ``error`` carries the failure reason and is omitted unless the job
    failed.
    """

    id: str
    status: JobStatus
    progress: int
    error: str | None = None

    def to_body(self) -> dict[str, typ.Any]:
        """Return the status endpoint body (without the id)."""
        body: dict[str, typ.Any] = {
            "status": self.status.value,
            "progress": self.progress,
        }
        if self.error is not None:
            body["error"] = self.error
        return body


__all__ = [
    "Job",
    "JobRecord",
    "JobState",
    "JobStatus",
    "ensure_transition",
    "normalize_progress",
    "translate_state",
]
