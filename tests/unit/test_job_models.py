"""Unit tests for the job status state machine."""

from __future__ import annotations

import datetime as dt
import math

import msgspec
import pytest

from githunter.jobs.errors import IllegalJobTransitionError
from githunter.jobs.models import (
    Job,
    JobRecord,
    JobState,
    JobStatus,
    ensure_transition,
    normalize_progress,
    translate_state,
)

_NOW = dt.datetime(2024, 7, 1, tzinfo=dt.UTC)


@pytest.mark.parametrize(
    ("state", "status"),
    [
        (JobState.WAITING, JobStatus.QUEUED),
        (JobState.DELAYED, JobStatus.QUEUED),
        (JobState.ACTIVE, JobStatus.PROCESSING),
        (JobState.COMPLETED, JobStatus.COMPLETED),
        (JobState.FAILED, JobStatus.FAILED),
    ],
)
def test_translate_state(state: JobState, status: JobStatus) -> None:
    """Queue-internal states map onto the four public statuses."""
    assert translate_state(state) is status, f"wrong status for {state}"


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (JobStatus.QUEUED, JobStatus.PROCESSING),
        (JobStatus.PROCESSING, JobStatus.PROCESSING),
        (JobStatus.PROCESSING, JobStatus.COMPLETED),
        (JobStatus.PROCESSING, JobStatus.FAILED),
    ],
)
def test_legal_transitions(current: JobStatus, target: JobStatus) -> None:
    """Forward moves along the lifecycle are accepted."""
    ensure_transition("j1", current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (JobStatus.QUEUED, JobStatus.COMPLETED),
        (JobStatus.QUEUED, JobStatus.FAILED),
        (JobStatus.PROCESSING, JobStatus.QUEUED),
        (JobStatus.COMPLETED, JobStatus.PROCESSING),
        (JobStatus.COMPLETED, JobStatus.FAILED),
        (JobStatus.FAILED, JobStatus.COMPLETED),
        (JobStatus.FAILED, JobStatus.FAILED),
    ],
)
def test_illegal_transitions(current: JobStatus, target: JobStatus) -> None:
    """Skips, backward moves and exits from terminal statuses are rejected."""
    with pytest.raises(IllegalJobTransitionError) as excinfo:
        ensure_transition("j1", current, target)

    assert excinfo.value.current is current, "expected the current status"
    assert excinfo.value.target is target, "expected the target status"


def test_terminal_statuses() -> None:
    """Only completed and failed are terminal."""
    assert {s for s in JobStatus if s.terminal} == {
        JobStatus.COMPLETED,
        JobStatus.FAILED,
    }, "unexpected terminal statuses"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (40, 40),
        (12.9, 12),
        ("85", 85),
        (" 5.5 ", 5),
        (150, 100),
        (-3, 0),
        (True, 0),
        (None, 0),
        ({"stage": "sampling"}, 0),
        ("abc", 0),
        (math.nan, 0),
    ],
)
def test_normalize_progress(raw: object, expected: int) -> None:
    """Progress is always an integer percentage."""
    assert normalize_progress(raw) == expected, f"wrong progress for {raw!r}"


def _record(state: JobState, **fields: object) -> JobRecord:
    return JobRecord(
        id="j1",
        state=state,
        username="octocat",
        view="recruiter",
        created_at=_NOW,
        updated_at=_NOW,
        **fields,  # type: ignore[arg-type]
    )


def test_error_only_exposed_when_failed() -> None:
    """The failure reason is hidden from non-failed jobs."""
    failed = _record(JobState.FAILED, failed_reason="boom", progress=40).to_job()
    active = _record(JobState.ACTIVE, failed_reason="stale", progress=40).to_job()

    assert failed.error == "boom", "expected the reason on a failed job"
    assert active.error is None, "expected no error on an active job"


def test_job_body_and_encoding() -> None:
    """Bodies omit ``error`` unless present; encoding keeps progress."""
    job = Job(id="j1", status=JobStatus.QUEUED, progress=0)

    assert job.to_body() == {"status": "queued", "progress": 0}, "unexpected body"
    assert msgspec.json.decode(msgspec.json.encode(job)) == {
        "id": "j1",
        "status": "queued",
        "progress": 0,
    }, "expected progress kept and error omitted"
