"""Enqueue analysis jobs and answer status and report polls.

Usage
-----
>>> queue = JobQueue(tracker, dispatch=dispatch_analysis)
>>> job = await queue.enqueue("torvalds")
>>> (await queue.get_status(job.id)).status
<JobStatus.QUEUED: 'queued'>

"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import re
import typing as typ
import uuid

import msgspec
from dramatiq.errors import DramatiqError
from redis.exceptions import RedisError

from githunter.common.time import utcnow
from githunter.jobs.errors import (
    InvalidInputError,
    JobNotFoundError,
    QueueUnavailableError,
    ReportExpiredError,
)
from githunter.jobs.models import Job, JobRecord, JobState, JobStatus
from githunter.jobs.observability import JobEventLogger
from githunter.jobs.tracking import decode_snapshot
from githunter.logging import get_logger, log_exception
from githunter.scoring.models import ScoringView

if typ.TYPE_CHECKING:
    from githunter.jobs.tracking import JobTracker

logger = get_logger(__name__)

type JobDispatcher = cabc.Callable[[str, str, str, str | None], None]

# GitHub logins: alphanumerics and single hyphens, at most 39 characters.
_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")
_INFRASTRUCTURE_ERRORS = (DramatiqError, RedisError, OSError)


class ReportReady(msgspec.Struct, frozen=True):
    """Encoded analysis ready to be served as-is."""

    payload: bytes


class ReportPending(msgspec.Struct, frozen=True):
    """The job exists but has no report to serve yet."""

    job: Job


type ReportLookup = ReportReady | ReportPending


def validate_username(username: object) -> str:
    """Return *username* stripped, or raise if GitHub could never accept it.

    Raises
    ------
    InvalidInputError
        If the username is missing, blank or not a valid GitHub login.

    """
    if not isinstance(username, str) or not username.strip():
        raise InvalidInputError.missing_username()
    username = username.strip()
    if not _USERNAME_PATTERN.match(username):
        raise InvalidInputError.invalid_username(username)
    return username


def validate_request(
    username: object, view: object = None, context: object = None
) -> tuple[str, ScoringView, str | None]:
    """Validate an analysis request, returning normalised values.

    Raises
    ------
    InvalidInputError
        If the username is missing or malformed, the view is unknown, or the
        context is not text.

    """
    username = validate_username(username)

    if view is None:
        resolved_view = ScoringView.RECRUITER
    else:
        try:
            resolved_view = ScoringView(view)
        except ValueError as exc:
            raise InvalidInputError.invalid_view(
                view, (member.value for member in ScoringView)
            ) from exc

    if context is not None and not isinstance(context, str):
        raise InvalidInputError.invalid_context()
    return username, resolved_view, context or None


class JobQueue:
    """Front door of the asynchronous analysis protocol.

    Parameters
    ----------
    tracker
        Registry and status cache access.
    dispatch
        Hands a recorded job to the broker. Called with
        ``(job_id, username, view, context)``.
    event_logger
        Structured event sink; a default logger is used when omitted.
    id_factory
        Produces job ids; defaults to random UUID hex strings.

    """

    def __init__(
        self,
        tracker: JobTracker,
        *,
        dispatch: JobDispatcher,
        event_logger: JobEventLogger | None = None,
        id_factory: cabc.Callable[[], str] | None = None,
    ) -> None:
        """Wire the queue to its tracker and broker dispatch."""
        self._tracker = tracker
        self._dispatch = dispatch
        self._events = event_logger or JobEventLogger()
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)

    async def enqueue(
        self,
        username: object,
        view: object = None,
        context: object = None,
    ) -> Job:
        """Record and dispatch a new analysis job.

        Raises
        ------
        InvalidInputError
            If the request is malformed.
        QueueUnavailableError
            If the job could not be recorded or dispatched. No record is
            left behind in that case.

        """
        login, resolved_view, job_context = validate_request(username, view, context)
        job_id = self._id_factory()
        now = utcnow()
        record = JobRecord(
            id=job_id,
            state=JobState.WAITING,
            username=login,
            view=resolved_view.value,
            context=job_context,
            created_at=now,
            updated_at=now,
            progress=0,
        )
        try:
            job = await self._tracker.create(record)
            await asyncio.to_thread(
                self._dispatch, job_id, login, resolved_view.value, job_context
            )
        except _INFRASTRUCTURE_ERRORS as exc:
            self._events.log_dispatch_failed(job_id=job_id, username=login, error=exc)
            await self._discard(job_id)
            raise QueueUnavailableError from exc

        self._events.log_enqueued(
            job_id=job_id, username=login, view=resolved_view.value
        )
        return job

    async def get_status(self, job_id: str) -> Job:
        """Return the public status of *job_id*.

        A terminal snapshot in the status cache is final and served without
        touching the registry.

        Raises
        ------
        JobNotFoundError
            If the registry has no record of *job_id*.

        """
        cached = await self._tracker.cache.get_job_status(job_id)
        if cached is not None:
            snapshot = decode_snapshot(cached)
            if snapshot is not None and snapshot.status.terminal:
                return snapshot

        record = await self._tracker.registry.get(job_id)
        if record is None:
            raise JobNotFoundError(job_id)
        return record.to_job()

    async def get_report(self, job_id: str) -> ReportLookup:
        """Return the cached analysis of *job_id*, or its pending status.

        Raises
        ------
        JobNotFoundError
            If *job_id* is unknown.
        ReportExpiredError
            If the job completed but its report is no longer cached.

        """
        payload = await self._tracker.cache.get_job_report(job_id)
        if payload is not None:
            return ReportReady(payload)

        record = await self._tracker.registry.get(job_id)
        if record is None:
            raise JobNotFoundError(job_id)
        job = record.to_job()
        if job.status is JobStatus.COMPLETED:
            raise ReportExpiredError
        return ReportPending(job)

    async def get_latest_report(self, username: str) -> bytes:
        """Return the most recent cached analysis for *username*.

        Raises
        ------
        ReportExpiredError
            If no analysis is cached for *username*.
        InvalidInputError
            If *username* is not a valid GitHub login.

        """
        username = validate_username(username)
        payload = await self._tracker.cache.get_user_report(username)
        if payload is None:
            raise ReportExpiredError
        return payload

    async def _discard(self, job_id: str) -> None:
        try:
            await self._tracker.discard(job_id)
        except _INFRASTRUCTURE_ERRORS as exc:
            log_exception(logger, f"Could not discard record for job {job_id}", exc)


__all__ = [
    "JobDispatcher",
    "JobQueue",
    "ReportLookup",
    "ReportPending",
    "ReportReady",
    "validate_request",
    "validate_username",
]
