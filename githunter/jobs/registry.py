"""Authoritative storage for job records.

Two implementations share the same transition rules: a Redis registry used
alongside the Redis broker, and an in-memory registry for stub-broker
deployments and tests. Unlike the cache, registry errors propagate; the
queue turns them into :class:`~githunter.jobs.errors.QueueUnavailableError`.
"""

from __future__ import annotations

import threading
import typing as typ

import msgspec
from redis.asyncio import Redis

from githunter.common.time import utcnow
from githunter.jobs.errors import JobNotFoundError
from githunter.jobs.models import JobRecord, JobState, ensure_transition

_RECORD_PREFIX = "job:record:"


class JobRegistry(typ.Protocol):
    """Storage interface for job records."""

    async def create(self, record: JobRecord) -> None:
        """Persist a new record."""
        ...

    async def get(self, job_id: str) -> JobRecord | None:
        """Return the record for *job_id*, or ``None`` when unknown."""
        ...

    async def update(
        self,
        job_id: str,
        *,
        state: JobState,
        progress: int,
        failed_reason: str | None = None,
    ) -> JobRecord:
        """Apply a state change and return the updated record."""
        ...

    async def discard(self, job_id: str) -> None:
        """Remove the record for *job_id* if present."""
        ...


def apply_update(
    record: JobRecord,
    *,
    state: JobState,
    progress: int,
    failed_reason: str | None,
) -> JobRecord:
    """Return *record* moved to *state*, enforcing the status state machine.

    Raises
    ------
    IllegalJobTransitionError
        If the public status would move illegally.

    """
    target = JobRecord(
        id=record.id,
        state=state,
        username=record.username,
        view=record.view,
        context=record.context,
        created_at=record.created_at,
        updated_at=utcnow(),
        progress=progress,
        failed_reason=failed_reason if state is JobState.FAILED else None,
    )
    ensure_transition(record.id, record.status, target.status)
    return target


class InMemoryJobRegistry:
    """Process-local registry.

    A thread lock guards the mapping because the stub broker's worker
    threads and the API share one instance in tests.
    """

    def __init__(self) -> None:
        """Create an empty registry."""
        self._records: dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    async def create(self, record: JobRecord) -> None:
        """Persist a new record."""
        with self._lock:
            self._records[record.id] = record

    async def get(self, job_id: str) -> JobRecord | None:
        """Return the record for *job_id*, or ``None`` when unknown."""
        with self._lock:
            return self._records.get(job_id)

    async def update(
        self,
        job_id: str,
        *,
        state: JobState,
        progress: int,
        failed_reason: str | None = None,
    ) -> JobRecord:
        """Apply a state change and return the updated record.

        Raises
        ------
        JobNotFoundError
            If *job_id* is unknown.

        """
        with self._lock:
            record = self._records.get(job_id)
            if record is None:
                raise JobNotFoundError(job_id)
            updated = apply_update(
                record, state=state, progress=progress, failed_reason=failed_reason
            )
            self._records[job_id] = updated
            return updated

    async def discard(self, job_id: str) -> None:
        """Remove the record for *job_id* if present."""
        with self._lock:
            self._records.pop(job_id, None)


class RedisJobRegistry:
    """Registry storing msgspec-encoded records in Redis with an expiry.

    Only the worker running a job updates its record, so the
    read-modify-write in :meth:`update` needs no locking.
    """

    def __init__(self, client: Redis, *, retention_s: int) -> None:
        """Bind the registry to *client*; records expire after *retention_s*."""
        self._client = client
        self._retention_s = retention_s

    @classmethod
    def from_url(cls, redis_url: str, *, retention_s: int) -> RedisJobRegistry:
        """Create a registry with its own binary-safe client."""
        return cls(
            Redis.from_url(redis_url, decode_responses=False),
            retention_s=retention_s,
        )

    async def aclose(self) -> None:
        """Close the Redis client."""
        await self._client.aclose()

    async def _write(self, record: JobRecord) -> None:
        await self._client.set(
            f"{_RECORD_PREFIX}{record.id}",
            msgspec.json.encode(record),
            ex=self._retention_s,
        )

    async def create(self, record: JobRecord) -> None:
        """Persist a new record."""
        await self._write(record)

    async def get(self, job_id: str) -> JobRecord | None:
        """Return the record for *job_id*, or ``None`` when unknown."""
        raw = await self._client.get(f"{_RECORD_PREFIX}{job_id}")
        if raw is None:
            return None
        return msgspec.json.decode(raw, type=JobRecord)

    async def update(
        self,
        job_id: str,
        *,
        state: JobState,
        progress: int,
        failed_reason: str | None = None,
    ) -> JobRecord:
        """Apply a state change and return the updated record.

        Raises
        ------
        JobNotFoundError
            If *job_id* is unknown or its record expired.

        """
        record = await self.get(job_id)
        if record is None:
            raise JobNotFoundError(job_id)
        updated = apply_update(
            record, state=state, progress=progress, failed_reason=failed_reason
        )
        await self._write(updated)
        return updated

    async def discard(self, job_id: str) -> None:
        """Remove the record for *job_id* if present."""
        await self._client.delete(f"{_RECORD_PREFIX}{job_id}")


__all__ = [
    "InMemoryJobRegistry",
    "JobRegistry",
    "RedisJobRegistry",
    "apply_update",
]
