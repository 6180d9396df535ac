"""Keep the job registry and the cached status snapshot in step."""

from __future__ import annotations

import typing as typ

import msgspec

from githunter.jobs.models import Job, JobState

if typ.TYPE_CHECKING:
    from githunter.cache.keys import ReportCache
    from githunter.jobs.models import JobRecord
    from githunter.jobs.registry import JobRegistry


def encode_snapshot(job: Job) -> bytes:
    """Encode *job* for the ``job:status`` keyspace."""
    return msgspec.json.encode(job)


def decode_snapshot(payload: bytes) -> Job | None:
    """Decode a cached snapshot, or ``None`` if it is unreadable."""
    try:
        return msgspec.json.decode(payload, type=Job)
    except (msgspec.DecodeError, msgspec.ValidationError):
        return None


class JobTracker:
    """Write job state to the registry and mirror it into the cache.

    The registry write comes first and its errors propagate. The mirror is
    best effort because the cache never raises.
    """

    def __init__(self, registry: JobRegistry, cache: ReportCache) -> None:
        """Bind the tracker to its registry and cache."""
        self.registry = registry
        self.cache = cache

    async def create(self, record: JobRecord) -> Job:
        """Persist a new record and mirror its snapshot."""
        await self.registry.create(record)
        job = record.to_job()
        await self.cache.set_job_status(record.id, encode_snapshot(job))
        return job

    async def advance(
        self,
        job_id: str,
        state: JobState,
        progress: int,
        *,
        failed_reason: str | None = None,
    ) -> Job:
        """Move *job_id* to *state* and mirror the resulting snapshot."""
        record = await self.registry.update(
            job_id, state=state, progress=progress, failed_reason=failed_reason
        )
        job = record.to_job()
        await self.cache.set_job_status(job_id, encode_snapshot(job))
        return job

    async def discard(self, job_id: str) -> None:
        """Remove every trace of *job_id*."""
        await self.cache.delete_job_status(job_id)
        await self.registry.discard(job_id)


__all__ = ["JobTracker", "decode_snapshot", "encode_snapshot"]
