"""Report and job-status keyspaces layered over :class:`CacheStore`."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from githunter.cache.config import CacheConfig
    from githunter.cache.store import CacheStore


def user_report_key(username: str) -> str:
    """Return the report-by-username key; logins compare case-insensitively."""
    return f"report:user:{username.casefold()}"


def job_report_key(job_id: str) -> str:
    """Return the report-by-job key."""
    return f"report:job:{job_id}"


def job_status_key(job_id: str) -> str:
    """Return the job status snapshot key."""
    return f"job:status:{job_id}"


class ReportCache:
    """Typed access to the three disjoint cache keyspaces.

    Values are opaque encoded JSON; this class never decodes them so a cached
    report is served byte for byte.
    """

    def __init__(self, store: CacheStore, config: CacheConfig) -> None:
        """Bind the keyspaces to *store* with the expiries from *config*."""
        self._store = store
        self._config = config

    @property
    def store(self) -> CacheStore:
        """Return the underlying store."""
        return self._store

    async def get_user_report(self, username: str) -> bytes | None:
        """Return the latest analysis cached for *username*."""
        return await self._store.get(user_report_key(username))

    async def set_user_report(self, username: str, payload: bytes) -> None:
        """Cache *payload* as the latest analysis for *username*."""
        await self._store.set(
            user_report_key(username), payload, self._config.report_ttl_s
        )

    async def get_job_report(self, job_id: str) -> bytes | None:
        """Return the analysis cached for *job_id*."""
        return await self._store.get(job_report_key(job_id))

    async def set_job_report(self, job_id: str, payload: bytes) -> None:
        """Cache the analysis produced by *job_id*."""
        await self._store.set(job_report_key(job_id), payload, self._config.report_ttl_s)

    async def get_job_status(self, job_id: str) -> bytes | None:
        """Return the status snapshot mirrored for *job_id*."""
        return await self._store.get(job_status_key(job_id))

    async def set_job_status(self, job_id: str, payload: bytes) -> None:
        """Mirror a status snapshot for *job_id*."""
        await self._store.set(job_status_key(job_id), payload, self._config.status_ttl_s)

    async def delete_job_status(self, job_id: str) -> None:
        """Drop the status snapshot for *job_id*."""
        await self._store.delete(job_status_key(job_id))


__all__ = ["ReportCache", "job_report_key", "job_status_key", "user_report_key"]
