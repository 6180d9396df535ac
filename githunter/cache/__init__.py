"""Fail-open Redis cache used by the API and the worker.

Public API
----------
CacheStore, CacheState
    Store handle and its availability state machine.
CacheConfig
    Connection and expiry settings.
ReportCache
    Report-by-username, report-by-job and job-status keyspaces.
"""

from __future__ import annotations

from githunter.cache.config import CacheConfig
from githunter.cache.keys import (
    ReportCache,
    job_report_key,
    job_status_key,
    user_report_key,
)
from githunter.cache.store import (
    CacheClient,
    CacheState,
    CacheStore,
    ClientFactory,
    redis_client_factory,
)

__all__ = [
    "CacheClient",
    "CacheConfig",
    "CacheState",
    "CacheStore",
    "ClientFactory",
    "ReportCache",
    "job_report_key",
    "job_status_key",
    "redis_client_factory",
    "user_report_key",
]
