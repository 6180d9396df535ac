"""Build :class:`AppDependencies` from environment configuration.

This mirrors :func:`githunter.jobs.runtime.build_pipeline_from_env` for the
API process: both sides share the Redis URL, the cache keyspaces and the
job registry.

Usage
-----
Build dependencies for the API layer::

    deps = build_app_dependencies()
    app = create_app(deps)

"""

from __future__ import annotations

import typing as typ

from githunter.api.app import AppDependencies
from githunter.cache.config import CacheConfig
from githunter.cache.keys import ReportCache
from githunter.cache.store import CacheStore
from githunter.github.client import GitHubConfig, GitHubRestClient
from githunter.jobs._broker import stub_broker_enabled
from githunter.jobs.config import JobConfig
from githunter.jobs.queue import JobQueue
from githunter.jobs.registry import InMemoryJobRegistry, RedisJobRegistry
from githunter.jobs.tracking import JobTracker
from githunter.profile.service import ProfileAggregator

if typ.TYPE_CHECKING:
    from githunter.api.middleware import Closer
    from githunter.jobs.registry import JobRegistry

__all__ = ["build_app_dependencies"]


def build_app_dependencies() -> AppDependencies:
    """Build API dependencies from ``GITHUNTER_*`` variables.

    The cache store is created uninitialised; the lifespan middleware probes
    it at startup. Importing the actor module here configures the broker
    the dispatch function sends to.
    """
    from githunter.jobs.actor import dispatch_analysis

    cache_config = CacheConfig.from_env()
    job_config = JobConfig.from_env()
    closers: list[Closer] = []

    registry: JobRegistry
    if stub_broker_enabled():
        registry = InMemoryJobRegistry()
    else:
        redis_registry = RedisJobRegistry.from_url(
            cache_config.redis_url, retention_s=job_config.job_retention_s
        )
        closers.append(redis_registry.aclose)
        registry = redis_registry

    github = GitHubRestClient(GitHubConfig.from_env())
    closers.append(github.aclose)

    cache = ReportCache(CacheStore(cache_config), cache_config)
    return AppDependencies(
        cache=cache,
        aggregator=ProfileAggregator(github),
        queue=JobQueue(JobTracker(registry, cache), dispatch=dispatch_analysis),
        closers=tuple(closers),
    )
