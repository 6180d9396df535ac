"""Long-lived worker state shared by every actor invocation.

Dramatiq runs the actor synchronously on a worker thread. Rather than an
``asyncio.run`` per message, the worker keeps one :class:`asyncio.Runner`
for its lifetime so the Redis and httpx clients, and the cache probe
outcome, survive from one job to the next. The worker runs a single thread,
so the runner is never entered concurrently.
"""

from __future__ import annotations

import asyncio
import contextlib
import threading
import typing as typ

from githunter.cache.config import CacheConfig
from githunter.cache.keys import ReportCache
from githunter.cache.store import CacheStore
from githunter.github.client import GitHubConfig, GitHubRestClient
from githunter.jobs._broker import stub_broker_enabled
from githunter.jobs.config import JobConfig
from githunter.jobs.errors import PipelineUnavailableError
from githunter.jobs.pipeline import AnalysisPipeline
from githunter.jobs.registry import InMemoryJobRegistry, JobRegistry, RedisJobRegistry
from githunter.jobs.tracking import JobTracker
from githunter.profile.service import ProfileAggregator
from githunter.sampling.service import CodeSampler
from githunter.scoring.factory import create_scoring_model

type PipelineFactory = typ.Callable[
    [contextlib.AsyncExitStack], typ.Awaitable[AnalysisPipeline]
]

_RUNTIME_LOCK = threading.Lock()
_runtime: WorkerRuntime | None = None


async def build_pipeline_from_env(stack: contextlib.AsyncExitStack) -> AnalysisPipeline:
    """Build the production pipeline from ``GITHUNTER_*`` variables.

    Clients are registered on *stack* so closing the runtime releases them.
    """
    cache_config = CacheConfig.from_env()
    job_config = JobConfig.from_env()

    store = CacheStore(cache_config)
    await store.init()
    stack.push_async_callback(store.aclose)

    registry: JobRegistry
    if stub_broker_enabled():
        registry = InMemoryJobRegistry()
    else:
        redis_registry = RedisJobRegistry.from_url(
            cache_config.redis_url, retention_s=job_config.job_retention_s
        )
        stack.push_async_callback(redis_registry.aclose)
        registry = redis_registry

    github = GitHubRestClient(GitHubConfig.from_env())
    stack.push_async_callback(github.aclose)

    scoring_model = create_scoring_model()
    aclose = getattr(scoring_model, "aclose", None)
    if aclose is not None:
        stack.push_async_callback(aclose)

    return AnalysisPipeline(
        aggregator=ProfileAggregator(github),
        sampler=CodeSampler(github),
        scoring_model=scoring_model,
        tracker=JobTracker(registry, ReportCache(store, cache_config)),
        config=job_config,
    )


class WorkerRuntime:
    """Event loop and pipeline reused across actor invocations.

    The pipeline is built at most once. The worker entrypoint calls
    :meth:`start` before consuming messages so a broken configuration stops
    the process instead of stranding jobs; a runtime used without
    :meth:`start` builds on the first job. A failed build is remembered and
    every later job fails with :class:`PipelineUnavailableError` without
    building again.
    """

    def __init__(self, pipeline_factory: PipelineFactory) -> None:
        """Create the runtime; nothing is built yet."""
        self._pipeline_factory = pipeline_factory
        self._runner = asyncio.Runner()
        self._stack = contextlib.AsyncExitStack()
        self._pipeline: AnalysisPipeline | None = None
        self._build_error: Exception | None = None

    def start(self) -> None:
        """Build the pipeline now.

        Raises
        ------
        PipelineUnavailableError
            If the pipeline cannot be built.

        """
        self._runner.run(self._ensure_pipeline())

    def run_job(
        self,
        job_id: str,
        username: str,
        view: str,
        context: str | None,
    ) -> None:
        """Run one job to completion on the persistent loop."""
        self._runner.run(self._run_job(job_id, username, view, context))

    async def _run_job(
        self,
        job_id: str,
        username: str,
        view: str,
        context: str | None,
    ) -> None:
        pipeline = await self._ensure_pipeline()
        await pipeline.run(job_id, username, view, context)

    async def _ensure_pipeline(self) -> AnalysisPipeline:
        if self._pipeline is not None:
            return self._pipeline
        if self._build_error is None:
            try:
                self._pipeline = await self._pipeline_factory(self._stack)
            except Exception as exc:  # noqa: BLE001 - any build failure is final
                self._build_error = exc
            else:
                return self._pipeline
        raise PipelineUnavailableError(self._build_error) from self._build_error

    def close(self) -> None:
        """Release pipeline resources and close the loop."""
        self._runner.run(self._stack.aclose())
        self._pipeline = None
        self._runner.close()


def configure_worker_runtime(pipeline_factory: PipelineFactory) -> WorkerRuntime:
    """Install a runtime built from *pipeline_factory*, replacing any other.

    The replaced runtime is closed first.
    """
    global _runtime
    with _RUNTIME_LOCK:
        previous, _runtime = _runtime, WorkerRuntime(pipeline_factory)
        runtime = _runtime
    if previous is not None:
        previous.close()
    return runtime


def get_worker_runtime() -> WorkerRuntime:
    """Return the installed runtime, creating the production one if absent."""
    global _runtime
    with _RUNTIME_LOCK:
        if _runtime is None:
            _runtime = WorkerRuntime(build_pipeline_from_env)
        return _runtime


def close_worker_runtime() -> None:
    """Close and forget the installed runtime, if any."""
    global _runtime
    with _RUNTIME_LOCK:
        runtime, _runtime = _runtime, None
    if runtime is not None:
        runtime.close()


__all__ = [
    "PipelineFactory",
    "WorkerRuntime",
    "build_pipeline_from_env",
    "close_worker_runtime",
    "configure_worker_runtime",
    "get_worker_runtime",
]
