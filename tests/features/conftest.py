"""Shared fixtures and steps for the analysis feature tests.

Steps run synchronously; every coroutine goes through one
:class:`asyncio.Runner` per scenario so the cache store and the registry see
a single event loop from the background steps to the assertions.
"""

from __future__ import annotations

import asyncio
import typing as typ

import pytest
from pytest_bdd import given, parsers, then, when

from githunter.github.errors import GitHubAPIError
from githunter.jobs.config import JobConfig
from githunter.jobs.pipeline import AnalysisPipeline
from githunter.jobs.queue import JobQueue
from githunter.profile.service import ProfileAggregator
from githunter.sampling.service import CodeSampler
from githunter.scoring.mock import MockScoringModel
from tests.helpers.github_payloads import repo_payload, tree_payload
from tests.helpers.jobs import RecordingDispatcher, sequential_ids

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.testing.client import Result

    from githunter.cache.keys import ReportCache
    from githunter.jobs.errors import InvalidInputError
    from githunter.jobs.models import Job
    from githunter.jobs.tracking import JobTracker
    from tests.helpers.fake_redis import FakeRedis
    from tests.helpers.github_payloads import FakeGitHubClient


class AnalysisContext(typ.TypedDict, total=False):
    """Mutable context shared between steps."""

    runner: asyncio.Runner
    github: FakeGitHubClient
    fake_redis: FakeRedis
    cache: ReportCache
    tracker: JobTracker
    dispatcher: RecordingDispatcher
    queue: JobQueue
    job: Job
    rejection: InvalidInputError
    failure: GitHubAPIError
    response: Result


@pytest.fixture
def runner() -> cabc.Iterator[asyncio.Runner]:
    """Provide one event loop for the whole scenario."""
    with asyncio.Runner() as scenario_runner:
        yield scenario_runner


@pytest.fixture
def analysis_context(
    runner: asyncio.Runner,
    github: FakeGitHubClient,
    fake_redis: FakeRedis,
    report_cache: ReportCache,
    tracker: JobTracker,
) -> AnalysisContext:
    """Wire a queue over in-memory doubles."""
    dispatcher = RecordingDispatcher()
    return {
        "runner": runner,
        "github": github,
        "fake_redis": fake_redis,
        "cache": report_cache,
        "tracker": tracker,
        "dispatcher": dispatcher,
        "queue": JobQueue(tracker, dispatch=dispatcher, id_factory=sequential_ids()),
    }


def _current_status(context: AnalysisContext) -> Job:
    return context["runner"].run(context["queue"].get_status(context["job"].id))


@given(parsers.parse('a GitHub user "{login}" with public repositories'))
def given_github_user(analysis_context: AnalysisContext, login: str) -> None:
    """Register *login* with two repositories and a small source tree."""
    github = analysis_context["github"]
    github.add_profile(
        login,
        [
            repo_payload("api", owner=login, stars=30, description="REST service"),
            repo_payload("cli", owner=login, stars=8, language="Go"),
        ],
        pinned=["api"],
    )
    github.trees[(login, "api")] = tree_payload("README.md", "src/", "src/app.py")
    github.files[(login, "api", "README.md")] = "# api\n\nA REST service.\n"
    github.files[(login, "api", "src/app.py")] = "def main():\n    return 0\n"


@given("a reachable cache")
def given_reachable_cache(analysis_context: AnalysisContext) -> None:
    """Probe a working Redis double."""
    cache = analysis_context["cache"]
    analysis_context["runner"].run(cache.store.init())
    assert cache.store.available, "expected the cache to be available"


@given("an unreachable cache")
def given_unreachable_cache(analysis_context: AnalysisContext) -> None:
    """Probe a Redis double that refuses connections."""
    analysis_context["fake_redis"].fail = True
    cache = analysis_context["cache"]
    analysis_context["runner"].run(cache.store.init())
    assert not cache.store.available, "expected the cache to be unavailable"


@when(parsers.parse('I request an analysis of "{username}" for the "{view}" view'))
def when_request_analysis(
    analysis_context: AnalysisContext, username: str, view: str
) -> None:
    """Enqueue an analysis job."""
    queue = analysis_context["queue"]
    analysis_context["job"] = analysis_context["runner"].run(
        queue.enqueue(username, view)
    )


@when("the worker runs the job")
def when_worker_runs(analysis_context: AnalysisContext) -> None:
    """Run the dispatched message through the analysis pipeline."""
    ((job_id, username, view, context),) = analysis_context["dispatcher"].sent
    github = analysis_context["github"]
    pipeline = AnalysisPipeline(
        aggregator=ProfileAggregator(github),
        sampler=CodeSampler(github),
        scoring_model=MockScoringModel(),
        tracker=analysis_context["tracker"],
        config=JobConfig(),
    )
    try:
        analysis_context["runner"].run(pipeline.run(job_id, username, view, context))
    except GitHubAPIError as exc:
        analysis_context["failure"] = exc


@then(parsers.parse('the job status is "{status}" with progress {progress:d}'))
def then_status_progress(
    analysis_context: AnalysisContext, status: str, progress: int
) -> None:
    """Assert the public status and progress."""
    job = _current_status(analysis_context)
    assert job.status.value == status, f"expected {status}, got {job.status}"
    assert job.progress == progress, f"expected {progress}, got {job.progress}"


@then(parsers.parse('the job status is "{status}" with error "{error}"'))
def then_status_error(analysis_context: AnalysisContext, status: str, error: str) -> None:
    """Assert the public status and its failure reason."""
    job = _current_status(analysis_context)
    assert job.status.value == status, f"expected {status}, got {job.status}"
    assert job.error == error, f"expected {error!r}, got {job.error!r}"
