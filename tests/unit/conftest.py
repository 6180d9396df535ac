"""Fixtures wiring the Falcon application over in-memory doubles."""

from __future__ import annotations

import typing as typ

import pytest

from githunter.api.app import create_app
from tests.helpers.jobs import RecordingDispatcher, build_dependencies

if typ.TYPE_CHECKING:
    import falcon.asgi

    from githunter.api.app import AppDependencies
    from githunter.cache.keys import ReportCache
    from githunter.jobs.tracking import JobTracker
    from tests.helpers.github_payloads import FakeGitHubClient


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    """Return a dispatcher that records messages instead of sending them."""
    return RecordingDispatcher()


@pytest.fixture
def dependencies(
    report_cache: ReportCache,
    github: FakeGitHubClient,
    tracker: JobTracker,
    dispatcher: RecordingDispatcher,
) -> AppDependencies:
    """Return application dependencies over the shared doubles."""
    return build_dependencies(report_cache, github, tracker, dispatch=dispatcher)


@pytest.fixture
def app(dependencies: AppDependencies) -> falcon.asgi.App:
    """Return the full application."""
    return create_app(dependencies)
