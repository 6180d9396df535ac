"""Behavioural coverage for the asynchronous analysis protocol.

Usage
-----
Run with pytest::

    pytest tests/features/steps/test_analysis_jobs_steps.py

Shared steps and the ``analysis_context`` fixture live in
``tests/features/conftest.py``.
"""

from __future__ import annotations

import typing as typ

import msgspec
import pytest
from pytest_bdd import parsers, scenario, then, when

from githunter.jobs.errors import InvalidInputError
from githunter.jobs.queue import ReportPending, ReportReady

if typ.TYPE_CHECKING:
    from tests.features.conftest import AnalysisContext


@scenario("../analysis_jobs.feature", "A queued analysis completes and is cached")
def test_analysis_completes() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../analysis_jobs.feature", "An analysis of an unknown user fails")
def test_unknown_user_fails() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../analysis_jobs.feature", "A request without a username is rejected")
def test_missing_username_rejected() -> None:
    """Wrapper for pytest-bdd scenario."""


@when("I request an analysis without a username")
def when_request_without_username(analysis_context: AnalysisContext) -> None:
    """Submit a request with no username."""
    queue = analysis_context["queue"]
    with pytest.raises(InvalidInputError) as excinfo:
        analysis_context["runner"].run(queue.enqueue(None))
    analysis_context["rejection"] = excinfo.value


@then(parsers.parse('the request is rejected with "{message}"'))
def then_rejected(analysis_context: AnalysisContext, message: str) -> None:
    """Assert the validation message and that nothing was dispatched."""
    assert str(analysis_context["rejection"]) == message, "unexpected reason"
    assert analysis_context["dispatcher"].sent == [], "expected nothing dispatched"


@then("the report for the job is available")
def then_report_available(analysis_context: AnalysisContext) -> None:
    """Assert the cached analysis carries the report and its scores."""
    queue = analysis_context["queue"]
    lookup = analysis_context["runner"].run(
        queue.get_report(analysis_context["job"].id)
    )
    assert isinstance(lookup, ReportReady), "expected a cached report"
    body = msgspec.json.decode(lookup.payload)
    assert body["report"]["user"]["login"] == "octocat", "expected the profile"
    assert 0 <= body["scores"]["overallScore"] <= 100, "expected a bounded score"


@then(parsers.parse('the latest report for "{username}" matches the job report'))
def then_latest_matches(analysis_context: AnalysisContext, username: str) -> None:
    """Assert both keyspaces hold the same bytes."""
    queue = analysis_context["queue"]
    runner = analysis_context["runner"]
    latest = runner.run(queue.get_latest_report(username))
    lookup = runner.run(queue.get_report(analysis_context["job"].id))
    assert isinstance(lookup, ReportReady), "expected a cached report"
    assert latest == lookup.payload, "expected identical payloads"


@then("the report for the job is still pending")
def then_report_pending(analysis_context: AnalysisContext) -> None:
    """Assert a failed job answers with its status instead of a report."""
    queue = analysis_context["queue"]
    lookup = analysis_context["runner"].run(
        queue.get_report(analysis_context["job"].id)
    )
    assert isinstance(lookup, ReportPending), "expected no report"
    assert lookup.job.error is not None, "expected the failure reason"
    assert "failure" in analysis_context, "expected the worker to see the error"
