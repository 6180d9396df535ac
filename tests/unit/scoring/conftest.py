"""Shared fixtures for scoring tests."""

from __future__ import annotations

import pytest

from githunter.profile.models import Item, ProfileSummary, Report
from githunter.profile.stats import compute_stats
from githunter.sampling.models import CodeFile, CodeSamples, RepoSample


def _report(items: list[Item]) -> Report:
    return Report(
        user=ProfileSummary(login="octocat", public_repos=len(items)),
        repos=tuple(items),
        stats=compute_stats(items),
    )


@pytest.fixture
def report() -> Report:
    """Provide a report with three own repositories and one fork."""
    return _report(
        [
            Item(
                name="api",
                owner="octocat",
                language="Python",
                stargazers_count=30,
                description="REST API for widgets",
            ),
            Item(name="cli", owner="octocat", language="Python", stargazers_count=8),
            Item(
                name="agent",
                owner="octocat",
                language="Go",
                stargazers_count=2,
                description="Metrics agent",
            ),
            Item(name="cpython", owner="octocat", fork=True, stargazers_count=900),
        ]
    )


@pytest.fixture
def empty_report() -> Report:
    """Provide a report for a profile without repositories."""
    return _report([])


@pytest.fixture
def samples() -> CodeSamples:
    """Provide samples for two of the repositories."""
    return CodeSamples(
        repos=(
            RepoSample(
                name="api",
                files=(
                    CodeFile(path="README.md", content="# API", language="Markdown"),
                    CodeFile(
                        path="tests/test_api.py",
                        content="def test_ok():\n    assert True",
                        language="Python",
                    ),
                ),
            ),
            RepoSample(
                name="cli",
                files=(
                    CodeFile(path="main.py", content="print('cli')", language="Python"),
                ),
            ),
            RepoSample(name="agent"),
        )
    )
