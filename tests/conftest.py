"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

from githunter.cache.config import CacheConfig
from githunter.cache.keys import ReportCache
from githunter.cache.store import CacheStore
from githunter.jobs.registry import InMemoryJobRegistry
from githunter.jobs.tracking import JobTracker
from tests.helpers.fake_redis import FakeRedis
from tests.helpers.github_payloads import FakeGitHubClient, repo_payload

_GITHUNTER_ENV_PREFIX = "GITHUNTER_"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ``GITHUNTER_*`` variables inherited from the developer's shell."""
    for name in list(os.environ):
        if name.startswith(_GITHUNTER_ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cache_config() -> CacheConfig:
    """Return cache settings with a short probe deadline."""
    return CacheConfig(report_ttl_s=3600, status_ttl_s=86400, probe_timeout_s=0.2)


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Return an empty in-memory Redis double."""
    return FakeRedis()


@pytest.fixture
def store(cache_config: CacheConfig, fake_redis: FakeRedis) -> CacheStore:
    """Return an uninitialised store bound to ``fake_redis``."""
    return CacheStore(cache_config, client_factory=lambda: fake_redis)


@pytest.fixture
def report_cache(store: CacheStore, cache_config: CacheConfig) -> ReportCache:
    """Return the keyspaces over ``store``."""
    return ReportCache(store, cache_config)


@pytest.fixture
def registry() -> InMemoryJobRegistry:
    """Return an empty in-memory job registry."""
    return InMemoryJobRegistry()


@pytest.fixture
def tracker(registry: InMemoryJobRegistry, report_cache: ReportCache) -> JobTracker:
    """Return a tracker over the in-memory registry and the fake cache."""
    return JobTracker(registry, report_cache)


@pytest.fixture
def github() -> FakeGitHubClient:
    """Return a fake GitHub with one user owning three repositories."""
    client = FakeGitHubClient()
    client.add_profile(
        "octocat",
        [
            repo_payload("spoon-knife", stars=12, description="Fork me"),
            repo_payload("hello-world", stars=40, language="C", description=None),
            repo_payload("linux", stars=3, fork=True, owner="octocat"),
        ],
        pinned=["spoon-knife"],
    )
    return client
