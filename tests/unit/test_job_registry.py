"""Unit tests for the job registries."""

from __future__ import annotations

import datetime as dt

import pytest

from githunter.jobs.errors import IllegalJobTransitionError, JobNotFoundError
from githunter.jobs.models import JobRecord, JobState, JobStatus
from githunter.jobs.registry import InMemoryJobRegistry, JobRegistry, RedisJobRegistry
from tests.helpers.fake_redis import FakeRedis

_NOW = dt.datetime(2024, 7, 1, tzinfo=dt.UTC)


def _record(job_id: str = "j1") -> JobRecord:
    return JobRecord(
        id=job_id,
        state=JobState.WAITING,
        username="octocat",
        view="recruiter",
        context="Python role",
        created_at=_NOW,
        updated_at=_NOW,
    )


@pytest.fixture(params=["memory", "redis"])
def any_registry(request: pytest.FixtureRequest) -> JobRegistry:
    """Provide each registry implementation."""
    if request.param == "memory":
        return InMemoryJobRegistry()
    return RedisJobRegistry(FakeRedis(), retention_s=600)  # type: ignore[arg-type]


class TestRegistryContract:
    """Behaviour shared by every registry."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, any_registry: JobRegistry) -> None:
        """A created record is returned unchanged."""
        await any_registry.create(_record())

        assert await any_registry.get("j1") == _record(), "expected the record"
        assert await any_registry.get("missing") is None, "expected None"

    @pytest.mark.asyncio
    async def test_lifecycle(self, any_registry: JobRegistry) -> None:
        """A job moves queued -> processing -> failed with its reason."""
        await any_registry.create(_record())

        active = await any_registry.update("j1", state=JobState.ACTIVE, progress=40)
        failed = await any_registry.update(
            "j1", state=JobState.FAILED, progress=40, failed_reason="boom"
        )

        assert active.status is JobStatus.PROCESSING, "expected processing"
        assert failed.to_job().error == "boom", "expected the reason"
        assert failed.created_at == _NOW, "expected creation time preserved"
        assert failed.updated_at > _NOW, "expected a fresh update time"

    @pytest.mark.asyncio
    async def test_illegal_transition_leaves_record(
        self, any_registry: JobRegistry
    ) -> None:
        """A rejected update does not modify the stored record."""
        await any_registry.create(_record())

        with pytest.raises(IllegalJobTransitionError):
            await any_registry.update("j1", state=JobState.COMPLETED, progress=100)

        stored = await any_registry.get("j1")
        assert stored is not None, "expected the record"
        assert stored.status is JobStatus.QUEUED, "expected the record unchanged"

    @pytest.mark.asyncio
    async def test_update_unknown_job(self, any_registry: JobRegistry) -> None:
        """Updating an unknown id raises JobNotFoundError."""
        with pytest.raises(JobNotFoundError):
            await any_registry.update("nope", state=JobState.ACTIVE, progress=5)

    @pytest.mark.asyncio
    async def test_discard(self, any_registry: JobRegistry) -> None:
        """Discarded records are gone; discarding twice is harmless."""
        await any_registry.create(_record())

        await any_registry.discard("j1")
        await any_registry.discard("j1")

        assert await any_registry.get("j1") is None, "expected the record removed"


@pytest.mark.asyncio
async def test_redis_registry_applies_retention() -> None:
    """Records are stored under their own prefix with the retention expiry."""
    client = FakeRedis()
    registry = RedisJobRegistry(client, retention_s=600)  # type: ignore[arg-type]

    await registry.create(_record())

    assert client.expiries == {"job:record:j1": 600}, "expected the record key"
