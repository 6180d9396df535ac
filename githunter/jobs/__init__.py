"""Asynchronous analysis jobs.

Public API
----------
JobQueue
    Enqueue jobs and answer status and report polls.
AnalysisPipeline
    Aggregation, sampling and scoring for one job.
JobStatus, Job, JobRecord, JobState
    Job state machine and records.
InMemoryJobRegistry, RedisJobRegistry
    Job registry implementations.

The Dramatiq actor lives in :mod:`githunter.jobs.actor`; importing it
configures the global broker, so it is not imported here.
"""

from __future__ import annotations

from githunter.jobs.config import JobConfig
from githunter.jobs.errors import (
    IllegalJobTransitionError,
    InvalidInputError,
    JobError,
    JobNotFoundError,
    PipelineUnavailableError,
    QueueUnavailableError,
    ReportExpiredError,
    StageTimeoutError,
)
from githunter.jobs.models import (
    Job,
    JobRecord,
    JobState,
    JobStatus,
    ensure_transition,
    normalize_progress,
    translate_state,
)
from githunter.jobs.pipeline import AnalysisPipeline
from githunter.jobs.queue import (
    JobDispatcher,
    JobQueue,
    ReportPending,
    ReportReady,
    validate_request,
    validate_username,
)
from githunter.jobs.registry import (
    InMemoryJobRegistry,
    JobRegistry,
    RedisJobRegistry,
)
from githunter.jobs.tracking import JobTracker

__all__ = [
    "AnalysisPipeline",
    "IllegalJobTransitionError",
    "InMemoryJobRegistry",
    "InvalidInputError",
    "Job",
    "JobConfig",
    "JobDispatcher",
    "JobError",
    "JobNotFoundError",
    "JobQueue",
    "JobRecord",
    "JobRegistry",
    "JobState",
    "JobStatus",
    "JobTracker",
    "PipelineUnavailableError",
    "QueueUnavailableError",
    "RedisJobRegistry",
    "ReportExpiredError",
    "ReportPending",
    "ReportReady",
    "StageTimeoutError",
    "ensure_transition",
    "normalize_progress",
    "translate_state",
    "validate_request",
    "validate_username",
]
