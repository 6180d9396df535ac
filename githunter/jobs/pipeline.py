"""The analysis pipeline executed by the worker for each job.

Stages run strictly in order, each under its own deadline:

1. aggregation: build the profile report (progress 40 afterwards);
2. sampling: gather code context (progress 85 afterwards);
3. scoring: score the report with the configured model.

Progress reaches 85 only once everything scoring depends on is gathered.
Code sampling is part of that groundwork, so aggregation alone stops at 40
and the jump to 85 waits for sampling.

The combined :class:`AnalysisResult` is cached under the job id and the
canonical login before the job is marked completed. Any failure marks the
job failed with a reason and is re-raised; the job is never retried here.
"""

from __future__ import annotations

import asyncio
import time
import typing as typ

import msgspec
from redis.exceptions import RedisError

from githunter.jobs.errors import JobError, StageTimeoutError
from githunter.jobs.models import JobState
from githunter.jobs.observability import JobEventLogger
from githunter.logging import get_logger, log_exception
from githunter.scoring.models import AnalysisResult, ScoringView

if typ.TYPE_CHECKING:
    from githunter.jobs.config import JobConfig
    from githunter.jobs.tracking import JobTracker
    from githunter.profile.service import ProfileAggregator
    from githunter.sampling.service import CodeSampler
    from githunter.scoring.protocol import ScoringModel

logger = get_logger(__name__)

PROGRESS_STARTED = 5
PROGRESS_AGGREGATED = 40
PROGRESS_SAMPLED = 85
PROGRESS_COMPLETED = 100


def failure_reason(exc: BaseException) -> str:
    """Return the reason recorded for a failed job."""
    return str(exc) or type(exc).__name__


class AnalysisPipeline:
    """Run aggregation, sampling and scoring for one job.

    Parameters
    ----------
    aggregator
        Builds the profile report.
    sampler
        Gathers code samples for scoring.
    scoring_model
        Scores the report.
    tracker
        Records progress in the registry and the status cache.
    config
        Stage deadlines.
    event_logger
        Structured event sink; a default logger is used when omitted.

    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        aggregator: ProfileAggregator,
        sampler: CodeSampler,
        scoring_model: ScoringModel,
        tracker: JobTracker,
        config: JobConfig,
        event_logger: JobEventLogger | None = None,
    ) -> None:
        """Wire the pipeline to its collaborators."""
        self._aggregator = aggregator
        self._sampler = sampler
        self._scoring_model = scoring_model
        self._tracker = tracker
        self._config = config
        self._events = event_logger or JobEventLogger()

    async def run(
        self,
        job_id: str,
        username: str,
        view: ScoringView | str = ScoringView.RECRUITER,
        context: str | None = None,
    ) -> AnalysisResult:
        """Execute the job and return its analysis.

        Raises
        ------
        StageTimeoutError
            If a stage exceeds its deadline.
        Exception
            Whatever a stage raised, after the job was marked failed.

        """
        started = time.monotonic()
        progress = 0
        self._events.log_started(job_id=job_id, username=username)
        try:
            await self._tracker.advance(job_id, JobState.ACTIVE, PROGRESS_STARTED)
            progress = PROGRESS_STARTED

            report = await self._run_stage(
                "aggregation",
                self._config.aggregation_timeout_s,
                self._aggregator.build_report(username),
            )
            await self._tracker.advance(job_id, JobState.ACTIVE, PROGRESS_AGGREGATED)
            progress = PROGRESS_AGGREGATED

            samples = await self._run_stage(
                "sampling",
                self._config.sampling_timeout_s,
                self._sampler.sample(report.repos),
            )
            await self._tracker.advance(job_id, JobState.ACTIVE, PROGRESS_SAMPLED)
            progress = PROGRESS_SAMPLED

            scoring = await self._run_stage(
                "scoring",
                self._config.scoring_timeout_s,
                self._scoring_model.score_profile(
                    report, samples, view=ScoringView(view), context=context
                ),
            )

            result = AnalysisResult.combine(report, scoring)
            payload = msgspec.json.encode(result)
            await self._tracker.cache.set_job_report(job_id, payload)
            await self._tracker.cache.set_user_report(report.login, payload)
            await self._tracker.advance(
                job_id, JobState.COMPLETED, PROGRESS_COMPLETED
            )
        except Exception as exc:
            await self._record_failure(job_id, progress, exc)
            self._events.log_failed(
                job_id=job_id,
                username=username,
                error=exc,
                duration_s=time.monotonic() - started,
            )
            raise

        metrics = getattr(self._scoring_model, "last_invocation_metrics", None)
        self._events.log_completed(
            job_id=job_id,
            login=report.login,
            overall_score=result.scores.overall_score,
            duration_s=time.monotonic() - started,
            total_tokens=metrics.total_tokens if metrics is not None else None,
        )
        return result

    async def _run_stage[T](
        self, stage: str, timeout_s: float, awaitable: typ.Awaitable[T]
    ) -> T:
        deadline = asyncio.timeout(timeout_s)
        try:
            async with deadline:
                return await awaitable
        except TimeoutError as exc:
            if deadline.expired():
                raise StageTimeoutError(stage, timeout_s) from exc
            raise

    async def _record_failure(
        self, job_id: str, progress: int, exc: BaseException
    ) -> None:
        try:
            await self._tracker.advance(
                job_id,
                JobState.FAILED,
                progress,
                failed_reason=failure_reason(exc),
            )
        except (JobError, RedisError, OSError) as record_exc:
            # The original error is re-raised by the caller either way.
            log_exception(
                logger, f"Could not record failure for job {job_id}", record_exc
            )


__all__ = [
    "PROGRESS_AGGREGATED",
    "PROGRESS_COMPLETED",
    "PROGRESS_SAMPLED",
    "PROGRESS_STARTED",
    "AnalysisPipeline",
    "failure_reason",
]
