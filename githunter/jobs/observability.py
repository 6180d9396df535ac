"""Structured log events for the analysis job lifecycle."""

from __future__ import annotations

import enum

from githunter.logging import get_logger, log_error, log_info

logger = get_logger(__name__)


class JobEventType(enum.StrEnum):
    """Structured log event types for analysis jobs."""

    JOB_ENQUEUED = "job.enqueued"
    JOB_STARTED = "job.started"
    JOB_COMPLETED = "job.completed"
    JOB_FAILED = "job.failed"
    JOB_DISPATCH_FAILED = "job.dispatch.failed"


class JobEventLogger:
    """Emit job lifecycle events via femtologging."""

    def log_enqueued(self, *, job_id: str, username: str, view: str) -> None:
        """Log a job accepted by the queue."""
        log_info(
            logger,
            "[%s] job_id=%s username=%s view=%s",
            JobEventType.JOB_ENQUEUED,
            job_id,
            username,
            view,
        )

    def log_dispatch_failed(
        self, *, job_id: str, username: str, error: BaseException
    ) -> None:
        """Log a job that could not be recorded or handed to the broker."""
        log_error(
            logger,
            "[%s] job_id=%s username=%s error_type=%s error_message=%s",
            JobEventType.JOB_DISPATCH_FAILED,
            job_id,
            username,
            type(error).__name__,
            str(error),
        )

    def log_started(self, *, job_id: str, username: str) -> None:
        """Log the worker picking up a job."""
        log_info(
            logger,
            "[%s] job_id=%s username=%s",
            JobEventType.JOB_STARTED,
            job_id,
            username,
        )

    def log_completed(
        self,
        *,
        job_id: str,
        login: str,
        overall_score: float,
        duration_s: float,
        total_tokens: int | None = None,
    ) -> None:
        """Log a job whose analysis was produced.

        ``total_tokens`` is the scoring model's usage when it reports one.
        """
        log_info(
            logger,
            "[%s] job_id=%s login=%s overall_score=%.1f duration_seconds=%.3f "
            "total_tokens=%s",
            JobEventType.JOB_COMPLETED,
            job_id,
            login,
            overall_score,
            duration_s,
            "unknown" if total_tokens is None else total_tokens,
        )

    def log_failed(
        self,
        *,
        job_id: str,
        username: str,
        error: BaseException,
        duration_s: float,
    ) -> None:
        """Log a job that failed and will not be retried."""
        log_error(
            logger,
            "[%s] job_id=%s username=%s error_type=%s error_message=%s "
            "duration_seconds=%.3f",
            JobEventType.JOB_FAILED,
            job_id,
            username,
            type(error).__name__,
            str(error),
            duration_s,
        )


__all__ = ["JobEventLogger", "JobEventType"]
