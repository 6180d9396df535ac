"""Errors raised by the job queue and the analysis pipeline."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from githunter.jobs.models import JobStatus


class JobError(Exception):
    """Base class for job queue errors."""


class InvalidInputError(JobError):
    """Raised when an analysis request is malformed."""

    @classmethod
    def missing_username(cls) -> InvalidInputError:
        """Return an error for an absent or blank username."""
        return cls("username is required")

    @classmethod
    def invalid_username(cls, username: str) -> InvalidInputError:
        """Return an error for a username GitHub could never accept."""
        return cls(f"Invalid GitHub username: {username!r}")

    @classmethod
    def invalid_view(cls, view: object, valid: typ.Iterable[str]) -> InvalidInputError:
        """Return an error for an unknown report view."""
        options = ", ".join(sorted(valid))
        return cls(f"Invalid view {view!r}. Valid options are: {options}")

    @classmethod
    def invalid_context(cls) -> InvalidInputError:
        """Return an error for a non-string job description."""
        return cls("context must be a string")

    @classmethod
    def invalid_body(cls) -> InvalidInputError:
        """Return an error for a request body that is not a JSON object."""
        return cls("Request body must be a JSON object")


class QueueUnavailableError(JobError):
    """Raised when a job cannot be recorded or dispatched."""

    def __init__(self, message: str = "Service unavailable") -> None:
        """Initialise with the client-facing message."""
        super().__init__(message)


class JobNotFoundError(JobError):
    """Raised when a job id is unknown or its record has expired."""

    def __init__(self, job_id: str) -> None:
        """Initialise with the missing job id."""
        self.job_id = job_id
        super().__init__("Job not found")


class ReportExpiredError(JobError):
    """Raised when a completed job's report is no longer cached."""

    def __init__(self) -> None:
        """Initialise with the client-facing message."""
        super().__init__("Report expired or not found")


class IllegalJobTransitionError(JobError):
    """Raised when a job status change would break the state machine."""

    def __init__(self, job_id: str, current: JobStatus, target: JobStatus) -> None:
        """Initialise with the rejected transition."""
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(
            f"Job {job_id} cannot move from {current.value} to {target.value}"
        )


class PipelineUnavailableError(JobError):
    """Raised when the worker cannot build its analysis pipeline."""

    def __init__(self, cause: BaseException) -> None:
        """Initialise with the build failure."""
        self.cause = cause
        super().__init__(f"Analysis pipeline unavailable: {cause}")


class StageTimeoutError(JobError):
    """Raised when a pipeline stage exceeds its deadline."""

    def __init__(self, stage: str, timeout_s: float) -> None:
        """Initialise with the stage name and the deadline that elapsed."""
        self.stage = stage
        self.timeout_s = timeout_s
        super().__init__(f"{stage} stage timed out after {timeout_s:g}s")


__all__ = [
    "IllegalJobTransitionError",
    "InvalidInputError",
    "JobError",
    "JobNotFoundError",
    "PipelineUnavailableError",
    "QueueUnavailableError",
    "ReportExpiredError",
    "StageTimeoutError",
]
