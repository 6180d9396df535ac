"""Dramatiq actor running analysis jobs.

The broker is configured before the actor is declared so the actor binds
to it. Retry policy and the time limit come from :class:`JobConfig`; with
the default ``max_retries=0`` a failed analysis is final.

Usage
-----
>>> dispatch_analysis("3f2c...", "torvalds", "recruiter", None)

"""

from __future__ import annotations

import dramatiq

from githunter.jobs._broker import ensure_broker_configured
from githunter.jobs.config import JobConfig
from githunter.jobs.runtime import get_worker_runtime

ANALYSIS_QUEUE = "analysis"

broker = ensure_broker_configured()
_JOB_CONFIG = JobConfig.from_env()


@dramatiq.actor(
    actor_name="analyze_profile",
    queue_name=ANALYSIS_QUEUE,
    max_retries=_JOB_CONFIG.max_retries,
    time_limit=_JOB_CONFIG.actor_time_limit_ms,
)
def analyze_profile_job(
    job_id: str,
    username: str,
    view: str,
    context: str | None = None,
) -> None:
    """Run the analysis pipeline for one job.

    Parameters
    ----------
    job_id
        Registry id created by the queue.
    username
        GitHub login to analyse.
    view
        ``recruiter`` or ``developer``.
    context
        Optional job description text.

    """
    get_worker_runtime().run_job(job_id, username, view, context)


def dispatch_analysis(
    job_id: str,
    username: str,
    view: str,
    context: str | None,
) -> None:
    """Send an analysis message to the broker."""
    analyze_profile_job.send(job_id, username, view, context)


__all__ = ["ANALYSIS_QUEUE", "analyze_profile_job", "broker", "dispatch_analysis"]
