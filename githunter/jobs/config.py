"""Configuration for analysis jobs."""

from __future__ import annotations

import dataclasses

from githunter.common.env import (
    read_non_negative_int,
    read_positive_float,
    read_positive_int,
)


@dataclasses.dataclass(frozen=True, slots=True)
class JobConfig:
    """Retry policy, retention and per-stage deadlines for analysis jobs.

    Attributes
    ----------
    max_retries
        Retries granted to the dramatiq actor. Analysis is not idempotent
        with respect to GitHub's rate budget, so the default is ``0``.
    job_retention_s
        Lifetime of job records in the registry.
    aggregation_timeout_s, sampling_timeout_s, scoring_timeout_s
        Deadlines for the three pipeline stages.
    time_limit_margin_s
        Slack added to the stage deadlines to form the actor time limit.

    """

    max_retries: int = 0
    job_retention_s: int = 86400
    aggregation_timeout_s: float = 120.0
    sampling_timeout_s: float = 180.0
    scoring_timeout_s: float = 180.0
    time_limit_margin_s: float = 30.0

    @property
    def actor_time_limit_ms(self) -> int:
        """Return the dramatiq ``time_limit`` covering every stage."""
        total_s = (
            self.aggregation_timeout_s
            + self.sampling_timeout_s
            + self.scoring_timeout_s
            + self.time_limit_margin_s
        )
        return int(total_s * 1000)

    @classmethod
    def from_env(cls) -> JobConfig:
        """Build configuration from ``GITHUNTER_*`` job variables."""
        return cls(
            max_retries=read_non_negative_int("GITHUNTER_JOB_MAX_RETRIES", 0),
            job_retention_s=read_positive_int("GITHUNTER_JOB_RETENTION", 86400),
            aggregation_timeout_s=read_positive_float(
                "GITHUNTER_AGGREGATION_TIMEOUT", 120.0
            ),
            sampling_timeout_s=read_positive_float("GITHUNTER_SAMPLING_TIMEOUT", 180.0),
            scoring_timeout_s=read_positive_float("GITHUNTER_SCORING_TIMEOUT", 180.0),
        )


__all__ = ["JobConfig"]
