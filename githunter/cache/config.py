"""Configuration for the Redis-backed cache."""

from __future__ import annotations

import dataclasses

from githunter.common.env import read_positive_float, read_positive_int, read_str

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


@dataclasses.dataclass(frozen=True, slots=True)
class CacheConfig:
    """Connection and expiry settings for :class:`CacheStore`.

    Attributes
    ----------
    redis_url
        Redis connection URL shared with the broker and the job registry.
    report_ttl_s
        Expiry for both report keyspaces.
    status_ttl_s
        Expiry for job status snapshots.
    probe_timeout_s
        Deadline for the startup ``PING``; past it the cache is disabled.

    """

    redis_url: str = DEFAULT_REDIS_URL
    report_ttl_s: int = 3600
    status_ttl_s: int = 86400
    probe_timeout_s: float = 3.0

    @classmethod
    def from_env(cls) -> CacheConfig:
        """Build configuration from ``GITHUNTER_*`` cache variables."""
        return cls(
            redis_url=read_str("GITHUNTER_REDIS_URL", DEFAULT_REDIS_URL),
            report_ttl_s=read_positive_int("GITHUNTER_REPORT_CACHE_TTL", 3600),
            status_ttl_s=read_positive_int("GITHUNTER_STATUS_CACHE_TTL", 86400),
            probe_timeout_s=read_positive_float("GITHUNTER_CACHE_PROBE_TIMEOUT", 3.0),
        )


__all__ = ["DEFAULT_REDIS_URL", "CacheConfig"]
