"""GitHub API client and error types."""

from __future__ import annotations

from .client import GitHubConfig, GitHubProfileClient, GitHubRestClient
from .errors import (
    GitHubAPIError,
    GitHubResponseShapeError,
    ProfileNotFoundError,
    RateLimitedError,
)

__all__ = [
    "GitHubAPIError",
    "GitHubConfig",
    "GitHubProfileClient",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "ProfileNotFoundError",
    "RateLimitedError",
]
