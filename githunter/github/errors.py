"""GitHub API errors raised by :mod:`githunter.github.client`."""

from __future__ import annotations

_HTTP_NOT_FOUND = 404
_HTTP_FORBIDDEN = 403
_HTTP_TOO_MANY_REQUESTS = 429


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, url: str) -> GitHubAPIError:
        """Return an error for a non-2xx response that has no dedicated type."""
        return cls(f"GitHub HTTP {status_code} for {url}", status_code=status_code)

    @classmethod
    def network_error(cls, detail: str) -> GitHubAPIError:
        """Return an error for DNS, connection, TLS, or timeout failures."""
        return cls(f"GitHub network error: {detail}")

    @classmethod
    def graphql_errors(cls, errors: object) -> GitHubAPIError:
        """Return an error for GraphQL ``errors`` payloads."""
        return cls(f"GitHub GraphQL errors: {errors}")

    @classmethod
    def from_status(
        cls,
        status_code: int,
        *,
        url: str,
        message: str | None,
        resource: str,
    ) -> GitHubAPIError:
        """Map a failed primary fetch onto the typed error for its status.

        ``404`` becomes :class:`ProfileNotFoundError`; ``403`` and ``429``
        become :class:`RateLimitedError` carrying GitHub's message verbatim.
        """
        if status_code == _HTTP_NOT_FOUND:
            return ProfileNotFoundError(resource)
        if status_code in {_HTTP_FORBIDDEN, _HTTP_TOO_MANY_REQUESTS}:
            return RateLimitedError(message, status_code=status_code)
        return cls.http_error(status_code, url)


class ProfileNotFoundError(GitHubAPIError):
    """Raised when the requested GitHub user does not exist."""

    def __init__(self, username: str) -> None:
        """Initialise with the username that could not be resolved."""
        self.username = username
        super().__init__(f"GitHub user '{username}' not found", status_code=404)


class RateLimitedError(GitHubAPIError):
    """Raised when GitHub refuses a primary request because of rate limits."""

    def __init__(self, message: str | None, *, status_code: int = 403) -> None:
        """Initialise with GitHub's own message, passed through unchanged."""
        super().__init__(
            message or "GitHub API rate limit exceeded",
            status_code=status_code,
        )


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub response missing expected field: {field}")

    @classmethod
    def unexpected(cls, field: str, expected: str) -> GitHubResponseShapeError:
        """Return an error for a field whose JSON type is wrong."""
        return cls(f"GitHub response field {field} is not {expected}")


__all__ = [
    "GitHubAPIError",
    "GitHubResponseShapeError",
    "ProfileNotFoundError",
    "RateLimitedError",
]
