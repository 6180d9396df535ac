"""Custom exceptions for scoring backends."""

from __future__ import annotations

import typing as typ

from githunter.scoring.constants import MAX_TEMPERATURE, MIN_TEMPERATURE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

# Content preview length for error messages
_CONTENT_PREVIEW_LIMIT = 100


class OpenAIScoringError(Exception):
    """Base exception for all OpenAI scoring errors."""


class OpenAIAPIError(OpenAIScoringError):
    """Raised when the OpenAI API returns an error response.

    Attributes
    ----------
    status_code
        HTTP status code from the API response, if available.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise the error with message and optional status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> OpenAIAPIError:
        """Create error for HTTP error responses."""
        return cls(f"OpenAI API HTTP error {status_code}", status_code=status_code)

    @classmethod
    def rate_limited(cls, retry_after: int | None = None) -> OpenAIAPIError:
        """Create error for rate limit (429) responses.

        Parameters
        ----------
        retry_after
            Seconds to wait before retrying, from the Retry-After header.

        """
        msg = "OpenAI API rate limited"
        if retry_after is not None:
            msg = f"{msg}, retry after {retry_after}s"
        return cls(msg, status_code=429)

    @classmethod
    def timeout(cls) -> OpenAIAPIError:
        """Create error for request timeouts."""
        return cls("OpenAI API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> OpenAIAPIError:
        """Create error for network failures (DNS, connection, TLS)."""
        return cls(f"OpenAI API network error: {detail}")


class OpenAIResponseShapeError(OpenAIScoringError):
    """Raised when an OpenAI response is missing fields or malformed."""

    @classmethod
    def missing(cls, field: str) -> OpenAIResponseShapeError:
        """Create error for a missing response field."""
        return cls(f"OpenAI response missing expected field: {field}")

    @classmethod
    def invalid_json(cls, content: str) -> OpenAIResponseShapeError:
        """Create error for invalid JSON, previewing the offending content."""
        if len(content) > _CONTENT_PREVIEW_LIMIT:
            preview = content[:_CONTENT_PREVIEW_LIMIT] + "..."
        else:
            preview = content
        return cls(f"Failed to parse JSON from response: {preview}")


class OpenAIConfigError(OpenAIScoringError):
    """Raised when OpenAI client configuration is invalid."""

    @classmethod
    def missing_api_key(cls) -> OpenAIConfigError:
        """Create error for a missing API key environment variable."""
        return cls("GITHUNTER_OPENAI_API_KEY environment variable is required")

    @classmethod
    def empty_api_key(cls) -> OpenAIConfigError:
        """Create error for an empty API key."""
        return cls("OpenAI API key must be non-empty")


class ScoringConfigError(Exception):
    """Raised when scoring backend configuration is invalid."""

    @classmethod
    def invalid_backend(
        cls, name: str, valid_backends: cabc.Iterable[str]
    ) -> ScoringConfigError:
        """Create error for an unrecognised backend name.

        Parameters
        ----------
        name
            The invalid backend name that was provided.
        valid_backends
            Iterable of valid backend names.

        """
        valid_backends_str = ", ".join(f"'{b}'" for b in sorted(valid_backends))
        return cls(
            f"Invalid scoring backend '{name}'. Valid options are: {valid_backends_str}"
        )

    @classmethod
    def invalid_parameter(
        cls, parameter_name: str, value: str, constraint: str
    ) -> ScoringConfigError:
        """Create error for an invalid configuration parameter value."""
        return cls(f"Invalid {parameter_name} '{value}'. {constraint}")

    @classmethod
    def invalid_temperature(cls, value: str) -> ScoringConfigError:
        """Create error for an invalid temperature value."""
        return cls.invalid_parameter(
            "temperature",
            value,
            f"Must be a float between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}",
        )

    @classmethod
    def invalid_max_tokens(cls, value: str) -> ScoringConfigError:
        """Create error for an invalid max_tokens value."""
        return cls.invalid_parameter("max_tokens", value, "Must be a positive integer")


__all__ = [
    "OpenAIAPIError",
    "OpenAIConfigError",
    "OpenAIResponseShapeError",
    "OpenAIScoringError",
    "ScoringConfigError",
]
