"""Configuration for the OpenAI scoring client."""

from __future__ import annotations

import dataclasses

from githunter.common.env import (
    read_optional_str,
    read_positive_float,
    read_positive_int,
    read_str,
)
from githunter.scoring.constants import MAX_TEMPERATURE, MIN_TEMPERATURE
from githunter.scoring.errors import OpenAIConfigError, ScoringConfigError

_DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
_DEFAULT_MODEL = "gpt-4o-mini"
_DEFAULT_TIMEOUT_S = 120.0
_DEFAULT_TEMPERATURE = 0.3
_DEFAULT_MAX_TOKENS = 2048


def _read_temperature() -> float:
    raw = read_optional_str("GITHUNTER_OPENAI_TEMPERATURE")
    if raw is None:
        return _DEFAULT_TEMPERATURE
    try:
        temperature = float(raw)
    except ValueError as exc:
        raise ScoringConfigError.invalid_temperature(raw) from exc
    if not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
        raise ScoringConfigError.invalid_temperature(raw)
    return temperature


def _read_max_tokens() -> int:
    try:
        return read_positive_int("GITHUNTER_OPENAI_MAX_TOKENS", _DEFAULT_MAX_TOKENS)
    except ValueError as exc:
        raw = read_str("GITHUNTER_OPENAI_MAX_TOKENS", "")
        raise ScoringConfigError.invalid_max_tokens(raw) from exc


@dataclasses.dataclass(frozen=True, slots=True)
class OpenAIScoringConfig:
    """Settings for an OpenAI-compatible chat completions endpoint.

    Attributes
    ----------
    api_key
        Bearer token sent with every request.
    endpoint
        Chat completions URL; any OpenAI-compatible server works.
    model
        Model identifier.
    timeout_s
        Request timeout in seconds.
    temperature
        Sampling temperature between 0 and 2.
    max_tokens
        Completion token limit.

    """

    api_key: str
    endpoint: str = _DEFAULT_ENDPOINT
    model: str = _DEFAULT_MODEL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    temperature: float = _DEFAULT_TEMPERATURE
    max_tokens: int = _DEFAULT_MAX_TOKENS

    @classmethod
    def from_env(cls) -> OpenAIScoringConfig:
        """Build configuration from ``GITHUNTER_OPENAI_*`` variables.

        ``GITHUNTER_OPENAI_API_KEY`` is required; ``_ENDPOINT``, ``_MODEL``,
        ``_TIMEOUT``, ``_TEMPERATURE`` and ``_MAX_TOKENS`` are optional.

        Raises
        ------
        OpenAIConfigError
            If the API key is missing or blank.
        ScoringConfigError
            If the temperature or token limit is invalid.
        ValueError
            If the timeout is not a positive number.

        """
        api_key = read_optional_str("GITHUNTER_OPENAI_API_KEY")
        if api_key is None:
            raise OpenAIConfigError.missing_api_key()

        return cls(
            api_key=api_key,
            endpoint=read_str("GITHUNTER_OPENAI_ENDPOINT", _DEFAULT_ENDPOINT),
            model=read_str("GITHUNTER_OPENAI_MODEL", _DEFAULT_MODEL),
            timeout_s=read_positive_float("GITHUNTER_OPENAI_TIMEOUT", _DEFAULT_TIMEOUT_S),
            temperature=_read_temperature(),
            max_tokens=_read_max_tokens(),
        )


__all__ = ["OpenAIScoringConfig"]
