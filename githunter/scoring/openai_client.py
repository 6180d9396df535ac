"""OpenAI-compatible implementation of the ScoringModel protocol."""

from __future__ import annotations

import time
import typing as typ

import httpx
import msgspec

from githunter.scoring.errors import (
    OpenAIAPIError,
    OpenAIConfigError,
    OpenAIResponseShapeError,
)
from githunter.scoring.models import ModelInvocationMetrics
from githunter.scoring.parsing import parse_scoring_content
from githunter.scoring.prompts import SYSTEM_PROMPT, build_user_prompt

if typ.TYPE_CHECKING:
    from githunter.profile.models import Report
    from githunter.sampling.models import CodeSamples
    from githunter.scoring.config import OpenAIScoringConfig
    from githunter.scoring.models import ScoringResult, ScoringView

_HTTP_RATE_LIMITED = 429


class _Message(msgspec.Struct):
    content: str | None = None


class _Choice(msgspec.Struct):
    message: _Message | None = None


class _Usage(msgspec.Struct):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class _ChatCompletion(msgspec.Struct):
    choices: list[_Choice] = msgspec.field(default_factory=list)
    usage: _Usage | None = None


_completion_decoder = msgspec.json.Decoder(_ChatCompletion)


def _retry_after_seconds(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After", "")
    return int(value) if value.isdigit() else None


def _decode_completion(body: bytes) -> _ChatCompletion:
    try:
        return _completion_decoder.decode(body)
    except msgspec.ValidationError as exc:
        raise OpenAIResponseShapeError.missing("choices") from exc
    except msgspec.DecodeError as exc:
        text = body.decode("utf-8", errors="replace")
        raise OpenAIResponseShapeError.invalid_json(text) from exc


def _message_content(completion: _ChatCompletion) -> str:
    if not completion.choices:
        raise OpenAIResponseShapeError.missing("choices")
    message = completion.choices[0].message
    if message is None or message.content is None:
        raise OpenAIResponseShapeError.missing("choices[0].message.content")
    return message.content


class OpenAIScoringModel:
    """Score profiles through an OpenAI-compatible chat completions endpoint.

    Parameters
    ----------
    config
        Endpoint, model and sampling settings.
    http_client
        Optional ``httpx.AsyncClient``, mainly for tests. When omitted the
        model creates its own client and closes it in :meth:`aclose`.

    Examples
    --------
    >>> model = OpenAIScoringModel(OpenAIScoringConfig(api_key="sk-..."))
    >>> # result = await model.score_profile(report, samples, view=view)
    >>> await model.aclose()

    """

    def __init__(
        self,
        config: OpenAIScoringConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Validate the API key and set up the HTTP client."""
        if not config.api_key.strip():
            raise OpenAIConfigError.empty_api_key()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._last_invocation_metrics: ModelInvocationMetrics | None = None

    @property
    def config(self) -> OpenAIScoringConfig:
        """Return the client configuration."""
        return self._config

    @property
    def last_invocation_metrics(self) -> ModelInvocationMetrics | None:
        """Return token usage and latency of the most recent call."""
        return self._last_invocation_metrics

    async def aclose(self) -> None:
        """Close the HTTP client when this model created it."""
        if self._owns_client:
            await self._client.aclose()

    async def score_profile(
        self,
        report: Report,
        samples: CodeSamples,
        *,
        view: ScoringView,
        context: str | None = None,
    ) -> ScoringResult:
        """Score *report* with the configured chat model.

        Raises
        ------
        OpenAIAPIError
            If the API answers with an error status, times out or is
            unreachable.
        OpenAIResponseShapeError
            If the completion or its content cannot be decoded.

        """
        prompt = build_user_prompt(report, samples, view=view, context=context)
        started = time.monotonic()
        completion = _decode_completion(await self._post(prompt))
        usage = completion.usage or _Usage()
        self._last_invocation_metrics = ModelInvocationMetrics(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
            latency_ms=(time.monotonic() - started) * 1000,
        )
        return parse_scoring_content(_message_content(completion))

    async def _post(self, prompt: str) -> bytes:
        payload = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {self._config.api_key}"}
        try:
            response = await self._client.post(
                self._config.endpoint, json=payload, headers=headers
            )
        except httpx.TimeoutException as exc:
            raise OpenAIAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise OpenAIAPIError.network_error(str(exc)) from exc

        if response.status_code == _HTTP_RATE_LIMITED:
            raise OpenAIAPIError.rate_limited(_retry_after_seconds(response))
        if response.is_error:
            raise OpenAIAPIError.http_error(response.status_code)
        return response.content


__all__ = ["OpenAIScoringModel"]
