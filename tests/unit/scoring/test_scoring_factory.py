"""Unit tests for scoring backend selection and configuration."""

from __future__ import annotations

import pytest

from githunter.scoring import (
    MockScoringModel,
    OpenAIScoringConfig,
    OpenAIScoringModel,
    create_scoring_model,
)
from githunter.scoring.errors import OpenAIConfigError, ScoringConfigError


class TestCreateScoringModel:
    """Tests for create_scoring_model."""

    def test_defaults_to_mock(self) -> None:
        """Without configuration the heuristic backend is used."""
        assert isinstance(create_scoring_model(), MockScoringModel), "expected mock"

    def test_backend_name_is_case_insensitive(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Backend names ignore case and whitespace."""
        monkeypatch.setenv("GITHUNTER_SCORING_BACKEND", " MOCK ")
        assert isinstance(create_scoring_model(), MockScoringModel), "expected mock"

    def test_unknown_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unknown backends are rejected with the valid options."""
        monkeypatch.setenv("GITHUNTER_SCORING_BACKEND", "claude")

        with pytest.raises(ScoringConfigError, match="'mock', 'openai'"):
            create_scoring_model()

    @pytest.mark.asyncio
    async def test_openai_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The openai backend reads its key from the environment."""
        monkeypatch.setenv("GITHUNTER_SCORING_BACKEND", "openai")
        monkeypatch.setenv("GITHUNTER_OPENAI_API_KEY", "sk-test")

        model = create_scoring_model()

        assert isinstance(model, OpenAIScoringModel), "expected the OpenAI model"
        await model.aclose()

    def test_openai_backend_requires_key(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Selecting openai without a key fails loudly."""
        monkeypatch.setenv("GITHUNTER_SCORING_BACKEND", "openai")

        with pytest.raises(OpenAIConfigError, match="GITHUNTER_OPENAI_API_KEY"):
            create_scoring_model()


class TestOpenAIScoringConfig:
    """Tests for OpenAIScoringConfig.from_env."""

    def test_reads_optional_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Model, temperature and token limits are read."""
        monkeypatch.setenv("GITHUNTER_OPENAI_API_KEY", " sk-test ")
        monkeypatch.setenv("GITHUNTER_OPENAI_MODEL", "gpt-4o")
        monkeypatch.setenv("GITHUNTER_OPENAI_TEMPERATURE", "0.7")
        monkeypatch.setenv("GITHUNTER_OPENAI_MAX_TOKENS", "4096")

        config = OpenAIScoringConfig.from_env()

        assert config.api_key == "sk-test", "expected stripped key"
        assert config.model == "gpt-4o", "expected model"
        assert config.temperature == 0.7, "expected temperature"
        assert config.max_tokens == 4096, "expected max tokens"

    @pytest.mark.parametrize("raw", ["hot", "2.5", "-0.1"])
    def test_rejects_bad_temperature(
        self, monkeypatch: pytest.MonkeyPatch, raw: str
    ) -> None:
        """Temperatures outside 0..2 are rejected."""
        monkeypatch.setenv("GITHUNTER_OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GITHUNTER_OPENAI_TEMPERATURE", raw)

        with pytest.raises(ScoringConfigError, match="temperature"):
            OpenAIScoringConfig.from_env()

    @pytest.mark.parametrize("raw", ["many", "0"])
    def test_rejects_bad_max_tokens(
        self, monkeypatch: pytest.MonkeyPatch, raw: str
    ) -> None:
        """Non-positive or non-integer token limits are rejected."""
        monkeypatch.setenv("GITHUNTER_OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GITHUNTER_OPENAI_MAX_TOKENS", raw)

        with pytest.raises(ScoringConfigError, match="max_tokens"):
            OpenAIScoringConfig.from_env()
