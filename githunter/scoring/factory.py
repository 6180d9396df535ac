"""Factory for creating ScoringModel implementations from the environment."""

from __future__ import annotations

import os
import typing as typ

from githunter.scoring.errors import ScoringConfigError
from githunter.scoring.mock import MockScoringModel

if typ.TYPE_CHECKING:
    from githunter.scoring.protocol import ScoringModel

_VALID_BACKENDS = frozenset({"mock", "openai"})
_DEFAULT_BACKEND = "mock"


def create_scoring_model() -> ScoringModel:
    """Create a ScoringModel based on ``GITHUNTER_SCORING_BACKEND``.

    The backend defaults to ``mock``. The ``openai`` backend also reads the
    ``GITHUNTER_OPENAI_*`` variables described on
    :class:`~githunter.scoring.config.OpenAIScoringConfig`.

    Raises
    ------
    ScoringConfigError
        If the backend name is not recognised.
    OpenAIConfigError
        If the OpenAI backend is selected but its configuration is invalid.

    Examples
    --------
    >>> os.environ["GITHUNTER_SCORING_BACKEND"] = "mock"
    >>> isinstance(create_scoring_model(), MockScoringModel)
    True

    """
    raw_backend = os.environ.get("GITHUNTER_SCORING_BACKEND", _DEFAULT_BACKEND)
    backend = raw_backend.strip().lower() or _DEFAULT_BACKEND
    if backend not in _VALID_BACKENDS:
        raise ScoringConfigError.invalid_backend(raw_backend, _VALID_BACKENDS)

    if backend == "mock":
        return MockScoringModel()

    from githunter.scoring.config import OpenAIScoringConfig
    from githunter.scoring.openai_client import OpenAIScoringModel

    return OpenAIScoringModel(OpenAIScoringConfig.from_env())


__all__ = ["create_scoring_model"]
