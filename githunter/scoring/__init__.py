"""AI scoring of profile reports.

Public API
----------
ScoringModel
    Protocol implemented by scoring backends.
MockScoringModel, OpenAIScoringModel
    Heuristic and OpenAI-compatible backends.
create_scoring_model
    Backend selection from ``GITHUNTER_SCORING_BACKEND``.
ScoringResult, AnalysisResult, ScoringView
    Output structures.
"""

from __future__ import annotations

from githunter.scoring.config import OpenAIScoringConfig
from githunter.scoring.errors import (
    OpenAIAPIError,
    OpenAIConfigError,
    OpenAIResponseShapeError,
    OpenAIScoringError,
    ScoringConfigError,
)
from githunter.scoring.factory import create_scoring_model
from githunter.scoring.mock import MockScoringModel
from githunter.scoring.models import (
    AnalysisResult,
    CategoryScores,
    ModelInvocationMetrics,
    Scores,
    ScoringResult,
    ScoringView,
    StrengthsWeaknesses,
)
from githunter.scoring.openai_client import OpenAIScoringModel
from githunter.scoring.protocol import ScoringModel

__all__ = [
    "AnalysisResult",
    "CategoryScores",
    "MockScoringModel",
    "ModelInvocationMetrics",
    "OpenAIAPIError",
    "OpenAIConfigError",
    "OpenAIResponseShapeError",
    "OpenAIScoringConfig",
    "OpenAIScoringError",
    "OpenAIScoringModel",
    "ScoringConfigError",
    "ScoringModel",
    "ScoringResult",
    "ScoringView",
    "StrengthsWeaknesses",
    "create_scoring_model",
]
