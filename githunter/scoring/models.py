"""Scoring output structures.

Scoring structures are encoded with camelCase keys (``overallScore``,
``scoreBreakdown``) to match the JSON contract clients consume.
"""

from __future__ import annotations

import enum

import msgspec

from githunter.profile.models import Report  # noqa: TC001


class ModelInvocationMetrics(msgspec.Struct, kw_only=True, frozen=True):
    """Token usage and latency of one scoring call; unknown values are ``None``."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    latency_ms: float | None = None


class ScoringView(enum.StrEnum):
    """Audience the analysis is written for."""

    RECRUITER = "recruiter"
    DEVELOPER = "developer"


class CategoryScores(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Per-category scores, each between 0 and 100."""

    code_quality: float = 0
    project_complexity: float = 0
    documentation: float = 0
    consistency: float = 0
    technical_breadth: float = 0


class Scores(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Overall score and its category breakdown."""

    overall_score: float = 0
    category_scores: CategoryScores = msgspec.field(default_factory=CategoryScores)


class StrengthsWeaknesses(msgspec.Struct, kw_only=True, frozen=True):
    """Bulleted strengths and weaknesses."""

    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()


class ScoringResult(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Output of a :class:`~githunter.scoring.protocol.ScoringModel`.

    Attributes
    ----------
    scores
        Overall and per-category scores.
    score_breakdown
        Short explanation of what drove the overall score.
    strengths_weaknesses
        Strength and weakness bullets.
    technical_highlights
        Notable frameworks, patterns and repositories.
    improvement_suggestions
        Concrete improvement items.
    hiring_recommendation
        Recommendation paragraph for the chosen view.

    """

    scores: Scores = msgspec.field(default_factory=Scores)
    score_breakdown: str = ""
    strengths_weaknesses: StrengthsWeaknesses = msgspec.field(
        default_factory=StrengthsWeaknesses
    )
    technical_highlights: tuple[str, ...] = ()
    improvement_suggestions: tuple[str, ...] = ()
    hiring_recommendation: str = ""


class AnalysisResult(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Report combined with its scoring; the payload cached for a job."""

    report: Report
    scores: Scores
    score_breakdown: str
    strengths_weaknesses: StrengthsWeaknesses
    technical_highlights: tuple[str, ...]
    improvement_suggestions: tuple[str, ...]
    hiring_recommendation: str

    @classmethod
    def combine(cls, report: Report, scoring: ScoringResult) -> AnalysisResult:
        """Merge *report* with the sections of *scoring*."""
        return cls(
            report=report,
            scores=scoring.scores,
            score_breakdown=scoring.score_breakdown,
            strengths_weaknesses=scoring.strengths_weaknesses,
            technical_highlights=scoring.technical_highlights,
            improvement_suggestions=scoring.improvement_suggestions,
            hiring_recommendation=scoring.hiring_recommendation,
        )


__all__ = [
    "AnalysisResult",
    "CategoryScores",
    "ModelInvocationMetrics",
    "Scores",
    "ScoringResult",
    "ScoringView",
    "StrengthsWeaknesses",
]
