"""Tolerant parsing of model output into :class:`ScoringResult`.

Models do not always honour the requested schema. Code fences are stripped,
numeric strings are coerced, scores are clamped into range and fields of the
wrong type fall back to empty values. Only content that is not a JSON object
at all is rejected.
"""

from __future__ import annotations

import math
import re
import typing as typ

import msgspec

from githunter.scoring.constants import MAX_SCORE, MIN_SCORE
from githunter.scoring.errors import OpenAIResponseShapeError
from githunter.scoring.models import (
    CategoryScores,
    Scores,
    ScoringResult,
    StrengthsWeaknesses,
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)```$", re.DOTALL | re.MULTILINE)


def strip_code_fence(text: str) -> str:
    """Return *text* without a surrounding Markdown code fence."""
    raw = text.strip()
    match = _CODE_FENCE.search(raw)
    if match:
        return match.group(1).strip()
    return raw


def coerce_score(value: object) -> float:
    """Return *value* as a score in range, or ``0`` when not numeric."""
    if isinstance(value, bool):
        return MIN_SCORE
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return MIN_SCORE
    else:
        return MIN_SCORE
    if math.isnan(number):
        return MIN_SCORE
    return min(max(number, MIN_SCORE), MAX_SCORE)


def _mapping(value: object) -> dict[str, typ.Any]:
    return typ.cast("dict[str, typ.Any]", value) if isinstance(value, dict) else {}


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _text_list(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(entry.strip() for entry in value if isinstance(entry, str))


def normalize_scoring_payload(payload: dict[str, typ.Any]) -> ScoringResult:
    """Build a :class:`ScoringResult` from a loosely shaped JSON object."""
    scores = _mapping(payload.get("scores"))
    categories = _mapping(scores.get("categoryScores"))
    sections = _mapping(payload.get("strengthsWeaknesses"))
    return ScoringResult(
        scores=Scores(
            overall_score=coerce_score(scores.get("overallScore")),
            category_scores=CategoryScores(
                code_quality=coerce_score(categories.get("codeQuality")),
                project_complexity=coerce_score(categories.get("projectComplexity")),
                documentation=coerce_score(categories.get("documentation")),
                consistency=coerce_score(categories.get("consistency")),
                technical_breadth=coerce_score(categories.get("technicalBreadth")),
            ),
        ),
        score_breakdown=_text(payload.get("scoreBreakdown")),
        strengths_weaknesses=StrengthsWeaknesses(
            strengths=_text_list(sections.get("strengths")),
            weaknesses=_text_list(sections.get("weaknesses")),
        ),
        technical_highlights=_text_list(payload.get("technicalHighlights")),
        improvement_suggestions=_text_list(payload.get("improvementSuggestions")),
        hiring_recommendation=_text(payload.get("hiringRecommendation")),
    )


def parse_scoring_content(content: str) -> ScoringResult:
    """Parse assistant message *content* into a :class:`ScoringResult`.

    Raises
    ------
    OpenAIResponseShapeError
        If the content is not a JSON object once fences are removed.

    """
    raw = strip_code_fence(content)
    try:
        payload = msgspec.json.decode(raw)
    except msgspec.DecodeError as exc:
        raise OpenAIResponseShapeError.invalid_json(content) from exc
    if not isinstance(payload, dict):
        raise OpenAIResponseShapeError.invalid_json(content)
    return normalize_scoring_payload(payload)


__all__ = [
    "coerce_score",
    "normalize_scoring_payload",
    "parse_scoring_content",
    "strip_code_fence",
]
