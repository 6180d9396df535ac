"""Unit tests for tolerant parsing of model output."""

from __future__ import annotations

import math

import pytest

from githunter.scoring.errors import OpenAIResponseShapeError
from githunter.scoring.parsing import (
    coerce_score,
    parse_scoring_content,
    strip_code_fence,
)

_VALID = """{
  "scores": {
    "overallScore": 82,
    "categoryScores": {
      "codeQuality": 85,
      "projectComplexity": "78",
      "documentation": 150,
      "consistency": -5,
      "technicalBreadth": null
    }
  },
  "scoreBreakdown": " Strong code. ",
  "strengthsWeaknesses": {"strengths": ["Tests", 3], "weaknesses": "none"},
  "technicalHighlights": ["FastAPI"],
  "improvementSuggestions": ["Add CI"],
  "hiringRecommendation": "Yes, senior."
}"""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (42, 42.0),
        ("73.5", 73.5),
        (250, 100.0),
        (-1, 0.0),
        (True, 0.0),
        ("n/a", 0.0),
        (None, 0.0),
        (math.nan, 0.0),
    ],
)
def test_coerce_score(raw: object, expected: float) -> None:
    """Scores are coerced to floats and clamped into 0..100."""
    assert coerce_score(raw) == expected, f"wrong score for {raw!r}"


def test_strip_code_fence() -> None:
    """Markdown fences around JSON are removed."""
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}', (
        "expected the fenced body"
    )
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}', "expected stripped text"


def test_parse_normalises_loose_payload() -> None:
    """Wrongly typed fields fall back to defaults instead of failing."""
    result = parse_scoring_content(f"```json\n{_VALID}\n```")

    categories = result.scores.category_scores
    assert result.scores.overall_score == 82, "expected overall score"
    assert categories.project_complexity == 78, "expected numeric string coerced"
    assert categories.documentation == 100, "expected clamp to 100"
    assert categories.consistency == 0, "expected clamp to 0"
    assert categories.technical_breadth == 0, "expected null as 0"
    assert result.score_breakdown == "Strong code.", "expected stripped text"
    assert result.strengths_weaknesses.strengths == ("Tests",), (
        "expected non-strings dropped"
    )
    assert result.strengths_weaknesses.weaknesses == (), "expected non-list ignored"
    assert result.hiring_recommendation == "Yes, senior.", "expected text"


@pytest.mark.parametrize("content", ["not json", "[1, 2]", '"text"', ""])
def test_parse_rejects_non_objects(content: str) -> None:
    """Content that is not a JSON object is a shape error."""
    with pytest.raises(OpenAIResponseShapeError, match="Failed to parse JSON"):
        parse_scoring_content(content)
