"""Deterministic heuristic implementation of ScoringModel."""

from __future__ import annotations

import re
import typing as typ

from githunter.scoring.models import (
    CategoryScores,
    ModelInvocationMetrics,
    Scores,
    ScoringResult,
    ScoringView,
    StrengthsWeaknesses,
)

if typ.TYPE_CHECKING:
    from githunter.profile.models import Report
    from githunter.sampling.models import CodeSamples, RepoSample

_TEST_PATH = re.compile(r"(^|/)(tests?|__tests__)/|\.(test|spec)\.|(^|/)test_[^/]+\.py$")
_CI_PATH = re.compile(r"^\.github/workflows/")
_README_PATH = re.compile(r"^README\.", re.IGNORECASE)

_WEIGHTS = {
    "code_quality": 0.30,
    "project_complexity": 0.20,
    "documentation": 0.15,
    "consistency": 0.15,
    "technical_breadth": 0.20,
}
_STRONG = 70.0
_WEAK = 40.0
_LABELS = {
    "code_quality": "Code quality",
    "project_complexity": "Project complexity",
    "documentation": "Documentation",
    "consistency": "Consistency",
    "technical_breadth": "Technical breadth",
}
NOT_CONFIGURED_NOTICE = (
    "Heuristic scoring only. Set GITHUNTER_SCORING_BACKEND=openai to enable "
    "AI analysis."
)


def _share(part: int, whole: int) -> float:
    return 0.0 if whole == 0 else part / whole


def _has(repo: RepoSample, pattern: re.Pattern[str]) -> bool:
    return any(pattern.search(sample.path) for sample in repo.files)


class MockScoringModel:
    """Score profiles with simple, reproducible heuristics.

    Useful for tests, development and deployments without model credentials.

    Heuristics
    ----------
    - Code quality: share of sampled repositories that carry tests.
    - Project complexity: share of sampled repositories with tests or CI.
    - Documentation: share of own repositories with a description, blended
      with the share of sampled repositories with a README.
    - Consistency: share of repositories written in the dominant language.
    - Technical breadth: 20 points per distinct language, capped at 100.

    A profile without any own repositories scores zero everywhere.

    Examples
    --------
    >>> model = MockScoringModel()
    >>> result = await model.score_profile(report, samples, view=view)
    >>> result.scores.overall_score

    """

    def __init__(self) -> None:
        """Initialize invocation metrics storage."""
        self._last_invocation_metrics: ModelInvocationMetrics | None = None

    @property
    def last_invocation_metrics(self) -> ModelInvocationMetrics | None:
        """Return metrics captured from the latest invocation."""
        return self._last_invocation_metrics

    async def score_profile(
        self,
        report: Report,
        samples: CodeSamples,
        *,
        view: ScoringView,
        context: str | None = None,
    ) -> ScoringResult:
        """Generate deterministic scores from the report and samples."""
        self._last_invocation_metrics = ModelInvocationMetrics(
            prompt_tokens=0,
            completion_tokens=0,
            total_tokens=0,
        )
        categories = self._category_scores(report, samples)
        overall = round(
            sum(categories[name] * weight for name, weight in _WEIGHTS.items()), 1
        )
        strengths = tuple(
            f"{_LABELS[name]} scores {score:.0f}/100"
            for name, score in categories.items()
            if score >= _STRONG
        )
        weaknesses = tuple(
            f"{_LABELS[name]} scores {score:.0f}/100"
            for name, score in categories.items()
            if score < _WEAK
        )
        return ScoringResult(
            scores=Scores(
                overall_score=overall,
                category_scores=CategoryScores(**categories),
            ),
            score_breakdown=self._breakdown(categories, overall),
            strengths_weaknesses=StrengthsWeaknesses(
                strengths=strengths, weaknesses=weaknesses
            ),
            technical_highlights=self._highlights(report),
            improvement_suggestions=self._suggestions(categories),
            hiring_recommendation=self._recommendation(
                report, overall, view=view, context=context
            ),
        )

    def _category_scores(
        self, report: Report, samples: CodeSamples
    ) -> dict[str, float]:
        own = [item for item in report.repos if not item.fork]
        if not own:
            return dict.fromkeys(_WEIGHTS, 0.0)

        sampled = [repo for repo in samples.repos if repo.files]
        tested = sum(1 for repo in sampled if _has(repo, _TEST_PATH))
        built = sum(
            1 for repo in sampled if _has(repo, _TEST_PATH) or _has(repo, _CI_PATH)
        )
        readmes = sum(1 for repo in sampled if _has(repo, _README_PATH))
        described = sum(1 for item in own if item.description)

        languages = report.stats.language
        dominant = max(languages.values(), default=0)
        with_language = sum(languages.values())

        documentation = (
            _share(described, len(own)) + _share(readmes, len(sampled))
        ) / (2 if sampled else 1)
        return {
            "code_quality": round(40 + 60 * _share(tested, len(sampled)), 1),
            "project_complexity": round(30 + 70 * _share(built, len(sampled)), 1),
            "documentation": round(100 * documentation, 1),
            "consistency": round(100 * _share(dominant, with_language), 1),
            "technical_breadth": float(min(100, 20 * len(languages))),
        }

    def _breakdown(self, categories: dict[str, float], overall: float) -> str:
        best = max(categories, key=lambda name: categories[name])
        worst = min(categories, key=lambda name: categories[name])
        return (
            f"Overall score {overall:.1f} from weighted category heuristics. "
            f"{_LABELS[best]} contributed most; {_LABELS[worst].lower()} "
            "held the score back."
        )

    def _highlights(self, report: Report) -> tuple[str, ...]:
        highlights = [
            f"{language}: {count} repositories"
            for language, count in sorted(
                report.stats.language.items(), key=lambda pair: (-pair[1], pair[0])
            )[:4]
        ]
        highlights.extend(
            f"{item.name} ({item.stargazers_count} stars)"
            for item in report.repos[:4]
            if not item.fork
        )
        return tuple(highlights)

    def _suggestions(self, categories: dict[str, float]) -> tuple[str, ...]:
        suggestions = {
            "code_quality": "Add automated tests to the main repositories",
            "project_complexity": "Set up continuous integration workflows",
            "documentation": "Describe repositories and add setup instructions",
            "consistency": "Align tooling and conventions across projects",
            "technical_breadth": "Publish work in an additional language or domain",
        }
        return tuple(
            suggestions[name] for name, score in categories.items() if score < _STRONG
        )

    def _recommendation(
        self,
        report: Report,
        overall: float,
        *,
        view: ScoringView,
        context: str | None,
    ) -> str:
        if overall >= _STRONG:
            verdict = "Recommend"
        elif overall >= _WEAK:
            verdict = "Maybe"
        else:
            verdict = "Not enough evidence to recommend"
        audience = "for the role" if view is ScoringView.RECRUITER else "as a peer"
        role = " against the supplied job description" if (context or "").strip() else ""
        return (
            f"{verdict} {report.user.login} {audience}{role} "
            f"(overall {overall:.1f}). {NOT_CONFIGURED_NOTICE}"
        )


__all__ = ["NOT_CONFIGURED_NOTICE", "MockScoringModel"]
