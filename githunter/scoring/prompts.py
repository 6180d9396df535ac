"""Prompt templates for the OpenAI scoring model."""

from __future__ import annotations

import typing as typ

import msgspec

from githunter.scoring.constants import (
    DESCRIPTION_CHAR_LIMIT,
    JOB_DESCRIPTION_CHAR_LIMIT,
    MAX_DESCRIPTIONS_IN_PROMPT,
    MAX_FILES_IN_PROMPT_PER_REPO,
    MAX_REPOS_IN_PROMPT,
    PREVIEW_CHAR_LIMIT,
)

if typ.TYPE_CHECKING:
    from githunter.profile.models import Report
    from githunter.sampling.models import CodeSamples
    from githunter.scoring.models import ScoringView

SYSTEM_PROMPT = """\
You are a senior engineer producing a hiring-grade report on a GitHub \
profile. Evaluate fairly and weight the categories below as specified. Each \
category score is 0-100; overallScore should reflect the weighted mix.

## Default weights (must sum to 100%)

1. **Code Quality (30%)**: readability, structure, error handling, naming. \
Prefer clear patterns over cleverness. Penalize obvious bugs or security \
issues in snippets.
2. **Project Complexity (20%)**: architecture, separation of concerns, use of \
tests and CI. Reward non-trivial projects and sensible tooling.
3. **Documentation (15%)**: README, comments, setup instructions. Missing \
docs hurt this score.
4. **Consistency (15%)**: style, formatting and patterns across repositories.
5. **Technical Breadth (20%)**: languages, frameworks and domains. Breadth \
without depth scores moderately; depth in one area can still score well.

## Output Requirements

Respond with a single JSON object only, no markdown or extra text, with \
exactly these keys:

```json
{
  "scores": {
    "overallScore": 0,
    "categoryScores": {
      "codeQuality": 0,
      "projectComplexity": 0,
      "documentation": 0,
      "consistency": 0,
      "technicalBreadth": 0
    }
  },
  "scoreBreakdown": "2-4 sentences on which categories drove the score",
  "strengthsWeaknesses": {"strengths": ["..."], "weaknesses": ["..."]},
  "technicalHighlights": ["4-8 concrete bullets"],
  "improvementSuggestions": ["3-6 concrete items"],
  "hiringRecommendation": "2-4 sentences: yes/no/maybe, level, and why"
}
```
"""

JOB_DESCRIPTION_GUIDE = """\
## Job-specific weights

A job description is provided below. Adjust the category weights so they \
align with the role; the weights must still sum to 100%. For example, raise \
Documentation for onboarding-heavy roles, Project Complexity and Code \
Quality for senior or architect roles, and Technical Breadth for full-stack \
roles. In hiringRecommendation, reference fit for this specific role.
"""


class _RepoSummary(msgspec.Struct, kw_only=True, frozen=True):
    name: str
    lang: str | None
    stars: int


class _ProfileSummary(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    user: str
    repo_count: int
    language: dict[str, int]
    stars: int
    forks: int
    commits: int
    pulls: int
    project_descriptions: list[str]
    top_repos: list[_RepoSummary]


class _FilePreview(msgspec.Struct, kw_only=True, frozen=True):
    path: str
    lang: str
    preview: str


class _RepoPreview(msgspec.Struct, kw_only=True, frozen=True):
    name: str
    files: list[_FilePreview]


def trim_description(description: str) -> str:
    """Shorten *description* to the prompt limit with an ellipsis."""
    if len(description) <= DESCRIPTION_CHAR_LIMIT:
        return description
    return description[: DESCRIPTION_CHAR_LIMIT - 3] + "…"


def _profile_summary(report: Report) -> _ProfileSummary:
    stats = report.stats
    descriptions = [d for d in stats.project_type if d][:MAX_DESCRIPTIONS_IN_PROMPT]
    return _ProfileSummary(
        user=report.user.login,
        repo_count=len(report.repos),
        language=dict(stats.language),
        stars=stats.stars,
        forks=stats.fork_count,
        commits=stats.commits,
        pulls=stats.pulls,
        project_descriptions=[trim_description(d) for d in descriptions],
        top_repos=[
            _RepoSummary(name=item.name, lang=item.language, stars=item.stargazers_count)
            for item in report.repos
            if not item.fork
        ][:MAX_REPOS_IN_PROMPT],
    )


def _code_summary(samples: CodeSamples) -> list[_RepoPreview]:
    return [
        _RepoPreview(
            name=repo.name,
            files=[
                _FilePreview(
                    path=sample.path,
                    lang=sample.language,
                    preview=sample.content[:PREVIEW_CHAR_LIMIT],
                )
                for sample in repo.files[:MAX_FILES_IN_PROMPT_PER_REPO]
            ],
        )
        for repo in samples.repos[:MAX_REPOS_IN_PROMPT]
    ]


def build_user_prompt(
    report: Report,
    samples: CodeSamples,
    *,
    view: ScoringView,
    context: str | None = None,
) -> str:
    """Build the user prompt for one profile.

    Parameters
    ----------
    report
        Aggregated profile report.
    samples
        Code samples gathered for the report's repositories.
    view
        Audience of the written sections.
    context
        Optional job description; blank text is ignored.

    Returns
    -------
    str
        Formatted user prompt for the model.

    """
    sections: list[str] = [f"# GitHub Profile Analysis: {report.user.login}"]

    job_description = (context or "").strip()
    if job_description:
        sections.extend(
            [
                "",
                JOB_DESCRIPTION_GUIDE,
                "## Job description",
                job_description[:JOB_DESCRIPTION_CHAR_LIMIT],
            ]
        )

    sections.extend(
        [
            "",
            f"View: {view.value}.",
            "",
            "## Profile",
            msgspec.json.encode(_profile_summary(report)).decode("utf-8"),
            "",
            "## Code samples",
            msgspec.json.encode(_code_summary(samples)).decode("utf-8"),
            "",
            "## Instructions",
            (
                "Score the profile above and respond with a JSON object "
                "following the schema in the system prompt."
            ),
        ]
    )
    return "\n".join(sections)


__all__ = [
    "JOB_DESCRIPTION_GUIDE",
    "SYSTEM_PROMPT",
    "build_user_prompt",
    "trim_description",
]
