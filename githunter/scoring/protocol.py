"""ScoringModel protocol for AI-backed profile scoring."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from githunter.profile.models import Report
    from githunter.sampling.models import CodeSamples
    from githunter.scoring.models import ScoringResult, ScoringView


@typ.runtime_checkable
class ScoringModel(typ.Protocol):
    """Protocol for scoring a profile report with sampled code.

    Implementations are black boxes to the job pipeline: they may call a
    hosted model or apply local heuristics, but must return a fully
    populated :class:`ScoringResult` or raise.

    Examples
    --------
    >>> from githunter.scoring import MockScoringModel, ScoringModel
    >>> model: ScoringModel = MockScoringModel()
    >>> isinstance(model, ScoringModel)
    True

    """

    async def score_profile(
        self,
        report: Report,
        samples: CodeSamples,
        *,
        view: ScoringView,
        context: str | None = None,
    ) -> ScoringResult:
        """Score *report* using *samples* as code context.

        Parameters
        ----------
        report
            Aggregated profile report.
        samples
            Bounded code samples for the top repositories.
        view
            Audience of the written sections.
        context
            Optional job description used to re-weight categories.

        Returns
        -------
        ScoringResult
            Scores and written sections.

        """
        ...
