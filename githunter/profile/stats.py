"""Pure statistics over report items."""

from __future__ import annotations

import collections
import typing as typ

from githunter.profile.models import Stats

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from githunter.profile.models import Item


def compute_stats(items: cabc.Sequence[Item]) -> Stats:
    """Compute :class:`Stats` for *items* in a single pass.

    Commit and pull request totals only include items that carry an
    enrichment, so they are lower bounds whenever enrichment was skipped.
    """
    languages: collections.Counter[str] = collections.Counter()
    descriptions: list[str | None] = []
    fork_count = 0
    forked_projects = 0
    size = 0
    watchers = 0
    stars = 0
    commits = 0
    pulls = 0

    for item in items:
        if item.language:
            languages[item.language] += 1
        descriptions.append(item.description)
        if item.fork:
            fork_count += 1
        forked_projects += item.forks_count
        size += item.size
        watchers += item.watchers_count
        stars += item.stargazers_count
        if item.enrichment is not None:
            commits += item.enrichment.commit_count
            pulls += item.enrichment.pull_count

    return Stats(
        language=dict(languages),
        project_type=tuple(descriptions),
        fork_count=fork_count,
        user_forked_projects=forked_projects,
        repo_size=size,
        watchers=watchers,
        stars=stars,
        commits=commits,
        pulls=pulls,
    )


__all__ = ["compute_stats"]
