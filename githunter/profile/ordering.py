"""Presentation ordering and enrichment target selection for report items.

Both functions are pure: they never mutate their inputs and depend only on
their arguments, so a report sorted twice from the same payloads is identical.
"""

from __future__ import annotations

import typing as typ

from githunter.common.time import parse_github_datetime

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from githunter.profile.models import Item

# Each selected item costs two further API calls during enrichment.
ENRICHMENT_LIMIT = 15


def _pin_ranks(pinned_names: cabc.Sequence[str]) -> dict[str, int]:
    ranks: dict[str, int] = {}
    for index, name in enumerate(pinned_names):
        ranks.setdefault(name.casefold(), index)
    return ranks


def _sort_key(
    item: Item, ranks: dict[str, int], unpinned: int
) -> tuple[int, int, int, float]:
    pushed = parse_github_datetime(item.pushed_at)
    # Negated so that newer pushes sort first; missing timestamps sort last.
    recency = -pushed.timestamp() if pushed is not None else float("inf")
    return (
        ranks.get(item.name.casefold(), unpinned),
        -item.stargazers_count,
        -item.forks_count,
        recency,
    )


def sort_items(
    items: cabc.Iterable[Item],
    pinned_names: cabc.Sequence[str] = (),
) -> list[Item]:
    """Return *items* in report order.

    Pinned repositories come first in pin order (names match
    case-insensitively), followed by the rest by stars, then forks, then the
    most recent push.
    """
    ranks = _pin_ranks(pinned_names)
    unpinned = len(pinned_names)
    return sorted(items, key=lambda item: _sort_key(item, ranks, unpinned))


def select_enrichment_targets(
    sorted_items: cabc.Sequence[Item],
    limit: int = ENRICHMENT_LIMIT,
) -> list[Item]:
    """Return the first *limit* non-fork items of an already sorted list."""
    return [item for item in sorted_items if not item.fork][:limit]


__all__ = ["ENRICHMENT_LIMIT", "select_enrichment_targets", "sort_items"]
