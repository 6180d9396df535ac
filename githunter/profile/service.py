"""Profile aggregation: build a :class:`Report` from GitHub's API.

Only the primary fetches (profile and repository list) can fail a report.
Pinned ordering and per-repository activity are best effort: failures there
degrade the report and are recorded as :class:`Skipped` outcomes.

Usage
-----
>>> aggregator = ProfileAggregator(GitHubRestClient(GitHubConfig.from_env()))
>>> report = await aggregator.build_report("torvalds")
>>> report.stats.stars

"""

from __future__ import annotations

import asyncio
import time
import typing as typ

import msgspec

from githunter.github.errors import GitHubAPIError, GitHubResponseShapeError
from githunter.profile.models import (
    Enriched,
    Enrichment,
    EnrichmentOutcome,
    Item,
    Report,
    Skipped,
    item_from_github,
    profile_from_github,
)
from githunter.profile.observability import AggregationEventLogger
from githunter.profile.ordering import (
    ENRICHMENT_LIMIT,
    select_enrichment_targets,
    sort_items,
)
from githunter.profile.stats import compute_stats

if typ.TYPE_CHECKING:
    from githunter.github.client import GitHubProfileClient, JSONObject

# Failures an enrichment sub-request may raise; anything else is a bug.
_ENRICHMENT_ERRORS = (GitHubAPIError, GitHubResponseShapeError, ValueError)


def _raise_first_failure(*results: object) -> None:
    """Re-raise the first exception among gathered primary results."""
    for result in results:
        if isinstance(result, BaseException):
            raise result


class ProfileAggregator:
    """Build canonical profile reports under GitHub's rate budget.

    Parameters
    ----------
    client
        GitHub client used for every upstream call.
    enrichment_limit
        Number of non-fork items whose commits and pull requests are fetched.
        Each selected item costs two requests, so this cap is what keeps a
        report inside the rate limit.
    event_logger
        Structured event sink; a default logger is used when omitted.

    """

    def __init__(
        self,
        client: GitHubProfileClient,
        *,
        enrichment_limit: int = ENRICHMENT_LIMIT,
        event_logger: AggregationEventLogger | None = None,
    ) -> None:
        """Configure the aggregator with its GitHub client."""
        self._client = client
        self._enrichment_limit = enrichment_limit
        self._events = event_logger or AggregationEventLogger()

    async def build_report(self, username: str) -> Report:
        """Return the report for *username*.

        Raises
        ------
        ProfileNotFoundError
            If the profile or its repository list does not exist.
        RateLimitedError
            If GitHub refuses the profile or repository list request.
        GitHubAPIError
            For any other failure of the primary fetches.

        """
        started = time.monotonic()
        user_result, repos_result, pinned = await asyncio.gather(
            self._client.get_user(username),
            self._client.list_repositories(username),
            self._pinned_names(username),
            return_exceptions=True,
        )
        _raise_first_failure(user_result, repos_result, pinned)
        user_payload = typ.cast("JSONObject", user_result)
        repo_payloads = typ.cast("list[JSONObject]", repos_result)

        profile = profile_from_github(user_payload)
        items = sort_items(
            (
                item_from_github(payload, fallback_owner=profile.login)
                for payload in repo_payloads
            ),
            typ.cast("list[str]", pinned),
        )

        targets = select_enrichment_targets(items, self._enrichment_limit)
        outcomes = await asyncio.gather(
            *(self._enrich(profile.login, item) for item in targets)
        )
        enriched_items = _attach_enrichments(items, targets, outcomes)

        report = Report(
            user=profile,
            repos=tuple(enriched_items),
            stats=compute_stats(enriched_items),
            enrichment=tuple(outcomes),
        )
        skipped = sum(1 for outcome in outcomes if isinstance(outcome, Skipped))
        self._events.log_report_built(
            login=profile.login,
            item_count=len(enriched_items),
            enriched=len(outcomes) - skipped,
            skipped=skipped,
            duration_s=time.monotonic() - started,
        )
        return report

    async def _pinned_names(self, username: str) -> list[str]:
        """Return pinned names, or an empty list when the lookup fails."""
        try:
            return await self._client.get_pinned_repository_names(username)
        except _ENRICHMENT_ERRORS as exc:
            self._events.log_pinned_lookup_failed(username=username, error=exc)
            return []

    async def _enrich(self, login: str, item: Item) -> EnrichmentOutcome:
        """Fetch commits and pull requests for *item* as one concurrent pair."""
        commits, pulls = await asyncio.gather(
            self._client.list_commits(item.owner, item.name),
            self._client.list_pull_requests(item.owner, item.name),
            return_exceptions=True,
        )
        for result in (commits, pulls):
            if isinstance(result, _ENRICHMENT_ERRORS):
                reason = f"{type(result).__name__}: {result}"
                self._events.log_enrichment_skipped(
                    login=login, item=item.name, reason=reason
                )
                return Skipped(item=item.name, reason=reason)
            if isinstance(result, BaseException):
                raise result
        return Enriched(
            item=item.name,
            commit_count=len(typ.cast("list[JSONObject]", commits)),
            pull_count=len(typ.cast("list[JSONObject]", pulls)),
        )


def _attach_enrichments(
    items: list[Item],
    targets: list[Item],
    outcomes: typ.Sequence[EnrichmentOutcome],
) -> list[Item]:
    """Return *items* with enrichment attached to each enriched target."""
    enrichments: dict[tuple[str, str], Enrichment] = {}
    for target, outcome in zip(targets, outcomes, strict=True):
        if isinstance(outcome, Enriched):
            enrichments[(target.owner, target.name)] = Enrichment(
                commit_count=outcome.commit_count,
                pull_count=outcome.pull_count,
            )
    return [
        msgspec.structs.replace(item, enrichment=enrichments[(item.owner, item.name)])
        if (item.owner, item.name) in enrichments
        else item
        for item in items
    ]


__all__ = ["ProfileAggregator"]
