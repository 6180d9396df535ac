"""Profile aggregation into normalized reports.

Public API
----------
ProfileAggregator
    Builds a :class:`Report` from GitHub, tolerating enrichment failures.
Report, Item, ProfileSummary, Stats, Enrichment
    Report structures.
Enriched, Skipped
    Per-item enrichment outcomes.
compute_stats, sort_items, select_enrichment_targets
    Pure helpers behind the report ordering and aggregates.
"""

from __future__ import annotations

from githunter.profile.models import (
    Enriched,
    Enrichment,
    EnrichmentOutcome,
    Item,
    ProfileSummary,
    Report,
    ReportEnvelope,
    Skipped,
    Stats,
)
from githunter.profile.ordering import (
    ENRICHMENT_LIMIT,
    select_enrichment_targets,
    sort_items,
)
from githunter.profile.service import ProfileAggregator
from githunter.profile.stats import compute_stats

__all__ = [
    "ENRICHMENT_LIMIT",
    "Enriched",
    "Enrichment",
    "EnrichmentOutcome",
    "Item",
    "ProfileAggregator",
    "ProfileSummary",
    "Report",
    "ReportEnvelope",
    "Skipped",
    "Stats",
    "compute_stats",
    "select_enrichment_targets",
    "sort_items",
]
