"""Structured log events for profile aggregation.

Events are emitted as ``[event] key=value`` lines through femtologging so log
aggregators can count degraded reports without parsing free text.
"""

from __future__ import annotations

import enum

from githunter.logging import get_logger, log_info, log_warning

logger = get_logger(__name__)


class AggregationEventType(enum.StrEnum):
    """Structured log event types for report aggregation."""

    REPORT_BUILT = "aggregation.report.built"
    ENRICHMENT_SKIPPED = "aggregation.enrichment.skipped"
    PINNED_LOOKUP_FAILED = "aggregation.pinned.failed"


class AggregationEventLogger:
    """Emit aggregation events via femtologging."""

    def log_report_built(  # noqa: PLR0913
        self,
        *,
        login: str,
        item_count: int,
        enriched: int,
        skipped: int,
        duration_s: float,
    ) -> None:
        """Log a finished report with its enrichment coverage."""
        log_info(
            logger,
            "[%s] login=%s items=%d enriched=%d skipped=%d duration_seconds=%.3f",
            AggregationEventType.REPORT_BUILT,
            login,
            item_count,
            enriched,
            skipped,
            duration_s,
        )

    def log_enrichment_skipped(self, *, login: str, item: str, reason: str) -> None:
        """Log one item dropped from the activity totals."""
        log_warning(
            logger,
            "[%s] login=%s item=%s reason=%s",
            AggregationEventType.ENRICHMENT_SKIPPED,
            login,
            item,
            reason,
        )

    def log_pinned_lookup_failed(self, *, username: str, error: BaseException) -> None:
        """Log a failed pinned-repository lookup; ordering falls back to stars."""
        log_warning(
            logger,
            "[%s] username=%s error_type=%s error_message=%s",
            AggregationEventType.PINNED_LOOKUP_FAILED,
            username,
            type(error).__name__,
            str(error),
        )


__all__ = ["AggregationEventLogger", "AggregationEventType"]
