"""Synchronous profile report resource.

``GET /user/{username}`` serves the latest cached analysis for the user when
one exists, byte for byte, and otherwise builds a fresh report from GitHub.
Freshly built reports are not cached: only the analysis pipeline writes the
username keyspace, so a cached full analysis is never replaced by a bare
report.

Usernames GitHub could never accept are rejected with 400 before any
lookup.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/user/{username}", UserReportResource(cache, aggregator))

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from githunter.jobs.queue import validate_username
from githunter.logging import get_logger, log_debug
from githunter.profile.models import ReportEnvelope

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from githunter.cache.keys import ReportCache
    from githunter.profile.service import ProfileAggregator

__all__ = ["UserReportResource"]

logger = get_logger(__name__)


class UserReportResource:
    """Cache-first report lookup for a single GitHub user."""

    def __init__(self, cache: ReportCache, aggregator: ProfileAggregator) -> None:
        """Configure the resource with its cache and aggregator."""
        self._cache = cache
        self._aggregator = aggregator

    async def on_get(self, _req: Request, resp: Response, *, username: str) -> None:
        """Handle GET /user/{username}.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response carrying the encoded report.
        username
            GitHub login from the URL path.

        """
        username = validate_username(username)
        cached = await self._cache.get_user_report(username)
        if cached is not None:
            log_debug(logger, "Cache hit for %s", username)
            resp.data = cached
        else:
            report = await self._aggregator.build_report(username)
            resp.data = msgspec.json.encode(ReportEnvelope(report=report))
        resp.content_type = falcon.MEDIA_JSON
        resp.status = falcon.HTTP_200
