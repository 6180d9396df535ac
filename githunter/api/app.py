"""Application factory for the GitHunter Falcon ASGI application.

``create_app()`` builds the Falcon app with health endpoints and, when
dependencies are supplied, the profile and analysis endpoints.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app::

    deps = AppDependencies(cache=cache, aggregator=aggregator, queue=queue)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from githunter.api.errors import (
    handle_invalid_input,
    handle_not_found,
    handle_queue_unavailable,
    handle_unexpected_error,
    handle_upstream_error,
)
from githunter.api.health.resources import HealthResource, ReadyResource
from githunter.github.errors import GitHubAPIError, GitHubResponseShapeError
from githunter.jobs.errors import (
    InvalidInputError,
    JobNotFoundError,
    QueueUnavailableError,
    ReportExpiredError,
)

if typ.TYPE_CHECKING:
    from githunter.api.middleware import Closer
    from githunter.cache.keys import ReportCache
    from githunter.jobs.queue import JobQueue
    from githunter.profile.service import ProfileAggregator

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    cache
        Report and status keyspaces; its store is probed at startup.
    aggregator
        Builds reports for the synchronous profile endpoint.
    queue
        Job queue behind the analysis endpoints.
    closers
        Coroutine functions awaited at shutdown to release clients.

    """

    cache: ReportCache
    aggregator: ProfileAggregator
    queue: JobQueue
    closers: tuple[Closer, ...] = ()


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, only ``/health``
        and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []
    if dependencies is not None:
        from githunter.api.middleware import ResourceLifecycle

        middleware.append(
            ResourceLifecycle(dependencies.cache.store, dependencies.closers)
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route(
        "/ready",
        ReadyResource(dependencies.cache.store if dependencies is not None else None),
    )

    if dependencies is not None:
        from githunter.api.jobs.resources import (
            AnalyzeResource,
            JobReportResource,
            JobStatusResource,
            LatestReportResource,
        )
        from githunter.api.profile.resources import UserReportResource

        app.add_route(
            "/user/{username}",
            UserReportResource(dependencies.cache, dependencies.aggregator),
        )
        app.add_route("/analyze", AnalyzeResource(dependencies.queue))
        app.add_route("/status/{job_id}", JobStatusResource(dependencies.queue))
        app.add_route("/report/{job_id}", JobReportResource(dependencies.queue))
        app.add_route(
            "/report/latest/{username}", LatestReportResource(dependencies.queue)
        )

    # Error handlers; Falcon picks the most specific match.
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(GitHubAPIError, handle_upstream_error)
    app.add_error_handler(GitHubResponseShapeError, handle_upstream_error)
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(JobNotFoundError, handle_not_found)
    app.add_error_handler(ReportExpiredError, handle_not_found)
    app.add_error_handler(QueueUnavailableError, handle_queue_unavailable)

    return app
