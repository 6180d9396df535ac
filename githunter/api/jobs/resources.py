"""Analysis job resources.

Flow: ``POST /analyze`` returns a job id, clients poll
``GET /status/{job_id}`` and finally fetch ``GET /report/{job_id}``.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/analyze", AnalyzeResource(queue))
    app.add_route("/status/{job_id}", JobStatusResource(queue))
    app.add_route("/report/{job_id}", JobReportResource(queue))
    app.add_route("/report/latest/{username}", LatestReportResource(queue))

"""

from __future__ import annotations

import typing as typ

import falcon

from githunter.jobs.errors import InvalidInputError
from githunter.jobs.queue import ReportReady

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from githunter.jobs.queue import JobQueue

__all__ = [
    "AnalyzeResource",
    "JobReportResource",
    "JobStatusResource",
    "LatestReportResource",
]


async def _read_json_object(req: Request) -> dict[str, typ.Any]:
    """Return the request body as a JSON object.

    Raises
    ------
    InvalidInputError
        If the body is missing, malformed, or not an object.

    """
    try:
        body = await req.get_media(default_when_empty=None)
    except falcon.MediaMalformedError as exc:
        raise InvalidInputError.invalid_body() from exc
    if body is None:
        raise InvalidInputError.missing_username()
    if not isinstance(body, dict):
        raise InvalidInputError.invalid_body()
    return body


class AnalyzeResource:
    """``POST /analyze``: enqueue an analysis job."""

    def __init__(self, queue: JobQueue) -> None:
        """Configure the resource with the job queue."""
        self._queue = queue

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /analyze with ``{username, view?, context?}``.

        Responds 202 with ``{"jobId": id}``; validation failures become 400
        and broker outages 503 through the registered error handlers.
        """
        body = await _read_json_object(req)
        job = await self._queue.enqueue(
            body.get("username"), body.get("view"), body.get("context")
        )
        resp.media = {"jobId": job.id}
        resp.status = falcon.HTTP_202


class JobStatusResource:
    """``GET /status/{job_id}``: report job status and progress."""

    def __init__(self, queue: JobQueue) -> None:
        """Configure the resource with the job queue."""
        self._queue = queue

    async def on_get(self, _req: Request, resp: Response, *, job_id: str) -> None:
        """Respond with ``{status, progress, error?}``."""
        job = await self._queue.get_status(job_id)
        resp.media = job.to_body()
        resp.status = falcon.HTTP_200


class JobReportResource:
    """``GET /report/{job_id}``: fetch a finished analysis."""

    def __init__(self, queue: JobQueue) -> None:
        """Configure the resource with the job queue."""
        self._queue = queue

    async def on_get(self, _req: Request, resp: Response, *, job_id: str) -> None:
        """Respond 200 with the analysis, or 202 with the job status.

        A failed job also answers 202, carrying its failure reason in
        ``error``.
        """
        lookup = await self._queue.get_report(job_id)
        if isinstance(lookup, ReportReady):
            resp.data = lookup.payload
            resp.content_type = falcon.MEDIA_JSON
            resp.status = falcon.HTTP_200
            return
        resp.media = lookup.job.to_body()
        resp.status = falcon.HTTP_202


class LatestReportResource:
    """``GET /report/latest/{username}``: the most recent cached analysis."""

    def __init__(self, queue: JobQueue) -> None:
        """Configure the resource with the job queue."""
        self._queue = queue

    async def on_get(self, _req: Request, resp: Response, *, username: str) -> None:
        """Respond 200 with the cached analysis bytes."""
        resp.data = await self._queue.get_latest_report(username)
        resp.content_type = falcon.MEDIA_JSON
        resp.status = falcon.HTTP_200
