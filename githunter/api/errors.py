"""Falcon error handlers for the API layer.

Every handler renders ``{"error": message}`` so clients parse a single
error shape across endpoints.

Usage
-----
Handlers are registered by :func:`githunter.api.app.create_app`::

    app.add_error_handler(JobNotFoundError, handle_not_found)

"""

from __future__ import annotations

import typing as typ

import falcon

from githunter.logging import get_logger, log_exception

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "handle_invalid_input",
    "handle_not_found",
    "handle_queue_unavailable",
    "handle_unexpected_error",
    "handle_upstream_error",
]

logger = get_logger(__name__)


def _render(resp: Response, status: str, message: str) -> None:
    resp.status = status
    resp.media = {"error": message}


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    _render(resp, falcon.HTTP_400, str(ex))


async def handle_not_found(
    _req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Map unknown jobs and expired reports to an HTTP 404 JSON response."""
    _render(resp, falcon.HTTP_404, str(ex))


async def handle_queue_unavailable(
    _req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``QueueUnavailableError`` to an HTTP 503 JSON response."""
    _render(resp, falcon.HTTP_503, str(ex))


async def handle_upstream_error(
    req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Map GitHub failures on the synchronous path to HTTP 500.

    The upstream message, including a rate-limit message, is passed through
    verbatim.
    """
    log_exception(logger, f"GitHub request failed for {req.path}", ex)
    _render(resp, falcon.HTTP_500, str(ex))


async def handle_unexpected_error(
    req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Log unexpected exceptions and answer with a generic HTTP 500.

    Falcon's own ``HTTPError`` subclasses keep their default handler because
    it is more specific.
    """
    log_exception(logger, f"Unhandled error for {req.method} {req.path}", ex)
    _render(resp, falcon.HTTP_500, "Internal error")
