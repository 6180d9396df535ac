"""Liveness and readiness probes.

``/ready`` reports the cache state but never fails on it: without Redis the
service still answers every request, it just recomputes.

Usage
-----
::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(store))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from githunter.cache.store import CacheStore

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """``GET /health``: the process is up."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Respond with ``{"status": "ok"}``."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """``GET /ready``: the process accepts traffic.

    Parameters
    ----------
    store
        Cache store whose lifecycle state is echoed as ``cache``. The
        health-only app has none and omits the field.

    """

    def __init__(self, store: CacheStore | None = None) -> None:
        """Attach the optional cache store."""
        self._store = store

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Respond with ``{"status": "ready", "cache"?: state}``."""
        body = {"status": "ready"}
        if self._store is not None:
            body["cache"] = self._store.state.value
        resp.media = body
        resp.status = HTTPStatus.OK
