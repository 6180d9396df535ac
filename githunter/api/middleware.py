"""ASGI lifespan middleware owning long-lived client resources.

On startup the cache store probes Redis once; on shutdown the store and any
other registered clients are closed.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(middleware=[ResourceLifecycle(store, closers)])

"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from githunter.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from githunter.cache.store import CacheStore

__all__ = ["Closer", "ResourceLifecycle"]

logger = get_logger(__name__)

type Closer = cabc.Callable[[], cabc.Awaitable[None]]


class ResourceLifecycle:
    """Falcon middleware initialising and closing shared resources.

    Parameters
    ----------
    store
        Cache store probed at startup.
    closers
        Coroutine functions awaited at shutdown, in order, after the store
        is closed.

    """

    def __init__(self, store: CacheStore, closers: cabc.Sequence[Closer] = ()) -> None:
        """Initialize the middleware with the resources it owns."""
        self._store = store
        self._closers = tuple(closers)

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Probe the cache once before traffic is accepted."""
        state = await self._store.init()
        log_info(logger, "Startup complete (cache=%s)", state.value)

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Close the cache store and every registered client."""
        await self._store.aclose()
        for closer in self._closers:
            await closer()
