"""Fail-open cache-aside store over Redis.

The store probes Redis once. If the probe fails, or any later call errors,
the store settles in :attr:`CacheState.UNAVAILABLE` for the rest of its life
and every operation becomes a no-op that never touches the network. Callers
therefore treat a miss purely as "recompute", never as an error.

Usage
-----
>>> store = CacheStore(CacheConfig.from_env())
>>> await store.init()
<CacheState.AVAILABLE: 'available'>
>>> await store.get("report:user:torvalds")

"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import enum
import typing as typ

from redis.asyncio import Redis
from redis.exceptions import RedisError

from githunter.logging import get_logger, log_debug, log_info, log_warning

if typ.TYPE_CHECKING:
    from githunter.cache.config import CacheConfig

logger = get_logger(__name__)

# Everything a Redis call may raise when the server misbehaves or vanishes.
_CACHE_ERRORS = (RedisError, OSError)
# Building the client also rejects malformed URLs with ValueError.
_PROBE_ERRORS = (*_CACHE_ERRORS, ValueError)


class CacheState(enum.StrEnum):
    """Lifecycle of a :class:`CacheStore`."""

    UNINITIALIZED = "uninitialized"
    PROBING = "probing"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class CacheClient(typ.Protocol):
    """Subset of ``redis.asyncio.Redis`` used by the store."""

    async def ping(self) -> object:
        """Check the connection."""
        ...

    async def get(self, name: str) -> bytes | None:
        """Return the value stored at *name*."""
        ...

    async def set(self, name: str, value: bytes, *, ex: int | None = None) -> object:
        """Store *value* at *name* with an optional expiry in seconds."""
        ...

    async def delete(self, *names: str) -> int:
        """Remove keys."""
        ...

    async def aclose(self) -> None:
        """Release the connection pool."""
        ...


type ClientFactory = cabc.Callable[[], CacheClient]


def redis_client_factory(config: CacheConfig) -> ClientFactory:
    """Return a factory producing binary-safe clients with bounded sockets."""

    def factory() -> CacheClient:
        return Redis.from_url(
            config.redis_url,
            decode_responses=False,
            socket_connect_timeout=config.probe_timeout_s,
            socket_timeout=config.probe_timeout_s,
        )

    return factory


class CacheStore:
    """Cache-aside handle with an explicit availability state machine.

    Parameters
    ----------
    config
        Connection settings; only ``probe_timeout_s`` is read here.
    client_factory
        Builds the Redis client on :meth:`init`. Defaults to
        :func:`redis_client_factory`.

    """

    def __init__(
        self,
        config: CacheConfig,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Create an uninitialised store; no connection is made here."""
        self._config = config
        self._client_factory = client_factory or redis_client_factory(config)
        self._client: CacheClient | None = None
        self._state = CacheState.UNINITIALIZED
        self._init_lock = asyncio.Lock()

    @property
    def state(self) -> CacheState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def available(self) -> bool:
        """Return whether calls reach Redis."""
        return self._state is CacheState.AVAILABLE

    async def init(self) -> CacheState:
        """Probe Redis once and settle the store's state.

        Repeated or concurrent calls return the settled state without
        probing again.
        """
        async with self._init_lock:
            if self._state is not CacheState.UNINITIALIZED:
                return self._state
            self._state = CacheState.PROBING
            client: CacheClient | None = None
            try:
                client = self._client_factory()
                async with asyncio.timeout(self._config.probe_timeout_s):
                    await client.ping()
            except _PROBE_ERRORS as exc:
                if client is not None:
                    await _close_client(client)
                self._state = CacheState.UNAVAILABLE
                log_warning(
                    logger,
                    "Redis unavailable, caching disabled: %s: %s",
                    type(exc).__name__,
                    exc,
                )
                return self._state
            self._client = client
            self._state = CacheState.AVAILABLE
            log_info(logger, "Redis connected, caching enabled")
            return self._state

    async def get(self, key: str) -> bytes | None:
        """Return the cached bytes for *key*, or ``None`` on miss or outage."""
        client = self._live_client()
        if client is None:
            return None
        try:
            value = await client.get(key)
        except _CACHE_ERRORS as exc:
            self._mark_unavailable(exc)
            return None
        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    async def set(self, key: str, value: bytes, ttl_s: int) -> None:
        """Store *value* under *key* for *ttl_s* seconds when available."""
        client = self._live_client()
        if client is None:
            return
        try:
            await client.set(key, value, ex=ttl_s)
        except _CACHE_ERRORS as exc:
            self._mark_unavailable(exc)

    async def delete(self, key: str) -> None:
        """Remove *key* when available."""
        client = self._live_client()
        if client is None:
            return
        try:
            await client.delete(key)
        except _CACHE_ERRORS as exc:
            self._mark_unavailable(exc)

    async def aclose(self) -> None:
        """Close the client; the store stays unavailable afterwards."""
        client, self._client = self._client, None
        self._state = CacheState.UNAVAILABLE
        if client is not None:
            await _close_client(client)

    def _live_client(self) -> CacheClient | None:
        if self._state is not CacheState.AVAILABLE:
            return None
        return self._client

    def _mark_unavailable(self, exc: BaseException) -> None:
        if self._state is CacheState.UNAVAILABLE:
            return
        self._state = CacheState.UNAVAILABLE
        log_warning(
            logger,
            "Redis error, caching disabled: %s: %s",
            type(exc).__name__,
            exc,
        )


async def _close_client(client: CacheClient) -> None:
    try:
        await client.aclose()
    except _CACHE_ERRORS as exc:
        log_debug(logger, "Ignoring error while closing Redis client: %s", exc)


__all__ = [
    "CacheClient",
    "CacheState",
    "CacheStore",
    "ClientFactory",
    "redis_client_factory",
]
