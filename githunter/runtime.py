"""GitHunter runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`githunter.api.app.create_app` while keeping the
``githunter.runtime:create_app`` entrypoint stable.

Configuration is driven by environment variables:

- ``GITHUNTER_HOST``: Bind address (default ``0.0.0.0``)
- ``GITHUNTER_PORT``: Listen port (default ``5000``)
- ``GITHUNTER_LOG_LEVEL``: Log level (default ``INFO``)
- ``GITHUNTER_HEALTH_ONLY``: Serve only ``/health`` and ``/ready`` when set

The remaining ``GITHUNTER_*`` variables are read by the configuration
objects of the cache, GitHub client, job queue and scoring backends.

Run the service directly with ``python -m githunter.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from githunter.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid GITHUNTER_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Returns
    -------
    falcon.asgi.App
        The full application, or a health-only one when
        ``GITHUNTER_HEALTH_ONLY`` is set.

    """
    from githunter.api.app import create_app as _create_api_app

    if os.environ.get("GITHUNTER_HEALTH_ONLY", "").lower() in {"1", "true", "yes"}:
        return _create_api_app()

    from githunter.api.factory import build_app_dependencies

    return _create_api_app(build_app_dependencies())


def main() -> None:
    """Start the GitHunter server using Granian.

    Reads ``GITHUNTER_HOST``, ``GITHUNTER_PORT`` and ``GITHUNTER_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("GITHUNTER_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("GITHUNTER_PORT", "5000"))
    log_level_str = os.environ.get("GITHUNTER_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid GITHUNTER_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting GitHunter on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "githunter.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
