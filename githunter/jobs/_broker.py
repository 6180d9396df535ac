"""Broker configuration helpers for Dramatiq actor setup.

The actor module calls :func:`ensure_broker_configured` before declaring its
actor so the actor binds to the broker chosen here: a ``RedisBroker`` on
``GITHUNTER_REDIS_URL`` in deployments, or a ``StubBroker`` under tests and
when ``GITHUNTER_ALLOW_STUB_BROKER`` is set.
"""

from __future__ import annotations

import os
import sys
import threading

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker

from githunter.cache.config import DEFAULT_REDIS_URL
from githunter.common.env import read_str

_BROKER_LOCK = threading.Lock()
_configured_broker: dramatiq.Broker | None = None


def _is_running_tests() -> bool:
    """Check if the current process is running under pytest."""
    return "pytest" in sys.modules or any(
        key in os.environ
        for key in ["PYTEST_CURRENT_TEST", "PYTEST_XDIST_WORKER", "PYTEST_ADDOPTS"]
    )


def stub_broker_enabled() -> bool:
    """Return whether an in-process ``StubBroker`` should be used.

    True if ``GITHUNTER_ALLOW_STUB_BROKER`` is set to a truthy value or the
    process is running tests.
    """
    allow_stub = os.environ.get("GITHUNTER_ALLOW_STUB_BROKER", "")
    return allow_stub.lower() in {"1", "true", "yes"} or _is_running_tests()


def ensure_broker_configured() -> dramatiq.Broker:
    """Configure the global Dramatiq broker once and return it.

    Thread-safe: uses a lock and sentinel so concurrent callers share one
    broker.
    """
    global _configured_broker

    if _configured_broker is not None:
        return _configured_broker

    with _BROKER_LOCK:
        # Double-check after acquiring the lock
        if _configured_broker is not None:
            return _configured_broker

        if stub_broker_enabled():
            broker: dramatiq.Broker = StubBroker()
        else:
            broker = RedisBroker(url=read_str("GITHUNTER_REDIS_URL", DEFAULT_REDIS_URL))
        dramatiq.set_broker(broker)
        _configured_broker = broker
        return broker


__all__ = ["ensure_broker_configured", "stub_broker_enabled"]
