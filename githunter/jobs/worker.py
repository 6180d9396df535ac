"""Worker process entrypoint.

Runs a Dramatiq worker with a single thread, so one job executes at a time
and the persistent event loop in :mod:`githunter.jobs.runtime` is never
shared.

Usage
-----
Run the worker::

    githunter-worker

Environment variables
---------------------
GITHUNTER_REDIS_URL
    Broker, registry and cache connection (default ``redis://localhost:6379/0``).
GITHUNTER_LOG_LEVEL
    Log level (default ``INFO``).
"""

from __future__ import annotations

import os
import signal
import threading

import dramatiq

from githunter.jobs.actor import ANALYSIS_QUEUE, broker
from githunter.jobs.errors import PipelineUnavailableError
from githunter.jobs.runtime import close_worker_runtime, get_worker_runtime
from githunter.logging import (
    configure_logging,
    get_logger,
    log_exception,
    log_info,
    log_warning,
)

logger = get_logger(__name__)

WORKER_THREADS = 1


def create_worker() -> dramatiq.Worker:
    """Return a single-threaded worker consuming the analysis queue."""
    return dramatiq.Worker(
        broker,
        queues={ANALYSIS_QUEUE},
        worker_threads=WORKER_THREADS,
    )


def main() -> None:
    """Run the worker until SIGINT or SIGTERM.

    The analysis pipeline is built before any message is consumed.

    Raises
    ------
    SystemExit
        If the pipeline cannot be built from the environment.

    """
    raw_level = os.environ.get("GITHUNTER_LOG_LEVEL")
    level, invalid = configure_logging(raw_level)
    if invalid and raw_level is not None:
        log_warning(
            logger, "Invalid GITHUNTER_LOG_LEVEL '%s'; using %s", raw_level, level
        )

    try:
        get_worker_runtime().start()
    except PipelineUnavailableError as exc:
        log_exception(logger, "Worker configuration is invalid", exc)
        close_worker_runtime()
        raise SystemExit(1) from exc

    stop = threading.Event()

    def _request_stop(signum: int, _frame: object) -> None:
        log_info(logger, "Received signal %d, stopping worker", signum)
        stop.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    worker = create_worker()
    worker.start()
    log_info(logger, "Worker consuming queue '%s'", ANALYSIS_QUEUE)
    try:
        stop.wait()
    finally:
        worker.stop()
        close_worker_runtime()


if __name__ == "__main__":
    main()
